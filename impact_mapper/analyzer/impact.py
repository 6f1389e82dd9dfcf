"""Impact engine: scan snapshot, entity lookup and blast-radius reports."""
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from .discovery import list_source_files
from .extractor import Entity, EntityExtractor
from .graph_builder import DependencyGraph, DependencyGraphBuilder
from .parser import ParseFailure
from .reference_tracker import Reference, ReferenceTracer, DEFINITION
from .resolver import get_module_name

SEVERITY_NONE = 'NONE'
SEVERITY_LOW = 'LOW'
SEVERITY_MEDIUM = 'MEDIUM'
SEVERITY_HIGH = 'HIGH'


def rate_severity(affected_count: int) -> str:
    """Map the number of affected modules to a severity tier.

    0 -> NONE, 1-2 -> LOW, 3-5 -> MEDIUM, 6+ -> HIGH
    """
    if affected_count <= 0:
        return SEVERITY_NONE
    if affected_count <= 2:
        return SEVERITY_LOW
    if affected_count <= 5:
        return SEVERITY_MEDIUM
    return SEVERITY_HIGH


@dataclass
class LocatedEntity(Entity):
    """An entity together with the module that declares it."""
    module: str
    absolute_path: str


@dataclass(frozen=True)
class ScanResult:
    """Immutable snapshot of one scan.

    ``entity_map`` maps module identifier -> entities, in discovery order.
    Modules that failed to parse map to an empty list and are also listed in
    ``failed_modules``.
    """
    files: Tuple[Path, ...]
    entity_map: Dict[str, List[Entity]]
    failed_modules: Tuple[str, ...] = ()

    @property
    def file_count(self) -> int:
        return len(self.files)

    def to_dict(self) -> Dict:
        return {
            'fileCount': self.file_count,
            'entityMap': {
                module: [asdict(entity) for entity in entities]
                for module, entities in self.entity_map.items()
            },
            'failedModules': list(self.failed_modules),
        }


@dataclass
class ImpactReport:
    entity: LocatedEntity
    references: List[Reference] = field(default_factory=list)
    affected_modules: List[str] = field(default_factory=list)
    severity: str = SEVERITY_NONE

    def to_dict(self) -> Dict:
        return {
            'entity': asdict(self.entity),
            'references': [asdict(ref) for ref in self.references],
            'affectedModules': list(self.affected_modules),
            'severity': self.severity,
        }


class ImpactEngine:
    """Answers "what breaks if I change this symbol?" for one project root."""

    def __init__(self, project_root: str | Path,
                 extra_exclude_dirs: Optional[Iterable[str]] = None):
        """Initialize the engine.

        Args:
            project_root: Root directory of the project
            extra_exclude_dirs: Directory names to skip on top of the defaults
        """
        self.project_root = Path(project_root).resolve()
        self.extra_exclude_dirs = list(extra_exclude_dirs or [])
        self.extractor = EntityExtractor()
        self.snapshot: Optional[ScanResult] = None

    def scan(self) -> ScanResult:
        """Discover all files and entities.

        A file that fails to parse gets an empty entity list; it never aborts
        the scan. Each call rebuilds the snapshot from disk.

        Returns:
            ScanResult snapshot, also kept on the engine for later queries
        """
        files = list_source_files(self.project_root, self.extra_exclude_dirs)
        entity_map: Dict[str, List[Entity]] = {}
        failed = []

        for file_path in files:
            module = get_module_name(file_path, self.project_root)
            try:
                entity_map[module] = self.extractor.extract_from_file(file_path)
            except ParseFailure:
                entity_map[module] = []
                failed.append(module)

        self.snapshot = ScanResult(files=tuple(files), entity_map=entity_map, failed_modules=tuple(failed))
        return self.snapshot

    def _require_snapshot(self) -> ScanResult:
        if self.snapshot is None:
            return self.scan()
        return self.snapshot

    def find_candidates(self, name: str, file_hint: Optional[str] = None) -> List[LocatedEntity]:
        """Every entity named ``name``, in scan order.

        Args:
            name: Entity name
            file_hint: Optional suffix the module identifier must end with

        Returns:
            List of LocatedEntity objects, possibly empty
        """
        candidates = []
        for module, entities in self._require_snapshot().entity_map.items():
            if file_hint and not module.endswith(file_hint):
                continue
            for entity in entities:
                if entity.name == name:
                    candidates.append(LocatedEntity(
                        name=entity.name,
                        kind=entity.kind,
                        line=entity.line,
                        exported=entity.exported,
                        module=module,
                        absolute_path=str(self.project_root / module),
                    ))
        return candidates

    def find_entity(self, name: str, file_hint: Optional[str] = None) -> Optional[LocatedEntity]:
        """First entity named ``name`` in the earliest scanned matching module.

        Same-named declarations in other modules are not reported here; use
        find_candidates() to detect the collision.

        Returns:
            LocatedEntity, or None if nothing matches
        """
        candidates = self.find_candidates(name, file_hint)
        return candidates[0] if candidates else None

    def get_impact(self, name: str, file_hint: Optional[str] = None) -> Optional[ImpactReport]:
        """Trace every usage of an entity and rate the blast radius.

        Args:
            name: Entity name
            file_hint: Optional module suffix for disambiguation

        Returns:
            ImpactReport, or None if the entity is not found
        """
        entity = self.find_entity(name, file_hint)
        if entity is None:
            return None

        tracer = ReferenceTracer(self.project_root)
        references = tracer.trace(name, Path(entity.absolute_path), self._require_snapshot().files)

        # Unique affected modules, first occurrence first, excluding the definition file
        affected_modules = []
        for ref in references:
            if ref.kind == DEFINITION or ref.module == entity.module:
                continue
            if ref.module not in affected_modules:
                affected_modules.append(ref.module)

        return ImpactReport(
            entity=entity,
            references=references,
            affected_modules=affected_modules,
            severity=rate_severity(len(affected_modules)),
        )

    def get_dependency_graph(self) -> DependencyGraph:
        """Build the full dependency graph, independent of the entity snapshot."""
        return DependencyGraphBuilder(self.project_root, self.extra_exclude_dirs).build()
