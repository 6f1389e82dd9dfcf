"""Module dependency graph built from per-file import lists."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional
import networkx as nx

from .discovery import list_source_files
from .import_tracker import ImportExtractor
from .parser import ParseFailure, read_and_parse
from .resolver import ModuleResolver


@dataclass
class GraphNode:
    id: str  # Module identifier
    file: str  # Absolute path


@dataclass
class GraphEdge:
    """``source`` imports ``imports`` from ``target``."""
    source: str
    target: str
    imports: List[str] = field(default_factory=list)


@dataclass
class DependencyGraph:
    """Nodes in discovery order, edges in import statement order.

    Edges are not deduplicated: two import statements between the same pair
    of modules are two edges.
    """
    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)

    def to_networkx(self) -> nx.MultiDiGraph:
        """Multigraph view where edge (A, B) means "module A imports module B"."""
        graph = nx.MultiDiGraph()
        for node in self.nodes:
            graph.add_node(node.id, file=node.file)
        for edge in self.edges:
            graph.add_edge(edge.source, edge.target, imports=list(edge.imports))
        return graph

    def to_dict(self) -> Dict:
        return {
            'nodes': [{'id': n.id, 'file': n.file} for n in self.nodes],
            'edges': [{'from': e.source, 'to': e.target, 'imports': list(e.imports)} for e in self.edges],
        }


class DependencyGraphBuilder:
    """Build the directed import graph for project files."""

    def __init__(self, project_root: str | Path = ".",
                 extra_exclude_dirs: Optional[Iterable[str]] = None):
        """Initialize graph builder.

        Args:
            project_root: Root directory of project to analyze
            extra_exclude_dirs: Directory names to skip on top of the defaults
        """
        self.project_root = Path(project_root).resolve()
        self.extra_exclude_dirs = extra_exclude_dirs
        self.resolver = ModuleResolver(self.project_root)
        self.import_extractor = ImportExtractor(self.resolver)

    def build(self) -> DependencyGraph:
        """Build dependency graph for the entire project.

        Only imports that resolve to a discovered project file produce an
        edge, so every edge target is also a node.

        Returns:
            DependencyGraph value
        """
        files = list_source_files(self.project_root, self.extra_exclude_dirs)
        known_files = set(files)
        graph = DependencyGraph()

        for file_path in files:
            module = self.resolver.module_name(file_path)
            graph.nodes.append(GraphNode(id=module, file=str(file_path)))

            try:
                _, tree = read_and_parse(file_path)
            except ParseFailure:
                # Unparseable files are still modules, just without outgoing edges
                continue

            for imp in self.import_extractor.extract_imports(tree, file_path):
                if imp.resolved_path is None or imp.resolved_path not in known_files:
                    continue
                graph.edges.append(GraphEdge(
                    source=module,
                    target=self.resolver.module_name(imp.resolved_path),
                    imports=list(imp.imported_names),
                ))

        return graph
