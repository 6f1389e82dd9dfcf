"""Reference tracer: finds and classifies usages of one entity across the project."""
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List
from tree_sitter import Node

from .import_tracker import ImportExtractor
from .parser import ParseFailure, read_and_parse
from .resolver import ModuleResolver
from .syntax import (
    traverse,
    is_field,
    is_loop_binding,
    require_specifier,
    IDENTIFIER_TYPES,
    CLASS_DECLARATION_TYPES,
    CLASS_EXPRESSION_TYPES,
    FUNCTION_DECLARATION_TYPES,
    FUNCTION_EXPRESSION_TYPES,
)

DEFINITION = 'definition'
IMPORT = 'import'
CALL = 'call'
INSTANTIATION = 'instantiation'
MEMBER_ACCESS = 'member-access'
REFERENCE = 'reference'

REFERENCE_KINDS = (DEFINITION, IMPORT, CALL, INSTANTIATION, MEMBER_ACCESS, REFERENCE)

# Named function/class expressions count too: `export default function name() {}`
DECLARATION_TYPES = (FUNCTION_DECLARATION_TYPES | CLASS_DECLARATION_TYPES
                     | FUNCTION_EXPRESSION_TYPES | CLASS_EXPRESSION_TYPES | {'variable_declarator'})
IMPORT_BINDING_PARENTS = {'import_specifier', 'import_clause', 'namespace_import'}
BINDING_PATTERN_TYPES = {
    'object_pattern',
    'pair_pattern',
    'array_pattern',
    'object_assignment_pattern',
    'assignment_pattern',
    'rest_pattern',
}


@dataclass
class Reference:
    """A usage of the traced entity."""
    module: str
    absolute_path: str
    line: int  # 1-based
    column: int  # 0-based, in characters
    kind: str
    source_text: str  # Trimmed source line, for display


class ReferenceTracer:
    """Trace every syntactic usage of a named entity.

    Resolution is by name and file relationship only, with no scope analysis:
    an identifier counts when its file is the defining file or imports from
    it. Same-named identifiers anywhere else are treated as coincidental and
    dropped.
    """

    def __init__(self, project_root: str | Path):
        self.resolver = ModuleResolver(project_root)
        self.import_extractor = ImportExtractor(self.resolver)

    def trace(self, entity_name: str, defining_file: str | Path,
              all_files: Iterable[str | Path]) -> List[Reference]:
        """Collect references in every file, in the order the files are supplied.

        Args:
            entity_name: Name of the entity to trace
            defining_file: Absolute path of the file declaring the entity
            all_files: Absolute paths of every project file

        Returns:
            List of Reference objects
        """
        defining_file = Path(defining_file)
        references = []
        for file_path in all_files:
            references.extend(self.trace_file(entity_name, defining_file, Path(file_path)))
        return references

    def trace_file(self, entity_name: str, defining_file: Path, file_path: Path) -> List[Reference]:
        """Classify the occurrences of ``entity_name`` in a single file.

        Unparseable files contribute nothing.
        """
        try:
            source_code, tree = read_and_parse(file_path)
        except ParseFailure:
            return []

        is_definer = file_path == defining_file
        if not is_definer:
            imports = self.import_extractor.extract_imports(tree, file_path)
            if not any(imp.resolved_path == defining_file for imp in imports):
                return []

        target = entity_name.encode('utf-8')
        lines = source_code.split(b'\n')
        module = self.resolver.module_name(file_path)
        references = []

        for node in traverse(tree.root_node):
            if node.type not in IDENTIFIER_TYPES or node.text != target:
                continue

            if is_definer:
                kind = self.classify_in_definer(node)
            else:
                kind = self.classify_in_importer(node)

            row, byte_column = node.start_point[0], node.start_point[1]
            line_bytes = lines[row] if row < len(lines) else b''
            references.append(Reference(
                module=module,
                absolute_path=str(file_path),
                line=row + 1,
                column=len(line_bytes[:byte_column].decode('utf-8', errors='replace')),
                kind=kind,
                source_text=line_bytes.decode('utf-8', errors='replace').strip(),
            ))

        return references

    def classify_in_definer(self, node: Node) -> str:
        parent = node.parent
        if parent is None:
            return REFERENCE
        if parent.type in DECLARATION_TYPES and is_field(parent, 'name', node):
            return DEFINITION
        if is_loop_binding(parent, node):
            return DEFINITION
        if parent.type == 'call_expression' and is_field(parent, 'function', node):
            return CALL
        if parent.type == 'member_expression' and is_field(parent, 'object', node):
            return MEMBER_ACCESS
        return REFERENCE

    def classify_in_importer(self, node: Node) -> str:
        parent = node.parent
        if parent is None:
            return REFERENCE
        if parent.type in IMPORT_BINDING_PARENTS or self._is_require_binding(node):
            return IMPORT
        if parent.type == 'call_expression' and is_field(parent, 'function', node):
            return CALL
        if parent.type == 'new_expression' and is_field(parent, 'constructor', node):
            return INSTANTIATION
        if parent.type == 'member_expression' and is_field(parent, 'object', node):
            return MEMBER_ACCESS
        return REFERENCE

    def _is_require_binding(self, node: Node) -> bool:
        """True for names destructured from a require call: ``const {a, b: c} = require(...)``.

        A plain ``const a = require(...)`` binding is not an import binding.
        """
        child = node
        ancestor = node.parent
        while ancestor is not None and ancestor.type in BINDING_PATTERN_TYPES:
            child = ancestor
            ancestor = ancestor.parent

        if child is node or ancestor is None or ancestor.type != 'variable_declarator':
            return False
        if not is_field(ancestor, 'name', child):
            return False

        value = ancestor.child_by_field_name('value')
        return value is not None and require_specifier(value) is not None
