"""Import extraction: ES module imports and CommonJS require calls."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
from tree_sitter import Node, Tree

from .resolver import ModuleResolver
from .syntax import traverse, node_text, string_value, require_specifier


@dataclass
class Import:
    """Represents one import statement or require call."""
    specifier: str  # The string used in the source, e.g. './utils' or 'lodash'
    resolved_path: Optional[Path]  # None for external packages and unresolvable paths
    imported_names: List[str] = field(default_factory=list)
    line: int = 0


class ImportExtractor:
    """Collect every import of one file, in source order."""

    def __init__(self, resolver: ModuleResolver):
        self.resolver = resolver

    def extract_imports(self, tree: Tree, file_path: str | Path) -> List[Import]:
        """Extract ``import ... from`` statements and ``require()`` calls.

        Args:
            tree: Parsed tree-sitter Tree of the file
            file_path: Absolute path of the file (imports resolve relative to it)

        Returns:
            List of Import objects
        """
        imports = []

        for node in traverse(tree.root_node):
            if node.type == 'import_statement':
                source_node = node.child_by_field_name('source')
                if source_node is None:
                    source_node = next((c for c in node.named_children if c.type == 'string'), None)
                if source_node is None:
                    continue
                specifier = string_value(source_node)
                names = self._import_clause_names(node)
            else:
                specifier = require_specifier(node)
                if specifier is None:
                    continue
                names = self._require_binding_names(node)

            imports.append(Import(
                specifier=specifier,
                resolved_path=self.resolver.resolve(specifier, file_path),
                imported_names=names,
                line=node.start_point[0] + 1,
            ))

        return imports

    def _import_clause_names(self, node: Node) -> List[str]:
        """Names brought in by an import statement.

        import x from 'm'         -> ['default']
        import * as ns from 'm'   -> ['*']
        import { a, b as c } ...  -> ['a', 'b']
        """
        names = []
        for clause in node.named_children:
            if clause.type != 'import_clause':
                continue
            for child in clause.named_children:
                if child.type == 'identifier':
                    names.append('default')
                elif child.type == 'namespace_import':
                    names.append('*')
                elif child.type == 'named_imports':
                    for specifier in child.named_children:
                        if specifier.type == 'import_specifier':
                            names.append(node_text(specifier.child_by_field_name('name')))
        return names

    def _require_binding_names(self, call_node: Node) -> List[str]:
        """Names bound by ``const {a, b} = require(...)`` or ``const x = require(...)``."""
        parent = call_node.parent
        if parent is None or parent.type != 'variable_declarator':
            return []

        name_node = parent.child_by_field_name('name')
        if name_node is None:
            return []
        if name_node.type == 'identifier':
            return [node_text(name_node)]
        if name_node.type != 'object_pattern':
            return []

        names = []
        for prop in name_node.named_children:
            if prop.type == 'shorthand_property_identifier_pattern':
                names.append(node_text(prop))
            elif prop.type == 'pair_pattern':
                key = prop.child_by_field_name('key')
                if key is not None and key.type == 'property_identifier':
                    names.append(node_text(key))
            elif prop.type == 'object_assignment_pattern':
                left = prop.child_by_field_name('left')
                if left is not None and left.type == 'shorthand_property_identifier_pattern':
                    names.append(node_text(left))
        return names
