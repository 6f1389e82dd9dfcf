"""Entity extraction from parsed syntax trees."""
from dataclasses import dataclass
from pathlib import Path
from typing import List, Set
from tree_sitter import Tree, Node

from .parser import read_and_parse
from .syntax import (
    traverse,
    node_text,
    loop_binding,
    CLASS_DECLARATION_TYPES,
    CLASS_EXPRESSION_TYPES,
    FUNCTION_DECLARATION_TYPES,
    FUNCTION_EXPRESSION_TYPES,
)

FUNCTION = 'function'
CLASS = 'class'
VARIABLE = 'variable'


@dataclass
class Entity:
    """A named function, class or variable declaration."""
    name: str
    kind: str  # function, class or variable
    line: int  # 1-based line of the declaration
    exported: bool


class EntityExtractor:
    """Extract declared entities and their export status from one file."""

    def extract_from_file(self, file_path: str | Path) -> List[Entity]:
        """Parse a file and extract its entities.

        Raises:
            ParseFailure: If the file cannot be parsed
        """
        _, tree = read_and_parse(file_path)
        return self.extract_entities(tree)

    def extract_entities(self, tree: Tree) -> List[Entity]:
        """Extract every function, class and variable declaration.

        Declarations are collected at every nesting depth. Export status is
        applied afterwards by name: any entity whose name appears in the
        file's export set is marked exported, even an unrelated local that
        happens to share the name.

        Args:
            tree: Parsed tree-sitter Tree

        Returns:
            List of Entity objects in source order
        """
        entities = []
        exported_names: Set[str] = set()

        for node in traverse(tree.root_node):
            if node.type in FUNCTION_DECLARATION_TYPES:
                self._add_named(node, FUNCTION, node.start_point[0] + 1, entities)
            elif node.type in CLASS_DECLARATION_TYPES:
                self._add_named(node, CLASS, node.start_point[0] + 1, entities)
            elif node.type == 'variable_declarator':
                name_node = node.child_by_field_name('name')
                if name_node is not None and name_node.type == 'identifier':
                    entities.append(Entity(
                        name=node_text(name_node),
                        kind=self._infer_declarator_kind(node),
                        line=node.start_point[0] + 1,
                        exported=False,
                    ))
            elif node.type == 'for_in_statement':
                binding = loop_binding(node)
                if binding is not None:
                    entities.append(Entity(
                        name=node_text(binding),
                        kind=VARIABLE,
                        line=binding.start_point[0] + 1,
                        exported=False,
                    ))
            elif node.type == 'export_statement':
                exported_names.update(self._export_statement_names(node))
                self._add_default_export_expression(node, entities)
            elif node.type == 'assignment_expression':
                exported_names.update(self._module_exports_names(node))

        for entity in entities:
            if entity.name in exported_names:
                entity.exported = True

        return entities

    def _add_named(self, node: Node, kind: str, line: int, entities: List[Entity]):
        name_node = node.child_by_field_name('name')
        if name_node is not None:
            entities.append(Entity(name=node_text(name_node), kind=kind, line=line, exported=False))

    def _add_default_export_expression(self, node: Node, entities: List[Entity]):
        """Record `export default function name() {}` when the grammar parses it as an expression."""
        value = node.child_by_field_name('value')
        if value is None or value.child_by_field_name('name') is None:
            return
        if value.type in FUNCTION_EXPRESSION_TYPES:
            self._add_named(value, FUNCTION, value.start_point[0] + 1, entities)
        elif value.type in CLASS_EXPRESSION_TYPES:
            self._add_named(value, CLASS, value.start_point[0] + 1, entities)

    def _infer_declarator_kind(self, declarator: Node) -> str:
        """const f = () => {} is a function, const C = class {} is a class."""
        value = declarator.child_by_field_name('value')
        if value is None:
            return VARIABLE
        if value.type in FUNCTION_EXPRESSION_TYPES:
            return FUNCTION
        if value.type in CLASS_EXPRESSION_TYPES:
            return CLASS
        return VARIABLE

    def _export_statement_names(self, node: Node) -> Set[str]:
        """Names exported by an ``export`` statement.

        Handles:
        - export { a, b as c }          (local names a, b)
        - export function foo() {}      / export class Bar {}
        - export const x = 1, y = 2
        - export default function foo() {}  (named declarations only)
        """
        names = set()

        for child in node.named_children:
            if child.type == 'export_clause':
                for spec in child.named_children:
                    if spec.type == 'export_specifier':
                        local = spec.child_by_field_name('name')
                        if local is not None:
                            names.add(node_text(local))

        declaration = node.child_by_field_name('declaration')
        if declaration is not None:
            name_node = declaration.child_by_field_name('name')
            if name_node is not None:
                names.add(node_text(name_node))
            for declarator in declaration.named_children:
                if declarator.type == 'variable_declarator':
                    declarator_name = declarator.child_by_field_name('name')
                    if declarator_name is not None and declarator_name.type == 'identifier':
                        names.add(node_text(declarator_name))

        value = node.child_by_field_name('value')
        if value is not None and value.type in FUNCTION_EXPRESSION_TYPES | CLASS_EXPRESSION_TYPES:
            value_name = value.child_by_field_name('name')
            if value_name is not None:
                names.add(node_text(value_name))

        return names

    def _module_exports_names(self, node: Node) -> Set[str]:
        """Names exported through ``module.exports = {...}`` or ``module.exports = name``."""
        left = node.child_by_field_name('left')
        right = node.child_by_field_name('right')
        if left is None or right is None or left.type != 'member_expression':
            return set()

        obj = left.child_by_field_name('object')
        prop = left.child_by_field_name('property')
        if obj is None or prop is None:
            return set()
        if node_text(obj) != 'module' or node_text(prop) != 'exports':
            return set()

        names = set()
        if right.type == 'object':
            for member in right.named_children:
                if member.type == 'shorthand_property_identifier':
                    names.add(node_text(member))
                elif member.type in ('pair', 'method_definition'):
                    field_name = 'key' if member.type == 'pair' else 'name'
                    key = member.child_by_field_name(field_name)
                    if key is not None and key.type == 'property_identifier':
                        names.add(node_text(key))
        elif right.type == 'identifier':
            names.add(node_text(right))
        return names
