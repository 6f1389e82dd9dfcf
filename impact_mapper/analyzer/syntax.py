"""Small helpers shared by the tree-sitter walkers."""
from typing import Iterator, Optional
from tree_sitter import Node

# Node types that carry a bare name in the JS/TS grammars
IDENTIFIER_TYPES = {
    'identifier',
    'property_identifier',
    'shorthand_property_identifier',
    'shorthand_property_identifier_pattern',
    'type_identifier',
}

FUNCTION_EXPRESSION_TYPES = {'arrow_function', 'function_expression', 'function', 'generator_function'}
CLASS_EXPRESSION_TYPES = {'class'}
FUNCTION_DECLARATION_TYPES = {'function_declaration', 'generator_function_declaration'}
CLASS_DECLARATION_TYPES = {'class_declaration', 'abstract_class_declaration'}


def traverse(node: Node) -> Iterator[Node]:
    """Iteratively traverse tree using a stack and yield all nodes.

    Nodes are yielded in pre-order, left to right, i.e. source order.
    """
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        # Add children in reverse order to maintain left-to-right traversal
        stack.extend(reversed(current.children))


def node_text(node: Node) -> str:
    return node.text.decode('utf-8', errors='replace')


def string_value(node: Node) -> str:
    """Contents of a string literal node without its quotes."""
    return node_text(node)[1:-1]


def same_node(a: Optional[Node], b: Optional[Node]) -> bool:
    """Identity check for nodes coming from the same tree."""
    if a is None or b is None:
        return False
    return a.type == b.type and a.start_byte == b.start_byte and a.end_byte == b.end_byte


def is_field(parent: Node, field_name: str, node: Node) -> bool:
    """True if ``node`` sits in ``parent``'s named field slot."""
    return same_node(parent.child_by_field_name(field_name), node)


def loop_binding(node: Node) -> Optional[Node]:
    """Identifier declared by a ``for (const x of ...)`` or ``for (let k in ...)`` head.

    tree-sitter puts such bindings on the for_in_statement itself rather than
    on a variable_declarator. Destructured loop heads return None.
    """
    if node.type != 'for_in_statement' or node.child_by_field_name('kind') is None:
        return None
    left = node.child_by_field_name('left')
    if left is None or left.type != 'identifier':
        return None
    return left


def is_loop_binding(parent: Node, node: Node) -> bool:
    return same_node(loop_binding(parent), node)


def require_specifier(node: Node) -> Optional[str]:
    """Return the module string of a ``require('...')`` call, else None.

    Only a single plain string argument counts; template literals and
    computed arguments are dynamic requires.
    """
    if node.type != 'call_expression':
        return None

    function_node = node.child_by_field_name('function')
    if function_node is None or function_node.type != 'identifier' or node_text(function_node) != 'require':
        return None

    args_node = node.child_by_field_name('arguments')
    if args_node is None:
        return None
    args = [arg for arg in args_node.named_children if arg.type != 'comment']
    if len(args) != 1 or args[0].type != 'string':
        return None
    return string_value(args[0])
