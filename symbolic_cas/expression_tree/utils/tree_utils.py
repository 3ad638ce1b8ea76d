"""
Tree Utility Functions

Traversal and inspection helpers shared by the driver, the serializers and
the tests. Every helper walks ``Expression.operands`` so it works for all
node categories alike.
"""

from typing import List, Dict, Optional, Any, Callable, Type, TypeVar, cast

from ..core.node import Expression, Constant, Variable, Real
from ..core.unary import UnaryExpression
from ..core.binary import BinaryExpression
from ..core.bounded import BoundedUnaryExpression

T = TypeVar('T', bound=Expression)


def get_all_nodes(node: Expression, traversal_order: str = 'breadth_first') -> List[Expression]:
    """
    Get all nodes in the tree using specified traversal order.

    Args:
        node: Root node of the tree
        traversal_order: 'breadth_first' (default) or 'depth_first'

    Returns:
        List of all nodes in the tree
    """
    if traversal_order == 'breadth_first':
        return _breadth_first_traversal(node)
    elif traversal_order == 'depth_first':
        return _depth_first_traversal(node)
    else:
        raise ValueError(f"Invalid traversal_order: {traversal_order}")


def _breadth_first_traversal(node: Expression) -> List[Expression]:
    """Breadth-first traversal (iterative, non-recursive)"""
    nodes_to_visit = [node]
    all_nodes = []

    while nodes_to_visit:
        current_node = nodes_to_visit.pop(0)  # FIFO for breadth-first
        all_nodes.append(current_node)
        nodes_to_visit.extend(current_node.operands)

    return all_nodes


def _depth_first_traversal(node: Expression) -> List[Expression]:
    """Depth-first traversal (recursive, pre-order)"""
    nodes = [node]
    for child in node.operands:
        nodes.extend(_depth_first_traversal(child))
    return nodes


def calculate_tree_depth(node: Expression) -> int:
    """
    Calculate the maximum depth of the tree.

    Args:
        node: Root node of the tree

    Returns:
        Maximum depth (leaf nodes have depth 1)
    """
    children = node.operands
    if not children:
        return 1
    return 1 + max(calculate_tree_depth(child) for child in children)


def calculate_subtree_sizes(node: Expression) -> Dict[int, int]:
    """
    Calculate the size (node count) of each subtree.

    Nodes hash structurally, so the result is keyed by ``id`` to keep equal
    but distinct subtrees apart.

    Args:
        node: Root node of the tree

    Returns:
        Dictionary mapping ``id(node)`` to its subtree size
    """
    sizes = {}

    def _calculate_size(current_node: Expression) -> int:
        size = 1 + sum(_calculate_size(child) for child in current_node.operands)
        sizes[id(current_node)] = size
        return size

    _calculate_size(node)
    return sizes


def find_nodes_by_type(node: Expression, node_type: Type[T]) -> List[T]:
    """
    Find all nodes of a specific class in the tree.

    Args:
        node: Root node of the tree
        node_type: Class of nodes to find (e.g., Constant, BinaryExpression)

    Returns:
        List of nodes matching the specified class
    """
    all_nodes = get_all_nodes(node)
    return [cast(T, n) for n in all_nodes if isinstance(n, node_type)]


def find_nodes_by_symbol(node: Expression, symbol: str) -> List[BinaryExpression]:
    """Find all binary operator nodes printed with ``symbol`` (e.g. '+')."""
    return [n for n in get_binary_ops(node) if n.symbol == symbol]


def apply_to_all_nodes(node: Expression, func: Callable[[Expression], Any],
                       filter_type: Optional[type] = None) -> List[Any]:
    """
    Apply a function to all nodes (optionally filtered by class).

    Args:
        node: Root node of the tree
        func: Function to apply to each node
        filter_type: Optional class filter (only apply to nodes of this class)

    Returns:
        List of function results
    """
    all_nodes = get_all_nodes(node)

    if filter_type is not None:
        all_nodes = [n for n in all_nodes if isinstance(n, filter_type)]

    return [func(n) for n in all_nodes]


def _is_complete(node: Expression) -> bool:
    if isinstance(node, BinaryExpression):
        return node.has_most_sig_op() and node.has_least_sig_op()
    if isinstance(node, (UnaryExpression, BoundedUnaryExpression)):
        return node.has_operand()
    return True


def validate_tree_structure(node: Expression) -> bool:
    """
    Validate that the tree structure is consistent and well-formed.

    A well-formed tree has every required operand present and never reaches
    the same node object twice, which rules out both cycles and subtrees
    shared between parents.

    Args:
        node: Root node of the tree

    Returns:
        True if tree structure is valid, False otherwise
    """
    seen = set()
    nodes_to_visit = [node]

    while nodes_to_visit:
        current_node = nodes_to_visit.pop()
        if not isinstance(current_node, Expression):
            return False
        if id(current_node) in seen:
            return False
        seen.add(id(current_node))

        if not _is_complete(current_node):
            return False
        nodes_to_visit.extend(current_node.operands)

    return True


def trees_share_nodes(first: Expression, second: Expression) -> bool:
    """True when any node object is reachable from both roots."""
    first_ids = {id(n) for n in get_all_nodes(first)}
    return any(id(n) in first_ids for n in get_all_nodes(second))


# Convenience functions for common operations
def get_constants(node: Expression) -> List[Constant]:
    """Get all named constant nodes in the tree."""
    return find_nodes_by_type(node, Constant)


def get_reals(node: Expression) -> List[Real]:
    """Get all numeric literal nodes in the tree."""
    return find_nodes_by_type(node, Real)


def get_variables(node: Expression) -> List[Variable]:
    """Get all variable nodes in the tree."""
    return find_nodes_by_type(node, Variable)


def get_variable_names(node: Expression) -> List[str]:
    """Sorted, de-duplicated names of the variables that occur in the tree."""
    return sorted({v.name for v in get_variables(node)})


def get_binary_ops(node: Expression) -> List[BinaryExpression]:
    """Get all binary operation nodes in the tree."""
    return find_nodes_by_type(node, BinaryExpression)


def get_unary_ops(node: Expression) -> List[UnaryExpression]:
    """Get all unary operation nodes in the tree."""
    return find_nodes_by_type(node, UnaryExpression)
