"""Utilities for expression trees."""

from .simplifier import ExpressionSimplifier, RULES
from .imaginary import ImaginarySimplifier, flatten_product
from .calculus import Differentiator, Integrator, DERIVATIVE_RULES, INTEGRAL_RULES
from .sympy_utils import SymPySimplifier, to_sympy, from_sympy, parse_expression
from .mathml import serialize_to, to_mathml, deserialize_from, from_mathml
from .tree_utils import (
    get_all_nodes, calculate_tree_depth, calculate_subtree_sizes,
    find_nodes_by_type, find_nodes_by_symbol, apply_to_all_nodes,
    validate_tree_structure, trees_share_nodes,
    get_constants, get_reals, get_variables, get_variable_names,
    get_binary_ops, get_unary_ops
)

__all__ = [
    'ExpressionSimplifier', 'RULES', 'ImaginarySimplifier', 'flatten_product',
    'Differentiator', 'Integrator', 'DERIVATIVE_RULES', 'INTEGRAL_RULES',
    'SymPySimplifier', 'to_sympy', 'from_sympy', 'parse_expression',
    'serialize_to', 'to_mathml', 'deserialize_from', 'from_mathml',
    'get_all_nodes', 'calculate_tree_depth', 'calculate_subtree_sizes',
    'find_nodes_by_type', 'find_nodes_by_symbol', 'apply_to_all_nodes',
    'validate_tree_structure', 'trees_share_nodes',
    'get_constants', 'get_reals', 'get_variables', 'get_variable_names',
    'get_binary_ops', 'get_unary_ops'
]
