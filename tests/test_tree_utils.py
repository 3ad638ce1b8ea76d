import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from symbolic_cas import Constant, Variable, Real, Tan, Log, Add, Multiply, Subtract, Sum
from symbolic_cas.expression_tree.core.binary import BinaryExpression
from symbolic_cas.expression_tree.utils.tree_utils import (
    get_all_nodes, calculate_tree_depth, calculate_subtree_sizes,
    find_nodes_by_type, find_nodes_by_symbol, apply_to_all_nodes,
    validate_tree_structure, trees_share_nodes,
    get_constants, get_reals, get_variables, get_variable_names,
    get_binary_ops, get_unary_ops
)


def sample():
    # ((a * b) + c)
    return Add(Multiply(Variable('a'), Variable('b')), Variable('c'))


def test_traversal_orders():
    tree = sample()
    breadth = [n.to_string() for n in get_all_nodes(tree)]
    depth = [n.to_string() for n in get_all_nodes(tree, 'depth_first')]
    assert breadth == ['((a * b) + c)', '(a * b)', 'c', 'a', 'b']
    assert depth == ['((a * b) + c)', '(a * b)', 'a', 'b', 'c']
    with pytest.raises(ValueError):
        get_all_nodes(tree, 'sideways')


def test_depth_and_sizes():
    tree = sample()
    assert calculate_tree_depth(tree) == 3
    assert calculate_tree_depth(Variable('x')) == 1
    sizes = calculate_subtree_sizes(tree)
    assert sizes[id(tree)] == 5
    assert sizes[id(tree.most_sig_op)] == 3
    assert sizes[id(tree.least_sig_op)] == 1


def test_find_by_type_and_symbol():
    tree = Subtract(Add(Tan(Variable('x')), Constant.pi()), Multiply(Real(2), Log(Variable('y'))))
    assert len(find_nodes_by_type(tree, BinaryExpression)) == 3
    assert len(get_binary_ops(tree)) == 3
    assert [n.to_string() for n in get_unary_ops(tree)] == ['tan(x)', 'ln(y)']
    assert len(find_nodes_by_symbol(tree, '+')) == 1
    assert len(get_constants(tree)) == 1
    assert len(get_reals(tree)) == 1
    assert len(get_variables(tree)) == 2
    assert get_variable_names(Add(Variable('y'), Multiply(Variable('x'), Variable('y')))) == ['x', 'y']


def test_sum_index_is_not_an_operand():
    summation = Sum(Variable('i'), Real(0), Variable('n'))
    assert get_variable_names(summation) == ['i', 'n']
    assert len(get_all_nodes(summation)) == 4


def test_apply_to_all_nodes():
    tree = sample()
    assert apply_to_all_nodes(tree, lambda n: n.size(), filter_type=Variable) == [1, 1, 1]
    assert len(apply_to_all_nodes(tree, lambda n: n)) == 5


def test_validate_tree_structure():
    assert validate_tree_structure(sample())
    assert validate_tree_structure(Sum(Variable('i'), Real(0), Real(4)))

    shared = Variable('x')
    assert not validate_tree_structure(Add(shared, shared))

    assert not validate_tree_structure(Add(Variable('x')))
    assert not validate_tree_structure(Tan())

    cyclic = Add(Variable('x'), Variable('y'))
    cyclic.set_least_sig_op(cyclic)
    assert not validate_tree_structure(cyclic)


def test_trees_share_nodes():
    tree = sample()
    assert not trees_share_nodes(tree, tree.copy())
    assert trees_share_nodes(tree, Tan(tree.least_sig_op))
