import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from symbolic_cas import (
    Constant, Variable, Real,
    Add, Multiply, Divide, Modulo, Sum,
    DivisionByZero, UndefinedOperation, RewriteCycleError,
    Simplifier, SimplificationGraph, ExpressionNode, ConcurrentStrategy, simplify
)


def x():
    return Variable('x')


def gauss():
    return Sum(Variable('i'), Constant(0), Constant(4))


class SwapOperands:
    """Strategy that never settles: (a + b) -> (b + a) -> (a + b) ..."""

    def simplify(self, expression):
        return Add(expression.least_sig_op.copy(), expression.most_sig_op.copy())


class TestDriver:

    def test_runs_to_fixpoint_and_records_steps(self):
        simplifier = Simplifier()
        result = simplifier.simplify(Add(Constant(0), x()))
        assert result.compare(x())
        assert len(simplifier.graph) == 2
        assert simplifier.graph.edges == ((0, 1),)
        assert simplifier.last_step_count == 1

    def test_gauss_chain(self):
        simplifier = Simplifier()
        result = simplifier.simplify(gauss())
        assert result.compare(Real(6))
        graph = simplifier.graph
        assert len(graph) == 3
        assert graph.edges == ((0, 1), (1, 2))
        assert graph.successors(0) == [1]
        assert graph.vertex(1).root.compare(Divide(Multiply(Constant(4), Constant(3)), Constant(2)))

    def test_normal_form_input_adds_a_single_vertex(self):
        simplifier = Simplifier()
        expression = Add(x(), Variable('y'))
        assert simplifier.simplify(expression).compare(expression)
        assert len(simplifier.graph) == 1
        assert simplifier.graph.edges == ()
        assert simplifier.last_step_count == 0

    def test_result_is_owned_by_the_caller(self):
        expression = Add(Constant(0), x())
        snapshot = expression.copy()
        simplifier = Simplifier()
        result = simplifier.simplify(expression)
        assert expression.compare(snapshot)
        assert result is not expression
        assert all(result is not vertex.root for vertex in simplifier.graph.vertices)

    def test_result_is_a_fixpoint(self):
        result = Simplifier().simplify(Multiply(Add(gauss(), Real(0)), Divide(x(), Real(1))))
        assert result.simplify().compare(result)

    def test_errors_propagate_and_graph_keeps_progress(self):
        simplifier = Simplifier()
        with pytest.raises(DivisionByZero):
            simplifier.simplify(Modulo(x(), Constant(0)))
        assert len(simplifier.graph) == 1
        assert simplifier.graph.edges == ()

    def test_cycle_is_reported(self):
        simplifier = Simplifier(strategy=SwapOperands())
        with pytest.raises(RewriteCycleError) as info:
            simplifier.simplify(Add(x(), Variable('y')))
        assert isinstance(info.value, UndefinedOperation)
        assert len(simplifier.graph) == 2
        assert simplifier.graph.edges == ((0, 1), (1, 0))

    def test_step_limit(self):
        simplifier = Simplifier(max_steps=1)
        with pytest.raises(RewriteCycleError):
            simplifier.simplify(gauss())
        assert len(simplifier.graph) == 2
        assert simplifier.graph.edges == ((0, 1),)

        assert Simplifier(max_steps=2).simplify(gauss()).compare(Real(6))
        with pytest.raises(ValueError):
            Simplifier(max_steps=-1)

    def test_graph_persists_across_runs(self):
        simplifier = Simplifier()
        simplifier.simplify(Add(Constant(0), x()))
        simplifier.simplify(Add(Constant(0), x()))
        assert len(simplifier.graph) == 2
        assert simplifier.graph.edges == ((0, 1),)

        simplifier.simplify(gauss())
        assert len(simplifier.graph) == 5

    def test_concurrent_strategy_records_same_history(self):
        sequential = Simplifier()
        concurrent = Simplifier(strategy=ConcurrentStrategy(min_parallel_size=1))
        sequential.simplify(gauss())
        concurrent.simplify(gauss())
        assert [v.to_string() for v in sequential.graph.vertices] == \
            [v.to_string() for v in concurrent.graph.vertices]
        assert sequential.graph.edges == concurrent.graph.edges

    def test_module_level_simplify(self):
        assert simplify(Add(Constant(0), x())).compare(x())


class TestSimplificationGraph:

    def test_insertion_deduplicates_structurally(self):
        graph = SimplificationGraph()
        first = graph.add_vertex(Add(x(), Real(1)))
        second = graph.add_vertex(Add(Variable('x'), Real(1)))
        third = graph.add_vertex(Add(x(), Real(2)))
        assert first == second == 0
        assert third == 1
        assert len(graph) == 2
        assert graph.find_vertex(Add(x(), Real(2))) == 1
        assert graph.find_vertex(x()) is None
        assert Add(x(), Real(1)) in graph

    def test_vertices_hold_copies(self):
        graph = SimplificationGraph()
        expression = Add(x(), Real(1))
        handle = graph.add_vertex(expression)
        assert graph.vertex(handle).root is not expression
        expression.set_least_sig_op(Real(5))
        assert graph.vertex(handle).root.compare(Add(x(), Real(1)))

    def test_edges(self):
        graph = SimplificationGraph()
        a = graph.add_vertex(x())
        b = graph.add_vertex(Real(1))
        assert graph.add_edge(a, b)
        assert not graph.add_edge(a, b)
        assert graph.edges == ((0, 1),)
        assert graph.successors(a) == [1]
        assert graph.successors(b) == []
        with pytest.raises(IndexError):
            graph.add_edge(a, 7)

    def test_to_dot(self):
        simplifier = Simplifier()
        simplifier.simplify(Add(Constant(0), x()))
        dot = simplifier.graph.to_dot()
        assert dot.startswith('digraph simplification {')
        assert '0 [label="(0 + x)"];' in dot
        assert '1 [label="x"];' in dot
        assert '0 -> 1;' in dot

    def test_to_dot_escapes_quotes(self):
        graph = SimplificationGraph()
        graph.add_vertex(Variable('a"b'))
        assert 'label="a\\"b"' in graph.to_dot()

    def test_save_graph_to_file(self, tmp_path):
        simplifier = Simplifier()
        simplifier.simplify(gauss())
        path = tmp_path / 'history.dot'
        simplifier.graph.save_graph_to_file(str(path))
        assert path.read_text(encoding='utf-8') == simplifier.graph.to_dot()


class TestExpressionNode:

    def test_string_is_cached(self):
        node = ExpressionNode(Add(x(), Real(1)))
        assert node.to_string() == "(x + 1)"
        assert node._string_cache == "(x + 1)"
        assert str(node) == "(x + 1)"

    def test_copy_and_get_expression_are_deep(self):
        node = ExpressionNode(Add(x(), Real(1)))
        duplicate = node.copy()
        assert duplicate == node
        assert duplicate.root is not node.root
        assert node.get_expression() is not node.root
        assert node.get_expression().compare(node.root)

    def test_evaluate_and_size(self):
        node = ExpressionNode(Add(x(), Real(1)))
        assert node.evaluate({'x': 2.0}) == 3.0
        assert node.size() == 3
        assert hash(node) == hash(ExpressionNode(Add(x(), Real(1))))
