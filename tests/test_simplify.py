import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import math
import numpy as np
import pytest

from symbolic_cas import (
    Constant, Variable, Real, Imaginary, Impulse,
    Tan, ArcTan, Log, Floor,
    Add, Subtract, Multiply, Divide, Modulo, Exponent,
    Fourier, Laplace, Sum,
    ExpressionType, DivisionByZero, Simplifier
)
from symbolic_cas.expression_tree.utils.simplifier import RULES
from symbolic_cas.expression_tree.utils.imaginary import ImaginarySimplifier, flatten_product


def x():
    return Variable('x')


def y():
    return Variable('y')


def euler(power):
    return Exponent(Constant.e(), power)


# Scenarios

def test_zero_plus_x_is_x():
    assert Add(Constant(0), x()).simplify().compare(x())


def test_modulo_by_zero_raises():
    with pytest.raises(DivisionByZero):
        Modulo(x(), Constant(0)).simplify()


def test_x_modulo_x_is_zero():
    assert Modulo(x(), x()).simplify().compare(Constant(0))


def test_gauss_identity():
    summation = Sum(Variable('i'), Constant(0), Constant(4))
    result = summation.simplify()
    assert result.compare(Divide(Multiply(Constant(4), Constant(3)), Constant(2)))
    assert result.evaluate() == 6.0


def test_euler_identity_at_pi():
    assert euler(Multiply(Imaginary(), Constant.pi())).simplify().compare(Constant(-1))


# Per-operator rules

def test_add_rules():
    assert Add(Real(2), Real(3)).simplify().compare(Real(5))
    assert Add(x(), Real(0)).simplify().compare(x())
    assert Add(x(), x()).simplify().compare(Multiply(Real(2), x()))
    assert Add(x(), y()).simplify().compare(Add(x(), y()))


def test_subtract_rules():
    assert Subtract(Real(2), Real(3)).simplify().compare(Real(-1))
    assert Subtract(x(), Constant(0)).simplify().compare(x())
    assert Subtract(Tan(x()), Tan(x())).simplify().compare(Constant(0))
    assert Subtract(Real(0), x()).simplify().compare(Subtract(Real(0), x()))


def test_multiply_rules():
    assert Multiply(Real(4), Real(2.5)).simplify().compare(Real(10))
    assert Multiply(x(), Constant(0)).simplify().compare(Constant(0))
    assert Multiply(Real(0), Tan(x())).simplify().compare(Constant(0))
    assert Multiply(x(), Real(1)).simplify().compare(x())
    assert Multiply(Constant(1), y()).simplify().compare(y())


def test_divide_rules():
    assert Divide(Real(6), Real(3)).simplify().compare(Real(2))
    assert Divide(x(), Real(1)).simplify().compare(x())
    with pytest.raises(DivisionByZero):
        Divide(x(), Real(0)).simplify()
    # the divisor is simplified before the check
    with pytest.raises(DivisionByZero):
        Divide(x(), Subtract(Real(2), Real(2))).simplify()


def test_modulo_rules():
    assert Modulo(Real(7), Real(3)).simplify().compare(Real(1))
    assert Modulo(Real(-7), Real(3)).simplify().compare(Real(-1))
    assert Modulo(x(), Real(1)).simplify().compare(Constant(0))
    assert Modulo(Constant(0), x()).simplify().compare(Constant(0))
    assert Modulo(x(), y()).simplify().compare(Modulo(x(), y()))


def test_exponent_rules():
    assert Exponent(Real(2), Real(10)).simplify().compare(Real(1024))
    assert Exponent(x(), Real(1)).simplify().compare(x())
    assert Exponent(x(), Real(0)).simplify().compare(Constant(1))
    assert Exponent(Constant(1), x()).simplify().compare(Constant(1))
    # not a finite real, so left alone
    assert Exponent(Real(-8), Real(0.5)).simplify().compare(Exponent(Real(-8), Real(0.5)))
    assert Exponent(Real(0), Real(-1)).simplify().compare(Exponent(Real(0), Real(-1)))


def test_unary_folding():
    assert Tan(Real(0)).simplify().compare(Real(0))
    folded = ArcTan(Real(1)).simplify()
    assert isinstance(folded, Real)
    assert np.isclose(folded.value, math.pi / 4)
    assert Floor(Real(2.5)).simplify().compare(Real(2))
    assert np.isclose(Log(Constant.e()).simplify().value, 1.0)


def test_unary_without_numeric_operand_is_rebuilt():
    assert Tan(Add(x(), Real(0))).simplify().compare(Tan(x()))
    assert Log(Real(0)).simplify().compare(Log(Real(0)))
    assert Log(Real(-2)).simplify().compare(Log(Real(-2)))


def test_children_are_simplified_before_parent():
    expression = Multiply(Add(x(), Real(0)), Real(1))
    assert expression.simplify().compare(x())

    nested = Add(Multiply(Real(2), Real(3)), Multiply(Real(4), Real(5)))
    assert nested.simplify().compare(Real(26))


def test_one_rewrite_per_call():
    # the Gauss result only folds to a number on the next pass
    first = Sum(Variable('i'), Constant(0), Constant(4)).simplify()
    assert isinstance(first, Divide)
    assert first.simplify().compare(Real(6))


def test_leaves_simplify_to_copies():
    for leaf in (Constant.pi(), x(), Real(3), Imaginary(), Impulse()):
        simplified = leaf.simplify()
        assert simplified is not leaf
        assert simplified.compare(leaf)


def test_simplify_does_not_mutate_input():
    expression = Add(Constant(0), Multiply(x(), Real(1)))
    snapshot = expression.copy()
    expression.simplify()
    assert expression.compare(snapshot)


def test_sum_constant_summand():
    result = Sum(Real(3), Real(1), Real(4)).simplify()
    assert result.compare(Multiply(Constant(4), Real(3)))
    assert result.evaluate() == 12.0

    empty = Sum(x(), Real(5), Real(2)).simplify()
    assert empty.compare(Multiply(Constant(0), x()))


def test_sum_without_identity_is_rebuilt():
    symbolic_bound = Sum(Variable('i'), Real(0), Variable('n'))
    assert symbolic_bound.simplify().compare(symbolic_bound)

    shifted = Sum(Variable('i'), Real(1), Real(4))
    assert shifted.simplify().compare(shifted)

    other_index = Sum(Variable('i'), Real(0), Real(4), 'k')
    assert other_index.simplify().compare(Multiply(Constant(5), Variable('i')))


@pytest.mark.parametrize("lower", [i / 10 for i in range(0, 30, 3)])
@pytest.mark.parametrize("upper", [i / 10 for i in range(0, 80, 7)])
def test_constant_summand_agrees_with_evaluation(lower, upper):
    summation = Sum(Real(2), Real(lower), Real(upper))
    assert summation.simplify().evaluate() == summation.evaluate()


def test_fractional_bounds_keep_the_summation():
    summation = Sum(Real(2), Real(0.1), Real(4.1))
    assert summation.simplify().compare(summation)
    assert summation.evaluate() == 10.0


def test_gauss_identity_needs_non_negative_integer_upper_bound():
    negative = Sum(Variable('i'), Constant(0), Constant(-3))
    assert negative.simplify().compare(negative)
    assert negative.evaluate() == 0.0

    fractional = Sum(Variable('i'), Constant(0), Real(2.5))
    assert fractional.simplify().compare(fractional)
    assert fractional.evaluate() == 3.0

    zero = Sum(Variable('i'), Constant(0), Constant(0))
    assert zero.simplify().evaluate() == zero.evaluate() == 0.0


def test_transforms_simplify_children():
    assert Fourier(Add(x(), Real(0))).simplify().compare(Fourier(x()))
    assert Laplace(x(), Add(Real(1), Real(1))).simplify().compare(Laplace(x(), Real(2)))


# Euler rule

def test_euler_quadrants():
    half_pi = Multiply(Imaginary(), Multiply(Real(0.5), Constant.pi()))
    assert euler(half_pi).simplify().compare(Imaginary())

    full_turn = Multiply(Real(2 * math.pi), Imaginary())
    assert euler(full_turn).simplify().compare(Constant(1))

    three_quarters = Multiply(Imaginary(), Real(1.5 * math.pi))
    assert euler(three_quarters).simplify().compare(Multiply(Constant(-1), Imaginary()))

    negative = Multiply(Imaginary(), Real(-math.pi))
    assert euler(negative).simplify().compare(Constant(-1))


def test_euler_leaves_other_angles_alone():
    other = euler(Multiply(Imaginary(), Real(0.3)))
    assert other.simplify().compare(other)

    not_e = Exponent(Real(2), Multiply(Imaginary(), Constant.pi()))
    assert not_e.simplify().compare(not_e)

    two_units = euler(Multiply(Imaginary(), Multiply(Imaginary(), Constant.pi())))
    assert two_units.simplify().compare(two_units)


def test_euler_results_agree_with_numeric_evaluation():
    for c in (0.5, 1.0, 1.5, 2.0, 3.0):
        expression = euler(Multiply(Imaginary(), Real(c * math.pi)))
        assert np.isclose(expression.evaluate(), expression.simplify().evaluate())


def test_flatten_product():
    product = Multiply(Multiply(Real(2), Imaginary()), Constant.pi())
    factors = flatten_product(product)
    assert [f.node_type for f in factors] == [
        ExpressionType.REAL, ExpressionType.IMAGINARY, ExpressionType.CONSTANT]
    assert np.isclose(ImaginarySimplifier.imaginary_angle(product), 2 * math.pi)
    assert ImaginarySimplifier.imaginary_angle(Imaginary()) is None


# Catalogue shape

def test_every_expression_type_has_a_rewrite_rule():
    assert set(RULES) == set(ExpressionType)


# Properties

BINDINGS = {'x': 1.7, 'y': -0.4}


def sample_expressions():
    return [
        Add(Multiply(Real(2), Real(3)), x()),
        Multiply(x(), Add(y(), Real(0))),
        Subtract(Tan(Real(0.3)), x()),
        Modulo(Real(7.5), Real(2)),
        Exponent(x(), Real(2)),
        Divide(Add(x(), x()), Real(1)),
        Sum(Real(2), Real(1), Real(3)),
        Sum(Multiply(Variable('i'), x()), Real(1), Real(3)),
        ArcTan(Multiply(y(), Real(1))),
        Log(Exponent(x(), Real(2))),
        Floor(Add(Real(3.2), Real(0.5))),
        Subtract(Multiply(x(), Constant(0)), Divide(y(), Constant(1))),
        euler(Multiply(Imaginary(), Constant.pi())),
        Add(Add(Add(x(), Real(0)), Multiply(Real(1), y())), Subtract(x(), x())),
    ]


@pytest.mark.parametrize("expression", sample_expressions(), ids=str)
def test_evaluate_agrees_with_simplify(expression):
    simplified = expression.simplify()
    assert np.isclose(expression.evaluate(BINDINGS), simplified.evaluate(BINDINGS))


@pytest.mark.parametrize("expression", sample_expressions(), ids=str)
def test_fixpoint_is_idempotent(expression):
    normal = Simplifier().simplify(expression)
    once = normal.simplify()
    assert once.compare(normal)
    assert once.simplify().compare(once)
    assert np.isclose(expression.evaluate(BINDINGS), normal.evaluate(BINDINGS))
