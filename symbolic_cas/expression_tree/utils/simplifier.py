import math
from typing import Callable, Dict, Optional

from ..core.node import Expression, Constant, Real, Variable
from ..core.binary import BinaryExpression, Add, Multiply, Divide
from ..core.bounded import Sum
from ..core.operators import ExpressionType, fold_binary, fold_unary
from ..specialize import (
  specialize, specialize_commutative, specialize_numeric, numeric_equals
)
from .imaginary import ImaginarySimplifier
from ...errors import DivisionByZero, UndefinedOperation

_is_zero = numeric_equals(0.0)
_is_one = numeric_equals(1.0)


class ExpressionSimplifier:
  """Per-operator rewrite rules.

  ``rewrite`` sees a node whose children are already simplified and applies
  that node's own rule once. A rule that does not apply hands the node back
  unchanged so the driver can detect the fixpoint.
  """

  @staticmethod
  def rewrite(node: Expression) -> Expression:
    rule = RULES.get(node.node_type)
    if rule is None:
      raise UndefinedOperation(f"no rewrite rule for {type(node).__name__}")
    return rule(node)


def _fold(node: BinaryExpression) -> Optional[Expression]:
  left = specialize_numeric(node.most_sig_op)
  right = specialize_numeric(node.least_sig_op)
  if left is None or right is None:
    return None
  value = fold_binary(left, right, node.node_type)
  return Real(value) if value is not None else None


def _check_divisor(node: BinaryExpression):
  if _is_zero(node.least_sig_op):
    raise DivisionByZero(f"{node.to_string()} has a zero divisor")


def _rewrite_leaf(node):
  return node


def _rewrite_add(node):
  folded = _fold(node)
  if folded is not None:
    return folded
  match = specialize_commutative(node, Add, _is_zero, None)
  if match is not None:
    return match[1]  # x + 0 = x
  if node.most_sig_op.compare(node.least_sig_op):
    return Multiply(Real(2.0), node.most_sig_op)  # x + x = 2x
  return node


def _rewrite_subtract(node):
  folded = _fold(node)
  if folded is not None:
    return folded
  if _is_zero(node.least_sig_op):
    return node.most_sig_op
  if node.most_sig_op.compare(node.least_sig_op):
    return Constant.zero()
  return node


def _rewrite_multiply(node):
  folded = _fold(node)
  if folded is not None:
    return folded
  if specialize_commutative(node, Multiply, _is_zero, None) is not None:
    return Constant.zero()
  match = specialize_commutative(node, Multiply, _is_one, None)
  if match is not None:
    return match[1]
  return node


def _rewrite_divide(node):
  _check_divisor(node)
  folded = _fold(node)
  if folded is not None:
    return folded
  if _is_one(node.least_sig_op):
    return node.most_sig_op
  return node


def _rewrite_modulo(node):
  _check_divisor(node)
  folded = _fold(node)
  if folded is not None:
    return folded
  if _is_one(node.least_sig_op) or _is_zero(node.most_sig_op):
    return Constant.zero()
  if node.most_sig_op.compare(node.least_sig_op):
    return Constant.zero()
  return node


def _rewrite_exponent(node):
  euler = ImaginarySimplifier.simplify(node)
  if euler is not None:
    return euler
  folded = _fold(node)
  if folded is not None:
    return folded
  if _is_one(node.power):
    return node.base
  if _is_zero(node.power) or _is_one(node.base):
    return Constant.one()
  return node


def _rewrite_unary(node):
  value = specialize_numeric(node.operand)
  if value is not None:
    folded = fold_unary(value, node.node_type)
    if folded is not None:
      return Real(folded)
  return node


def _rewrite_bounded(node):
  return node


def _rewrite_sum(node):
  """Constant-summand and Gauss identities over numeric bounds"""
  if specialize(node, Sum) is None or not (node.has_lower_bound() and node.has_upper_bound()):
    return node
  lower = specialize_numeric(node.lower_bound)
  upper = specialize_numeric(node.upper_bound)
  # both identities count terms on the integer grid
  if lower is None or upper is None or not (_is_integral(lower) and _is_integral(upper)):
    return node

  function, index = node.function, node.variable
  if not function.contains_variable(index):
    count = upper - lower + 1.0 if upper >= lower else 0.0
    return Multiply(Constant(count), function)

  if (specialize(function, Variable) is not None and function.compare(index)
      and lower == 0.0 and upper >= 0.0):
    return Divide(Multiply(Constant(upper), Constant(upper - 1.0)), Constant(2.0))
  return node


def _is_integral(value: float) -> bool:
  return math.isfinite(value) and value.is_integer()


RULES: Dict[ExpressionType, Callable[[Expression], Expression]] = {
  ExpressionType.CONSTANT: _rewrite_leaf,
  ExpressionType.VARIABLE: _rewrite_leaf,
  ExpressionType.REAL: _rewrite_leaf,
  ExpressionType.IMAGINARY: _rewrite_leaf,
  ExpressionType.IMPULSE: _rewrite_leaf,
  ExpressionType.ADD: _rewrite_add,
  ExpressionType.SUBTRACT: _rewrite_subtract,
  ExpressionType.MULTIPLY: _rewrite_multiply,
  ExpressionType.DIVIDE: _rewrite_divide,
  ExpressionType.MODULO: _rewrite_modulo,
  ExpressionType.EXPONENT: _rewrite_exponent,
  ExpressionType.TAN: _rewrite_unary,
  ExpressionType.ARCTAN: _rewrite_unary,
  ExpressionType.LOG: _rewrite_unary,
  ExpressionType.FLOOR: _rewrite_unary,
  ExpressionType.FOURIER: _rewrite_bounded,
  ExpressionType.LAPLACE: _rewrite_bounded,
  ExpressionType.SUM: _rewrite_sum,
}
