import numpy as np
import sympy as sp
from typing import Optional

from .node import Expression, to_number
from .operators import ExpressionType, ExpressionCategory, BINARY_SYMBOLS
from ...errors import DivisionByZero, UndefinedOperation


class BinaryExpression(Expression):
  """A node owning a most significant (left) and least significant (right) operand.

  Operand order carries meaning for Divide, Modulo and Exponent; for the
  commutative operators it is only a convention.
  """

  __slots__ = ('_most_sig_op', '_least_sig_op')

  category = ExpressionCategory.BINARY
  commutative = False

  def __init__(self, most_sig_op: Optional[Expression] = None,
               least_sig_op: Optional[Expression] = None):
    super().__init__()
    self._most_sig_op = most_sig_op
    self._least_sig_op = least_sig_op

  def has_most_sig_op(self) -> bool:
    return self._most_sig_op is not None

  def has_least_sig_op(self) -> bool:
    return self._least_sig_op is not None

  @property
  def most_sig_op(self) -> Expression:
    if self._most_sig_op is None:
      raise RuntimeError(f"{type(self).__name__} has no most significant operand")
    return self._most_sig_op

  @property
  def least_sig_op(self) -> Expression:
    if self._least_sig_op is None:
      raise RuntimeError(f"{type(self).__name__} has no least significant operand")
    return self._least_sig_op

  def set_most_sig_op(self, operand: Expression):
    self._most_sig_op = operand
    self._clear_cache()

  def set_least_sig_op(self, operand: Expression):
    self._least_sig_op = operand
    self._clear_cache()

  @property
  def operands(self):
    return tuple(op for op in (self._most_sig_op, self._least_sig_op) if op is not None)

  def _payload(self):
    return (self.has_most_sig_op(), self.has_least_sig_op())

  @property
  def symbol(self) -> str:
    return BINARY_SYMBOLS[self.node_type]

  def with_operands(self, operands):
    it = iter(operands)
    most = next(it) if self.has_most_sig_op() else None
    least = next(it) if self.has_least_sig_op() else None
    return type(self)(most, least)

  def copy(self):
    return type(self)(
      self._most_sig_op.copy() if self._most_sig_op is not None else None,
      self._least_sig_op.copy() if self._least_sig_op is not None else None,
    )

  def evaluate(self, bindings=None):
    left = to_number(self.most_sig_op.evaluate(bindings))
    right = to_number(self.least_sig_op.evaluate(bindings))
    return to_number(self._apply(left, right))

  def _apply(self, left, right):
    raise NotImplementedError

  def to_string(self) -> str:
    return f"({self.most_sig_op.to_string()} {self.symbol} {self.least_sig_op.to_string()})"


class Add(BinaryExpression):
  __slots__ = ()

  node_type = ExpressionType.ADD
  commutative = True

  def _apply(self, left, right):
    return left + right

  def to_sympy(self):
    return sp.Add(self.most_sig_op.to_sympy(), self.least_sig_op.to_sympy())


class Subtract(BinaryExpression):
  __slots__ = ()

  node_type = ExpressionType.SUBTRACT

  def _apply(self, left, right):
    return left - right

  def to_sympy(self):
    return sp.Add(self.most_sig_op.to_sympy(), sp.Mul(-1, self.least_sig_op.to_sympy()))


class Multiply(BinaryExpression):
  __slots__ = ()

  node_type = ExpressionType.MULTIPLY
  commutative = True

  def _apply(self, left, right):
    return left * right

  def to_sympy(self):
    return sp.Mul(self.most_sig_op.to_sympy(), self.least_sig_op.to_sympy())


class Divide(BinaryExpression):
  __slots__ = ()

  node_type = ExpressionType.DIVIDE

  def _apply(self, left, right):
    if right == 0:
      raise DivisionByZero(f"division of {self.most_sig_op} by zero")
    return left / right

  def to_sympy(self):
    return sp.Mul(self.most_sig_op.to_sympy(), sp.Pow(self.least_sig_op.to_sympy(), -1))


class Modulo(BinaryExpression):
  """Floating remainder of the dividend (left) by the divisor (right)."""

  __slots__ = ()

  node_type = ExpressionType.MODULO

  def _apply(self, left, right):
    if right == 0:
      raise DivisionByZero(f"modulo of {self.most_sig_op} by zero")
    if isinstance(left, complex) or isinstance(right, complex):
      raise UndefinedOperation("modulo of complex values")
    return float(np.fmod(left, right))

  def to_sympy(self):
    return sp.Mod(self.most_sig_op.to_sympy(), self.least_sig_op.to_sympy())


class Exponent(BinaryExpression):
  """Base (left) raised to the power (right)."""

  __slots__ = ()

  node_type = ExpressionType.EXPONENT

  @property
  def base(self) -> Expression:
    return self.most_sig_op

  @property
  def power(self) -> Expression:
    return self.least_sig_op

  def _apply(self, left, right):
    try:
      return left ** right
    except ZeroDivisionError as e:
      raise DivisionByZero(f"zero raised to a negative power in {self}") from e

  def to_sympy(self):
    return sp.Pow(self.most_sig_op.to_sympy(), self.least_sig_op.to_sympy())
