import math
import numpy as np
import sympy as sp
from typing import Optional

from .node import Expression, to_number
from .operators import ExpressionType, ExpressionCategory, UNARY_NAMES
from ...errors import UndefinedOperation


class UnaryExpression(Expression):
  """A node owning one operand; subclasses supply the numeric function."""

  __slots__ = ('_operand',)

  category = ExpressionCategory.UNARY

  def __init__(self, operand: Optional[Expression] = None):
    super().__init__()
    self._operand = operand

  def has_operand(self) -> bool:
    return self._operand is not None

  @property
  def operand(self) -> Expression:
    if self._operand is None:
      raise RuntimeError(f"{type(self).__name__} has no operand")
    return self._operand

  def set_operand(self, operand: Expression):
    self._operand = operand
    self._clear_cache()

  @property
  def operands(self):
    return (self._operand,) if self._operand is not None else ()

  @property
  def name(self) -> str:
    return UNARY_NAMES[self.node_type]

  def with_operands(self, operands):
    return type(self)(*operands)

  def copy(self):
    if self._operand is None:
      return type(self)()
    return type(self)(self._operand.copy())

  def evaluate(self, bindings=None):
    return self._apply(to_number(self.operand.evaluate(bindings)))

  def _apply(self, value):
    raise NotImplementedError

  def to_string(self) -> str:
    return f"{self.name}({self.operand.to_string()})"


class Tan(UnaryExpression):
  __slots__ = ()

  node_type = ExpressionType.TAN

  def _apply(self, value):
    return to_number(np.tan(value))

  def to_sympy(self):
    return sp.tan(self.operand.to_sympy())


class ArcTan(UnaryExpression):
  __slots__ = ()

  node_type = ExpressionType.ARCTAN

  def _apply(self, value):
    return to_number(np.arctan(value))

  def to_sympy(self):
    return sp.atan(self.operand.to_sympy())


class Log(UnaryExpression):
  """Natural logarithm; negative reals evaluate on the principal branch."""

  __slots__ = ()

  node_type = ExpressionType.LOG

  def _apply(self, value):
    if value == 0:
      raise UndefinedOperation("logarithm of zero")
    if isinstance(value, float) and value > 0:
      return math.log(value)
    return to_number(np.log(complex(value)))

  def to_sympy(self):
    return sp.log(self.operand.to_sympy())


class Floor(UnaryExpression):
  __slots__ = ()

  node_type = ExpressionType.FLOOR

  def _apply(self, value):
    if isinstance(value, complex):
      raise UndefinedOperation("floor of a complex value")
    return float(np.floor(value))

  def to_sympy(self):
    return sp.floor(self.operand.to_sympy())
