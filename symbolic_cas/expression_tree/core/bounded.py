import sympy as sp
from typing import Optional, Union

from .node import Expression, Variable, as_variable, to_number
from .operators import ExpressionType, ExpressionCategory
from ...errors import UndefinedOperation


class BoundedUnaryExpression(Expression):
  """An operand plus an optional lower and upper bound, each owned by this node."""

  __slots__ = ('_operand', '_lower_bound', '_upper_bound')

  category = ExpressionCategory.BOUNDED_UNARY
  label = ''

  def __init__(self, operand: Optional[Expression] = None,
               lower_bound: Optional[Expression] = None,
               upper_bound: Optional[Expression] = None):
    super().__init__()
    self._operand = operand
    self._lower_bound = lower_bound
    self._upper_bound = upper_bound

  def has_operand(self) -> bool:
    return self._operand is not None

  def has_lower_bound(self) -> bool:
    return self._lower_bound is not None

  def has_upper_bound(self) -> bool:
    return self._upper_bound is not None

  @property
  def operand(self) -> Expression:
    if self._operand is None:
      raise RuntimeError(f"{type(self).__name__} has no operand")
    return self._operand

  @property
  def lower_bound(self) -> Expression:
    if self._lower_bound is None:
      raise RuntimeError(f"{type(self).__name__} has no lower bound")
    return self._lower_bound

  @property
  def upper_bound(self) -> Expression:
    if self._upper_bound is None:
      raise RuntimeError(f"{type(self).__name__} has no upper bound")
    return self._upper_bound

  def set_lower_bound(self, bound: Expression):
    self._lower_bound = bound
    self._clear_cache()

  def set_upper_bound(self, bound: Expression):
    self._upper_bound = bound
    self._clear_cache()

  @property
  def operands(self):
    return tuple(op for op in (self._operand, self._lower_bound, self._upper_bound) if op is not None)

  def _payload(self):
    return (self.has_operand(), self.has_lower_bound(), self.has_upper_bound())

  def with_operands(self, operands):
    it = iter(operands)
    operand = next(it) if self.has_operand() else None
    lower = next(it) if self.has_lower_bound() else None
    upper = next(it) if self.has_upper_bound() else None
    return self._rebuild(operand, lower, upper)

  def _rebuild(self, operand, lower, upper):
    return type(self)(operand, lower, upper)

  def copy(self):
    return self.with_operands(tuple(op.copy() for op in self.operands))

  def evaluate(self, bindings=None):
    raise UndefinedOperation(f"{type(self).__name__} has no numeric evaluation")

  def _bounds_string(self) -> str:
    parts = []
    if self.has_lower_bound():
      parts.append(self.lower_bound.to_string())
    if self.has_upper_bound():
      parts.append(self.upper_bound.to_string())
    return ''.join(', ' + part for part in parts)

  def to_string(self) -> str:
    return f"{self.label}({self.operand.to_string()}{self._bounds_string()})"

  def to_sympy(self):
    raise UndefinedOperation(f"{type(self).__name__} has no SymPy counterpart")


class Fourier(BoundedUnaryExpression):
  __slots__ = ()

  node_type = ExpressionType.FOURIER
  label = 'Fourier'


class Laplace(BoundedUnaryExpression):
  __slots__ = ()

  node_type = ExpressionType.LAPLACE
  label = 'Laplace'


class Sum(BoundedUnaryExpression):
  """Summation of ``function`` as the index variable runs over [lower, upper].

  The index variable (``i`` unless given) is owned by the node but is a
  binder, not an operand: it is never simplified.
  """

  __slots__ = ('_variable',)

  node_type = ExpressionType.SUM
  label = 'Σ'

  def __init__(self, function: Optional[Expression] = None,
               lower_bound: Optional[Expression] = None,
               upper_bound: Optional[Expression] = None,
               variable: Union[Variable, str, None] = None):
    super().__init__(function, lower_bound, upper_bound)
    self._variable = as_variable(variable) if variable is not None else Variable('i')

  @property
  def function(self) -> Expression:
    return self.operand

  @property
  def variable(self) -> Variable:
    return self._variable

  def _rebuild(self, operand, lower, upper):
    return Sum(operand, lower, upper, self._variable.copy())

  def _payload(self):
    return super()._payload() + (self._variable.name,)

  def contains_variable(self, variable):
    bounds = [b for b in (self._lower_bound, self._upper_bound) if b is not None]
    if any(b.contains_variable(variable) for b in bounds):
      return True
    if variable.name == self._variable.name:
      return False
    return self.has_operand() and self.operand.contains_variable(variable)

  def evaluate(self, bindings=None):
    if not (self.has_lower_bound() and self.has_upper_bound()):
      raise UndefinedOperation("cannot evaluate a summation without both bounds")
    lower = to_number(self.lower_bound.evaluate(bindings))
    upper = to_number(self.upper_bound.evaluate(bindings))
    if isinstance(lower, complex) or isinstance(upper, complex):
      raise UndefinedOperation("summation bounds must be real")

    local_bindings = dict(bindings) if bindings else {}
    result = 0.0
    index = lower
    while index <= upper:
      local_bindings[self._variable.name] = index
      result += self.function.evaluate(local_bindings)
      index += 1.0
    return to_number(result)

  def to_string(self) -> str:
    lower = self.lower_bound.to_string() if self.has_lower_bound() else ''
    upper = self.upper_bound.to_string() if self.has_upper_bound() else ''
    return f"Σ({self._variable.name}={lower}..{upper}, {self.function.to_string()})"

  def to_sympy(self):
    if not (self.has_lower_bound() and self.has_upper_bound()):
      raise UndefinedOperation("cannot convert a summation without both bounds")
    return sp.Sum(
      self.function.to_sympy(),
      (self._variable.to_sympy(), self.lower_bound.to_sympy(), self.upper_bound.to_sympy()),
    )
