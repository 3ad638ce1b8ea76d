import math
import sympy as sp
from abc import ABC, abstractmethod
from typing import Mapping, Optional, Tuple, Union

from .operators import ExpressionType, ExpressionCategory
from ...errors import UnboundVariable

Number = Union[float, complex]
Bindings = Optional[Mapping[str, float]]


def to_number(value) -> Number:
  """Collapse numpy scalars and complexes with no imaginary part to plain floats"""
  value = complex(value)
  if value.imag == 0.0:
    return value.real
  return value


def format_number(value: float) -> str:
  if float(value).is_integer() and abs(value) < 1e15:
    return str(int(value))
  return format(value, '.12g')


def number_to_sympy(value: float) -> sp.Expr:
  if float(value).is_integer():
    return sp.Integer(int(value))
  return sp.Float(value)


class Expression(ABC):
  """Base node of the expression tree.

  Every concrete node carries a class-level ``node_type`` tag, owns its
  operands exclusively and is compared structurally (tag plus children,
  never by numeric evaluation).
  """

  __slots__ = ('_hash_cache', '_size_cache')

  node_type: ExpressionType = None
  category: ExpressionCategory = None

  def __init__(self):
    self._hash_cache: Optional[int] = None
    self._size_cache: Optional[int] = None

  def _clear_cache(self):
    self._hash_cache = None
    self._size_cache = None

  @abstractmethod
  def evaluate(self, bindings: Bindings = None) -> Number:
    pass

  @abstractmethod
  def to_string(self) -> str:
    pass

  @abstractmethod
  def copy(self) -> 'Expression':
    pass

  @abstractmethod
  def with_operands(self, operands: Tuple['Expression', ...]) -> 'Expression':
    """Build a node of the same shape that owns ``operands``."""
    pass

  @abstractmethod
  def to_sympy(self) -> sp.Expr:
    pass

  @property
  def operands(self) -> Tuple['Expression', ...]:
    return ()

  def _payload(self) -> tuple:
    """Non-child data that takes part in structural equality."""
    return ()

  def clone(self) -> 'Expression':
    return self.copy()

  def simplify(self) -> 'Expression':
    """One bottom-up rewrite pass: children first, then this node's own rule."""
    rebuilt = self.with_operands(tuple(child.simplify() for child in self.operands))
    return rebuilt._rewrite()

  def _rewrite(self) -> 'Expression':
    # Consumes self: the result may reuse self or its children.
    from ..utils.simplifier import ExpressionSimplifier
    return ExpressionSimplifier.rewrite(self)

  def differentiate(self, variable: Union['Variable', str]) -> 'Expression':
    from ..utils.calculus import Differentiator
    return Differentiator.differentiate(self, as_variable(variable))

  def integrate(self, variable: Union['Variable', str]) -> 'Expression':
    from ..utils.calculus import Integrator
    return Integrator.integrate(self, as_variable(variable))

  def contains_variable(self, variable: 'Variable') -> bool:
    return any(child.contains_variable(variable) for child in self.operands)

  def compare(self, other: 'Expression') -> bool:
    if not isinstance(other, Expression) or other.node_type != self.node_type:
      return False
    if self._payload() != other._payload():
      return False
    mine, theirs = self.operands, other.operands
    if len(mine) != len(theirs):
      return False
    return all(a.compare(b) for a, b in zip(mine, theirs))

  def equals(self, other: 'Expression') -> bool:
    return self.compare(other)

  def size(self) -> int:
    if self._size_cache is None:
      self._size_cache = 1 + sum(child.size() for child in self.operands)
    return self._size_cache

  def _compute_hash(self) -> int:
    return hash((self.node_type, self._payload(), tuple(hash(child) for child in self.operands)))

  def __hash__(self) -> int:
    if self._hash_cache is None:
      self._hash_cache = self._compute_hash()
    return self._hash_cache

  def __eq__(self, other) -> bool:
    if not isinstance(other, Expression):
      return NotImplemented
    return self.compare(other)

  def __ne__(self, other) -> bool:
    result = self.__eq__(other)
    if result is NotImplemented:
      return result
    return not result

  def __str__(self) -> str:
    return self.to_string()

  def __repr__(self) -> str:
    return f"{type(self).__name__}({self.to_string()})"


class LeafExpression(Expression):
  __slots__ = ()

  category = ExpressionCategory.LEAF

  def with_operands(self, operands):
    if operands:
      raise RuntimeError(f"{type(self).__name__} takes no operands")
    return self.copy()


class Constant(LeafExpression):
  """A named, immutable numeric constant such as pi or e."""

  __slots__ = ('value', 'name')

  node_type = ExpressionType.CONSTANT

  def __init__(self, value: float, name: Optional[str] = None):
    super().__init__()
    self.value = float(value)
    self.name = name if name is not None else format_number(self.value)

  @classmethod
  def pi(cls) -> 'Constant':
    return cls(math.pi, 'π')

  @classmethod
  def e(cls) -> 'Constant':
    return cls(math.e, 'e')

  @classmethod
  def zero(cls) -> 'Constant':
    return cls(0.0, '0')

  @classmethod
  def one(cls) -> 'Constant':
    return cls(1.0, '1')

  def evaluate(self, bindings=None):
    return self.value

  def to_string(self) -> str:
    return self.name

  def copy(self) -> 'Constant':
    return Constant(self.value, self.name)

  def _payload(self):
    return (self.value,)

  def to_sympy(self):
    if self.value == math.pi:
      return sp.pi
    if self.value == math.e:
      return sp.E
    return number_to_sympy(self.value)


class Variable(LeafExpression):
  __slots__ = ('name',)

  node_type = ExpressionType.VARIABLE

  def __init__(self, name: str):
    super().__init__()
    self.name = name

  def evaluate(self, bindings=None):
    if bindings is None or self.name not in bindings:
      raise UnboundVariable(self.name)
    return to_number(bindings[self.name])

  def to_string(self) -> str:
    return self.name

  def copy(self) -> 'Variable':
    return Variable(self.name)

  def contains_variable(self, variable):
    return self.name == variable.name

  def _payload(self):
    return (self.name,)

  def to_sympy(self):
    return sp.Symbol(self.name)


class Real(LeafExpression):
  """An evaluated numeric literal; numeric folding produces these."""

  __slots__ = ('value',)

  node_type = ExpressionType.REAL

  def __init__(self, value: float):
    super().__init__()
    self.value = float(value)

  def evaluate(self, bindings=None):
    return self.value

  def to_string(self) -> str:
    return format_number(self.value)

  def copy(self) -> 'Real':
    return Real(self.value)

  def _payload(self):
    return (self.value,)

  def to_sympy(self):
    return number_to_sympy(self.value)


class Imaginary(LeafExpression):
  __slots__ = ()

  node_type = ExpressionType.IMAGINARY

  def evaluate(self, bindings=None):
    return 1j

  def to_string(self) -> str:
    return 'i'

  def copy(self) -> 'Imaginary':
    return Imaginary()

  def to_sympy(self):
    return sp.I


class Impulse(LeafExpression):
  """Dirac delta in ``t``. It has no derivative or integral rule."""

  __slots__ = ()

  node_type = ExpressionType.IMPULSE

  def evaluate(self, bindings=None):
    if bindings is None or 't' not in bindings:
      raise UnboundVariable('t')
    return math.inf if bindings['t'] == 0 else 0.0

  def to_string(self) -> str:
    return 'δ(t)'

  def copy(self) -> 'Impulse':
    return Impulse()

  def contains_variable(self, variable):
    return variable.name == 't'

  def to_sympy(self):
    return sp.DiracDelta(sp.Symbol('t'))


def as_variable(variable: Union[Variable, str]) -> Variable:
  if isinstance(variable, Variable):
    return variable
  if isinstance(variable, str):
    return Variable(variable)
  raise TypeError(f"expected a Variable or a name, got {type(variable).__name__}")
