import sympy as sp
from typing import Mapping, Optional

from .core.node import Expression, Number


class ExpressionNode:
  """One state of a simplification run, as stored in the history graph"""

  __slots__ = ('root', '_string_cache')

  def __init__(self, root: Expression):
    self.root = root
    self._string_cache: Optional[str] = None

  def evaluate(self, bindings: Optional[Mapping[str, float]] = None) -> Number:
    return self.root.evaluate(bindings)

  def to_string(self) -> str:
    if self._string_cache is None:
      self._string_cache = self.root.to_string()
    return self._string_cache

  def copy(self) -> 'ExpressionNode':
    return ExpressionNode(self.root.copy())

  def get_expression(self) -> Expression:
    """A deep copy of the stored tree; the vertex keeps its own."""
    return self.root.copy()

  def size(self) -> int:
    return self.root.size()

  def to_sympy(self) -> sp.Expr:
    return self.root.to_sympy()

  def compare(self, expression: Expression) -> bool:
    return self.root.compare(expression)

  def __hash__(self) -> int:
    return hash(self.root)

  def __eq__(self, other) -> bool:
    if not isinstance(other, ExpressionNode):
      return False
    return self.root.compare(other.root)

  def __str__(self) -> str:
    return self.to_string()

  def __repr__(self) -> str:
    return f"ExpressionNode({self.to_string()})"
