"""Generalize/specialize protocol.

A *generalized* expression is any node of the uniform tree. A *specialized*
view is that same node seen as one concrete shape, e.g. "a Multiply whose
operands are both present and whose left operand is numeric". Rule modules
try to specialize into the shape they care about and fall through when it
does not match.

``specialize*`` never copies and never raises on a mismatch: a failed match
is ``None``. Rules copy only when they build their result.
"""

from typing import Callable, Optional, Tuple, Type, Union

from .core.node import Expression, Constant, Real, Variable, Imaginary
from .core.unary import UnaryExpression
from .core.binary import BinaryExpression, Add, Multiply
from .core.bounded import BoundedUnaryExpression

Shape = Union[Type[Expression], Tuple[Type[Expression], ...], Callable[[Expression], bool], None]

NUMERIC = (Constant, Real)


def _tag_matches(expression: Expression, cls: Type[Expression]) -> bool:
  node_type = getattr(cls, 'node_type', None)
  if node_type is not None:
    return expression.node_type == node_type
  # Abstract shapes (BinaryExpression, ...) match by category
  return isinstance(expression, cls)


def _is_complete(expression: Expression) -> bool:
  if isinstance(expression, BinaryExpression):
    return expression.has_most_sig_op() and expression.has_least_sig_op()
  if isinstance(expression, (UnaryExpression, BoundedUnaryExpression)):
    return expression.has_operand()
  return True


def matches(expression: Expression, shape: Shape) -> bool:
  if shape is None:
    return True
  if isinstance(shape, tuple):
    return any(matches(expression, s) for s in shape)
  if isinstance(shape, type):
    return _tag_matches(expression, shape) and _is_complete(expression)
  return bool(shape(expression))


def specialize(expression: Expression, shape: Shape) -> Optional[Expression]:
  """View ``expression`` as ``shape`` or return None."""
  if not isinstance(expression, Expression):
    return None
  return expression if matches(expression, shape) else None


def specialize_unary(expression: Expression, cls: Type[UnaryExpression],
                     operand: Shape = None) -> Optional[UnaryExpression]:
  node = specialize(expression, cls)
  if node is None or not matches(node.operand, operand):
    return None
  return node


def specialize_binary(expression: Expression, cls: Type[BinaryExpression],
                      left: Shape = None, right: Shape = None) -> Optional[BinaryExpression]:
  node = specialize(expression, cls)
  if node is None:
    return None
  if not (matches(node.most_sig_op, left) and matches(node.least_sig_op, right)):
    return None
  return node


def specialize_commutative(expression: Expression, cls: Type[BinaryExpression],
                           first: Shape, second: Shape) -> Optional[Tuple[Expression, Expression]]:
  """Match ``first``/``second`` against the operands in either order.

  Returns the operands reordered as (first match, second match).
  """
  node = specialize(expression, cls)
  if node is None:
    return None
  left, right = node.most_sig_op, node.least_sig_op
  if matches(left, first) and matches(right, second):
    return left, right
  if matches(right, first) and matches(left, second):
    return right, left
  return None


def specialize_numeric(expression: Expression) -> Optional[float]:
  """Value of a Constant or Real leaf, None for anything else."""
  node = specialize(expression, NUMERIC)
  if node is None:
    return None
  return node.value


def numeric_equals(value: float) -> Callable[[Expression], bool]:
  """Shape predicate: a numeric leaf holding exactly ``value``."""
  def predicate(expression: Expression) -> bool:
    return specialize_numeric(expression) == value
  return predicate


def generalize(value) -> Expression:
  """Total conversion into the uniform tree form."""
  if isinstance(value, Expression):
    return value
  if isinstance(value, bool):
    raise TypeError("booleans are not expressions")
  if isinstance(value, (int, float)):
    return Real(float(value))
  if isinstance(value, complex):
    if value == 1j:
      return Imaginary()
    imag = Multiply(Real(value.imag), Imaginary())
    return imag if value.real == 0 else Add(Real(value.real), imag)
  if isinstance(value, str):
    return Variable(value)
  raise TypeError(f"cannot generalize {type(value).__name__} into an expression")
