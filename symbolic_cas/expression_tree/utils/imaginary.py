import math
import numpy as np
from typing import List, Optional

from ..core.node import Expression, Constant, Imaginary
from ..core.binary import Exponent, Multiply
from ..specialize import specialize, specialize_numeric

TWO_PI = 2.0 * math.pi


def flatten_product(expression: Expression) -> List[Expression]:
  """Factors of a (possibly nested) Multiply, left to right."""
  node = specialize(expression, Multiply)
  if node is None:
    return [expression]
  return flatten_product(node.most_sig_op) + flatten_product(node.least_sig_op)


class ImaginarySimplifier:
  """Euler's identity for e raised to an imaginary multiple of pi"""

  @staticmethod
  def simplify(node: Exponent) -> Optional[Expression]:
    """Fold e^(i*c*pi) at the quadrant boundaries.

    ``node`` must already have its exponent simplified. Returns None when the
    rule does not apply or the angle is not a quadrant boundary, in which
    case the node itself is the normal form.
    """
    base = specialize(node.base, Constant)
    if base is None or base.value != math.e:
      return None

    angle = ImaginarySimplifier.imaginary_angle(node.power)
    if angle is None:
      return None
    return ImaginarySimplifier.from_angle(angle)

  @staticmethod
  def imaginary_angle(expression: Expression) -> Optional[float]:
    """Angle theta when ``expression`` is i times numeric factors, else None."""
    if specialize(expression, Multiply) is None:
      return None

    factors = flatten_product(expression)
    imaginary = [f for f in factors if specialize(f, Imaginary) is not None]
    if len(imaginary) != 1:
      return None

    angle = 1.0
    for factor in factors:
      if specialize(factor, Imaginary) is not None:
        continue
      value = specialize_numeric(factor)
      if value is None:
        return None
      angle *= value
    return angle

  @staticmethod
  def from_angle(angle: float) -> Optional[Expression]:
    reduced = angle % TWO_PI
    if np.isclose(reduced, 0.0, atol=1e-9) or np.isclose(reduced, TWO_PI, atol=1e-9):
      return Constant(1.0)
    if np.isclose(reduced, math.pi, atol=1e-9):
      return Constant(-1.0)
    if np.isclose(reduced, math.pi / 2, atol=1e-9):
      return Imaginary()
    if np.isclose(reduced, 3 * math.pi / 2, atol=1e-9):
      return Multiply(Constant(-1.0), Imaginary())
    return None
