import math
import numba
import numpy as np
from enum import IntEnum


class ExpressionCategory(IntEnum):
  LEAF = 0
  UNARY = 1
  BINARY = 2
  BOUNDED_UNARY = 3


class ExpressionType(IntEnum):
  # Leaves
  CONSTANT = 0
  VARIABLE = 1
  REAL = 2
  IMAGINARY = 3
  IMPULSE = 4
  # Binary ops
  ADD = 10
  SUBTRACT = 11
  MULTIPLY = 12
  DIVIDE = 13
  MODULO = 14
  EXPONENT = 15
  # Unary ops
  TAN = 20
  ARCTAN = 21
  LOG = 22
  FLOOR = 23
  # Bounded unary ops
  FOURIER = 30
  LAPLACE = 31
  SUM = 32


BINARY_SYMBOLS = {
  ExpressionType.ADD: '+',
  ExpressionType.SUBTRACT: '-',
  ExpressionType.MULTIPLY: '*',
  ExpressionType.DIVIDE: '/',
  ExpressionType.MODULO: '%',
  ExpressionType.EXPONENT: '^',
}

UNARY_NAMES = {
  ExpressionType.TAN: 'tan',
  ExpressionType.ARCTAN: 'arctan',
  ExpressionType.LOG: 'ln',
  ExpressionType.FLOOR: 'floor',
}

# numba resolves these as compile-time constants
_ADD = int(ExpressionType.ADD)
_SUBTRACT = int(ExpressionType.SUBTRACT)
_MULTIPLY = int(ExpressionType.MULTIPLY)
_DIVIDE = int(ExpressionType.DIVIDE)
_MODULO = int(ExpressionType.MODULO)
_EXPONENT = int(ExpressionType.EXPONENT)
_TAN = int(ExpressionType.TAN)
_ARCTAN = int(ExpressionType.ARCTAN)
_LOG = int(ExpressionType.LOG)
_FLOOR = int(ExpressionType.FLOOR)


@numba.njit(cache=True)
def fold_binary_kernel(left, right, op_code):
  """Scalar kernel for numeric folding. Callers rule out zero divisors."""
  if op_code == _ADD:
    return left + right
  elif op_code == _SUBTRACT:
    return left - right
  elif op_code == _MULTIPLY:
    return left * right
  elif op_code == _DIVIDE:
    return left / right
  elif op_code == _MODULO:
    return np.fmod(left, right)
  elif op_code == _EXPONENT:
    return math.pow(left, right)
  return math.nan


@numba.njit(cache=True)
def fold_unary_kernel(operand, op_code):
  if op_code == _TAN:
    return math.tan(operand)
  elif op_code == _ARCTAN:
    return math.atan(operand)
  elif op_code == _LOG:
    return math.log(operand)
  elif op_code == _FLOOR:
    return float(math.floor(operand))
  return math.nan


def fold_binary(left: float, right: float, op_type: ExpressionType):
  """Fold two real operands, or return None when the result is not a finite real."""
  if op_type in (ExpressionType.DIVIDE, ExpressionType.MODULO) and right == 0.0:
    return None
  if op_type == ExpressionType.EXPONENT:
    if left < 0.0 and not float(right).is_integer():
      return None
    if left == 0.0 and right < 0.0:
      return None
  result = fold_binary_kernel(float(left), float(right), int(op_type))
  if not math.isfinite(result):
    return None
  return float(result)


def fold_unary(operand: float, op_type: ExpressionType):
  if op_type == ExpressionType.LOG and operand <= 0.0:
    return None
  result = fold_unary_kernel(float(operand), int(op_type))
  if not math.isfinite(result):
    return None
  return float(result)
