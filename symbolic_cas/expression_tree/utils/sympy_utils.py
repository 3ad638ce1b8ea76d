import sympy as sp
import numpy as np
from typing import Any, Dict, Mapping, Optional

from ..core.node import Expression, Constant, Variable, Real, Imaginary, Impulse
from ..core.unary import Tan, ArcTan, Log, Floor
from ..core.binary import Add, Multiply, Modulo, Exponent
from ..core.bounded import Sum
from ..specialize import generalize
from ...errors import MalformedInput

_UNARY_FUNCTIONS = {
  sp.tan: Tan,
  sp.atan: ArcTan,
  sp.log: Log,
  sp.floor: Floor,
}

# names sympify does not know; '^' is rewritten separately
_PARSE_LOCALS = {
  'arctan': sp.atan,
  'ln': sp.log,
}


def to_sympy(expression: Expression) -> sp.Expr:
  return expression.to_sympy()


def _fold_left(cls, args) -> Expression:
  """n-ary Add/Mul as a left-associative chain of binary nodes"""
  result = from_sympy(args[0])
  for arg in args[1:]:
    result = cls(result, from_sympy(arg))
  return result


def from_sympy(sympy_expr) -> Expression:
  """Convert a sympy expression to our tree; unsupported constructs raise MalformedInput."""
  if sympy_expr.is_Symbol:
    return Variable(str(sympy_expr))

  if sympy_expr is sp.pi:
    return Constant.pi()
  if sympy_expr is sp.E:
    return Constant.e()
  if sympy_expr is sp.I:
    return Imaginary()

  if sympy_expr.is_number and not sympy_expr.free_symbols and not sympy_expr.args:
    if sympy_expr.is_finite is False or sympy_expr is sp.nan:
      raise MalformedInput(f"non-finite number {sympy_expr}")
    value = complex(sympy_expr)
    if value.imag == 0.0:
      return Real(value.real)
    return generalize(value)

  if isinstance(sympy_expr, sp.DiracDelta):
    if sympy_expr.args[0] != sp.Symbol('t') or len(sympy_expr.args) != 1:
      raise MalformedInput("only DiracDelta(t) is supported")
    return Impulse()

  if isinstance(sympy_expr, sp.exp):
    return Exponent(Constant.e(), from_sympy(sympy_expr.args[0]))

  for function, cls in _UNARY_FUNCTIONS.items():
    if isinstance(sympy_expr, function):
      if len(sympy_expr.args) != 1:
        raise MalformedInput(f"{function.__name__} takes one argument, got {len(sympy_expr.args)}")
      return cls(from_sympy(sympy_expr.args[0]))

  if isinstance(sympy_expr, sp.Pow):
    base = from_sympy(sympy_expr.args[0])
    exponent = from_sympy(sympy_expr.args[1])
    return Exponent(base, exponent)

  if isinstance(sympy_expr, sp.Add):
    return _fold_left(Add, sympy_expr.args)

  if isinstance(sympy_expr, sp.Mul):
    return _fold_left(Multiply, sympy_expr.args)

  if isinstance(sympy_expr, sp.Mod):
    return Modulo(from_sympy(sympy_expr.args[0]), from_sympy(sympy_expr.args[1]))

  if isinstance(sympy_expr, sp.Sum):
    limits = sympy_expr.limits
    if len(limits) != 1 or len(limits[0]) != 3:
      raise MalformedInput("only single-index sums with both bounds are supported")
    index, lower, upper = limits[0]
    return Sum(from_sympy(sympy_expr.function), from_sympy(lower), from_sympy(upper), str(index))

  raise MalformedInput(f"unsupported sympy construct {type(sympy_expr).__name__}: {sympy_expr}")


def parse_expression(text: str) -> Expression:
  """Parse infix text such as ``'x^2 + tan(y)'`` via sympify."""
  normalized = text.replace('^', '**')
  try:
    sympy_expr = sp.sympify(normalized, locals=_PARSE_LOCALS)
  except (sp.SympifyError, SyntaxError, TypeError) as e:
    raise MalformedInput(f"cannot parse '{text}': {e}") from e
  return from_sympy(sympy_expr)


class SymPySimplifier:
  """SymPy-based reference simplifier and numeric cross-checker"""

  def __init__(self):
    self.simplification_strategies = [
      'simplify',
      'expand',
      'factor',
      'trigsimp',
      'logcombine'
    ]

  def simplify_expression(self, expression: Expression) -> Dict[str, Any]:
    """
    Simplify expression using multiple SymPy strategies

    Returns:
        Dict with the simplified tree and metadata
    """
    sympy_expr = to_sympy(expression)
    original_complexity = self._calculate_complexity(sympy_expr)

    best_simplified = sympy_expr
    best_complexity = original_complexity
    best_strategy = 'none'

    for strategy in self.simplification_strategies:
      simplified = getattr(sp, strategy)(sympy_expr)
      complexity = self._calculate_complexity(simplified)
      if complexity < best_complexity:
        best_simplified = simplified
        best_complexity = complexity
        best_strategy = strategy

    return {
      'simplified': from_sympy(best_simplified),
      'strategy_used': best_strategy,
      'complexity_reduction': original_complexity - best_complexity,
      'original_complexity': original_complexity,
      'simplified_complexity': best_complexity
    }

  def cross_check(self, expression: Expression, bindings: Optional[Mapping[str, float]] = None,
                  rtol: float = 1e-9, atol: float = 1e-12) -> bool:
    """True when our evaluation agrees with SymPy's numeric evaluation."""
    ours = complex(expression.evaluate(bindings))
    substitutions = {sp.Symbol(name): value for name, value in (bindings or {}).items()}
    theirs = complex(sp.N(to_sympy(expression).subs(substitutions)))
    return bool(np.isclose(ours, theirs, rtol=rtol, atol=atol))

  def _calculate_complexity(self, expr: sp.Expr) -> int:
    """Calculate expression complexity for SymPy expressions"""
    return len(expr.free_symbols) + len(expr.atoms(sp.Function)) + expr.count_ops()

  def latex_representation(self, expression: Expression) -> str:
    """Get LaTeX representation of the expression"""
    return sp.latex(to_sympy(expression))
