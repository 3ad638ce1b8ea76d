"""Symbolic differentiation and integration rules.

Both engines dispatch on the node's type tag and recurse into operands;
every result is a freshly built tree that shares nothing with its input.
A node without a rule raises UndefinedOperation rather than returning an
approximation.
"""

from typing import Callable, Dict

from ..core.node import Expression, Constant, Variable
from ..core.unary import Tan, ArcTan, Log, Floor
from ..core.binary import Add, Subtract, Multiply, Divide, Exponent
from ..core.operators import ExpressionType, ExpressionCategory
from ..specialize import specialize, specialize_numeric
from ...errors import UndefinedOperation

Rule = Callable[[Expression, Variable], Expression]


def _two() -> Constant:
  return Constant(2.0)


def _is_variable(expression: Expression, variable: Variable) -> bool:
  return specialize(expression, Variable) is not None and expression.compare(variable)


class Differentiator:

  @staticmethod
  def differentiate(node: Expression, variable: Variable) -> Expression:
    rule = DERIVATIVE_RULES.get(node.node_type)
    if rule is None:
      raise UndefinedOperation(f"no derivative rule for {type(node).__name__}")
    return rule(node, variable)


class Integrator:

  @staticmethod
  def integrate(node: Expression, variable: Variable) -> Expression:
    """Indefinite integral of ``node`` with respect to ``variable``.

    Any operator subtree free of the variable integrates as a constant
    factor, except for the operators that have no integral at all.
    """
    if node.node_type in NO_INTEGRAL:
      raise UndefinedOperation(f"{type(node).__name__} has no integral")
    if node.category != ExpressionCategory.LEAF and not node.contains_variable(variable):
      return Multiply(variable.copy(), node.copy())
    rule = INTEGRAL_RULES.get(node.node_type)
    if rule is None:
      raise UndefinedOperation(f"no integral rule for {type(node).__name__}")
    return rule(node, variable)


def _d(node: Expression, variable: Variable) -> Expression:
  return Differentiator.differentiate(node, variable)


def _i(node: Expression, variable: Variable) -> Expression:
  return Integrator.integrate(node, variable)


def _undefined(operation: str) -> Rule:
  def rule(node, variable):
    raise UndefinedOperation(f"{operation} of {type(node).__name__} is not defined")
  return rule


# Derivatives

def _d_constant(node, variable):
  return Constant.zero()


def _d_variable(node, variable):
  return Constant.one() if node.compare(variable) else Constant.zero()


def _d_add(node, variable):
  return Add(_d(node.most_sig_op, variable), _d(node.least_sig_op, variable))


def _d_subtract(node, variable):
  return Subtract(_d(node.most_sig_op, variable), _d(node.least_sig_op, variable))


def _d_multiply(node, variable):
  u, v = node.most_sig_op, node.least_sig_op
  return Add(
    Multiply(_d(u, variable), v.copy()),
    Multiply(u.copy(), _d(v, variable)),
  )


def _d_divide(node, variable):
  u, v = node.most_sig_op, node.least_sig_op
  numerator = Subtract(
    Multiply(_d(u, variable), v.copy()),
    Multiply(u.copy(), _d(v, variable)),
  )
  return Divide(numerator, Exponent(v.copy(), _two()))


def _d_exponent(node, variable):
  base, power = node.base, node.power
  if not power.contains_variable(variable):
    # power rule
    lowered = Exponent(base.copy(), Subtract(power.copy(), Constant.one()))
    return Multiply(Multiply(power.copy(), lowered), _d(base, variable))
  if not base.contains_variable(variable):
    return Multiply(Multiply(node.copy(), Log(base.copy())), _d(power, variable))
  # d(f^g) = f^g * (g' ln f + g f' / f)
  inner = Add(
    Multiply(_d(power, variable), Log(base.copy())),
    Divide(Multiply(power.copy(), _d(base, variable)), base.copy()),
  )
  return Multiply(node.copy(), inner)


def _d_modulo(node, variable):
  # u mod v = u - v * floor(u / v)
  u, v = node.most_sig_op, node.least_sig_op
  quotient_part = Multiply(v.copy(), Floor(Divide(u.copy(), v.copy())))
  return Subtract(_d(u, variable), _d(quotient_part, variable))


def _d_tan(node, variable):
  sec_squared = Add(Constant.one(), Exponent(Tan(node.operand.copy()), _two()))
  return Multiply(sec_squared, _d(node.operand, variable))


def _d_arctan(node, variable):
  u = node.operand
  return Divide(_d(u, variable), Add(Constant.one(), Exponent(u.copy(), _two())))


def _d_log(node, variable):
  return Divide(_d(node.operand, variable), node.operand.copy())


def _d_floor(node, variable):
  # zero almost everywhere; the chain is kept so the operand's rule still runs
  return Multiply(Constant.zero(), _d(node.operand, variable))


DERIVATIVE_RULES: Dict[ExpressionType, Rule] = {
  ExpressionType.CONSTANT: _d_constant,
  ExpressionType.REAL: _d_constant,
  ExpressionType.IMAGINARY: _d_constant,
  ExpressionType.VARIABLE: _d_variable,
  ExpressionType.IMPULSE: _undefined("differentiation"),
  ExpressionType.ADD: _d_add,
  ExpressionType.SUBTRACT: _d_subtract,
  ExpressionType.MULTIPLY: _d_multiply,
  ExpressionType.DIVIDE: _d_divide,
  ExpressionType.MODULO: _d_modulo,
  ExpressionType.EXPONENT: _d_exponent,
  ExpressionType.TAN: _d_tan,
  ExpressionType.ARCTAN: _d_arctan,
  ExpressionType.LOG: _d_log,
  ExpressionType.FLOOR: _d_floor,
  ExpressionType.FOURIER: _undefined("differentiation"),
  ExpressionType.LAPLACE: _undefined("differentiation"),
  ExpressionType.SUM: _undefined("differentiation"),
}


# Integrals

def _i_constant(node, variable):
  return Multiply(variable.copy(), node.copy())


def _i_variable(node, variable):
  if node.compare(variable):
    return Divide(Exponent(variable.copy(), _two()), _two())
  return Multiply(variable.copy(), node.copy())


def _i_add(node, variable):
  return Add(_i(node.most_sig_op, variable), _i(node.least_sig_op, variable))


def _i_subtract(node, variable):
  return Subtract(_i(node.most_sig_op, variable), _i(node.least_sig_op, variable))


def _i_multiply(node, variable):
  u, v = node.most_sig_op, node.least_sig_op
  if not u.contains_variable(variable):
    return Multiply(u.copy(), _i(v, variable))
  if not v.contains_variable(variable):
    return Multiply(_i(u, variable), v.copy())
  raise UndefinedOperation(f"no integral rule for the product {node.to_string()}")


def _i_divide(node, variable):
  u, v = node.most_sig_op, node.least_sig_op
  if not v.contains_variable(variable):
    return Divide(_i(u, variable), v.copy())
  if not u.contains_variable(variable) and _is_variable(v, variable):
    return Multiply(u.copy(), Log(variable.copy()))
  raise UndefinedOperation(f"no integral rule for the quotient {node.to_string()}")


def _i_exponent(node, variable):
  base, power = node.base, node.power
  if _is_variable(base, variable) and not power.contains_variable(variable):
    if specialize_numeric(power) == -1.0:
      return Log(variable.copy())
    raised = Add(power.copy(), Constant.one())
    return Divide(Exponent(variable.copy(), raised), raised.copy())
  if not base.contains_variable(variable) and _is_variable(power, variable):
    return Divide(node.copy(), Log(base.copy()))
  raise UndefinedOperation(f"no integral rule for the power {node.to_string()}")


def _i_log(node, variable):
  if not _is_variable(node.operand, variable):
    raise UndefinedOperation(f"no integral rule for {node.to_string()}")
  x = variable
  return Subtract(Multiply(x.copy(), Log(x.copy())), x.copy())


def _i_arctan(node, variable):
  if not _is_variable(node.operand, variable):
    raise UndefinedOperation(f"no integral rule for {node.to_string()}")
  x = variable
  log_term = Divide(Log(Add(Constant.one(), Exponent(x.copy(), _two()))), _two())
  return Subtract(Multiply(x.copy(), ArcTan(x.copy())), log_term)


NO_INTEGRAL = frozenset({
  ExpressionType.IMPULSE,
  ExpressionType.MODULO,
  ExpressionType.SUM,
  ExpressionType.FOURIER,
  ExpressionType.LAPLACE,
})

INTEGRAL_RULES: Dict[ExpressionType, Rule] = {
  ExpressionType.CONSTANT: _i_constant,
  ExpressionType.REAL: _i_constant,
  ExpressionType.IMAGINARY: _i_constant,
  ExpressionType.VARIABLE: _i_variable,
  ExpressionType.IMPULSE: _undefined("integration"),
  ExpressionType.ADD: _i_add,
  ExpressionType.SUBTRACT: _i_subtract,
  ExpressionType.MULTIPLY: _i_multiply,
  ExpressionType.DIVIDE: _i_divide,
  ExpressionType.MODULO: _undefined("integration"),
  ExpressionType.EXPONENT: _i_exponent,
  ExpressionType.TAN: _undefined("integration"),
  ExpressionType.ARCTAN: _i_arctan,
  ExpressionType.LOG: _i_log,
  ExpressionType.FLOOR: _undefined("integration"),
  ExpressionType.FOURIER: _undefined("integration"),
  ExpressionType.LAPLACE: _undefined("integration"),
  ExpressionType.SUM: _undefined("integration"),
}
