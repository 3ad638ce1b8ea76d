"""Symbolic CAS Package

Expression trees rewritten to a fixpoint, with symbolic differentiation and
integration, an optional fork-join simplification strategy and a history
graph of every rewrite step.
"""

from .errors import (
  CasError, DivisionByZero, UnboundVariable, UndefinedOperation,
  RewriteCycleError, MalformedInput
)
from .expression_tree import (
  Expression, ExpressionNode, Constant, Variable, Real, Imaginary, Impulse,
  Tan, ArcTan, Log, Floor,
  Add, Subtract, Multiply, Divide, Modulo, Exponent,
  Fourier, Laplace, Sum,
  ExpressionType, ExpressionCategory,
  specialize, specialize_unary, specialize_binary, specialize_commutative,
  specialize_numeric, generalize
)
from .expression_tree.utils import (
  to_sympy, from_sympy, parse_expression, to_mathml, from_mathml, SymPySimplifier
)
from .concurrency import SequentialStrategy, ConcurrentStrategy, TaskState
from .simplification_graph import SimplificationGraph
from .simplifier import Simplifier, simplify
from .logging_system import LogLevel, configure_logging, set_log_level, get_logger

__version__ = "0.1.0"
__all__ = [
  "CasError", "DivisionByZero", "UnboundVariable", "UndefinedOperation",
  "RewriteCycleError", "MalformedInput",
  "Expression", "ExpressionNode", "Constant", "Variable", "Real", "Imaginary", "Impulse",
  "Tan", "ArcTan", "Log", "Floor",
  "Add", "Subtract", "Multiply", "Divide", "Modulo", "Exponent",
  "Fourier", "Laplace", "Sum",
  "ExpressionType", "ExpressionCategory",
  "specialize", "specialize_unary", "specialize_binary", "specialize_commutative",
  "specialize_numeric", "generalize",
  "to_sympy", "from_sympy", "parse_expression", "to_mathml", "from_mathml", "SymPySimplifier",
  "SequentialStrategy", "ConcurrentStrategy", "TaskState",
  "SimplificationGraph", "Simplifier", "simplify",
  "LogLevel", "configure_logging", "set_log_level", "get_logger"
]
