"""Expression Tree Module

Tagged expression trees, the specialization protocol and the per-node
rewrite and calculus rules.
"""

from .expression_node import ExpressionNode
from .core.node import (
    Expression,
    LeafExpression,
    Constant,
    Variable,
    Real,
    Imaginary,
    Impulse,
    as_variable
)
from .core.unary import UnaryExpression, Tan, ArcTan, Log, Floor
from .core.binary import BinaryExpression, Add, Subtract, Multiply, Divide, Modulo, Exponent
from .core.bounded import BoundedUnaryExpression, Fourier, Laplace, Sum
from .core.operators import (
    ExpressionType,
    ExpressionCategory,
    fold_binary,
    fold_unary
)
from .specialize import (
    specialize,
    specialize_unary,
    specialize_binary,
    specialize_commutative,
    specialize_numeric,
    numeric_equals,
    generalize
)
from .utils import ExpressionSimplifier, SymPySimplifier, Differentiator, Integrator

__all__ = [
    "ExpressionNode",
    "Expression", "LeafExpression", "Constant", "Variable", "Real", "Imaginary", "Impulse",
    "as_variable",
    "UnaryExpression", "Tan", "ArcTan", "Log", "Floor",
    "BinaryExpression", "Add", "Subtract", "Multiply", "Divide", "Modulo", "Exponent",
    "BoundedUnaryExpression", "Fourier", "Laplace", "Sum",
    "ExpressionType", "ExpressionCategory", "fold_binary", "fold_unary",
    "specialize", "specialize_unary", "specialize_binary", "specialize_commutative",
    "specialize_numeric", "numeric_equals", "generalize",
    "ExpressionSimplifier", "SymPySimplifier", "Differentiator", "Integrator"
]
