"""Core expression tree components."""

from .node import (
    Expression, LeafExpression, Constant, Variable, Real, Imaginary, Impulse,
    as_variable, to_number
)
from .unary import UnaryExpression, Tan, ArcTan, Log, Floor
from .binary import BinaryExpression, Add, Subtract, Multiply, Divide, Modulo, Exponent
from .bounded import BoundedUnaryExpression, Fourier, Laplace, Sum
from .operators import (
    ExpressionType, ExpressionCategory, BINARY_SYMBOLS, UNARY_NAMES,
    fold_binary, fold_unary
)

__all__ = [
    'Expression', 'LeafExpression', 'Constant', 'Variable', 'Real', 'Imaginary', 'Impulse',
    'UnaryExpression', 'Tan', 'ArcTan', 'Log', 'Floor',
    'BinaryExpression', 'Add', 'Subtract', 'Multiply', 'Divide', 'Modulo', 'Exponent',
    'BoundedUnaryExpression', 'Fourier', 'Laplace', 'Sum',
    'ExpressionType', 'ExpressionCategory', 'BINARY_SYMBOLS', 'UNARY_NAMES',
    'fold_binary', 'fold_unary', 'as_variable', 'to_number'
]
