"""Error kinds raised by the algebra core.

All of them are deterministic, input-driven failures. They are raised
synchronously from the offending operation and are never caught by the
rewrite or calculus rules.
"""


class CasError(Exception):
    """Base class for every error raised by symbolic_cas."""


class DivisionByZero(CasError, ZeroDivisionError):
    """A Divide or Modulo node has a zero divisor."""


class UnboundVariable(CasError, KeyError):
    """Evaluation referenced a variable with no binding."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"variable '{self.name}' is not bound"


class UndefinedOperation(CasError, ArithmeticError):
    """No rule is defined for this operator (e.g. integrating Modulo)."""


class RewriteCycleError(UndefinedOperation):
    """The driver saw a non-terminal state it had already visited."""


class MalformedInput(CasError, ValueError):
    """Deserialization met a markup or expression shape it cannot read."""
