"""Exception hierarchy for the derivation pipeline.

All of these are raised while building the model, never from inside a
generated evaluator.
"""

from typing import Iterable


class BipedModelError(Exception):
    """Base class for every error raised by the derivation pipeline."""


class NonlinearEquationError(BipedModelError):
    """An equation is not linear in one of its designated unknowns."""

    def __init__(self, equation_index: int, unknown, system: str = ""):
        self.equation_index = equation_index
        self.unknown = unknown
        self.system = system
        where = f" of {system}" if system else ""
        super().__init__(
            f"equation {equation_index}{where} is not linear in {unknown}"
        )


class DegenerateSystemError(BipedModelError):
    """A linear system is (structurally) singular."""


class UnresolvedSymbolError(BipedModelError):
    """An expression references symbols outside its declared argument list."""

    def __init__(self, evaluator: str, symbols: Iterable):
        self.evaluator = evaluator
        self.symbols = sorted(str(s) for s in symbols)
        super().__init__(
            f"evaluator {evaluator!r} references undeclared symbols: "
            + ", ".join(self.symbols)
        )


class InvalidParameterError(BipedModelError, ValueError):
    """Numeric link parameters are non-finite or non-physical."""
