"""Five-link biped dynamics: symbolic derivation and numeric evaluators."""

from .core.schemas import LinkParameters, BipedParameters, default_parameters
from .core.errors import (
    BipedModelError, NonlinearEquationError, DegenerateSystemError,
    UnresolvedSymbolError, InvalidParameterError,
)
from .pipeline import BipedModel, derive_biped_model

__all__ = [
    'LinkParameters', 'BipedParameters', 'default_parameters',
    'BipedModelError', 'NonlinearEquationError', 'DegenerateSystemError',
    'UnresolvedSymbolError', 'InvalidParameterError',
    'BipedModel', 'derive_biped_model',
]
