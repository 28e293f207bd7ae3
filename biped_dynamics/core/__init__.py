from .base import Derivation, CompositeDerivation
from .errors import (
    BipedModelError,
    NonlinearEquationError,
    DegenerateSystemError,
    UnresolvedSymbolError,
    InvalidParameterError,
)
from .schemas import (
    NUM_LINKS, LINK_NAMES,
    LinkParameters, BipedParameters, default_parameters,
)
from .symbols import BipedSymbols

__all__ = [
    'Derivation', 'CompositeDerivation',
    'BipedModelError', 'NonlinearEquationError', 'DegenerateSystemError',
    'UnresolvedSymbolError', 'InvalidParameterError',
    'NUM_LINKS', 'LINK_NAMES',
    'LinkParameters', 'BipedParameters', 'default_parameters',
    'BipedSymbols',
]
