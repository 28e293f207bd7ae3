from .linear import (
    LinearSystem, extract_linear_system, check_structural_rank,
    solve_2x2, dense_from_nonzero,
)
from .single_support import SingleSupportDynamics, MASS_MATRIX_FORMS
from .contact import ContactForces
from .energy import Energy
from .heel_strike import HeelStrikeMap

__all__ = [
    'LinearSystem', 'extract_linear_system', 'check_structural_rank',
    'solve_2x2', 'dense_from_nonzero',
    'SingleSupportDynamics', 'MASS_MATRIX_FORMS',
    'ContactForces', 'Energy', 'HeelStrikeMap',
]
