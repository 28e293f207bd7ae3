from .tree import GROUND, Link, FIVE_LINK_BIPED, KinematicTree
from .model import (
    I_HAT, J_HAT, unit_vector, cross2d,
    KinematicModel, build_kinematics,
)
from .derivatives import (
    time_derivative, second_time_derivative,
    CoMDerivatives, differentiate_coms,
)

__all__ = [
    'GROUND', 'Link', 'FIVE_LINK_BIPED', 'KinematicTree',
    'I_HAT', 'J_HAT', 'unit_vector', 'cross2d',
    'KinematicModel', 'build_kinematics',
    'time_derivative', 'second_time_derivative',
    'CoMDerivatives', 'differentiate_coms',
]
