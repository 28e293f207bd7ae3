from .evaluators import (
    NumericEvaluator,
    dynamics_args, heel_strike_args, contact_force_args,
    energy_args, points_args, com_velocity_args,
)

__all__ = [
    'NumericEvaluator',
    'dynamics_args', 'heel_strike_args', 'contact_force_args',
    'energy_args', 'points_args', 'com_velocity_args',
]
