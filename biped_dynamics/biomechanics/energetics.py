"""Mechanical energy bookkeeping along a single-support trajectory."""

from typing import Dict

import numpy as np

from ..core.schemas import BipedParameters
from ..pipeline import BipedModel


def energy_report(model: BipedModel, params: BipedParameters,
                  q: np.ndarray, dq: np.ndarray) -> Dict:
    """Kinetic, potential and total energy along a trajectory.

    Args:
        model: Derived biped model.
        params: Parameter set the trajectory was simulated with.
        q, dq: Arrays of shape (5, T).

    With zero actuation the single-support dynamics conserve ``KE + PE``, so
    ``max_relative_drift`` is a direct check on the equations and on the
    integrator that produced the trajectory.
    """
    kinetic, potential = model.energy(q, dq, params)
    kinetic = np.atleast_1d(kinetic)
    potential = np.atleast_1d(potential)
    total = kinetic + potential

    scale = max(float(np.max(np.abs(total))), 1e-12)
    drift = np.abs(total - total[0])

    return {
        'kinetic': kinetic,
        'potential': potential,
        'total': total,
        'energy_variance': {
            'kinetic': float(np.std(kinetic)),
            'potential': float(np.std(potential)),
            'total': float(np.std(total)),
        },
        'max_drift': float(np.max(drift)),
        'max_relative_drift': float(np.max(drift) / scale),
    }
