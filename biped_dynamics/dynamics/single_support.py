"""Single-support equations of motion.

One angular-momentum balance per joint, taken about the joint point and over
every link outboard of it:

    sum_i cross(G_i - P_k, m_i ddG_i) + I_i ddq_i
        = sum_i cross(G_i - P_k, w_i) + u_{k+1}

The reaction at the joint has no moment about ``P_k`` and torques between
links of the outboard set cancel, so each balance involves one actuator only.
"""

import logging
from typing import Any, Dict, List, Optional

import sympy as sp

from ..core.base import Derivation
from ..kinematics.derivatives import CoMDerivatives
from ..kinematics.model import J_HAT, KinematicModel, cross2d
from .linear import LinearSystem, extract_linear_system

logger = logging.getLogger(__name__)

MASS_MATRIX_FORMS = ('joint', 'symmetric')


def link_weight(model: KinematicModel, index: int) -> sp.Matrix:
    s = model.symbols
    return -s.m[index - 1] * s.g * J_HAT


class SingleSupportDynamics(Derivation):
    """Assemble the single-support balances and extract ``M ddq = F``.

    Config keys:
        mass_matrix_form: ``'joint'`` (default) keeps one row per joint
            balance. ``'symmetric'`` left-multiplies by the inverse outboard
            incidence matrix, giving the symmetric positive definite mass
            matrix of the same dynamics.
        expand: expand mass-matrix entries so structural zeros are exact
            (default True).
    """

    def __init__(self, model: KinematicModel, derivatives: CoMDerivatives,
                 config: Optional[Dict] = None):
        super().__init__(config)
        self.model = model
        self.derivatives = derivatives
        form = self.config.get('mass_matrix_form', 'joint')
        if form not in MASS_MATRIX_FORMS:
            raise ValueError(f"Unknown mass_matrix_form: {form!r}")
        self.form = form

    def torque(self, joint: int):
        """Gravity and actuator torque about joint ``joint`` on its outboard links."""
        model, s = self.model, self.model.symbols
        P_k = model.P[model.tree.joint_point(joint)]
        total = s.u[joint]
        for i in sorted(model.tree.outboard(joint)):
            total += cross2d(model.G[i] - P_k, link_weight(model, i))
        return total

    def inertia(self, joint: int):
        """Rate of change of angular momentum about joint ``joint``."""
        model, s = self.model, self.model.symbols
        P_k = model.P[model.tree.joint_point(joint)]
        total = 0
        for i in sorted(model.tree.outboard(joint)):
            total += cross2d(model.G[i] - P_k, s.m[i - 1] * self.derivatives.ddG[i])
            total += s.ddq[i - 1] * s.I[i - 1]
        return total

    def equations(self) -> List:
        """One balance per joint, written as ``inertia - torque`` (= 0)."""
        return [self.inertia(k) - self.torque(k)
                for k in range(self.model.tree.num_joints)]

    def derive(self) -> Dict[str, Any]:
        eqns = self.equations()
        system = extract_linear_system(
            eqns, self.model.symbols.ddq,
            expand=self.config.get('expand', True),
            name='single-support dynamics')
        if self.form == 'symmetric':
            T = sp.Matrix(self.model.tree.incidence_matrix())
            system = system.transform(T.inv())
        values, indices = system.nonzero()
        logger.debug("single-support mass matrix (%s form): %d nonzeros at %s",
                     self.form, len(indices), indices.tolist())
        self.results = {
            'equations': eqns,
            'system': system,
            'mass_matrix': system.A,
            'generalized_force': system.b,
            'mass_matrix_values': values,
            'mass_matrix_indices': indices,
        }
        return self.results

    @property
    def system(self) -> LinearSystem:
        if not self.results:
            self.derive()
        return self.results['system']
