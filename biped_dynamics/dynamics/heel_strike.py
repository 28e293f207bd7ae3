"""Heel-strike collision map.

At impact the new ground reaction is impulsive and acts at the contact point,
while joint torques stay finite and so deliver no impulse. Angular momentum of
every outboard set about its joint point is therefore conserved through the
collision. Pre-impact momentum uses free Cartesian CoM velocities ``dG_i^-``
and rates ``dq_i^-``; post-impact momentum uses the generalized rates ``dq``.

Swapping leg labels after the collision is left to the caller.
"""

from typing import Any, Dict, List, Optional

from ..core.base import Derivation
from ..kinematics.derivatives import CoMDerivatives
from ..kinematics.model import KinematicModel, cross2d
from .linear import extract_linear_system


class HeelStrikeMap(Derivation):
    """Extract ``MM dq_post = ff`` from momentum conservation at each joint."""

    def __init__(self, model: KinematicModel, derivatives: CoMDerivatives,
                 config: Optional[Dict] = None):
        super().__init__(config)
        self.model = model
        self.derivatives = derivatives

    def momentum_before(self, joint: int):
        model, s = self.model, self.model.symbols
        P_k = model.P[model.tree.joint_point(joint)]
        total = 0
        for i in sorted(model.tree.outboard(joint)):
            total += cross2d(model.G[i] - P_k, s.m[i - 1] * s.dG_minus(i))
            total += s.dq_minus[i - 1] * s.I[i - 1]
        return total

    def momentum_after(self, joint: int):
        model, s = self.model, self.model.symbols
        P_k = model.P[model.tree.joint_point(joint)]
        total = 0
        for i in sorted(model.tree.outboard(joint)):
            total += cross2d(model.G[i] - P_k, s.m[i - 1] * self.derivatives.dG[i])
            total += s.dq[i - 1] * s.I[i - 1]
        return total

    def equations(self) -> List:
        return [self.momentum_after(k) - self.momentum_before(k)
                for k in range(self.model.tree.num_joints)]

    def derive(self) -> Dict[str, Any]:
        eqns = self.equations()
        system = extract_linear_system(
            eqns, self.model.symbols.dq,
            expand=self.config.get('expand', True),
            name='heel-strike map')
        self.results = {
            'equations': eqns,
            'system': system,
            'MM': system.A,
            'ff': system.b,
        }
        return self.results
