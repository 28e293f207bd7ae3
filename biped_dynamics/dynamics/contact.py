"""Ground reaction at the stance foot from whole-body linear momentum balance."""

from typing import Any, Dict, Optional

import sympy as sp

from ..core.base import Derivation
from ..kinematics.derivatives import CoMDerivatives
from ..kinematics.model import I_HAT, J_HAT, KinematicModel
from .linear import extract_linear_system, solve_2x2
from .single_support import link_weight


class ContactForces(Derivation):
    """Solve ``sum(w_i) + (Fx, Fy) = (sum m_i) ddG`` for ``Fx`` and ``Fy``."""

    def __init__(self, model: KinematicModel, derivatives: CoMDerivatives,
                 config: Optional[Dict] = None):
        super().__init__(config)
        self.model = model
        self.derivatives = derivatives

    def equations(self) -> sp.Matrix:
        s = self.model.symbols
        forces = s.Fx * I_HAT + s.Fy * J_HAT
        for i in sorted(self.model.G):
            forces += link_weight(self.model, i)
        return forces - self.model.total_mass * self.derivatives.ddG_total

    def derive(self) -> Dict[str, Any]:
        s = self.model.symbols
        system = extract_linear_system(list(self.equations()), (s.Fx, s.Fy),
                                       name='contact force')
        solution = solve_2x2(system)
        self.results = {
            'system': system,
            'Fx': solution[0],
            'Fy': solution[1],
        }
        return self.results
