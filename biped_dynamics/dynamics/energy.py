"""Kinetic and potential energy of the biped."""

from typing import Any, Dict, Optional

from ..core.base import Derivation
from ..kinematics.derivatives import CoMDerivatives
from ..kinematics.model import KinematicModel


class Energy(Derivation):
    """Closed-form ``KE`` and ``PE`` as functions of ``(q, dq, params)``."""

    def __init__(self, model: KinematicModel, derivatives: CoMDerivatives,
                 config: Optional[Dict] = None):
        super().__init__(config)
        self.model = model
        self.derivatives = derivatives

    def derive(self) -> Dict[str, Any]:
        s = self.model.symbols
        kinetic = 0
        potential = 0
        for i in sorted(self.model.G):
            dG = self.derivatives.dG[i]
            kinetic += s.m[i - 1] * dG.dot(dG) / 2 + s.I[i - 1] * s.dq[i - 1]**2 / 2
            potential += s.m[i - 1] * s.g * self.model.G[i][1]
        self.results = {'KE': kinetic, 'PE': potential}
        return self.results
