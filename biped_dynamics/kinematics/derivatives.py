"""Time derivatives by the chain rule over the augmented state ``(q, dq)``."""

from dataclasses import dataclass
from typing import Dict, Sequence

import sympy as sp

from .model import KinematicModel


def time_derivative(expr, q: Sequence, dq: Sequence, ddq: Sequence):
    """Total time derivative of ``expr(q, dq)``.

    Computed as ``jacobian(expr, [q; dq]) * [dq; ddq]``, so applying it to a
    first derivative gives the second derivative. Scalars come back as
    scalars, matrices keep their shape.
    """
    state = sp.Matrix(list(q) + list(dq))
    rates = sp.Matrix(list(dq) + list(ddq))
    if isinstance(expr, sp.MatrixBase):
        flat = expr.reshape(expr.rows * expr.cols, 1)
        return (flat.jacobian(state) * rates).reshape(expr.rows, expr.cols)
    return (sp.Matrix([sp.sympify(expr)]).jacobian(state) * rates)[0, 0]


def second_time_derivative(expr, q: Sequence, dq: Sequence, ddq: Sequence):
    """Second time derivative; equivalent to applying :func:`time_derivative` twice."""
    return time_derivative(time_derivative(expr, q, dq, ddq), q, dq, ddq)


@dataclass(frozen=True)
class CoMDerivatives:
    """First and second derivatives of every link CoM and of the whole-body CoM."""
    dG: Dict[int, sp.Matrix]
    ddG: Dict[int, sp.Matrix]
    dG_total: sp.Matrix
    ddG_total: sp.Matrix

    def velocities_stacked(self) -> sp.Matrix:
        """``[dG1; dG2; dG3; dG4; dG5]`` as a 10x1 column."""
        return sp.Matrix.vstack(*(self.dG[i] for i in sorted(self.dG)))


def differentiate_coms(model: KinematicModel) -> CoMDerivatives:
    s = model.symbols
    dG, ddG = {}, {}
    for idx, G in model.G.items():
        dG[idx] = time_derivative(G, s.q, s.dq, s.ddq)
        ddG[idx] = time_derivative(dG[idx], s.q, s.dq, s.ddq)
    dG_total = time_derivative(model.G_total, s.q, s.dq, s.ddq)
    ddG_total = time_derivative(dG_total, s.q, s.dq, s.ddq)
    return CoMDerivatives(dG=dG, ddG=ddG, dG_total=dG_total, ddG_total=ddG_total)
