"""Closed-form kinematics of the five-link biped.

All angles are absolute and measured from vertical; ``q = 0`` is the upright
pose with both legs straight below the hip. Positions are 2x1 sympy column
vectors in the (horizontal, vertical) basis with the stance foot at the origin.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import sympy as sp

from ..core.symbols import BipedSymbols
from .tree import KinematicTree

# Horizontal and vertical basis vectors
I_HAT = sp.Matrix([1, 0])
J_HAT = sp.Matrix([0, 1])


def unit_vector(angle, sign: int = 1) -> sp.Matrix:
    """Unit vector of a link at absolute ``angle`` from vertical.

    ``sign = -1`` is used for links that hang below their proximal joint.
    """
    return sign * (sp.cos(angle) * J_HAT + sp.sin(angle) * (-I_HAT))


def cross2d(a: sp.Matrix, b: sp.Matrix):
    """Out-of-plane component of the cross product of two planar vectors."""
    return a[0] * b[1] - a[1] * b[0]


@dataclass(frozen=True)
class KinematicModel:
    """Unit vectors, joint points and CoM positions of every link."""
    symbols: BipedSymbols
    tree: KinematicTree
    e: Dict[int, sp.Matrix]          # link index -> unit vector
    P: Tuple[sp.Matrix, ...]         # P0..P5
    G: Dict[int, sp.Matrix]          # link index -> CoM position
    G_total: sp.Matrix               # whole-body CoM

    @property
    def total_mass(self):
        return sum(self.symbols.m)

    def com(self, index: int) -> sp.Matrix:
        return self.G[index]

    def points_stacked(self) -> sp.Matrix:
        """``[P1; P2; P3; P4; P5]`` as a 10x1 column."""
        return sp.Matrix.vstack(*self.P[1:])

    def coms_stacked(self) -> sp.Matrix:
        """``[G1; G2; G3; G4; G5]`` as a 10x1 column."""
        return sp.Matrix.vstack(*(self.G[i] for i in sorted(self.G)))


def build_kinematics(symbols: BipedSymbols,
                     tree: Optional[KinematicTree] = None) -> KinematicModel:
    """Build every position expression by walking the tree from the ground out."""
    tree = tree or KinematicTree()
    q, l, c, m = symbols.q, symbols.l, symbols.c, symbols.m

    points: Dict[int, sp.Matrix] = {0: sp.zeros(2, 1)}
    e: Dict[int, sp.Matrix] = {}
    G: Dict[int, sp.Matrix] = {}
    for idx in tree.build_order():
        link = tree.link(idx)
        e[idx] = unit_vector(q[idx - 1], link.sign)
        points[link.distal] = points[link.proximal] + l[idx - 1] * e[idx]
        if link.com_from_distal:
            G[idx] = points[link.distal] - c[idx - 1] * e[idx]
        else:
            G[idx] = points[link.proximal] + c[idx - 1] * e[idx]

    weighted = sp.zeros(2, 1)
    for idx in sorted(G):
        weighted += m[idx - 1] * G[idx]
    G_total = weighted / sum(m[idx - 1] for idx in sorted(G))

    return KinematicModel(
        symbols=symbols,
        tree=tree,
        e=e,
        P=tuple(points[i] for i in range(len(points))),
        G=G,
        G_total=G_total,
    )
