"""Symbol tables shared by every stage of the derivation.

Naming follows the generated evaluator arguments: ``q1..q5`` are absolute link
angles, ``dq``/``ddq`` their rates and accelerations, ``u1..u5`` joint torques,
and ``m``, ``c``, ``l``, ``I`` the per-link mass, CoM offset, length and
centroidal inertia. Heel-strike pre-impact quantities carry an ``m`` (minus)
suffix.
"""

from dataclasses import dataclass
from typing import Tuple

import sympy as sp

SymbolTuple = Tuple[sp.Symbol, ...]


def _indexed(prefix: str, suffix: str = '', n: int = 5) -> SymbolTuple:
    return tuple(sp.Symbol(f'{prefix}{i}{suffix}', real=True) for i in range(1, n + 1))


@dataclass(frozen=True)
class BipedSymbols:
    """Immutable bundle of every symbol used by the five-link model."""
    q: SymbolTuple
    dq: SymbolTuple
    ddq: SymbolTuple
    u: SymbolTuple
    m: SymbolTuple
    c: SymbolTuple
    l: SymbolTuple
    I: SymbolTuple
    g: sp.Symbol
    Fx: sp.Symbol
    Fy: sp.Symbol
    dq_minus: SymbolTuple
    dG_minus_x: SymbolTuple
    dG_minus_y: SymbolTuple

    @classmethod
    def create(cls) -> 'BipedSymbols':
        return cls(
            q=_indexed('q'),
            dq=_indexed('dq'),
            ddq=_indexed('ddq'),
            u=_indexed('u'),
            m=_indexed('m'),
            c=_indexed('c'),
            l=_indexed('l'),
            I=_indexed('I'),
            g=sp.Symbol('g', real=True),
            Fx=sp.Symbol('Fx', real=True),
            Fy=sp.Symbol('Fy', real=True),
            dq_minus=_indexed('dq', 'm'),
            dG_minus_x=_indexed('dG', 'mx'),
            dG_minus_y=_indexed('dG', 'my'),
        )

    def dG_minus(self, i: int) -> sp.Matrix:
        """Pre-impact CoM velocity of link ``i`` (1-based) as a column vector."""
        return sp.Matrix([self.dG_minus_x[i - 1], self.dG_minus_y[i - 1]])

    def by_name(self, name: str) -> sp.Symbol:
        """Look up any symbol of the bundle by its printed name."""
        for group in (self.q, self.dq, self.ddq, self.u, self.m, self.c, self.l,
                      self.I, self.dq_minus, self.dG_minus_x, self.dG_minus_y):
            for sym in group:
                if sym.name == name:
                    return sym
        for sym in (self.g, self.Fx, self.Fy):
            if sym.name == name:
                return sym
        raise KeyError(f"Unknown symbol: {name!r}")
