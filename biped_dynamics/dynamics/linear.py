"""Extraction of ``A x = b`` from equations that are linear in ``x``."""

import logging
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np
import sympy as sp
from scipy.sparse import csr_matrix
from scipy.sparse.csgraph import structural_rank

from ..core.errors import DegenerateSystemError, NonlinearEquationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LinearSystem:
    """Coefficient matrix ``A`` and right-hand side ``b`` with ``A x = b``."""
    A: sp.Matrix
    b: sp.Matrix
    unknowns: Tuple[sp.Symbol, ...]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.A.shape

    def sparsity_pattern(self) -> np.ndarray:
        """Boolean mask of structurally nonzero entries of ``A``."""
        rows, cols = self.A.shape
        mask = np.zeros((rows, cols), dtype=bool)
        for i in range(rows):
            for j in range(cols):
                mask[i, j] = self.A[i, j] != 0
        return mask

    def nonzero(self) -> Tuple[sp.Matrix, np.ndarray]:
        """Nonzero entries of ``A`` and their flat row-major indices."""
        mask = self.sparsity_pattern()
        indices = np.flatnonzero(mask)
        cols = self.A.shape[1]
        values = sp.Matrix([self.A[int(k) // cols, int(k) % cols] for k in indices])
        return values, indices

    def residual(self) -> sp.Matrix:
        """``A x - b``; zero exactly when the original equations hold."""
        return self.A * sp.Matrix(self.unknowns) - self.b

    def transform(self, T) -> 'LinearSystem':
        """Left-multiply both sides by ``T`` (an equivalent system when ``T`` is invertible)."""
        T = sp.Matrix(T)
        A = (T * self.A).applyfunc(sp.expand)
        return LinearSystem(A=A, b=T * self.b, unknowns=self.unknowns)


def extract_linear_system(equations: Sequence, unknowns: Sequence,
                          expand: bool = True, name: str = "") -> LinearSystem:
    """Split ``equations == 0`` into ``A x = b`` for the unknowns ``x``.

    ``A[i, j]`` is the derivative of equation ``i`` with respect to unknown
    ``j`` and ``b`` is minus the equations with every unknown set to zero.

    Raises:
        NonlinearEquationError: a coefficient still depends on an unknown.
        DegenerateSystemError: ``A`` is square and structurally singular.
    """
    eqs: List = [sp.sympify(eq) for eq in equations]
    unknowns = tuple(unknowns)
    unknown_set = set(unknowns)
    zero_subs = {x: 0 for x in unknowns}

    A = sp.zeros(len(eqs), len(unknowns))
    b = sp.zeros(len(eqs), 1)
    for i, eq in enumerate(eqs):
        for j, x in enumerate(unknowns):
            coeff = sp.diff(eq, x)
            if coeff.free_symbols & unknown_set:
                raise NonlinearEquationError(i, x, name)
            A[i, j] = sp.expand(coeff) if expand else coeff
        b[i, 0] = -eq.subs(zero_subs)

    system = LinearSystem(A=A, b=b, unknowns=unknowns)
    check_structural_rank(system, name)
    logger.debug("extracted %s: %dx%d, %d nonzeros", name or "linear system",
                 A.rows, A.cols, int(system.sparsity_pattern().sum()))
    return system


def check_structural_rank(system: LinearSystem, name: str = "") -> None:
    """Raise if no assignment of values to the nonzero pattern makes ``A`` invertible."""
    rows, cols = system.shape
    if rows != cols:
        return
    rank = structural_rank(csr_matrix(system.sparsity_pattern().astype(float)))
    if rank < rows:
        raise DegenerateSystemError(
            f"{name or 'linear system'} is structurally singular "
            f"(structural rank {rank} < {rows})")


def solve_2x2(system: LinearSystem) -> sp.Matrix:
    """Closed-form solution of a 2x2 system through its explicit inverse."""
    if system.shape != (2, 2):
        raise ValueError(f"expected a 2x2 system, got {system.shape}")
    det = sp.simplify(system.A.det())
    if det == 0:
        raise DegenerateSystemError("2x2 system matrix is singular")
    a, b_, c, d = system.A
    inverse = sp.Matrix([[d, -b_], [-c, a]]) / det
    return inverse * system.b


def dense_from_nonzero(values, indices, shape: Tuple[int, int]) -> np.ndarray:
    """Rebuild a dense matrix from nonzero ``values`` at flat row-major ``indices``.

    ``values`` may carry trailing batch dimensions, in which case the result
    has shape ``shape + batch``.
    """
    values = np.asarray(values, dtype=float)
    indices = np.asarray(indices, dtype=int)
    batch = values.shape[1:]
    dense = np.zeros((shape[0] * shape[1],) + batch)
    dense[indices] = values
    return dense.reshape(tuple(shape) + batch)
