"""Turn finished symbolic artifacts into standalone numeric evaluators.

Each evaluator has a fixed argument order and named outputs. Outputs are
lambdified together (numpy backend, shared subexpressions eliminated) and
broadcast over array-valued inputs, so a whole trajectory can be evaluated in
one call: scalar outputs then have the batch shape, vector outputs
``(n,) + batch`` and matrix outputs ``(rows, cols) + batch``.
"""

import logging
from typing import Any, Dict, List, Sequence, Tuple

import numpy as np
import sympy as sp

from ..core.errors import UnresolvedSymbolError
from ..core.symbols import BipedSymbols

logger = logging.getLogger(__name__)


class NumericEvaluator:
    """A compiled numeric function of a fixed list of symbols."""

    def __init__(self, name: str, args: Sequence[sp.Symbol],
                 outputs: Dict[str, Any], cse: bool = True):
        self.name = name
        self.args: Tuple[sp.Symbol, ...] = tuple(args)
        self.arg_names: Tuple[str, ...] = tuple(a.name for a in self.args)
        self.output_names: Tuple[str, ...] = tuple(outputs)

        declared = set(self.args)
        unresolved = set()
        self._layout: List[Tuple[str, Any, slice]] = []
        flat: List[sp.Expr] = []
        self._constants: Dict[str, np.ndarray] = {}
        for out_name, value in outputs.items():
            if isinstance(value, np.ndarray):
                self._constants[out_name] = value.copy()
                continue
            if isinstance(value, sp.MatrixBase):
                shape = value.shape if value.cols > 1 else (value.rows,)
                entries = list(value)
            else:
                shape = ()
                entries = [sp.sympify(value)]
            for expr in entries:
                unresolved |= expr.free_symbols - declared
            start = len(flat)
            flat.extend(entries)
            self._layout.append((out_name, shape, slice(start, len(flat))))
        if unresolved:
            raise UnresolvedSymbolError(name, unresolved)

        self._func = sp.lambdify(self.args, flat, modules='numpy', cse=cse)
        logger.debug("generated %s(%d args) -> %s, %d expressions",
                     name, len(self.args), ', '.join(self.output_names), len(flat))

    def _bind(self, args, kwargs) -> List[Any]:
        if len(args) > len(self.args):
            raise TypeError(f"{self.name}() takes {len(self.args)} arguments, "
                            f"got {len(args)}")
        values = dict(zip(self.arg_names, args))
        for key, value in kwargs.items():
            if key not in self.arg_names:
                raise TypeError(f"{self.name}() got an unexpected argument {key!r}")
            if key in values:
                raise TypeError(f"{self.name}() got multiple values for {key!r}")
            values[key] = value
        missing = [n for n in self.arg_names if n not in values]
        if missing:
            raise TypeError(f"{self.name}() missing arguments: {', '.join(missing)}")
        return [values[n] for n in self.arg_names]

    def __call__(self, *args, **kwargs) -> Tuple:
        raw = self._func(*self._bind(args, kwargs))
        stacked = np.stack(np.broadcast_arrays(*[np.asarray(v, dtype=float) for v in raw]))
        batch = stacked.shape[1:]

        computed = {}
        for out_name, shape, span in self._layout:
            value = stacked[span].reshape(tuple(shape) + batch)
            computed[out_name] = value[()] if value.ndim == 0 else value
        outputs = []
        for out_name in self.output_names:
            if out_name in self._constants:
                outputs.append(self._constants[out_name].copy())
            else:
                outputs.append(computed[out_name])
        return tuple(outputs)

    def __repr__(self):
        return (f"NumericEvaluator({self.name}({', '.join(self.arg_names)}) -> "
                f"{', '.join(self.output_names)})")


# ---------------------------------------------------------------------------
# Argument lists
# ---------------------------------------------------------------------------

def dynamics_args(s: BipedSymbols) -> Tuple[sp.Symbol, ...]:
    return s.q + s.dq + s.u + s.m + s.I + s.l[:4] + s.c + (s.g,)


def heel_strike_args(s: BipedSymbols) -> Tuple[sp.Symbol, ...]:
    return (s.q + s.dq_minus + s.dG_minus_x + s.dG_minus_y
            + s.m + s.I + s.l[:4] + s.c)


def contact_force_args(s: BipedSymbols) -> Tuple[sp.Symbol, ...]:
    return s.q + s.dq + s.ddq + s.m + s.l[:4] + s.c + (s.g,)


def energy_args(s: BipedSymbols) -> Tuple[sp.Symbol, ...]:
    return s.q + s.dq + s.m + s.I + s.l[:4] + s.c + (s.g,)


def points_args(s: BipedSymbols) -> Tuple[sp.Symbol, ...]:
    return s.q + s.l + s.c


def com_velocity_args(s: BipedSymbols) -> Tuple[sp.Symbol, ...]:
    return s.q + s.dq + s.l[:4] + s.c
