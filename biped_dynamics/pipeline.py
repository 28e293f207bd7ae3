"""End-to-end derivation of the five-link biped model.

``derive_biped_model`` runs every stage in dependency order, each stage
receiving the outputs of the previous ones, then generates the numeric
evaluators. The returned :class:`BipedModel` keeps the evaluators and a few
numeric wrappers that take a :class:`BipedParameters` instead of loose
``m1..c5`` arguments.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import numpy as np

from .codegen.evaluators import (
    NumericEvaluator,
    com_velocity_args, contact_force_args, dynamics_args,
    energy_args, heel_strike_args, points_args,
)
from .core.base import CompositeDerivation
from .core.schemas import NUM_LINKS, BipedParameters
from .core.symbols import BipedSymbols
from .dynamics.contact import ContactForces
from .dynamics.energy import Energy
from .dynamics.heel_strike import HeelStrikeMap
from .dynamics.linear import dense_from_nonzero
from .dynamics.single_support import SingleSupportDynamics
from .kinematics.derivatives import CoMDerivatives, differentiate_coms
from .kinematics.model import KinematicModel, build_kinematics
from .kinematics.tree import KinematicTree

logger = logging.getLogger(__name__)


def _link_state(prefix: str, values, suffix: str = '') -> Dict[str, np.ndarray]:
    """Map a length-5 (optionally batched) array to ``prefix1..prefix5`` kwargs."""
    values = np.asarray(values, dtype=float)
    if values.shape[:1] != (NUM_LINKS,):
        raise ValueError(f"{prefix} must have leading dimension {NUM_LINKS}, "
                         f"got shape {values.shape}")
    return {f'{prefix}{i + 1}{suffix}': values[i] for i in range(NUM_LINKS)}


def _batched_solve(A: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Solve ``A x = b`` where ``A`` is ``(n, n) + batch`` and ``b`` is ``(n,) + batch``."""
    if A.ndim == 2:
        return np.linalg.solve(A, b)
    A_b = np.moveaxis(A, (0, 1), (-2, -1))
    b_b = np.moveaxis(b, 0, -1)[..., None]
    return np.moveaxis(np.linalg.solve(A_b, b_b)[..., 0], -1, 0)


@dataclass
class BipedModel:
    """Derived model: symbolic artifacts plus generated numeric evaluators."""
    symbols: BipedSymbols
    tree: KinematicTree
    kinematics: KinematicModel
    derivatives: CoMDerivatives
    artifacts: Dict[str, Dict[str, Any]]
    evaluators: Dict[str, NumericEvaluator]
    mass_matrix_form: str = 'joint'
    config: Dict = field(default_factory=dict)

    @property
    def mass_matrix_indices(self) -> np.ndarray:
        return self.artifacts['single_support']['mass_matrix_indices'].copy()

    def _call(self, name: str, params: BipedParameters, **state):
        evaluator = self.evaluators[name]
        values = params.symbol_values()
        kwargs = {k: v for k, v in values.items() if k in evaluator.arg_names}
        kwargs.update(state)
        return evaluator(**kwargs)

    def mass_matrix(self, q, dq, u, params: BipedParameters) -> Tuple[np.ndarray, np.ndarray]:
        """Dense single-support mass matrix and generalized force."""
        values, indices, F = self._call(
            'dynamics_single_support', params,
            **_link_state('q', q), **_link_state('dq', dq), **_link_state('u', u))
        return dense_from_nonzero(values, indices, (NUM_LINKS, NUM_LINKS)), F

    def accelerations(self, q, dq, u, params: BipedParameters) -> np.ndarray:
        M, F = self.mass_matrix(q, dq, u, params)
        return _batched_solve(M, F)

    def heel_strike_system(self, q, dq_minus, dG_minus,
                           params: BipedParameters) -> Tuple[np.ndarray, np.ndarray]:
        """``MM`` and ``ff`` of the collision map.

        ``dG_minus`` is stacked like :meth:`com_velocity` output:
        ``[dG1x, dG1y, ..., dG5x, dG5y]``.
        """
        dG_minus = np.asarray(dG_minus, dtype=float)
        if dG_minus.shape[:1] != (2 * NUM_LINKS,):
            raise ValueError(f"dG_minus must have leading dimension {2 * NUM_LINKS}, "
                             f"got shape {dG_minus.shape}")
        return self._call(
            'dynamics_heel_strike', params,
            **_link_state('q', q), **_link_state('dq', dq_minus, suffix='m'),
            **_link_state('dG', dG_minus[0::2], suffix='mx'),
            **_link_state('dG', dG_minus[1::2], suffix='my'))

    def heel_strike(self, q, dq_minus, dG_minus, params: BipedParameters) -> np.ndarray:
        """Post-impact rates ``dq`` (before any leg relabeling)."""
        MM, ff = self.heel_strike_system(q, dq_minus, dG_minus, params)
        return _batched_solve(MM, ff)

    def contact_forces(self, q, dq, ddq, params: BipedParameters):
        return self._call('contact_force', params, **_link_state('q', q),
                          **_link_state('dq', dq), **_link_state('ddq', ddq))

    def energy(self, q, dq, params: BipedParameters):
        return self._call('energy', params, **_link_state('q', q), **_link_state('dq', dq))

    def points(self, q, params: BipedParameters):
        return self._call('get_points', params, **_link_state('q', q))

    def com_velocity(self, q, dq, params: BipedParameters) -> np.ndarray:
        (dG,) = self._call('com_velocity', params, **_link_state('q', q),
                           **_link_state('dq', dq))
        return dG


def generate_evaluators(symbols: BipedSymbols, kinematics: KinematicModel,
                        derivatives: CoMDerivatives, artifacts: Dict[str, Dict[str, Any]],
                        cse: bool = True) -> Dict[str, NumericEvaluator]:
    ss = artifacts['single_support']
    hs = artifacts['heel_strike']
    contact = artifacts['contact']
    energy = artifacts['energy']
    return {
        'dynamics_single_support': NumericEvaluator(
            'dynamics_single_support', dynamics_args(symbols),
            {'MM': ss['mass_matrix_values'], 'Idx': ss['mass_matrix_indices'],
             'F': ss['generalized_force']}, cse=cse),
        'dynamics_heel_strike': NumericEvaluator(
            'dynamics_heel_strike', heel_strike_args(symbols),
            {'MM': hs['MM'], 'ff': hs['ff']}, cse=cse),
        'contact_force': NumericEvaluator(
            'contact_force', contact_force_args(symbols),
            {'Fx': contact['Fx'], 'Fy': contact['Fy']}, cse=cse),
        'energy': NumericEvaluator(
            'energy', energy_args(symbols),
            {'KE': energy['KE'], 'PE': energy['PE']}, cse=cse),
        'get_points': NumericEvaluator(
            'get_points', points_args(symbols),
            {'P': kinematics.points_stacked(), 'G': kinematics.coms_stacked()}, cse=cse),
        'com_velocity': NumericEvaluator(
            'com_velocity', com_velocity_args(symbols),
            {'dG': derivatives.velocities_stacked()}, cse=cse),
    }


def derive_biped_model(config: Optional[Dict] = None) -> BipedModel:
    """Derive every artifact of the five-link biped and compile its evaluators.

    Config keys:
        mass_matrix_form: ``'joint'`` or ``'symmetric'`` (see
            :class:`SingleSupportDynamics`).
        expand: expand matrix coefficients (default True).
        cse: common subexpression elimination in generated code (default True).
    """
    config = dict(config or {})
    symbols = BipedSymbols.create()
    tree = KinematicTree()

    logger.info("building kinematics for %d links", len(tree))
    kinematics = build_kinematics(symbols, tree)
    derivatives = differentiate_coms(kinematics)

    logger.info("assembling single-support dynamics")
    single_support = SingleSupportDynamics(kinematics, derivatives, config)
    artifacts = {'single_support': single_support.derive()}

    logger.info("deriving contact forces, energy and heel-strike map")
    artifacts.update(CompositeDerivation({
        'contact': ContactForces(kinematics, derivatives, config),
        'energy': Energy(kinematics, derivatives, config),
        'heel_strike': HeelStrikeMap(kinematics, derivatives, config),
    }).derive())

    logger.info("generating numeric evaluators")
    evaluators = generate_evaluators(symbols, kinematics, derivatives, artifacts,
                                     cse=config.get('cse', True))

    return BipedModel(
        symbols=symbols,
        tree=tree,
        kinematics=kinematics,
        derivatives=derivatives,
        artifacts=artifacts,
        evaluators=evaluators,
        mass_matrix_form=single_support.form,
        config=config,
    )
