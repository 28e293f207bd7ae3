"""Tests for numeric evaluator generation."""

import numpy as np
import pytest
import sympy as sp

from biped_dynamics.codegen.evaluators import (
    NumericEvaluator,
    com_velocity_args, contact_force_args, dynamics_args,
    energy_args, heel_strike_args, points_args,
)
from biped_dynamics.core.errors import UnresolvedSymbolError
from biped_dynamics.core.symbols import BipedSymbols

x, y, z = sp.symbols('x y z', real=True)


def _names(args):
    return [a.name for a in args]


def _group(prefix, n=5, suffix=''):
    return [f'{prefix}{i}{suffix}' for i in range(1, n + 1)]


# ---------------------------------------------------------------------------
# NumericEvaluator
# ---------------------------------------------------------------------------

class TestNumericEvaluator:
    def make(self, **kwargs):
        return NumericEvaluator('f', (x, y), {
            's': x + y,
            'v': sp.Matrix([x, 2 * y, 0]),
            'M': sp.Matrix([[x, 0], [1, y]]),
            'idx': np.array([0, 3]),
        }, **kwargs)

    def test_scalar_call(self):
        s, v, M, idx = self.make()(1.0, 2.0)
        assert s == pytest.approx(3.0)
        np.testing.assert_allclose(v, [1.0, 4.0, 0.0])
        np.testing.assert_allclose(M, [[1.0, 0.0], [1.0, 2.0]])
        np.testing.assert_array_equal(idx, [0, 3])

    def test_keyword_call(self):
        s, v, M, idx = self.make()(y=2.0, x=1.0)
        assert s == pytest.approx(3.0)

    def test_mixed_call(self):
        s, *_ = self.make()(1.0, y=5.0)
        assert s == pytest.approx(6.0)

    def test_batched_call(self):
        s, v, M, idx = self.make()(np.array([1.0, 2.0, 3.0]), 1.0)
        assert s.shape == (3,)
        assert v.shape == (3, 3)
        assert M.shape == (2, 2, 3)
        np.testing.assert_allclose(v[2], 0.0)
        np.testing.assert_allclose(M[1, 0], 1.0)
        np.testing.assert_allclose(M[0, 0], [1.0, 2.0, 3.0])

    def test_without_cse(self):
        s, *_ = self.make(cse=False)(1.0, 2.0)
        assert s == pytest.approx(3.0)

    def test_constant_output_not_shared(self):
        f = self.make()
        idx = f(1.0, 2.0)[3]
        idx[0] = 99
        np.testing.assert_array_equal(f(1.0, 2.0)[3], [0, 3])

    def test_names(self):
        f = self.make()
        assert f.arg_names == ('x', 'y')
        assert f.output_names == ('s', 'v', 'M', 'idx')
        assert 'f(x, y)' in repr(f)

    def test_unresolved_symbol(self):
        with pytest.raises(UnresolvedSymbolError) as info:
            NumericEvaluator('bad', (x,), {'out': x + z})
        assert info.value.symbols == ['z']
        assert info.value.evaluator == 'bad'

    def test_missing_argument(self):
        with pytest.raises(TypeError, match='missing'):
            self.make()(1.0)

    def test_unknown_argument(self):
        with pytest.raises(TypeError, match='unexpected'):
            self.make()(1.0, 2.0, w=3.0)

    def test_duplicate_argument(self):
        with pytest.raises(TypeError, match='multiple'):
            self.make()(1.0, 2.0, x=3.0)

    def test_too_many_arguments(self):
        with pytest.raises(TypeError):
            self.make()(1.0, 2.0, 3.0)


# ---------------------------------------------------------------------------
# Fixed argument orders
# ---------------------------------------------------------------------------

class TestArgumentOrders:
    def setup_method(self):
        self.s = BipedSymbols.create()

    def test_dynamics(self):
        assert _names(dynamics_args(self.s)) == (
            _group('q') + _group('dq') + _group('u') + _group('m') + _group('I')
            + _group('l', 4) + _group('c') + ['g'])

    def test_heel_strike(self):
        assert _names(heel_strike_args(self.s)) == (
            _group('q') + _group('dq', suffix='m') + _group('dG', suffix='mx')
            + _group('dG', suffix='my') + _group('m') + _group('I')
            + _group('l', 4) + _group('c'))

    def test_contact_force(self):
        assert _names(contact_force_args(self.s)) == (
            _group('q') + _group('dq') + _group('ddq') + _group('m')
            + _group('l', 4) + _group('c') + ['g'])

    def test_energy(self):
        assert _names(energy_args(self.s)) == (
            _group('q') + _group('dq') + _group('m') + _group('I')
            + _group('l', 4) + _group('c') + ['g'])

    def test_points(self):
        assert _names(points_args(self.s)) == _group('q') + _group('l') + _group('c')

    def test_com_velocity(self):
        assert _names(com_velocity_args(self.s)) == (
            _group('q') + _group('dq') + _group('l', 4) + _group('c'))
