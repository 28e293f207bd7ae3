"""Tests for kinematics module: tree, forward kinematics, time derivatives."""

import numpy as np
import pytest
import sympy as sp

from biped_dynamics.core.symbols import BipedSymbols
from biped_dynamics.kinematics.tree import GROUND, Link, KinematicTree
from biped_dynamics.kinematics.model import build_kinematics, cross2d, unit_vector
from biped_dynamics.kinematics.derivatives import (
    differentiate_coms, second_time_derivative, time_derivative,
)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(scope='module')
def symbols():
    return BipedSymbols.create()


@pytest.fixture(scope='module')
def kinematics(symbols):
    return build_kinematics(symbols)


def _upright(symbols):
    return {q: 0 for q in symbols.q}


def _is_zero(expr):
    return sp.simplify(expr) == sp.zeros(*expr.shape) if isinstance(expr, sp.MatrixBase) \
        else sp.simplify(expr) == 0


# ---------------------------------------------------------------------------
# Kinematic tree
# ---------------------------------------------------------------------------

class TestKinematicTree:
    def test_outboard_sets(self):
        tree = KinematicTree()
        assert tree.outboard(0) == {1, 2, 3, 4, 5}
        assert tree.outboard(1) == {2, 3, 4, 5}
        assert tree.outboard(2) == {3, 4, 5}
        assert tree.outboard(3) == {4, 5}
        assert tree.outboard(4) == {5}

    def test_torso_not_outboard_of_swing_hip(self):
        assert 3 not in KinematicTree().outboard(3)

    def test_joint_points(self):
        tree = KinematicTree()
        assert [tree.joint_point(k) for k in range(5)] == [0, 1, 2, 2, 4]

    def test_hip_branch(self):
        tree = KinematicTree()
        assert tree.link(3).proximal == tree.link(4).proximal == 2

    def test_parents(self):
        tree = KinematicTree()
        assert tree.parent(1) is None
        assert tree.parent(4) == 3
        assert tree.children(GROUND) == [1]

    def test_build_order_parents_first(self):
        tree = KinematicTree()
        order = tree.build_order()
        assert sorted(order) == [1, 2, 3, 4, 5]
        for idx in order:
            parent = tree.parent(idx)
            if parent is not None:
                assert order.index(parent) < order.index(idx)

    def test_incidence_matrix(self):
        T = KinematicTree().incidence_matrix()
        np.testing.assert_array_equal(T, np.triu(np.ones((5, 5), dtype=int)))
        assert round(np.linalg.det(T)) == 1

    def test_unknown_parent_rejected(self):
        with pytest.raises(ValueError):
            KinematicTree([Link(1, 'a', parent=GROUND, proximal=0, distal=1),
                           Link(2, 'b', parent=7, proximal=1, distal=2)])

    def test_len(self):
        assert len(KinematicTree()) == 5


# ---------------------------------------------------------------------------
# Forward kinematics
# ---------------------------------------------------------------------------

class TestKinematicModel:
    def test_unit_vector_upright(self):
        q = sp.Symbol('q')
        assert unit_vector(q).subs(q, 0) == sp.Matrix([0, 1])
        assert unit_vector(q, -1).subs(q, 0) == sp.Matrix([0, -1])

    def test_unit_vector_norm(self):
        q = sp.Symbol('q')
        e = unit_vector(q)
        assert sp.simplify(e.dot(e)) == 1

    def test_cross2d(self):
        assert cross2d(sp.Matrix([1, 0]), sp.Matrix([0, 1])) == 1
        assert cross2d(sp.Matrix([0, 1]), sp.Matrix([1, 0])) == -1

    def test_six_points(self, kinematics):
        assert len(kinematics.P) == 6
        assert kinematics.P[0] == sp.zeros(2, 1)

    def test_upright_points_on_vertical_axis(self, symbols, kinematics):
        subs = _upright(symbols)
        l = symbols.l
        assert kinematics.P[1].subs(subs) == sp.Matrix([0, l[0]])
        assert kinematics.P[2].subs(subs) == sp.Matrix([0, l[0] + l[1]])
        assert kinematics.P[3].subs(subs) == sp.Matrix([0, l[0] + l[1] + l[2]])
        assert _is_zero(kinematics.P[4].subs(subs) - sp.Matrix([0, l[0] + l[1] - l[3]]))
        assert _is_zero(kinematics.P[5].subs(subs)
                        - sp.Matrix([0, l[0] + l[1] - l[3] - l[4]]))

    def test_upright_coms(self, symbols, kinematics):
        subs = _upright(symbols)
        l, c = symbols.l, symbols.c
        expected = {
            1: l[0] - c[0],
            2: l[0] + l[1] - c[1],
            3: l[0] + l[1] + l[2] - c[2],
            4: l[0] + l[1] - c[3],
            5: l[0] + l[1] - l[3] - c[4],
        }
        for idx, height in expected.items():
            assert _is_zero(kinematics.G[idx].subs(subs) - sp.Matrix([0, height]))

    def test_swing_foot_closure(self, symbols, kinematics):
        # Equal legs standing straight: the swing foot touches the ground
        l = symbols.l
        subs = dict(_upright(symbols))
        subs.update({l[3]: l[1], l[4]: l[0]})
        assert _is_zero(kinematics.P[5].subs(subs))

    def test_positive_angle_leans_left(self, symbols, kinematics):
        subs = {q: 0 for q in symbols.q}
        subs[symbols.q[0]] = sp.pi / 2
        assert kinematics.P[1].subs(subs) == sp.Matrix([-symbols.l[0], 0])

    def test_swing_leg_independent_of_torso(self, symbols, kinematics):
        assert symbols.q[2] not in kinematics.G[4].free_symbols
        assert symbols.q[2] not in kinematics.G[5].free_symbols
        assert symbols.l[2] not in kinematics.G[5].free_symbols

    def test_total_com_is_weighted_average(self, symbols, kinematics):
        m = symbols.m
        weighted = sum((m[i - 1] * kinematics.G[i] for i in range(1, 6)), sp.zeros(2, 1))
        assert _is_zero(kinematics.G_total * sum(m) - weighted)

    def test_stacked_shapes(self, kinematics):
        assert kinematics.points_stacked().shape == (10, 1)
        assert kinematics.coms_stacked().shape == (10, 1)


# ---------------------------------------------------------------------------
# Differentiation engine
# ---------------------------------------------------------------------------

class TestTimeDerivative:
    def test_constant(self, symbols):
        s = symbols
        assert time_derivative(sp.Integer(7), s.q, s.dq, s.ddq) == 0
        assert time_derivative(s.l[0] * s.m[1], s.q, s.dq, s.ddq) == 0

    def test_coordinate(self, symbols):
        s = symbols
        for q, dq in zip(s.q, s.dq):
            assert time_derivative(q, s.q, s.dq, s.ddq) == dq

    def test_rate(self, symbols):
        s = symbols
        assert time_derivative(s.dq[2], s.q, s.dq, s.ddq) == s.ddq[2]

    def test_trig_chain_rule(self, symbols):
        s = symbols
        q1, dq1, ddq1 = s.q[0], s.dq[0], s.ddq[0]
        first = time_derivative(sp.sin(q1), s.q, s.dq, s.ddq)
        assert sp.simplify(first - sp.cos(q1) * dq1) == 0
        second = time_derivative(first, s.q, s.dq, s.ddq)
        assert sp.simplify(second - (-sp.sin(q1) * dq1**2 + sp.cos(q1) * ddq1)) == 0

    def test_twice_equals_second_derivative(self, symbols, kinematics):
        s = symbols
        expr = kinematics.G[5]
        twice = time_derivative(time_derivative(expr, s.q, s.dq, s.ddq), s.q, s.dq, s.ddq)
        assert twice == second_time_derivative(expr, s.q, s.dq, s.ddq)

    def test_matrix_shape_preserved(self, symbols):
        s = symbols
        expr = sp.Matrix([[s.q[0], s.q[1]], [s.q[2], 1]])
        result = time_derivative(expr, s.q, s.dq, s.ddq)
        assert result == sp.Matrix([[s.dq[0], s.dq[1]], [s.dq[2], 0]])

    def test_product_rule(self, symbols):
        s = symbols
        expr = s.q[0] * s.q[1]
        result = time_derivative(expr, s.q, s.dq, s.ddq)
        assert sp.expand(result - (s.dq[0] * s.q[1] + s.q[0] * s.dq[1])) == 0


class TestCoMDerivatives:
    def test_every_link(self, kinematics):
        d = differentiate_coms(kinematics)
        assert sorted(d.dG) == [1, 2, 3, 4, 5]
        assert sorted(d.ddG) == [1, 2, 3, 4, 5]
        assert d.velocities_stacked().shape == (10, 1)

    def test_velocity_linear_in_rates(self, symbols, kinematics):
        d = differentiate_coms(kinematics)
        for dq in symbols.dq:
            for idx in d.dG:
                assert sp.diff(d.dG[idx], dq, 2) == sp.zeros(2, 1)

    def test_acceleration_coefficient_is_jacobian(self, symbols, kinematics):
        d = differentiate_coms(kinematics)
        for q, ddq in zip(symbols.q, symbols.ddq):
            coeff = sp.diff(d.ddG[5], ddq)
            assert _is_zero(coeff - sp.diff(kinematics.G[5], q))

    def test_stance_foot_velocity_free(self, symbols, kinematics):
        d = differentiate_coms(kinematics)
        # Stance tibia CoM velocity only depends on the stance tibia rate
        assert d.dG[1].free_symbols & set(symbols.dq) == {symbols.dq[0]}
