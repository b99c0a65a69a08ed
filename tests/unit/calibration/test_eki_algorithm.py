"""Tests for the EKI update."""

import warnings

import numpy as np
import pytest
from scipy.linalg import LinAlgWarning

from aerocal.calibration.eki import EKIAlgorithm
from aerocal.core.exceptions import DimensionMismatchError

pytestmark = pytest.mark.unit


def linear_problem(rng, n_members=50):
    """G(u) = A u with a known solution."""
    A = np.array([[1.0, -1.0], [1.0, 1.0]])
    u_true = np.array([-1.5, 0.5])
    y = A @ u_true
    U = rng.normal(0.0, 1.0, size=(n_members, 2))
    return A, u_true, y, U


class TestEKIUpdate:

    def test_shapes(self):
        rng = np.random.default_rng(0)
        A, _, y, U = linear_problem(rng, 25)
        eki = EKIAlgorithm(rng=np.random.default_rng(1))
        U_new = eki.update(U, U @ A.T, y, 0.01 * np.eye(2))
        assert U_new.shape == U.shape

    @pytest.mark.parametrize("variant", ['stochastic', 'deterministic'])
    def test_moves_toward_solution(self, variant):
        rng = np.random.default_rng(3)
        A, u_true, y, U = linear_problem(rng)
        eki = EKIAlgorithm(variant, rng=np.random.default_rng(4))

        for _ in range(5):
            U = eki.update(U, U @ A.T, y, 0.01 * np.eye(2))

        np.testing.assert_allclose(U.mean(axis=0), u_true, atol=0.05)

    def test_deterministic_is_exact_formula(self):
        rng = np.random.default_rng(5)
        A, _, y, U = linear_problem(rng, 10)
        G = U @ A.T
        gamma = 0.1 * np.eye(2)

        C_ug = np.cov(U.T, G.T)[:2, 2:]
        C_gg = np.cov(G.T)
        expected = U + ((C_ug @ np.linalg.inv(C_gg + gamma)) @ (y - G).T).T

        result = EKIAlgorithm('deterministic').update(U, G, y, gamma)
        np.testing.assert_allclose(result, expected, rtol=1e-10)

    def test_step_size_scales_noise(self):
        rng = np.random.default_rng(6)
        A, _, y, U = linear_problem(rng, 10)
        G = U @ A.T
        gamma = 0.5 * np.eye(2)

        half = EKIAlgorithm('deterministic', step_size=0.5).update(U, G, y, gamma)
        doubled = EKIAlgorithm('deterministic', step_size=1.0).update(U, G, y, 2.0 * gamma)
        np.testing.assert_allclose(half, doubled)

    def test_stochastic_reproducible_with_seed(self):
        rng = np.random.default_rng(7)
        A, _, y, U = linear_problem(rng, 10)
        G = U @ A.T
        a = EKIAlgorithm(rng=np.random.default_rng(11)).update(U, G, y, np.eye(2))
        b = EKIAlgorithm(rng=np.random.default_rng(11)).update(U, G, y, np.eye(2))
        np.testing.assert_array_equal(a, b)

    def test_inputs_not_modified(self):
        rng = np.random.default_rng(8)
        A, _, y, U = linear_problem(rng, 10)
        G = U @ A.T
        U_before, G_before = U.copy(), G.copy()
        EKIAlgorithm(rng=np.random.default_rng(0)).update(U, G, y, np.eye(2))
        np.testing.assert_array_equal(U, U_before)
        np.testing.assert_array_equal(G, G_before)

    def test_singular_covariance_uses_pseudo_inverse(self, caplog):
        U = np.array([[0.0, 1.0], [1.0, 0.0], [2.0, 2.0]])
        G = np.ones((3, 2))
        result = EKIAlgorithm('deterministic').update(U, G, np.ones(2), np.zeros((2, 2)))
        assert np.all(np.isfinite(result))
        assert "pseudo-inverse" in caplog.text

    def test_output_shape_mismatch(self):
        U = np.zeros((4, 2))
        with pytest.raises(DimensionMismatchError):
            EKIAlgorithm('deterministic').update(U, np.zeros((4, 3)), np.zeros(2), np.eye(2))

    def test_invalid_arguments(self):
        with pytest.raises(ValueError):
            EKIAlgorithm('square_root')
        with pytest.raises(ValueError):
            EKIAlgorithm(step_size=0.0)

    def test_stochastic_needs_generator(self):
        with pytest.raises(ValueError, match="random generator"):
            EKIAlgorithm('stochastic')


class TestIllConditionedNoise:
    """Observables on very different scales, as with N_act and M_act."""

    def test_update_invariant_to_output_units(self):
        rng = np.random.default_rng(9)
        A, _, y, U = linear_problem(rng, 20)
        G = U @ A.T + 0.1 * rng.normal(size=(20, 2))
        gamma = np.diag([0.5, 2.0])
        scale = np.diag([1e3, 1e-5])

        base = EKIAlgorithm('deterministic').update(U, G, y, gamma)
        with warnings.catch_warnings():
            warnings.simplefilter('error', LinAlgWarning)
            scaled = EKIAlgorithm('deterministic').update(
                U, G @ scale, y @ scale, scale @ gamma @ scale
            )
        np.testing.assert_allclose(scaled, base, rtol=1e-8, atol=1e-10)

    def test_no_pseudo_inverse_fallback(self, caplog):
        rng = np.random.default_rng(10)
        U = rng.normal(size=(50, 2))
        G = np.column_stack([1e8 + 1e7 * U[:, 0], 0.05 + 1e-3 * U[:, 1]])
        gamma = np.diag([1e6, 2e-10])
        result = EKIAlgorithm('deterministic').update(U, G, G.mean(axis=0), gamma)
        assert np.all(np.isfinite(result))
        assert "pseudo-inverse" not in caplog.text
