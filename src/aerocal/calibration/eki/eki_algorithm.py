# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Ensemble Kalman Inversion algorithm.

Implements the perturbed-observation (stochastic) and unperturbed
(deterministic) variants of the EKI parameter update.

References:
    Iglesias, M.A., Law, K.J.H. & Stuart, A.M. (2013). Ensemble Kalman
    methods for inverse problems. Inverse Problems, 29, 045001.

    Schillings, C. & Stuart, A.M. (2017). Analysis of the ensemble Kalman
    filter for inverse problems. SIAM J. Numer. Anal., 55, 1264-1290.
"""

import logging
import warnings
from typing import Optional

import numpy as np
from scipy import linalg

from aerocal.core.exceptions import DimensionMismatchError, InvalidCovarianceError

logger = logging.getLogger(__name__)

VARIANTS = ('stochastic', 'deterministic')


def check_settings(variant: str, step_size: float) -> None:
    """Raise ValueError for an unknown variant or a non-positive step size."""
    if variant not in VARIANTS:
        raise ValueError(f"Unknown EKI variant '{variant}', expected one of {VARIANTS}")
    if not step_size > 0:
        raise ValueError(f"EKI step size must be positive, got {step_size}")


class EKIAlgorithm:
    """Ensemble Kalman Inversion (EKI) update step.

    Args:
        variant: 'stochastic' perturbs the observations per member,
            'deterministic' uses the same observation for every member.
        step_size: Pseudo time step; the noise covariance is divided by it.
        rng: Generator for the observation perturbations. Required by the
            stochastic variant, unused by the deterministic one.
    """

    def __init__(
        self,
        variant: str = 'stochastic',
        step_size: float = 1.0,
        rng: Optional[np.random.Generator] = None,
    ):
        check_settings(variant, step_size)
        if variant == 'stochastic' and rng is None:
            raise ValueError("The stochastic EKI variant needs an explicit random generator")
        self.variant = variant
        self.step_size = step_size
        self.rng = rng

    def update(
        self,
        U: np.ndarray,
        G: np.ndarray,
        y_obs: np.ndarray,
        noise_cov: np.ndarray,
    ) -> np.ndarray:
        """Perform one EKI update.

        Args:
            U: Unconstrained parameter ensemble, shape (n_members, n_params).
            G: Forward model outputs, shape (n_members, n_obs).
            y_obs: Truth sample, shape (n_obs,).
            noise_cov: Observation noise covariance, shape (n_obs, n_obs).

        Returns:
            Updated ensemble, shape (n_members, n_params). Inputs are not modified.
        """
        U = np.asarray(U, dtype=float)
        G = np.asarray(G, dtype=float)
        y_obs = np.asarray(y_obs, dtype=float)
        noise_cov = np.asarray(noise_cov, dtype=float)

        n_members = U.shape[0]
        n_obs = y_obs.shape[0]
        if G.shape != (n_members, n_obs):
            raise DimensionMismatchError(
                f"Forward outputs have shape {G.shape}, expected ({n_members}, {n_obs})"
            )
        if noise_cov.shape != (n_obs, n_obs):
            raise InvalidCovarianceError(
                f"Noise covariance has shape {noise_cov.shape}, expected ({n_obs}, {n_obs})"
            )
        if n_members < 2:
            raise DimensionMismatchError("EKI needs at least two ensemble members")

        # Anomalies about the ensemble means
        U_anom = U - U.mean(axis=0)
        G_anom = G - G.mean(axis=0)

        # Sample covariances with (N-1) normalisation
        C_ug = U_anom.T @ G_anom / (n_members - 1)  # (n_params, n_obs)
        C_gg = G_anom.T @ G_anom / (n_members - 1)  # (n_obs, n_obs)

        scaled_cov = noise_cov / self.step_size

        Y = self._observations(y_obs, scaled_cov, n_members)
        innovation = Y - G  # (n_members, n_obs)

        W = _solve_innovation(C_gg, scaled_cov, innovation.T)
        return U + (C_ug @ W).T

    def _observations(
        self,
        y_obs: np.ndarray,
        noise_cov: np.ndarray,
        n_members: int,
    ) -> np.ndarray:
        """Per-member observations, perturbed for the stochastic variant."""
        if self.variant == 'deterministic':
            return np.tile(y_obs, (n_members, 1))
        noise = self.rng.multivariate_normal(
            np.zeros(y_obs.shape[0]), noise_cov, size=n_members
        )
        return y_obs + noise


def _solve_innovation(C_gg: np.ndarray, noise_cov: np.ndarray, rhs: np.ndarray) -> np.ndarray:
    """Solve ``(C_gg + noise_cov) W = rhs``.

    With a positive definite noise covariance ``L L^T`` the system is
    whitened to ``(L^-1 C_gg L^-T + I) X = L^-1 rhs`` and mapped back with
    ``W = L^-T X``.
    A near-singular system falls back to the pseudo-inverse.
    """
    try:
        L = linalg.cholesky(noise_cov, lower=True)
    except linalg.LinAlgError:
        L = None

    if L is None:
        C, b = C_gg + noise_cov, rhs
    else:
        half = linalg.solve_triangular(L, C_gg, lower=True)
        C = linalg.solve_triangular(L, half.T, lower=True) + np.eye(C_gg.shape[0])
        b = linalg.solve_triangular(L, rhs, lower=True)

    try:
        with warnings.catch_warnings():
            warnings.simplefilter('error', linalg.LinAlgWarning)
            X = linalg.solve(C, b, assume_a='sym')
    except (linalg.LinAlgError, linalg.LinAlgWarning):
        logger.warning("Singular innovation covariance, using pseudo-inverse")
        X = linalg.pinv(C) @ b

    if L is None:
        return X
    return linalg.solve_triangular(L, X, lower=True, trans='T')
