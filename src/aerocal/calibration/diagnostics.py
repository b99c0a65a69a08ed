# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Calibration diagnostics.

Provides convergence metrics for an EKI run:
- Ensemble mean and standard deviation per parameter
- Data misfit of the ensemble-mean output
- Ensemble spread (collapse indicator)
- Per-iteration convergence table and final parameter table
"""

import logging
from typing import TYPE_CHECKING, Dict, Optional

import numpy as np
import pandas as pd
from scipy import linalg

if TYPE_CHECKING:
    from .driver import CalibrationHistory
    from .observations import TruthObservation
    from .priors import PriorSet

logger = logging.getLogger(__name__)


def ensemble_mean(ensemble: np.ndarray) -> np.ndarray:
    """Mean over members of a (n_members, n) ensemble."""
    return np.asarray(ensemble, dtype=float).mean(axis=0)


def ensemble_std(ensemble: np.ndarray) -> np.ndarray:
    """Sample standard deviation over members (ddof=1)."""
    ensemble = np.asarray(ensemble, dtype=float)
    if ensemble.shape[0] < 2:
        return np.zeros(ensemble.shape[1:])
    return ensemble.std(axis=0, ddof=1)


def ensemble_spread(ensemble: np.ndarray) -> float:
    """Root mean ensemble variance, a scalar measure of ensemble collapse."""
    return float(np.sqrt(np.mean(ensemble_std(ensemble) ** 2)))


def data_misfit(
    outputs: np.ndarray,
    y_obs: np.ndarray,
    noise_cov: np.ndarray,
) -> float:
    """Noise-weighted squared misfit of the ensemble-mean output.

    Computes ``r^T Γ^{-1} r`` with ``r = y - mean(G)``, i.e. the squared
    norm of the whitened residual.

    Args:
        outputs: Forward model outputs, shape (n_members, n_obs).
        y_obs: Truth sample, shape (n_obs,).
        noise_cov: Noise covariance Γ, shape (n_obs, n_obs).
    """
    residual = np.asarray(y_obs, dtype=float) - ensemble_mean(outputs)
    try:
        weighted = linalg.solve(noise_cov, residual, assume_a='pos')
    except linalg.LinAlgError:
        logger.warning("Singular noise covariance in misfit, using pseudo-inverse")
        weighted = linalg.pinv(noise_cov) @ residual
    return float(residual @ weighted)


def convergence_table(
    history: 'CalibrationHistory',
    prior_set: 'PriorSet',
    truth: 'TruthObservation',
) -> pd.DataFrame:
    """Per-iteration convergence metrics.

    One row per iteration with the data misfit of the outputs evaluated on
    that iteration's ensemble (NaN for the final, unevaluated ensemble), the
    unconstrained spread, and the constrained mean and standard deviation
    of every parameter.
    """
    rows = []
    for state in history:
        constrained = state.constrained(prior_set)
        outputs = history.outputs_for(state.iteration)
        row = {
            'iteration': state.iteration,
            'misfit': (
                data_misfit(outputs, truth.sample, truth.noise_cov)
                if outputs is not None else np.nan
            ),
            'spread': ensemble_spread(state.unconstrained),
        }
        means = ensemble_mean(constrained)
        stds = ensemble_std(constrained)
        for i, name in enumerate(prior_set.names):
            row[f'{name}_mean'] = means[i]
            row[f'{name}_std'] = stds[i]
        rows.append(row)
    return pd.DataFrame(rows).set_index('iteration')


def parameter_summary(
    history: 'CalibrationHistory',
    prior_set: 'PriorSet',
    true_parameters: Optional[Dict[str, float]] = None,
) -> pd.DataFrame:
    """Prior versus final ensemble statistics per parameter (constrained space)."""
    initial = history[0].constrained(prior_set)
    final = history.final.constrained(prior_set)

    summary = pd.DataFrame({
        'label': [p.display_name for p in prior_set],
        'initial_mean': ensemble_mean(initial),
        'final_mean': ensemble_mean(final),
        'final_std': ensemble_std(final),
    }, index=pd.Index(prior_set.names, name='parameter'))

    if true_parameters:
        true_values = prior_set.as_vector(true_parameters)
        summary['true_value'] = true_values
        summary['relative_error'] = np.abs(summary['final_mean'] - true_values) / np.abs(true_values)

    return summary
