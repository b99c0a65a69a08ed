# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Synthetic truth observations for perfect-model experiments.

The forward model is run once at the true parameters; noisy replicates are
drawn around that output with a diagonal covariance proportional to it, and
one working truth sample is selected from the replicates.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Literal, Optional, Sequence, Tuple

import numpy as np

from aerocal.core.exceptions import (
    ForwardModelError,
    InvalidCovarianceError,
    ValidationError,
)

from .forward_model import as_forward_model

logger = logging.getLogger(__name__)

SamplePolicy = Literal['index', 'mean']


def _read_only(values: np.ndarray) -> np.ndarray:
    values = np.array(values, dtype=float, copy=True)
    values.setflags(write=False)
    return values


@dataclass(frozen=True)
class TruthObservation:
    """Observed data used as the calibration target.

    Attributes:
        baseline: Noiseless forward model output G_t, shape (n_obs,).
        noise_cov: Observation noise covariance, shape (n_obs, n_obs).
        samples: Noisy replicates, shape (n_replicates, n_obs).
        names: Observable names.
        sample_policy: 'index' uses one replicate, 'mean' averages them.
        sample_index: Replicate used by the 'index' policy.
    """
    baseline: np.ndarray
    noise_cov: np.ndarray
    samples: np.ndarray
    names: Tuple[str, ...] = ()
    sample_policy: SamplePolicy = 'index'
    sample_index: int = 0
    sample: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        baseline = _read_only(self.baseline)
        noise_cov = _read_only(self.noise_cov)
        samples = _read_only(np.atleast_2d(self.samples))
        n_obs = baseline.shape[0]

        if noise_cov.shape != (n_obs, n_obs):
            raise ValidationError(
                f"Noise covariance shape {noise_cov.shape} does not match {n_obs} observables"
            )
        if samples.shape[1] != n_obs:
            raise ValidationError(
                f"Replicates have {samples.shape[1]} observables, expected {n_obs}"
            )
        if self.names and len(self.names) != n_obs:
            raise ValidationError(f"Got {len(self.names)} names for {n_obs} observables")

        if self.sample_policy == 'index':
            if not 0 <= self.sample_index < samples.shape[0]:
                raise ValidationError(
                    f"Truth sample index {self.sample_index} outside "
                    f"{samples.shape[0]} replicates"
                )
            sample = samples[self.sample_index]
        elif self.sample_policy == 'mean':
            sample = samples.mean(axis=0)
        else:
            raise ValidationError(f"Unknown truth sample policy: {self.sample_policy}")

        object.__setattr__(self, 'baseline', baseline)
        object.__setattr__(self, 'noise_cov', noise_cov)
        object.__setattr__(self, 'samples', samples)
        object.__setattr__(self, 'names', tuple(self.names))
        object.__setattr__(self, 'sample', _read_only(sample))

    @property
    def n_obs(self) -> int:
        return self.baseline.shape[0]

    @property
    def n_replicates(self) -> int:
        return self.samples.shape[0]

    def with_sample_policy(
        self,
        policy: SamplePolicy,
        index: int = 0,
    ) -> 'TruthObservation':
        """Copy of this observation using a different working truth sample."""
        return replace(self, sample_policy=policy, sample_index=index)


def build_noise_covariance(baseline: np.ndarray, relative_noise: float) -> np.ndarray:
    """Diagonal covariance with variances ``relative_noise * baseline``.

    Raises:
        InvalidCovarianceError: If any variance is not strictly positive.
    """
    variances = relative_noise * np.asarray(baseline, dtype=float)
    if not np.all(np.isfinite(variances)) or np.any(variances <= 0.0):
        raise InvalidCovarianceError(
            f"Noise variances must be positive, got {variances} "
            f"(relative noise {relative_noise})"
        )
    return np.diag(variances)


def generate_truth(
    forward_model,
    true_parameters: Sequence[float],
    relative_noise: float,
    replicates: int,
    seed: int,
    names: Optional[Sequence[str]] = None,
    sample_policy: SamplePolicy = 'index',
    sample_index: int = 0,
) -> TruthObservation:
    """Generate synthetic noisy observations from the true parameters.

    Args:
        forward_model: ForwardModel or callable of the constrained parameters.
        true_parameters: Constrained parameter vector used as truth.
        relative_noise: Noise variance as a fraction of the noiseless output.
        replicates: Number of noisy replicates to draw (>= 1).
        seed: Seed of the noise generator.
        names: Observable names (defaults to the model's output names).
        sample_policy: How the working truth sample is chosen.
        sample_index: Replicate used by the 'index' policy.

    Raises:
        ForwardModelError: If the model fails or returns non-finite values.
        InvalidCovarianceError: If any noise variance is not strictly positive.
    """
    if replicates < 1:
        raise ValidationError(f"Need at least one replicate, got {replicates}")

    model = as_forward_model(forward_model)
    true_parameters = np.asarray(true_parameters, dtype=float)

    try:
        baseline = np.atleast_1d(np.asarray(model(true_parameters), dtype=float))
    except Exception as e:
        raise ForwardModelError(
            f"Forward model failed at the true parameters {true_parameters}: {e}"
        ) from e
    if baseline.ndim != 1 or not np.all(np.isfinite(baseline)):
        raise ForwardModelError(
            f"Forward model returned an invalid output at the true parameters: {baseline}"
        )

    noise_cov = build_noise_covariance(baseline, relative_noise)

    rng = np.random.default_rng(seed)
    noise = rng.multivariate_normal(np.zeros(baseline.shape[0]), noise_cov, size=replicates)
    samples = baseline + noise

    if names is None:
        names = getattr(model, 'output_names', None) or ()

    logger.debug(
        f"Generated {replicates} truth replicates around {baseline} "
        f"(relative noise {relative_noise})"
    )
    return TruthObservation(
        baseline=baseline,
        noise_cov=noise_cov,
        samples=samples,
        names=tuple(names),
        sample_policy=sample_policy,
        sample_index=sample_index,
    )
