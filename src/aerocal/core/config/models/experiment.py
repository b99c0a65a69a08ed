# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Experiment, EKI and synthetic truth configuration models.
"""

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from .base import FROZEN_CONFIG


def _default_true_parameters() -> Dict[str, float]:
    return {'molar_mass': 0.058443, 'osmotic_coeff': 0.9}


class ExperimentConfig(BaseModel):
    """Perfect-model experiment settings."""
    model_config = FROZEN_CONFIG

    name: str = Field(default='aerosol_activation', alias='EXPERIMENT_NAME')
    seed: int = Field(default=44, alias='RANDOM_SEED', ge=0)
    ensemble_size: int = Field(default=50, alias='ENSEMBLE_SIZE', ge=2)
    iterations: int = Field(default=10, alias='NUMBER_OF_ITERATIONS', ge=1)
    true_parameters: Dict[str, float] = Field(
        default_factory=_default_true_parameters, alias='TRUE_PARAMETERS',
        description='Parameter values used to generate the synthetic truth'
    )


class EKIConfig(BaseModel):
    """Ensemble Kalman Inversion update and member evaluation settings."""
    model_config = FROZEN_CONFIG

    variant: Literal['stochastic', 'deterministic'] = Field(
        default='stochastic', alias='EKI_VARIANT'
    )
    step_size: float = Field(
        default=1.0, alias='EKI_STEP_SIZE', gt=0,
        description='Noise covariance is scaled by 1/step_size'
    )
    executor: Literal['serial', 'thread', 'process'] = Field(
        default='serial', alias='EKI_EXECUTOR'
    )
    max_workers: int = Field(default=1, alias='EKI_MAX_WORKERS', ge=1)
    evaluation_timeout: Optional[float] = Field(
        default=None, alias='EKI_EVALUATION_TIMEOUT', gt=0,
        description='Per-member forward model timeout in seconds'
    )


class TruthConfig(BaseModel):
    """Synthetic observation settings."""
    model_config = FROZEN_CONFIG

    relative_noise: float = Field(
        default=0.01, alias='TRUTH_RELATIVE_NOISE', ge=0,
        description='Noise variance as a fraction of the noiseless output'
    )
    replicates: int = Field(default=10, alias='TRUTH_REPLICATES', ge=1)
    sample_policy: Literal['index', 'mean'] = Field(
        default='index', alias='TRUTH_SAMPLE_POLICY'
    )
    sample_index: int = Field(default=0, alias='TRUTH_SAMPLE_INDEX', ge=0)
    seed: Optional[int] = Field(
        default=None, alias='TRUTH_SEED', ge=0,
        description='Defaults to the experiment seed'
    )
    observable_names: List[str] = Field(
        default_factory=lambda: ['N_act', 'M_act'], alias='OBSERVABLE_NAMES'
    )
