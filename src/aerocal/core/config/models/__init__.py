# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Hierarchical configuration models for AEROCAL.

Every field carries an UPPER_CASE alias so configurations can be written
either nested (``experiment: {ensemble_size: 50}``) or flat
(``ENSEMBLE_SIZE: 50``). All models are frozen.
"""

from .experiment import EKIConfig, ExperimentConfig, TruthConfig
from .priors import PriorConfig, default_priors
from .reporting import ReportingConfig
from .root import AerocalConfig
from .scenario import AerosolModeConfig, ScenarioConfig

__all__ = [
    'AerocalConfig',
    'AerosolModeConfig',
    'EKIConfig',
    'ExperimentConfig',
    'PriorConfig',
    'ReportingConfig',
    'ScenarioConfig',
    'TruthConfig',
    'default_priors',
]
