# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Root configuration model.

Groups the section models and validates the cross-section constraints
(prior names versus true parameter names).
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from .base import FROZEN_CONFIG
from .experiment import EKIConfig, ExperimentConfig, TruthConfig
from .priors import PriorConfig, default_priors
from .reporting import ReportingConfig
from .scenario import ScenarioConfig


class AerocalConfig(BaseModel):
    """Complete configuration of one calibration run.

    Example:
        >>> config = AerocalConfig.from_file(Path('config.yaml'))
        >>> config.experiment.ensemble_size
        50
    """
    model_config = FROZEN_CONFIG

    experiment: ExperimentConfig = Field(default_factory=ExperimentConfig)
    eki: EKIConfig = Field(default_factory=EKIConfig)
    truth: TruthConfig = Field(default_factory=TruthConfig)
    priors: List[PriorConfig] = Field(default_factory=default_priors)
    scenario: ScenarioConfig = Field(default_factory=ScenarioConfig)
    reporting: ReportingConfig = Field(default_factory=ReportingConfig)

    @model_validator(mode='after')
    def _check_parameter_names(self) -> 'AerocalConfig':
        names = [p.name for p in self.priors]
        if not names:
            raise ValueError("At least one prior must be configured")
        if len(set(names)) != len(names):
            raise ValueError(f"Prior names must be unique, got {names}")
        true_names = set(self.experiment.true_parameters)
        if true_names != set(names):
            raise ValueError(
                f"TRUE_PARAMETERS keys {sorted(true_names)} do not match "
                f"prior names {sorted(names)}"
            )
        return self

    @property
    def parameter_names(self) -> List[str]:
        return [p.name for p in self.priors]

    @property
    def truth_seed(self) -> int:
        if self.truth.seed is not None:
            return self.truth.seed
        return self.experiment.seed

    @classmethod
    def from_file(
        cls,
        path: Path,
        overrides: Optional[Dict[str, Any]] = None,
        *,
        use_env: bool = True,
    ) -> 'AerocalConfig':
        """Load configuration from a YAML file (see :func:`load_config`)."""
        from aerocal.core.config.loader import load_config
        return load_config(path, overrides, use_env=use_env)

    @classmethod
    def from_minimal(cls, **overrides: Any) -> 'AerocalConfig':
        """Build a configuration from defaults plus flat or nested overrides."""
        from aerocal.core.config.loader import build_config
        return build_config({}, overrides, use_env=False)

    def to_dict(self, flatten: bool = False) -> Dict[str, Any]:
        """Return the configuration as a dict.

        Args:
            flatten: Return flat UPPER_CASE alias keys instead of sections.
        """
        nested = self.model_dump(mode='json')
        if not flatten:
            return nested
        from aerocal.core.config.loader import flatten_config
        return flatten_config(self)
