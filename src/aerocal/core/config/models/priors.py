# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Prior distribution configuration models.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from .base import FROZEN_CONFIG

ConstraintType = Literal['none', 'bounded_below', 'bounded_above', 'bounded']


class PriorConfig(BaseModel):
    """One calibrated parameter: unconstrained Gaussian plus constraint."""
    model_config = FROZEN_CONFIG

    name: str
    mean: float = 0.0
    std: float = Field(default=1.0, gt=0)
    constraint: ConstraintType = 'bounded_below'
    lower: Optional[float] = 0.0
    upper: Optional[float] = None
    label: Optional[str] = None
    units: Optional[str] = None

    @model_validator(mode='after')
    def _check_bounds(self) -> 'PriorConfig':
        if self.constraint in ('bounded_below', 'bounded') and self.lower is None:
            raise ValueError(f"Prior '{self.name}': constraint '{self.constraint}' needs 'lower'")
        if self.constraint in ('bounded_above', 'bounded') and self.upper is None:
            raise ValueError(f"Prior '{self.name}': constraint '{self.constraint}' needs 'upper'")
        if self.constraint == 'bounded' and not self.lower < self.upper:
            raise ValueError(
                f"Prior '{self.name}': lower bound {self.lower} must be below upper bound {self.upper}"
            )
        return self


def default_priors() -> List[PriorConfig]:
    """Standard normal priors bounded below at zero for the sea salt example."""
    return [
        PriorConfig(name='molar_mass', label='Molar mass', units='kg/mol'),
        PriorConfig(name='osmotic_coeff', label='Osmotic coefficient', units='-'),
    ]
