# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Atmospheric and aerosol scenario configuration models.

Defaults describe a single lognormal Aitken-size sea salt mode lifted at
0.5 m/s in saturated air at 283.15 K and 1000 hPa, so that only part of
the mode activates.
"""

from typing import Optional

from pydantic import BaseModel, Field

from .base import FROZEN_CONFIG


class AerosolModeConfig(BaseModel):
    """Lognormal aerosol mode with a single chemical component."""
    model_config = FROZEN_CONFIG

    dry_radius: float = Field(default=0.02e-6, alias='AEROSOL_DRY_RADIUS', gt=0)
    geometric_std: float = Field(default=1.4, alias='AEROSOL_GEOMETRIC_STD', gt=1.0)
    number_concentration: float = Field(
        default=100.0 * 1e6, alias='AEROSOL_NUMBER_CONCENTRATION', gt=0,
        description='1/m3 (100 per cm3)'
    )
    dissociation: float = Field(default=2.0, alias='AEROSOL_DISSOCIATION', gt=0)
    soluble_mass_fraction: float = Field(
        default=1.0, alias='AEROSOL_SOLUBLE_MASS_FRACTION', gt=0, le=1.0
    )
    density: float = Field(default=2170.0, alias='AEROSOL_DENSITY', gt=0)
    molar_mass: float = Field(default=0.058443, alias='AEROSOL_MOLAR_MASS', gt=0)
    osmotic_coeff: float = Field(default=0.9, alias='AEROSOL_OSMOTIC_COEFF', gt=0)


class ScenarioConfig(BaseModel):
    """Air parcel conditions for the activation calculation."""
    model_config = FROZEN_CONFIG

    temperature: float = Field(default=283.15, alias='AIR_TEMPERATURE', gt=0)
    pressure: float = Field(default=1e5, alias='AIR_PRESSURE', gt=0)
    vertical_velocity: float = Field(default=0.5, alias='VERTICAL_VELOCITY', gt=0)
    specific_humidity: Optional[float] = Field(
        default=None, alias='SPECIFIC_HUMIDITY', ge=0,
        description='kg/kg; saturation value when unset'
    )
    aerosol: AerosolModeConfig = Field(default_factory=AerosolModeConfig)
