# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Cloud microphysics needed by the activation forward model.
"""

from .aerosol_activation import (
    critical_supersaturation,
    max_supersaturation,
    total_M_activated,
    total_N_activated,
)
from .aerosol_model import AerosolDistribution, AerosolMode, single_component_mode
from .constants import PhysicalConstants
from .scenario import Scenario
from .thermodynamics import (
    PhasePartition,
    saturation_specific_humidity,
    saturation_vapor_pressure,
)

__all__ = [
    'AerosolDistribution',
    'AerosolMode',
    'PhasePartition',
    'PhysicalConstants',
    'Scenario',
    'critical_supersaturation',
    'max_supersaturation',
    'saturation_specific_humidity',
    'saturation_vapor_pressure',
    'single_component_mode',
    'total_M_activated',
    'total_N_activated',
]
