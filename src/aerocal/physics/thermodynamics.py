# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Moist thermodynamics helpers.

Saturation vapour pressure over liquid water integrates the
Clausius-Clapeyron relation with a latent heat that varies linearly with
temperature, anchored at the triple point.
"""

from dataclasses import dataclass

import numpy as np

from .constants import PhysicalConstants as PC


@dataclass(frozen=True)
class PhasePartition:
    """Specific humidities (kg/kg) of total water, liquid and ice."""
    tot: float
    liq: float = 0.0
    ice: float = 0.0

    @property
    def vap(self) -> float:
        return self.tot - self.liq - self.ice


def latent_heat_vapor(temperature):
    """Latent heat of vaporization (J/kg) at temperature (K)."""
    return PC.LH_V0 + (PC.CP_V - PC.CP_L) * (temperature - PC.T_0)


def saturation_vapor_pressure(temperature):
    """Saturation vapour pressure over liquid water (Pa).

    Args:
        temperature: Air temperature in K (scalar or array).
    """
    delta_cp = PC.CP_V - PC.CP_L
    return (
        PC.PRESS_TRIPLE
        * (temperature / PC.T_TRIPLE) ** (delta_cp / PC.R_V)
        * np.exp(
            (PC.LH_V0 - delta_cp * PC.T_0) / PC.R_V
            * (1.0 / PC.T_TRIPLE - 1.0 / temperature)
        )
    )


def saturation_specific_humidity(temperature, pressure):
    """Specific humidity (kg/kg) of air saturated over liquid water."""
    p_vs = saturation_vapor_pressure(temperature)
    return 1.0 / (1.0 - PC.MOLMASS_RATIO * (p_vs - pressure) / p_vs)


def cp_moist(q: PhasePartition) -> float:
    """Isobaric specific heat of moist air (J/(kg K))."""
    return (
        PC.CP_D
        + (PC.CP_V - PC.CP_D) * q.tot
        + (PC.CP_L - PC.CP_V) * q.liq
    )


def diffusional_growth_factor(temperature):
    """Thermodynamic factor G (kg/(m s)) of diffusional droplet growth.

    Combines the heat conduction and vapour diffusion resistances; divide
    by the water density to get the growth coefficient in m2/s.
    """
    L = latent_heat_vapor(temperature)
    p_vs = saturation_vapor_pressure(temperature)
    heat_term = L / PC.K_THERM / temperature * (L / PC.R_V / temperature - 1.0)
    vapor_term = PC.R_V * temperature / PC.D_VAPOR / p_vs
    return 1.0 / (heat_term + vapor_term)
