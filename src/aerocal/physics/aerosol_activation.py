# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Aerosol activation parameterization.

Implements the Abdul-Razzak & Ghan (2000) scheme: the maximum
supersaturation reached in an adiabatically lifted parcel is estimated in
closed form from the aerosol modes, and every particle whose critical
supersaturation lies below it is counted as activated.

References:
    Abdul-Razzak, H. & Ghan, S.J. (2000). A parameterization of aerosol
    activation: 2. Multiple aerosol types. J. Geophys. Res., 105(D5),
    6837-6844.
"""

import numpy as np
from scipy.special import erf

from .aerosol_model import AerosolDistribution, AerosolMode
from .constants import PhysicalConstants as PC
from .thermodynamics import (
    PhasePartition,
    cp_moist,
    diffusional_growth_factor,
    latent_heat_vapor,
    saturation_vapor_pressure,
)


def coeff_of_curvature(temperature: float) -> float:
    """Kelvin (curvature) coefficient A of Köhler theory (m)."""
    return (
        2.0 * PC.SURFACE_TENSION * PC.MOLMASS_WATER
        / (PC.RHO_WATER * PC.GAS_CONSTANT * temperature)
    )


def critical_supersaturation(ad: AerosolDistribution, temperature: float) -> np.ndarray:
    """Critical supersaturation of the mean dry radius of each mode (-)."""
    A = coeff_of_curvature(temperature)
    return np.array([
        2.0 / np.sqrt(mode.hygroscopicity()) * (A / 3.0 / mode.r_dry) ** 1.5
        for mode in ad
    ])


def max_supersaturation(
    ad: AerosolDistribution,
    temperature: float,
    pressure: float,
    updraft: float,
    q: PhasePartition,
) -> float:
    """Maximum supersaturation reached by the rising parcel (-).

    Args:
        ad: Aerosol distribution.
        temperature: Air temperature (K).
        pressure: Air pressure (Pa).
        updraft: Vertical velocity (m/s).
        q: Humidity partition (kg/kg).
    """
    T = temperature
    L = latent_heat_vapor(T)
    p_vs = saturation_vapor_pressure(T)
    G = diffusional_growth_factor(T) / PC.RHO_WATER
    cp = cp_moist(q)

    # Parcel cooling rate and condensation coefficients (ARG2000 eqs. 11-12)
    alpha = (
        PC.GRAVITY * PC.MOLMASS_WATER * L / (cp * PC.GAS_CONSTANT * T ** 2)
        - PC.GRAVITY * PC.MOLMASS_DRYAIR / (PC.GAS_CONSTANT * T)
    )
    gamma = (
        PC.GAS_CONSTANT * T / (p_vs * PC.MOLMASS_WATER)
        + PC.MOLMASS_WATER * L ** 2 / (cp * pressure * PC.MOLMASS_DRYAIR * T)
    )

    A = coeff_of_curvature(T)
    zeta = 2.0 * A / 3.0 * np.sqrt(alpha * updraft / G)
    s_crit = critical_supersaturation(ad, T)

    tmp = 0.0
    for mode, sm in zip(ad, s_crit):
        eta = (alpha * updraft / G) ** 1.5 / (2.0 * np.pi * PC.RHO_WATER * gamma * mode.N)
        log_std = np.log(mode.stdev)
        f = 0.5 * np.exp(2.5 * log_std ** 2)
        g = 1.0 + 0.25 * log_std
        tmp += 1.0 / sm ** 2 * (
            f * (zeta / eta) ** 1.5
            + g * (sm ** 2 / (eta + 3.0 * zeta)) ** 0.75
        )

    return float(1.0 / np.sqrt(tmp))


def _activation_argument(mode: AerosolMode, sm: float, smax: float) -> float:
    return 2.0 * np.log(sm / smax) / 3.0 / np.sqrt(2.0) / np.log(mode.stdev)


def N_activated_per_mode(ad, temperature, pressure, updraft, q) -> np.ndarray:
    """Number concentration of activated particles in each mode (1/m3)."""
    smax = max_supersaturation(ad, temperature, pressure, updraft, q)
    s_crit = critical_supersaturation(ad, temperature)
    return np.array([
        mode.N * 0.5 * (1.0 - erf(_activation_argument(mode, sm, smax)))
        for mode, sm in zip(ad, s_crit)
    ])


def activated_mass_fraction(ad, temperature, pressure, updraft, q) -> np.ndarray:
    """Fraction of the dry aerosol mass of each mode that activates (-)."""
    smax = max_supersaturation(ad, temperature, pressure, updraft, q)
    s_crit = critical_supersaturation(ad, temperature)
    fractions = []
    for mode, sm in zip(ad, s_crit):
        # The mass distribution is the number distribution shifted by 3 ln^2(sigma)
        u = _activation_argument(mode, sm, smax) - 3.0 / np.sqrt(2.0) * np.log(mode.stdev)
        fractions.append(0.5 * (1.0 - erf(u)))
    return np.array(fractions)


def M_activated_per_mode(ad, temperature, pressure, updraft, q) -> np.ndarray:
    """Activated molar mass of each mode (kg/mol).

    The mode's mass weighted molar mass scaled by the fraction of its dry
    mass that activates.
    """
    fractions = activated_mass_fraction(ad, temperature, pressure, updraft, q)
    return np.array([mode.average_molar_mass() * f for mode, f in zip(ad, fractions)])


def total_N_activated(ad, temperature, pressure, updraft, q) -> float:
    """Total activated number concentration (1/m3)."""
    return float(np.sum(N_activated_per_mode(ad, temperature, pressure, updraft, q)))


def total_M_activated(ad, temperature, pressure, updraft, q) -> float:
    """Activated molar mass summed over the modes (kg/mol)."""
    return float(np.sum(M_activated_per_mode(ad, temperature, pressure, updraft, q)))
