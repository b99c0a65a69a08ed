# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Physical constants for the thermodynamics and activation calculations.

Values follow the Earth parameter set commonly used with the ARG2000
activation scheme.
"""


class PhysicalConstants:
    """
    Earth and water constants in SI units.
    """

    GAS_CONSTANT = 8.3144598
    """Universal gas constant, J/(mol K)."""

    MOLMASS_WATER = 18.01528e-3
    """Molar mass of water, kg/mol."""

    MOLMASS_DRYAIR = 28.97e-3
    """Molar mass of dry air, kg/mol."""

    R_V = GAS_CONSTANT / MOLMASS_WATER
    """Specific gas constant of water vapour, J/(kg K)."""

    R_D = GAS_CONSTANT / MOLMASS_DRYAIR
    """Specific gas constant of dry air, J/(kg K)."""

    MOLMASS_RATIO = MOLMASS_DRYAIR / MOLMASS_WATER
    """Ratio of dry air to water vapour molar masses."""

    GRAVITY = 9.81
    """Gravitational acceleration, m/s2."""

    CP_D = R_D / 0.2857
    """Isobaric specific heat of dry air (R_d / kappa_d), J/(kg K)."""

    CP_V = 1859.0
    """Isobaric specific heat of water vapour, J/(kg K)."""

    CP_L = 4181.0
    """Isobaric specific heat of liquid water, J/(kg K)."""

    LH_V0 = 2.5008e6
    """Latent heat of vaporization at T_0, J/kg."""

    T_0 = 273.16
    """Reference temperature for latent heats, K."""

    T_TRIPLE = 273.16
    """Triple point temperature of water, K."""

    PRESS_TRIPLE = 611.657
    """Triple point vapour pressure of water, Pa."""

    RHO_WATER = 1000.0
    """Density of cloud liquid water, kg/m3."""

    SURFACE_TENSION = 0.072
    """Surface tension of water against air, N/m."""

    K_THERM = 2.4e-2
    """Thermal conductivity of air, J/(m s K)."""

    D_VAPOR = 2.26e-5
    """Diffusivity of water vapour in air, m2/s."""
