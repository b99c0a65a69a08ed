# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Aerosol size distribution description.

A mode is a lognormal number distribution of dry particles whose chemical
composition is given per component through mass mixing ratios and the
Köhler solute parameters (osmotic coefficient, molar mass, dissociation).
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from aerocal.core.exceptions import ValidationError, require

from .constants import PhysicalConstants as PC


@dataclass(frozen=True)
class AerosolMode:
    """Lognormal aerosol mode described by its solute properties.

    Attributes:
        r_dry: Geometric mean dry radius (m).
        stdev: Geometric standard deviation (-), > 1.
        N: Number concentration (1/m3).
        mass_mix_ratio: Mass mixing ratio of each component.
        soluble_mass_frac: Soluble mass fraction of each component.
        osmotic_coeff: Osmotic coefficient of each component.
        molar_mass: Molar mass of each component (kg/mol).
        dissoc: Number of ions per dissolved molecule.
        aerosol_density: Density of each component (kg/m3).
    """
    r_dry: float
    stdev: float
    N: float
    mass_mix_ratio: Tuple[float, ...]
    soluble_mass_frac: Tuple[float, ...]
    osmotic_coeff: Tuple[float, ...]
    molar_mass: Tuple[float, ...]
    dissoc: Tuple[float, ...]
    aerosol_density: Tuple[float, ...]

    def __post_init__(self):
        require(self.r_dry > 0, f"Dry radius must be positive, got {self.r_dry}")
        require(self.stdev > 1.0, f"Geometric std must exceed 1, got {self.stdev}")
        require(self.N > 0, f"Number concentration must be positive, got {self.N}")
        n = len(self.mass_mix_ratio)
        for name in ('soluble_mass_frac', 'osmotic_coeff', 'molar_mass',
                     'dissoc', 'aerosol_density'):
            if len(getattr(self, name)) != n:
                raise ValidationError(
                    f"{name} has {len(getattr(self, name))} components, expected {n}"
                )

    @property
    def n_components(self) -> int:
        return len(self.mass_mix_ratio)

    def hygroscopicity(self) -> float:
        """Mean hygroscopicity B of the mode (-)."""
        m = np.asarray(self.mass_mix_ratio)
        nom = np.sum(
            m
            * np.asarray(self.dissoc)
            * np.asarray(self.osmotic_coeff)
            * np.asarray(self.soluble_mass_frac)
            / np.asarray(self.molar_mass)
        )
        den = np.sum(m / np.asarray(self.aerosol_density))
        return float(nom / den * PC.MOLMASS_WATER / PC.RHO_WATER)

    def average_molar_mass(self) -> float:
        """Mass weighted molar mass of the components (kg/mol)."""
        m = np.asarray(self.mass_mix_ratio)
        return float(np.sum(m * np.asarray(self.molar_mass)) / np.sum(m))


@dataclass(frozen=True)
class AerosolDistribution:
    """Collection of externally mixed aerosol modes."""
    modes: Tuple[AerosolMode, ...]

    def __post_init__(self):
        require(len(self.modes) > 0, "An aerosol distribution needs at least one mode")

    def __len__(self) -> int:
        return len(self.modes)

    def __iter__(self):
        return iter(self.modes)


def single_component_mode(
    r_dry: float,
    stdev: float,
    N: float,
    osmotic_coeff: float,
    molar_mass: float,
    dissoc: float,
    aerosol_density: float,
    soluble_mass_frac: float = 1.0,
) -> AerosolMode:
    """Build a mode made of one chemical component."""
    return AerosolMode(
        r_dry=r_dry,
        stdev=stdev,
        N=N,
        mass_mix_ratio=(1.0,),
        soluble_mass_frac=(soluble_mass_frac,),
        osmotic_coeff=(osmotic_coeff,),
        molar_mass=(molar_mass,),
        dissoc=(dissoc,),
        aerosol_density=(aerosol_density,),
    )
