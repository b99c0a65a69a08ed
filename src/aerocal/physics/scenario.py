# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Fixed atmospheric and aerosol conditions of an activation experiment.
"""

from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from .aerosol_model import AerosolDistribution, AerosolMode, single_component_mode
from .thermodynamics import PhasePartition, saturation_specific_humidity

if TYPE_CHECKING:
    from aerocal.core.config.models import ScenarioConfig


@dataclass(frozen=True)
class Scenario:
    """Air parcel state and the calibrated aerosol's fixed properties.

    The molar mass and osmotic coefficient stored here are defaults; a
    forward model overrides them with the values being calibrated.
    """
    temperature: float = 283.15
    pressure: float = 1e5
    vertical_velocity: float = 0.5
    r_dry: float = 0.02e-6
    stdev: float = 1.4
    N: float = 100.0 * 1e6
    dissoc: float = 2.0
    soluble_mass_frac: float = 1.0
    aerosol_density: float = 2170.0
    molar_mass: float = 0.058443
    osmotic_coeff: float = 0.9
    specific_humidity: Optional[float] = None
    q: PhasePartition = field(init=False)

    def __post_init__(self):
        q_tot = self.specific_humidity
        if q_tot is None:
            q_tot = float(saturation_specific_humidity(self.temperature, self.pressure))
        object.__setattr__(self, 'q', PhasePartition(q_tot, 0.0, 0.0))

    @classmethod
    def from_config(cls, config: 'ScenarioConfig') -> 'Scenario':
        aerosol = config.aerosol
        return cls(
            temperature=config.temperature,
            pressure=config.pressure,
            vertical_velocity=config.vertical_velocity,
            r_dry=aerosol.dry_radius,
            stdev=aerosol.geometric_std,
            N=aerosol.number_concentration,
            dissoc=aerosol.dissociation,
            soluble_mass_frac=aerosol.soluble_mass_fraction,
            aerosol_density=aerosol.density,
            molar_mass=aerosol.molar_mass,
            osmotic_coeff=aerosol.osmotic_coeff,
            specific_humidity=config.specific_humidity,
        )

    def aerosol_mode(
        self,
        molar_mass: Optional[float] = None,
        osmotic_coeff: Optional[float] = None,
    ) -> AerosolMode:
        return single_component_mode(
            r_dry=self.r_dry,
            stdev=self.stdev,
            N=self.N,
            osmotic_coeff=self.osmotic_coeff if osmotic_coeff is None else osmotic_coeff,
            molar_mass=self.molar_mass if molar_mass is None else molar_mass,
            dissoc=self.dissoc,
            aerosol_density=self.aerosol_density,
            soluble_mass_frac=self.soluble_mass_frac,
        )

    def aerosol_distribution(self, **overrides) -> AerosolDistribution:
        return AerosolDistribution((self.aerosol_mode(**overrides),))
