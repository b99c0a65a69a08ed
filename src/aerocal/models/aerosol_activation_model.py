# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Aerosol activation forward model.

Maps the calibrated aerosol solute parameters to the number concentration
and the molar mass of activated particles in a fixed scenario using the
Abdul-Razzak & Ghan (2000) parameterization.
"""

from typing import Sequence

import numpy as np

from aerocal.calibration.forward_model import ForwardModel
from aerocal.core.exceptions import DimensionMismatchError
from aerocal.physics.aerosol_activation import total_M_activated, total_N_activated
from aerocal.physics.scenario import Scenario

CALIBRATABLE_PARAMETERS = ('molar_mass', 'osmotic_coeff')

# kg/mol -> g/mol
MOLAR_MASS_OUTPUT_SCALE = 1e3


class AerosolActivationModel(ForwardModel):
    """Forward model ``[molar_mass, osmotic_coeff] -> [N_act, M_act]``.

    ``N_act`` is in 1/m3 and ``M_act`` in g/mol. The gram unit keeps the
    noise of a relative noise variance small next to ``M_act``.

    Args:
        scenario: Fixed air parcel and aerosol properties.
        parameter_names: Order of the calibrated parameters in the input
            vector; any subset of ``molar_mass`` and ``osmotic_coeff``.
            Parameters not listed keep the scenario defaults.
    """

    output_names = ('N_act', 'M_act')

    def __init__(
        self,
        scenario: Scenario,
        parameter_names: Sequence[str] = CALIBRATABLE_PARAMETERS,
    ):
        unknown = set(parameter_names) - set(CALIBRATABLE_PARAMETERS)
        if unknown:
            raise ValueError(
                f"Cannot calibrate {sorted(unknown)}; supported parameters are "
                f"{list(CALIBRATABLE_PARAMETERS)}"
            )
        if len(set(parameter_names)) != len(parameter_names):
            raise ValueError(f"Duplicate parameter names: {list(parameter_names)}")
        self.scenario = scenario
        self.parameter_names = tuple(parameter_names)

    def __repr__(self) -> str:
        return f"AerosolActivationModel(parameters={list(self.parameter_names)})"

    def evaluate(self, parameters: np.ndarray) -> np.ndarray:
        parameters = np.atleast_1d(np.asarray(parameters, dtype=float))
        if parameters.shape != (len(self.parameter_names),):
            raise DimensionMismatchError(
                f"Expected {len(self.parameter_names)} parameters "
                f"{list(self.parameter_names)}, got shape {parameters.shape}"
            )
        overrides = {name: float(value) for name, value in zip(self.parameter_names, parameters)}

        sc = self.scenario
        ad = sc.aerosol_distribution(**overrides)
        args = (ad, sc.temperature, sc.pressure, sc.vertical_velocity, sc.q)
        return np.array([
            total_N_activated(*args),
            total_M_activated(*args) * MOLAR_MASS_OUTPUT_SCALE,
        ])
