"""Tests for moist thermodynamics helpers."""

import numpy as np
import pytest

from aerocal.physics.constants import PhysicalConstants as PC
from aerocal.physics.thermodynamics import (
    PhasePartition,
    cp_moist,
    diffusional_growth_factor,
    latent_heat_vapor,
    saturation_specific_humidity,
    saturation_vapor_pressure,
)

pytestmark = pytest.mark.unit


class TestSaturation:

    def test_triple_point(self):
        assert saturation_vapor_pressure(PC.T_TRIPLE) == pytest.approx(PC.PRESS_TRIPLE)

    def test_reference_value(self):
        # About 12.3 hPa at 10 degC
        assert saturation_vapor_pressure(283.15) == pytest.approx(1228.0, rel=0.02)

    def test_increases_with_temperature(self):
        temperatures = np.linspace(250.0, 310.0, 20)
        assert np.all(np.diff(saturation_vapor_pressure(temperatures)) > 0)

    def test_saturation_specific_humidity(self):
        q = saturation_specific_humidity(283.15, 1e5)
        assert q == pytest.approx(0.0076, rel=0.05)

    def test_specific_humidity_decreases_with_pressure(self):
        assert saturation_specific_humidity(283.15, 8e4) > saturation_specific_humidity(283.15, 1e5)


class TestHeat:

    def test_latent_heat_reference(self):
        assert latent_heat_vapor(PC.T_0) == pytest.approx(PC.LH_V0)

    def test_latent_heat_decreases_with_temperature(self):
        assert latent_heat_vapor(300.0) < latent_heat_vapor(280.0)

    def test_cp_moist_dry_air(self):
        assert cp_moist(PhasePartition(0.0)) == pytest.approx(PC.CP_D)

    def test_cp_moist_increases_with_vapour(self):
        assert cp_moist(PhasePartition(0.01)) > PC.CP_D

    def test_growth_factor_positive(self):
        assert diffusional_growth_factor(283.15) > 0.0


class TestPhasePartition:

    def test_vapour(self):
        q = PhasePartition(0.01, 0.002, 0.001)
        assert q.vap == pytest.approx(0.007)
