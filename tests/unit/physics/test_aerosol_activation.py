"""Tests for the ARG2000 aerosol activation parameterization."""

import numpy as np
import pytest

from aerocal.core.exceptions import ValidationError
from aerocal.physics import aerosol_activation as aa
from aerocal.physics.aerosol_model import AerosolDistribution, AerosolMode, single_component_mode
from aerocal.physics.scenario import Scenario
from aerocal.physics.thermodynamics import saturation_specific_humidity

pytestmark = pytest.mark.unit


def activation(scenario, **overrides):
    ad = scenario.aerosol_distribution(**overrides)
    args = (ad, scenario.temperature, scenario.pressure, scenario.vertical_velocity, scenario.q)
    return aa.total_N_activated(*args), aa.total_M_activated(*args)


class TestAerosolMode:

    def test_sea_salt_hygroscopicity(self, scenario):
        assert scenario.aerosol_mode().hygroscopicity() == pytest.approx(1.204, rel=1e-3)

    def test_average_molar_mass(self):
        mode = AerosolMode(
            1e-7, 1.5, 1e8, (0.25, 0.75), (1.0, 1.0), (0.9, 0.9),
            (0.058, 0.132), (2.0, 3.0), (2170.0, 1770.0),
        )
        assert mode.average_molar_mass() == pytest.approx(0.25 * 0.058 + 0.75 * 0.132)

    def test_invalid_geometric_std(self):
        with pytest.raises(ValidationError):
            single_component_mode(1e-7, 1.0, 1e8, 0.9, 0.058, 2.0, 2170.0)

    def test_component_count_mismatch(self):
        with pytest.raises(ValidationError):
            AerosolMode(1e-7, 1.5, 1e8, (0.5, 0.5), (1.0,), (0.9,), (0.058,), (2.0,), (2170.0,))

    def test_empty_distribution(self):
        with pytest.raises(ValidationError):
            AerosolDistribution(())


class TestSupersaturation:

    def test_critical_decreases_with_hygroscopicity(self, scenario):
        low = aa.critical_supersaturation(scenario.aerosol_distribution(osmotic_coeff=0.5), 283.15)
        high = aa.critical_supersaturation(scenario.aerosol_distribution(osmotic_coeff=1.0), 283.15)
        assert high[0] < low[0]

    def test_max_supersaturation_increases_with_updraft(self, scenario):
        ad = scenario.aerosol_distribution()
        s = [aa.max_supersaturation(ad, 283.15, 1e5, w, scenario.q) for w in (0.1, 1.0, 5.0)]
        assert s[0] < s[1] < s[2]

    def test_max_supersaturation_decreases_with_number(self):
        few = Scenario(N=1e7)
        many = Scenario(N=1e9)
        s_few = aa.max_supersaturation(few.aerosol_distribution(), 283.15, 1e5, 0.5, few.q)
        s_many = aa.max_supersaturation(many.aerosol_distribution(), 283.15, 1e5, 0.5, many.q)
        assert s_many < s_few


class TestActivation:

    def test_bounded_by_totals(self, scenario):
        n_act, m_act = activation(scenario)
        assert 0.0 < n_act <= scenario.N
        assert 0.0 < m_act <= scenario.molar_mass

    def test_default_scenario_activates_partially(self, scenario):
        n_act, m_act = activation(scenario)
        assert 0.4 < n_act / scenario.N < 0.85
        # Large particles carry most of the mass, so the mass fraction is higher
        assert n_act / scenario.N < m_act / scenario.molar_mass < 1.0

    def test_activation_increases_with_updraft(self):
        values = [activation(Scenario(vertical_velocity=w))[0] for w in (0.01, 0.1, 1.0)]
        assert np.all(np.diff(values) >= 0.0)
        assert values[0] < values[-1]

    def test_number_depends_on_solute_ratio_only(self, scenario):
        base = activation(scenario, molar_mass=0.058443, osmotic_coeff=0.9)
        scaled = activation(scenario, molar_mass=2 * 0.058443, osmotic_coeff=2 * 0.9)
        assert scaled[0] == pytest.approx(base[0], rel=1e-10)
        assert scaled[1] == pytest.approx(2.0 * base[1], rel=1e-10)

    def test_both_outputs_respond_to_hygroscopicity(self, scenario):
        low = activation(scenario, osmotic_coeff=0.6)
        high = activation(scenario, osmotic_coeff=1.2)
        assert high[0] > low[0]
        assert high[1] > low[1]

    def test_mass_fraction_exceeds_number_fraction(self, scenario):
        ad = scenario.aerosol_distribution()
        args = (ad, scenario.temperature, scenario.pressure, scenario.vertical_velocity, scenario.q)
        mass_fraction = aa.activated_mass_fraction(*args)
        number_fraction = aa.N_activated_per_mode(*args) / scenario.N
        assert mass_fraction[0] > number_fraction[0]

    def test_per_mode_sums(self, scenario):
        ad = AerosolDistribution((scenario.aerosol_mode(), scenario.aerosol_mode()))
        args = (ad, scenario.temperature, scenario.pressure, 1.0, scenario.q)
        per_mode = aa.N_activated_per_mode(*args)
        assert per_mode.shape == (2,)
        assert aa.total_N_activated(*args) == pytest.approx(per_mode.sum())
        assert aa.total_M_activated(*args) == pytest.approx(aa.M_activated_per_mode(*args).sum())


class TestScenario:

    def test_saturated_by_default(self, scenario):
        expected = saturation_specific_humidity(scenario.temperature, scenario.pressure)
        assert scenario.q.tot == pytest.approx(expected)
        assert scenario.q.liq == 0.0

    def test_explicit_humidity(self):
        assert Scenario(specific_humidity=0.005).q.tot == 0.005

    def test_overrides(self, scenario):
        mode = scenario.aerosol_mode(molar_mass=0.1)
        assert mode.molar_mass == (0.1,)
        assert mode.osmotic_coeff == (scenario.osmotic_coeff,)

    def test_from_config(self):
        from aerocal.core.config import AerocalConfig
        config = AerocalConfig.from_minimal(AIR_TEMPERATURE=290.0, AEROSOL_DRY_RADIUS=1e-7)
        scenario = Scenario.from_config(config.scenario)
        assert scenario.temperature == 290.0
        assert scenario.r_dry == 1e-7
