"""Tests for parameter priors and constraint transforms."""

import numpy as np
import pytest

from aerocal.calibration.priors import (
    Bounded,
    BoundedAbove,
    BoundedBelow,
    NoConstraint,
    ParameterPrior,
    PriorSet,
    make_constraint,
)
from aerocal.core.config.models import PriorConfig
from aerocal.core.exceptions import DimensionMismatchError, InvalidPriorError

pytestmark = pytest.mark.unit


class TestConstraints:
    """Constraint transforms are invertible and map into the support."""

    @pytest.mark.parametrize("constraint", [
        NoConstraint(),
        BoundedBelow(0.0),
        BoundedBelow(-2.5),
        BoundedAbove(1.0),
        Bounded(0.0, 1.0),
        Bounded(-3.0, 7.0),
    ])
    def test_round_trip(self, constraint):
        u = np.linspace(-4.0, 4.0, 17)
        x = constraint.to_constrained(u)
        assert constraint.contains(x)
        np.testing.assert_allclose(constraint.to_unconstrained(x), u, atol=1e-9)

    def test_bounded_below_formula(self):
        assert BoundedBelow(0.0).to_constrained(0.0) == pytest.approx(1.0)
        assert BoundedBelow(2.0).to_constrained(np.log(3.0)) == pytest.approx(5.0)

    def test_bounded_above_formula(self):
        assert BoundedAbove(1.0).to_constrained(0.0) == pytest.approx(0.0)

    def test_bounded_midpoint(self):
        assert Bounded(2.0, 4.0).to_constrained(0.0) == pytest.approx(3.0)

    def test_transforms_are_monotonic(self):
        u = np.linspace(-3.0, 3.0, 50)
        for constraint in (BoundedBelow(0.0), Bounded(0.0, 1.0)):
            assert np.all(np.diff(constraint.to_constrained(u)) > 0)
        assert np.all(np.diff(BoundedAbove(0.0).to_constrained(u)) < 0)

    def test_empty_interval_rejected(self):
        with pytest.raises(InvalidPriorError):
            Bounded(1.0, 1.0).validate()

    def test_make_constraint(self):
        assert make_constraint('none') == NoConstraint()
        assert make_constraint('bounded_below', lower=0.0) == BoundedBelow(0.0)
        assert make_constraint('bounded', 0.0, 2.0) == Bounded(0.0, 2.0)

    def test_make_constraint_missing_bound(self):
        with pytest.raises(InvalidPriorError, match="upper bound"):
            make_constraint('bounded_above')

    def test_make_constraint_unknown(self):
        with pytest.raises(InvalidPriorError, match="Unknown constraint"):
            make_constraint('logit')


class TestParameterPrior:

    def test_non_positive_scale_rejected(self):
        with pytest.raises(InvalidPriorError, match="scale"):
            ParameterPrior('a', 0.0, 0.0)
        with pytest.raises(InvalidPriorError):
            ParameterPrior('a', 0.0, -1.0)

    def test_non_finite_mean_rejected(self):
        with pytest.raises(InvalidPriorError, match="mean"):
            ParameterPrior('a', np.nan, 1.0)

    def test_empty_bounds_rejected(self):
        with pytest.raises(InvalidPriorError):
            ParameterPrior('a', 0.0, 1.0, Bounded(2.0, 1.0))

    def test_sample_is_seeded(self):
        prior = ParameterPrior('a', 1.0, 2.0)
        first = prior.sample(100, np.random.default_rng(3))
        second = prior.sample(100, np.random.default_rng(3))
        np.testing.assert_array_equal(first, second)
        assert first.shape == (100,)

    def test_sample_moments(self):
        prior = ParameterPrior('a', 1.0, 2.0)
        draws = prior.sample(20000, np.random.default_rng(0))
        assert draws.mean() == pytest.approx(1.0, abs=0.05)
        assert draws.std() == pytest.approx(2.0, rel=0.05)

    def test_display_name(self):
        assert ParameterPrior('m', label='Molar mass', units='kg/mol').display_name == 'Molar mass [kg/mol]'
        assert ParameterPrior('m').display_name == 'm'

    def test_from_config(self):
        config = PriorConfig(name='phi', mean=0.5, std=2.0, constraint='bounded', lower=0.0, upper=1.0)
        prior = ParameterPrior.from_config(config)
        assert prior.constraint == Bounded(0.0, 1.0)
        assert prior.std == 2.0


class TestPriorSet:

    def test_layout_and_lookup(self, prior_set):
        assert len(prior_set) == 2
        assert prior_set.names == ['molar_mass', 'osmotic_coeff']
        assert prior_set['osmotic_coeff'].name == 'osmotic_coeff'
        assert prior_set[0].name == 'molar_mass'
        assert prior_set.index('osmotic_coeff') == 1

    def test_empty_set_rejected(self):
        with pytest.raises(InvalidPriorError):
            PriorSet([])

    def test_duplicate_names_rejected(self):
        with pytest.raises(InvalidPriorError, match="unique"):
            PriorSet([ParameterPrior('a'), ParameterPrior('a')])

    def test_matrix_transform(self, prior_set):
        u = np.array([[0.0, 0.0], [np.log(2.0), np.log(0.5)]])
        x = prior_set.to_constrained(u)
        np.testing.assert_allclose(x, [[1.0, 1.0], [2.0, 0.5]])
        np.testing.assert_allclose(prior_set.to_unconstrained(x), u)

    def test_transform_does_not_modify_input(self, prior_set):
        u = np.zeros((3, 2))
        prior_set.to_constrained(u)
        np.testing.assert_array_equal(u, 0.0)

    def test_wrong_width_rejected(self, prior_set):
        with pytest.raises(DimensionMismatchError):
            prior_set.to_constrained(np.zeros((4, 3)))

    def test_value_outside_support_rejected(self, prior_set):
        with pytest.raises(InvalidPriorError, match="support"):
            prior_set.to_unconstrained(np.array([-1.0, 0.5]))

    def test_sample_shape(self, prior_set):
        draws = prior_set.sample(7, np.random.default_rng(0))
        assert draws.shape == (7, 2)

    def test_as_vector(self, prior_set, true_parameters):
        np.testing.assert_allclose(prior_set.as_vector(true_parameters), [0.058443, 0.9])
        with pytest.raises(DimensionMismatchError):
            prior_set.as_vector({'molar_mass': 1.0})
