"""Tests for EnsemblePlotter."""

from pathlib import Path

import numpy as np
import pytest

from aerocal.reporting.plotters.ensemble_plotter import EnsemblePlotter

pytestmark = pytest.mark.unit

pytest.importorskip("matplotlib")


@pytest.fixture
def plotter(mock_logger):
    return EnsemblePlotter(logger=mock_logger)


class TestEnsemblePlotter:

    def test_scatter_plot(self, plotter, tmp_path, rng):
        values = rng.normal(size=(5, 3))
        path = plotter.plot_ensemble_scatter(values, tmp_path / 'scatter.svg', 'x')
        assert path == str(tmp_path / 'scatter.svg')
        assert Path(path).stat().st_size > 0

    def test_mean_plot_with_truth(self, plotter, tmp_path, rng):
        values = rng.normal(size=(5, 3))
        path = plotter.plot_ensemble_means(values, tmp_path / 'sub' / 'mean.png', 'x', true_value=0.0)
        assert Path(path).exists()

    def test_failure_returns_none(self, plotter, tmp_path, mock_logger):
        path = plotter.plot_ensemble_means(np.zeros(3), tmp_path / 'bad.svg', 'x')
        assert path is None
        mock_logger.error.assert_called_once()

    def test_plot_parameters(self, plotter, calibrated_run, prior_set, true_parameters, tmp_path):
        history, _, _ = calibrated_run
        plots = plotter.plot_parameters(
            history.parameter_array(prior_set), prior_set, tmp_path,
            true_parameters=true_parameters,
        )
        assert set(plots) == {
            'molar_mass_scatter', 'molar_mass_average',
            'osmotic_coeff_scatter', 'osmotic_coeff_average',
        }
        assert (tmp_path / 'molar_mass_average.svg').exists()
        assert (tmp_path / 'osmotic_coeff_scatter.svg').exists()
