"""Tests for the NetCDF output writer."""

import numpy as np
import pytest

from aerocal.calibration.driver import CalibrationDriver
from aerocal.calibration.output import CalibrationOutputManager

pytestmark = pytest.mark.unit

xr = pytest.importorskip("xarray")
pytest.importorskip("netCDF4")


@pytest.fixture
def run(prior_set, surrogate_model):
    driver = CalibrationDriver()
    truth = driver.generate_truth(surrogate_model, [0.058443, 0.9], 0.01, 10, seed=44)
    history = driver.run(prior_set, surrogate_model, truth, 6, 3, seed=44)
    return history, truth


class TestCalibrationOutputManager:

    def test_dataset_layout(self, run, prior_set, true_parameters):
        history, truth = run
        ds = CalibrationOutputManager().build_dataset(history, prior_set, truth, true_parameters)
        assert ds['parameters'].dims == ('parameter', 'member', 'iteration')
        assert ds['parameters'].shape == (2, 6, 4)
        assert ds['forward_outputs'].shape == (3, 6, 2)
        assert list(ds['observable'].values) == ['N_act', 'M_act']
        assert ds.attrs['n_iterations'] == 3
        np.testing.assert_allclose(ds['true_value'].values, [0.058443, 0.9])

    def test_write_and_reopen(self, run, prior_set, true_parameters, tmp_path):
        history, truth = run
        path = CalibrationOutputManager().write(
            tmp_path / 'nested' / 'run.nc', history, prior_set, truth, true_parameters,
            attrs={'experiment': 'test'},
        )
        assert path.exists()
        with xr.open_dataset(path) as ds:
            assert ds.attrs['Conventions'] == 'CF-1.6'
            assert ds.attrs['experiment'] == 'test'
            np.testing.assert_allclose(
                ds['parameters'].values, history.parameter_array(prior_set)
            )
            np.testing.assert_allclose(ds['truth_sample'].values, truth.sample)

    def test_without_truth(self, run, prior_set):
        history, _ = run
        ds = CalibrationOutputManager().build_dataset(history, prior_set)
        assert 'forward_outputs' not in ds
        assert 'true_value' not in ds
