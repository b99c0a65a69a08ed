"""
Root conftest.py - fixtures shared across all tests.

Provides small configurations, prior sets and a cheap forward model so
unit tests stay fast; the aerosol activation model itself is exercised
in the physics, models and integration tests.
"""

import logging
import os

import numpy as np
import pytest

from aerocal.calibration.forward_model import CallableForwardModel
from aerocal.calibration.priors import BoundedBelow, ParameterPrior, PriorSet
from aerocal.core.config import AerocalConfig
from aerocal.physics.scenario import Scenario

TRUE_MOLAR_MASS = 0.058443
TRUE_OSMOTIC_COEFF = 0.9


def log_ratio_outputs(parameters):
    """Identifiable stand-in for the activation model.

    Linear in the log-transformed parameters:
    ``1000 * [10 + log(phi / M), 10 + log(phi * M)]``.
    """
    molar_mass, osmotic_coeff = parameters
    return 1000.0 * np.array([
        10.0 + np.log(osmotic_coeff / molar_mass),
        10.0 + np.log(osmotic_coeff * molar_mass),
    ])


@pytest.fixture
def true_parameters():
    return {'molar_mass': TRUE_MOLAR_MASS, 'osmotic_coeff': TRUE_OSMOTIC_COEFF}


@pytest.fixture
def prior_set():
    """Two standard-normal priors bounded below at 0."""
    return PriorSet([
        ParameterPrior('molar_mass', 0.0, 1.0, BoundedBelow(0.0),
                       label='Molar mass', units='kg/mol'),
        ParameterPrior('osmotic_coeff', 0.0, 1.0, BoundedBelow(0.0),
                       label='Osmotic coefficient', units='-'),
    ])


@pytest.fixture
def surrogate_model():
    return CallableForwardModel(log_ratio_outputs, output_names=['N_act', 'M_act'])


@pytest.fixture
def scenario():
    return Scenario()


@pytest.fixture
def small_config(tmp_path):
    """Fast configuration writing into a temporary directory."""
    return AerocalConfig.from_minimal(
        ENSEMBLE_SIZE=10,
        NUMBER_OF_ITERATIONS=2,
        OUTPUT_DIR=str(tmp_path / 'output'),
    )


@pytest.fixture
def test_logger():
    logger = logging.getLogger('aerocal.tests')
    logger.setLevel(logging.DEBUG)
    return logger


@pytest.fixture(autouse=True)
def _clear_aerocal_env(monkeypatch):
    """Keep AEROCAL_* variables from the caller's shell out of tests."""
    for key in list(os.environ):
        if key.startswith('AEROCAL_'):
            monkeypatch.delenv(key, raising=False)
