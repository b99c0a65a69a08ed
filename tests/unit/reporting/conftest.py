"""
Shared fixtures for reporting unit tests.

Provides a short finished calibration run to plot and summarize.
"""

import pytest

from aerocal.calibration import diagnostics
from aerocal.calibration.driver import CalibrationDriver


@pytest.fixture
def calibrated_run(prior_set, surrogate_model, true_parameters):
    """History, truth and summary of a 6-member, 3-iteration run."""
    driver = CalibrationDriver()
    truth = driver.generate_truth(
        surrogate_model, prior_set.as_vector(true_parameters), 0.01, 10, seed=44
    )
    history = driver.run(prior_set, surrogate_model, truth, 6, 3, seed=44)
    summary = diagnostics.parameter_summary(history, prior_set, true_parameters)
    return history, truth, summary
