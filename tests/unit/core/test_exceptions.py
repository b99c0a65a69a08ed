"""Tests for the exception hierarchy and error handling helpers."""

import logging

import pytest

from aerocal.core.exceptions import (
    AEROCALError,
    CalibrationError,
    ConfigurationError,
    DimensionMismatchError,
    EnsembleEvaluationError,
    ForwardModelError,
    InvalidCovarianceError,
    InvalidPriorError,
    ReportingError,
    ValidationError,
    aerocal_error_handler,
    require,
)

pytestmark = pytest.mark.unit


class TestHierarchy:

    @pytest.mark.parametrize('error_type', [
        ConfigurationError, ValidationError, CalibrationError, ReportingError,
    ])
    def test_top_level_errors(self, error_type):
        assert issubclass(error_type, AEROCALError)

    @pytest.mark.parametrize('error_type', [
        InvalidPriorError, InvalidCovarianceError, EnsembleEvaluationError,
    ])
    def test_calibration_errors(self, error_type):
        assert issubclass(error_type, CalibrationError)

    def test_member_errors_carry_location(self):
        error = DimensionMismatchError("bad shape", iteration=2, member=5)
        assert isinstance(error, EnsembleEvaluationError)
        assert error.iteration == 2
        assert error.member == 5
        assert error.states == ()

    def test_forward_model_error_timeout_flag(self):
        error = ForwardModelError("slow", member=1, timed_out=True, states=[1, 2])
        assert error.timed_out
        assert error.states == (1, 2)
        assert not ForwardModelError("boom").timed_out


class TestRequire:

    def test_passes(self):
        require(True, "never raised")

    def test_default_error_type(self):
        with pytest.raises(ValidationError, match="two members"):
            require(False, "needs two members")

    def test_custom_error_type(self):
        with pytest.raises(InvalidPriorError):
            require(False, "bad prior", InvalidPriorError)


class TestErrorHandler:

    def test_wraps_generic_exceptions(self):
        with pytest.raises(ReportingError, match="plotting") as info:
            with aerocal_error_handler("plotting", error_type=ReportingError):
                raise RuntimeError("backend missing")
        assert isinstance(info.value.__cause__, RuntimeError)

    def test_project_errors_pass_through(self):
        with pytest.raises(InvalidCovarianceError):
            with aerocal_error_handler("update", error_type=ReportingError):
                raise InvalidCovarianceError("zero variance")

    def test_no_reraise_logs(self, caplog):
        logger = logging.getLogger('aerocal.tests.handler')
        with caplog.at_level(logging.ERROR, logger='aerocal.tests.handler'):
            with aerocal_error_handler("writing", logger, reraise=False):
                raise OSError("disk full")
        assert "Error during writing" in caplog.text
