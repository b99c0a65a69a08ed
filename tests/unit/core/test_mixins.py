"""Tests for LoggingMixin and TimingMixin."""

import logging

import pytest

from aerocal.core.mixins import LoggingMixin, TimingMixin

pytestmark = pytest.mark.unit


class Stage(LoggingMixin, TimingMixin):
    pass


class TestLoggingMixin:

    def test_default_logger_name(self):
        assert Stage().logger.name == f"{__name__}.Stage"

    def test_assigned_logger(self, mock_logger):
        stage = Stage()
        stage.logger = mock_logger
        assert stage.logger is mock_logger

    def test_loggers_are_per_instance(self, mock_logger):
        first, second = Stage(), Stage()
        first.logger = mock_logger
        assert isinstance(second.logger, logging.Logger)


class TestTimingMixin:

    def test_records_stage(self, mock_logger):
        stage = Stage()
        stage.logger = mock_logger
        with stage.timed_stage("truth generation"):
            pass
        assert list(stage.timings) == ["truth generation"]
        assert stage.timings["truth generation"] >= 0.0
        mock_logger.info.assert_called_once()

    def test_records_failed_stage(self):
        stage = Stage()
        with pytest.raises(RuntimeError):
            with stage.timed_stage("EKI calibration"):
                raise RuntimeError("diverged")
        assert "EKI calibration" in stage.timings

    def test_timings_are_per_instance(self):
        first, second = Stage(), Stage()
        with first.timed_stage("reporting"):
            pass
        assert second.timings == {}
