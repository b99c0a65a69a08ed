# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""Central reporting facade for calibration results.

Turns a finished CalibrationHistory into plots, a summary table, a
printed comparison with the true values and a NetCDF archive. Reporting
only ever reads the history; it runs after the calibration loop.
"""

from functools import cached_property
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Optional

import pandas as pd

from aerocal.core.exceptions import ReportingError, aerocal_error_handler
from aerocal.core.mixins import LoggingMixin
from aerocal.reporting.config.plot_config import DEFAULT_PLOT_CONFIG, PlotConfig
from aerocal.reporting.summary import format_comparison, write_summary_csv

if TYPE_CHECKING:
    from aerocal.calibration.driver import CalibrationHistory
    from aerocal.calibration.observations import TruthObservation
    from aerocal.calibration.output import CalibrationOutputManager
    from aerocal.calibration.priors import PriorSet
    from aerocal.core.config.models import AerocalConfig
    from aerocal.reporting.plotters.ensemble_plotter import EnsemblePlotter


class ReportingManager(LoggingMixin):
    """Facade coordinating plots and output files of one calibration run.

    Example:
        >>> rm = ReportingManager(config, logger)
        >>> artifacts = rm.generate_reports(history, priors, truth, summary)
    """

    def __init__(self, config: 'AerocalConfig', logger: Any = None):
        """Initialize the ReportingManager.

        Args:
            config: AerocalConfig instance.
            logger: Logger instance.
        """
        self.config = config
        if logger is not None:
            self.logger = logger
        self.output_dir = Path(config.reporting.output_dir)
        self.name = config.experiment.name

    @cached_property
    def plot_config(self) -> PlotConfig:
        """Lazy initialization of plot configuration."""
        return DEFAULT_PLOT_CONFIG

    @cached_property
    def ensemble_plotter(self) -> 'EnsemblePlotter':
        """Lazy initialization of ensemble plotter."""
        from aerocal.reporting.plotters.ensemble_plotter import EnsemblePlotter
        return EnsemblePlotter(self.config, self.logger, self.plot_config)

    @cached_property
    def output_manager(self) -> 'CalibrationOutputManager':
        """Lazy initialization of NetCDF writer."""
        from aerocal.calibration.output import CalibrationOutputManager
        return CalibrationOutputManager()

    def plot_calibration(
        self,
        history: 'CalibrationHistory',
        prior_set: 'PriorSet',
        true_parameters: Optional[Dict[str, float]] = None,
    ) -> Dict[str, str]:
        """Ensemble scatter and mean plots for every parameter."""
        if not self.config.reporting.make_plots:
            self.logger.debug("Plotting disabled, skipping ensemble plots")
            return {}
        with aerocal_error_handler("ensemble plotting", self.logger, error_type=ReportingError):
            return self.ensemble_plotter.plot_parameters(
                history.parameter_array(prior_set),
                prior_set,
                self.output_dir,
                true_parameters=true_parameters,
                plot_format=self.config.reporting.plot_format,
            )

    def write_netcdf(
        self,
        history: 'CalibrationHistory',
        prior_set: 'PriorSet',
        truth: Optional['TruthObservation'] = None,
        true_parameters: Optional[Dict[str, float]] = None,
    ) -> Optional[Path]:
        if not self.config.reporting.write_netcdf:
            return None
        output_path = self.output_dir / f"{self.name}_ensembles.nc"
        attrs = {
            'experiment': self.name,
            'seed': self.config.experiment.seed,
            'eki_variant': self.config.eki.variant,
            'eki_step_size': self.config.eki.step_size,
        }
        with aerocal_error_handler("NetCDF output", self.logger, error_type=ReportingError):
            return self.output_manager.write(
                output_path, history, prior_set, truth, true_parameters, attrs
            )

    def write_summary(self, summary: pd.DataFrame) -> Optional[Path]:
        if not self.config.reporting.write_summary_csv:
            return None
        with aerocal_error_handler("summary output", self.logger, error_type=ReportingError):
            path = write_summary_csv(summary, self.output_dir / f"{self.name}_summary.csv")
        self.logger.info(f"Wrote parameter summary: {path}")
        return path

    def report_comparison(self, summary: pd.DataFrame) -> None:
        """Log the final estimate of each parameter next to its true value."""
        for line in format_comparison(summary):
            self.logger.info(line)

    def generate_reports(
        self,
        history: 'CalibrationHistory',
        prior_set: 'PriorSet',
        truth: Optional['TruthObservation'],
        summary: pd.DataFrame,
        true_parameters: Optional[Dict[str, float]] = None,
    ) -> Dict[str, str]:
        """Produce every enabled artifact.

        Returns:
            Mapping of artifact name to file path.

        Raises:
            ReportingError: If any artifact could not be produced.
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        artifacts: Dict[str, str] = {}

        self.report_comparison(summary)
        artifacts.update(self.plot_calibration(history, prior_set, true_parameters))

        netcdf_path = self.write_netcdf(history, prior_set, truth, true_parameters)
        if netcdf_path is not None:
            artifacts['netcdf'] = str(netcdf_path)

        summary_path = self.write_summary(summary)
        if summary_path is not None:
            artifacts['summary'] = str(summary_path)

        return artifacts
