# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Calibration Manager.

Top-level orchestrator for the perfect-model EKI experiment.
Coordinates prior and forward model construction, synthetic truth
generation, the calibration loop, diagnostics and reporting.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import pandas as pd

from aerocal.core.exceptions import AEROCALError, ConfigurationError, EnsembleEvaluationError
from aerocal.core.mixins import LoggingMixin, TimingMixin
from aerocal.models.aerosol_activation_model import AerosolActivationModel
from aerocal.physics.scenario import Scenario
from aerocal.reporting.summary import estimates_dict

from . import diagnostics
from .driver import CalibrationDriver, CalibrationHistory
from .eki import ForwardModelEvaluator
from .forward_model import ForwardModel
from .observations import TruthObservation
from .priors import PriorSet

if TYPE_CHECKING:
    from aerocal.core.config.models import AerocalConfig
    from aerocal.core.logging_manager import LoggingManager


@dataclass
class CalibrationResult:
    """Everything produced by one calibration run."""
    history: CalibrationHistory
    truth: TruthObservation
    prior_set: PriorSet
    summary: pd.DataFrame
    convergence: pd.DataFrame
    artifacts: Dict[str, str] = field(default_factory=dict)

    @property
    def estimates(self) -> Dict[str, float]:
        """Final constrained ensemble mean per parameter."""
        return {name: float(value) for name, value in self.summary['final_mean'].items()}


class CalibrationManager(LoggingMixin, TimingMixin):
    """Orchestrates the EKI calibration of the aerosol activation model.

    Workflow:
        1. Build priors, scenario and forward model from the configuration
        2. Generate synthetic truth at the true parameters
        3. Run the EKI loop (initialize + N updates)
        4. Compute diagnostics
        5. Hand the finished history to reporting

    Args:
        config: AerocalConfig instance.
        logger: Logger instance.
        forward_model: Optional replacement for the activation model.
    """

    def __init__(
        self,
        config: 'AerocalConfig',
        logger: Optional[logging.Logger] = None,
        forward_model: Optional[ForwardModel] = None,
    ):
        self.config = config
        if logger is not None:
            self.logger = logger
        self.prior_set = PriorSet.from_config(config.priors)
        self.scenario = Scenario.from_config(config.scenario)
        self.forward_model = forward_model or AerosolActivationModel(
            self.scenario, self.prior_set.names
        )
        self.true_parameters: Dict[str, float] = dict(config.experiment.true_parameters)

    def build_evaluator(self) -> ForwardModelEvaluator:
        eki = self.config.eki
        return ForwardModelEvaluator(
            executor=eki.executor,
            max_workers=eki.max_workers,
            timeout=eki.evaluation_timeout,
        )

    def build_driver(self) -> CalibrationDriver:
        return CalibrationDriver(
            variant=self.config.eki.variant,
            step_size=self.config.eki.step_size,
            evaluator=self.build_evaluator(),
            logger=self.logger,
        )

    def generate_truth(self, driver: CalibrationDriver) -> TruthObservation:
        truth_cfg = self.config.truth
        output_names = getattr(self.forward_model, 'output_names', None)
        names = truth_cfg.observable_names
        if output_names is not None and len(output_names) != len(names):
            raise ConfigurationError(
                f"OBSERVABLE_NAMES has {len(names)} entries {list(names)} but the "
                f"forward model returns {len(output_names)} outputs {list(output_names)}"
            )
        return driver.generate_truth(
            self.forward_model,
            self.prior_set.as_vector(self.true_parameters),
            relative_noise=truth_cfg.relative_noise,
            replicates=truth_cfg.replicates,
            seed=self.config.truth_seed,
            names=names,
            sample_policy=truth_cfg.sample_policy,
            sample_index=truth_cfg.sample_index,
        )

    def run_calibration(self, stop_event: Optional[threading.Event] = None) -> CalibrationResult:
        """Generate the truth, run EKI and compute diagnostics.

        Raises:
            ConfigurationError: If the observable names do not fit the model.
            CalibrationError: Any failure of the calibration itself.
        """
        experiment = self.config.experiment
        driver = self.build_driver()

        with self.timed_stage("synthetic truth generation"):
            truth = self.generate_truth(driver)

        with self.timed_stage("EKI calibration"):
            history = driver.run(
                self.prior_set,
                self.forward_model,
                truth,
                ensemble_size=experiment.ensemble_size,
                iterations=experiment.iterations,
                seed=experiment.seed,
                stop_event=stop_event,
            )

        summary = diagnostics.parameter_summary(history, self.prior_set, self.true_parameters)
        convergence = diagnostics.convergence_table(history, self.prior_set, truth)
        return CalibrationResult(history, truth, self.prior_set, summary, convergence)

    def report(self, result: CalibrationResult) -> Dict[str, str]:
        """Produce plots, the NetCDF archive and the summary table."""
        from aerocal.reporting.reporting_manager import ReportingManager

        reporting = ReportingManager(self.config, self.logger)
        with self.timed_stage("reporting"):
            result.artifacts = reporting.generate_reports(
                result.history,
                result.prior_set,
                result.truth,
                result.summary,
                self.true_parameters,
            )
        return result.artifacts

    def run_workflow(
        self,
        logging_manager: Optional['LoggingManager'] = None,
        stop_event: Optional[threading.Event] = None,
        make_reports: bool = True,
    ) -> CalibrationResult:
        """Execute calibration and reporting, recording a run summary.

        Errors are logged, recorded in the run summary and re-raised.
        """
        start = datetime.now()
        errors: List[Dict[str, Any]] = []
        results: Dict[str, Any] = {}
        status = 'completed'

        try:
            self.logger.info(f"Starting AEROCAL experiment '{self.config.experiment.name}'")
            result = self.run_calibration(stop_event=stop_event)
            if result.history.stopped:
                status = 'stopped'
            if make_reports:
                self.report(result)

            results = {
                'iterations_completed': result.history.n_iterations,
                'parameters': estimates_dict(result.summary),
                'artifacts': result.artifacts,
            }
            return result

        except AEROCALError as e:
            status = 'failed'
            record: Dict[str, Any] = {'error': str(e), 'type': type(e).__name__}
            if isinstance(e, EnsembleEvaluationError):
                record.update({
                    'iteration': e.iteration,
                    'member': e.member,
                    'states_completed': len(e.states),
                })
            errors.append(record)
            self.logger.error(f"Experiment failed: {e}")
            raise
        finally:
            elapsed_s = (datetime.now() - start).total_seconds()
            results['stage_timings_s'] = {
                stage: round(seconds, 3) for stage, seconds in self.timings.items()
            }
            if logging_manager is not None:
                logging_manager.create_run_summary(
                    status=status,
                    execution_time=elapsed_s,
                    errors=errors,
                    results=results,
                )
