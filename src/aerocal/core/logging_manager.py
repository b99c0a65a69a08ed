# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Logging setup for calibration runs.

Configures the ``aerocal`` package logger with a console handler and,
when an output directory is configured, a per-run log file. Also writes
a JSON run summary next to the log file.
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from aerocal.core.config.models import AerocalConfig

LOG_FORMAT = '[%(asctime)s] [%(levelname)s] [%(name)s] - %(message)s'
CONSOLE_FORMAT = '[%(asctime)s] %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class LoggingManager:
    """Owns the handlers attached to the ``aerocal`` logger for one run.

    Args:
        config: AerocalConfig instance.
        debug_mode: Log at DEBUG level instead of the configured level.
        log_to_file: Write a log file under ``<output_dir>/logs``.
    """

    def __init__(
        self,
        config: 'AerocalConfig',
        debug_mode: bool = False,
        log_to_file: bool = True,
    ):
        self.config = config
        self.debug_mode = debug_mode
        self.timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        self.log_dir: Optional[Path] = None
        self.log_file: Optional[Path] = None
        self._handlers: List[logging.Handler] = []

        if log_to_file:
            self.log_dir = Path(config.reporting.output_dir) / 'logs'

        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        logger = logging.getLogger('aerocal')
        level = logging.DEBUG if self.debug_mode else getattr(
            logging, self.config.reporting.log_level, logging.INFO
        )
        logger.setLevel(level)

        # Re-running in the same process must not stack handlers
        self.close()
        for handler in list(logger.handlers):
            if getattr(handler, '_aerocal_handler', False):
                logger.removeHandler(handler)
                handler.close()

        console = logging.StreamHandler(sys.stdout)
        console.setLevel(level)
        console.setFormatter(logging.Formatter(CONSOLE_FORMAT, DATE_FORMAT))
        self._attach(logger, console)

        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            name = self.config.experiment.name
            self.log_file = self.log_dir / f"aerocal_{name}_{self.timestamp}.log"
            file_handler = logging.FileHandler(self.log_file)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
            self._attach(logger, file_handler)

        logger.propagate = False
        return logger

    def _attach(self, logger: logging.Logger, handler: logging.Handler) -> None:
        handler._aerocal_handler = True
        logger.addHandler(handler)
        self._handlers.append(handler)

    def create_run_summary(
        self,
        status: str,
        execution_time: float,
        errors: Optional[List[Dict[str, Any]]] = None,
        results: Optional[Dict[str, Any]] = None,
    ) -> Optional[Path]:
        """Write a JSON summary of the run next to the log file.

        Args:
            status: 'completed', 'failed' or 'stopped'.
            execution_time: Wall time in seconds.
            errors: Error records collected during the run.
            results: Final parameter estimates and diagnostics.

        Returns:
            Path to the summary file, or None when file logging is disabled.
        """
        if self.log_dir is None:
            return None

        summary = {
            'experiment': self.config.experiment.name,
            'timestamp': self.timestamp,
            'status': status,
            'execution_time_s': round(execution_time, 3),
            'seed': self.config.experiment.seed,
            'ensemble_size': self.config.experiment.ensemble_size,
            'iterations': self.config.experiment.iterations,
            'errors': errors or [],
            'results': results or {},
        }
        summary_path = self.log_dir / f"run_summary_{self.timestamp}.json"
        with open(summary_path, 'w') as f:
            json.dump(summary, f, indent=2, default=str)
        self.logger.info(f"Run summary written to {summary_path}")
        return summary_path

    def close(self) -> None:
        """Detach and close the handlers installed by this manager."""
        logger = logging.getLogger('aerocal')
        if not self._handlers:
            return
        for handler in self._handlers:
            logger.removeHandler(handler)
            handler.close()
        self._handlers = []
        logger.propagate = True
        logger.setLevel(logging.NOTSET)
