# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Mixins shared by managers, drivers and plotters.
"""

import logging
import time
from contextlib import contextmanager
from typing import Dict, Iterator, Optional


class LoggingMixin:
    """Gives a class a ``logger`` attribute.

    An explicitly assigned logger wins. Otherwise the instance logs to a
    logger named after its module and class, which sits below ``aerocal``
    and therefore reaches the handlers installed by LoggingManager.
    """

    _logger: Optional[logging.Logger] = None

    @property
    def logger(self) -> logging.Logger:
        if self._logger is None:
            cls = type(self)
            self._logger = logging.getLogger(f"{cls.__module__}.{cls.__qualname__}")
        return self._logger

    @logger.setter
    def logger(self, value: logging.Logger) -> None:
        self._logger = value


class TimingMixin:
    """Records wall-clock durations of named stages in ``self.timings``."""

    @property
    def timings(self) -> Dict[str, float]:
        """Seconds spent per stage, in completion order."""
        if '_timings' not in self.__dict__:
            self._timings: Dict[str, float] = {}
        return self._timings

    @contextmanager
    def timed_stage(self, stage: str) -> Iterator[None]:
        """Time the enclosed block, log its duration and store it under ``stage``.

        The duration is recorded even when the block raises.
        """
        logger = getattr(self, 'logger', None) or logging.getLogger(__name__)
        logger.debug(f"Starting {stage}")
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            self.timings[stage] = elapsed
            logger.info(f"Completed {stage} in {elapsed:.2f} s")
