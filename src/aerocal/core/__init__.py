# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Core infrastructure: exceptions, configuration, logging and mixins.
"""

from .exceptions import (
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
)

__all__ = [
    'AEROCALError',
    'CalibrationError',
    'ConfigurationError',
    'DimensionMismatchError',
    'EnsembleEvaluationError',
    'ForwardModelError',
    'InvalidCovarianceError',
    'InvalidPriorError',
    'ReportingError',
    'ValidationError',
]
