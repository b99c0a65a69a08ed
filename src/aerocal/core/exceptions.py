# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Custom exception hierarchy for AEROCAL.

This module defines a hierarchy of exceptions that provide clear, specific
error types for the different failure modes of a calibration run.
"""

import logging
from contextlib import contextmanager
from typing import Optional, Sequence, TypeVar


class AEROCALError(Exception):
    """
    Base exception for all AEROCAL-specific errors.

    All custom exceptions in AEROCAL inherit from this class, so callers
    can catch every project error with a single except clause.
    """
    pass


class ConfigurationError(AEROCALError):
    """
    Configuration-related errors.

    Raised when:
    - Configuration file cannot be loaded or parsed
    - Configuration values fail validation
    - Prior or truth parameter names do not line up
    """
    pass


class ValidationError(AEROCALError):
    """
    Data or parameter validation failures.

    Raised by :func:`require` when a checked condition does not hold.
    """
    pass


class CalibrationError(AEROCALError):
    """
    Base class for failures of the ensemble calibration itself.
    """
    pass


class InvalidPriorError(CalibrationError):
    """
    Malformed prior distribution or constraint.

    Raised when:
    - A prior's scale is non-positive or its mean is not finite
    - A bounded constraint has an empty interval
    - A prior set is empty or holds duplicate names
    - A value lies outside the support of its constraint
    """
    pass


class InvalidCovarianceError(CalibrationError):
    """
    Degenerate or negative observation noise covariance.

    Raised when any diagonal entry of the noise covariance is not
    strictly positive.
    """
    pass


class EnsembleEvaluationError(CalibrationError):
    """
    Failure while evaluating or updating one ensemble member.

    Carries the iteration and member where the failure happened and,
    once the driver has seen it, the ensemble states that were completed
    before the failure so callers can still inspect them.
    """

    def __init__(
        self,
        message: str,
        iteration: Optional[int] = None,
        member: Optional[int] = None,
        states: Sequence = (),
    ):
        super().__init__(message)
        self.iteration = iteration
        self.member = member
        self.states = tuple(states)


class ForwardModelError(EnsembleEvaluationError):
    """
    Forward model evaluation failed.

    Raised when:
    - The forward model raised an exception
    - The forward model returned a non-finite value
    - The evaluation exceeded its timeout
    """

    def __init__(
        self,
        message: str,
        iteration: Optional[int] = None,
        member: Optional[int] = None,
        states: Sequence = (),
        timed_out: bool = False,
    ):
        super().__init__(message, iteration=iteration, member=member, states=states)
        self.timed_out = timed_out


class DimensionMismatchError(EnsembleEvaluationError):
    """
    Array dimensions do not agree.

    Raised when a forward model output length disagrees with the
    dimensionality of the truth observation, or when a parameter vector
    does not match the prior set it is transformed with.
    """
    pass


class ReportingError(AEROCALError):
    """
    Visualization and output failures.

    Raised when:
    - Plot generation fails
    - NetCDF or CSV output cannot be written
    """
    pass


# =============================================================================
# Validation Helpers
# =============================================================================

T = TypeVar('T')


def require(condition: bool, message: str, error_type: type = None) -> None:
    """
    Validate a condition, raising an exception if it fails.

    This replaces assert statements with validation that cannot be
    disabled with python -O.

    Args:
        condition: The condition that must be True
        message: Error message if condition is False
        error_type: Exception type to raise (default: ValidationError)

    Example:
        >>> require(ensemble_size >= 2, "Ensemble needs two members", InvalidPriorError)
    """
    if error_type is None:
        error_type = ValidationError
    if not condition:
        raise error_type(message)


@contextmanager
def aerocal_error_handler(
    operation: str,
    logger: Optional[logging.Logger] = None,
    reraise: bool = True,
    error_type: type = AEROCALError
):
    """
    Context manager for standardized error handling.

    Args:
        operation: Description of the operation being performed (for logging)
        logger: Logger instance for error messages. If None, errors are not logged.
        reraise: Whether to re-raise the exception after handling (default: True)
        error_type: AEROCAL exception type to convert generic exceptions to

    Example:
        >>> with aerocal_error_handler("plotting", logger, error_type=ReportingError):
        ...     plotter.plot_ensemble_means(history, priors, 0, path)
    """
    try:
        yield
    except AEROCALError:
        if logger:
            logger.error(f"Error during {operation}", exc_info=True)
        if reraise:
            raise
    except Exception as e:
        if logger:
            logger.error(f"Error during {operation}: {e}", exc_info=True)
        if reraise:
            raise error_type(f"Failed during {operation}: {e}") from e


__all__ = [
    'AEROCALError',
    'ConfigurationError',
    'ValidationError',
    'CalibrationError',
    'InvalidPriorError',
    'InvalidCovarianceError',
    'EnsembleEvaluationError',
    'ForwardModelError',
    'DimensionMismatchError',
    'ReportingError',
    'require',
    'aerocal_error_handler',
]
