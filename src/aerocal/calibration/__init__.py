# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Ensemble Kalman calibration for AEROCAL.

Provides the calibration driver, priors and constraint transforms,
synthetic truth generation and the EKI update. The end-to-end workflow
lives in :mod:`aerocal.calibration.calibration_manager`.
"""

from .driver import CalibrationDriver, CalibrationHistory
from .eki import EKIAlgorithm, EnsembleState, ForwardModelEvaluator
from .forward_model import CallableForwardModel, ForwardModel, as_forward_model
from .observations import TruthObservation, generate_truth
from .priors import (
    Bounded,
    BoundedAbove,
    BoundedBelow,
    NoConstraint,
    ParameterPrior,
    PriorSet,
    make_constraint,
)

__all__ = [
    "Bounded",
    "BoundedAbove",
    "BoundedBelow",
    "CalibrationDriver",
    "CalibrationHistory",
    "CallableForwardModel",
    "EKIAlgorithm",
    "EnsembleState",
    "ForwardModel",
    "ForwardModelEvaluator",
    "NoConstraint",
    "ParameterPrior",
    "PriorSet",
    "TruthObservation",
    "as_forward_model",
    "generate_truth",
    "make_constraint",
]
