# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Ensemble Kalman Inversion (EKI) implementation.
"""

from .eki_algorithm import EKIAlgorithm
from .ensemble_state import EnsembleState
from .evaluator import ForwardModelEvaluator

__all__ = [
    "EKIAlgorithm",
    "EnsembleState",
    "ForwardModelEvaluator",
]
