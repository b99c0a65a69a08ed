# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Forward model interface.

A forward model maps one constrained parameter vector to a vector of
predicted observables. Everything else it needs (scenario constants,
solver settings) is fixed when the model is constructed, so ``evaluate``
is a pure single-argument function.
"""

from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence

import numpy as np


class ForwardModel(ABC):
    """Abstract base class for forward models.

    Subclasses must be picklable to be evaluated on a process pool.
    """

    #: Names of the returned observables, in order.
    output_names: Optional[Sequence[str]] = None

    @abstractmethod
    def evaluate(self, parameters: np.ndarray) -> np.ndarray:
        """Evaluate the model.

        Args:
            parameters: Constrained parameter vector of shape (n_params,).

        Returns:
            Predicted observables of shape (n_obs,).
        """
        ...

    def __call__(self, parameters: np.ndarray) -> np.ndarray:
        return self.evaluate(parameters)


class CallableForwardModel(ForwardModel):
    """Adapts a plain function ``f(parameters) -> observables``.

    Args:
        func: Function of one parameter vector.
        output_names: Optional observable names.
    """

    def __init__(
        self,
        func: Callable[[np.ndarray], Sequence[float]],
        output_names: Optional[Sequence[str]] = None,
    ):
        self.func = func
        self.output_names = list(output_names) if output_names is not None else None

    def evaluate(self, parameters: np.ndarray) -> np.ndarray:
        return np.asarray(self.func(parameters), dtype=float)

    def __repr__(self) -> str:
        name = getattr(self.func, '__name__', repr(self.func))
        return f"CallableForwardModel({name})"


def as_forward_model(model) -> ForwardModel:
    """Return ``model`` unchanged if it is a ForwardModel, else wrap the callable."""
    if isinstance(model, ForwardModel):
        return model
    if callable(model):
        return CallableForwardModel(model)
    raise TypeError(f"Forward model must be callable, got {type(model).__name__}")
