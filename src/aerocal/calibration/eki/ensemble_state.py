# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Ensemble state snapshot.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from aerocal.core.exceptions import ValidationError

if TYPE_CHECKING:
    from aerocal.calibration.priors import PriorSet


@dataclass(frozen=True)
class EnsembleState:
    """Population of unconstrained parameter vectors at one iteration.

    The array is copied on construction and marked read-only, so a state
    can be shared between the driver, diagnostics and reporting without
    being changed behind their backs.

    Attributes:
        unconstrained: Member parameters, shape (n_members, n_params).
        iteration: Iteration index (0 is the prior ensemble).
    """
    unconstrained: np.ndarray
    iteration: int = 0

    def __post_init__(self):
        values = np.array(self.unconstrained, dtype=float, copy=True)
        if values.ndim != 2:
            raise ValidationError(
                f"Ensemble must be a (members, parameters) matrix, got shape {values.shape}"
            )
        values.setflags(write=False)
        object.__setattr__(self, 'unconstrained', values)

    def __len__(self) -> int:
        return self.unconstrained.shape[0]

    @property
    def n_members(self) -> int:
        return self.unconstrained.shape[0]

    @property
    def n_params(self) -> int:
        return self.unconstrained.shape[1]

    def constrained(self, prior_set: 'PriorSet') -> np.ndarray:
        """Member parameters mapped to constrained space."""
        return prior_set.to_constrained(self.unconstrained)

    def mean(self) -> np.ndarray:
        """Ensemble mean in unconstrained space."""
        return self.unconstrained.mean(axis=0)
