# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Parameter priors and constraint transforms.

Each calibrated parameter has a Gaussian prior in unconstrained space and a
constraint that maps unconstrained values onto the physically admissible
range. Ensemble updates happen in unconstrained space; forward models see
constrained values.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, TYPE_CHECKING

import numpy as np
from scipy import stats

from aerocal.core.exceptions import DimensionMismatchError, InvalidPriorError

if TYPE_CHECKING:
    from aerocal.core.config.models import PriorConfig


class Constraint(ABC):
    """Invertible, monotonic map between unconstrained and constrained values."""

    @abstractmethod
    def to_constrained(self, u: np.ndarray) -> np.ndarray:
        ...

    @abstractmethod
    def to_unconstrained(self, x: np.ndarray) -> np.ndarray:
        ...

    def validate(self) -> None:
        """Raise InvalidPriorError if the constraint is malformed."""

    def contains(self, x: np.ndarray) -> bool:
        """True if every value lies strictly inside the constrained support."""
        return True


@dataclass(frozen=True)
class NoConstraint(Constraint):
    """Identity transform."""

    def to_constrained(self, u):
        return np.asarray(u, dtype=float)

    def to_unconstrained(self, x):
        return np.asarray(x, dtype=float)


@dataclass(frozen=True)
class BoundedBelow(Constraint):
    """x = exp(u) + lower."""
    lower: float = 0.0

    def validate(self) -> None:
        if not np.isfinite(self.lower):
            raise InvalidPriorError(f"Lower bound must be finite, got {self.lower}")

    def to_constrained(self, u):
        return np.exp(np.asarray(u, dtype=float)) + self.lower

    def to_unconstrained(self, x):
        return np.log(np.asarray(x, dtype=float) - self.lower)

    def contains(self, x) -> bool:
        return bool(np.all(np.asarray(x) > self.lower))


@dataclass(frozen=True)
class BoundedAbove(Constraint):
    """x = upper - exp(u)."""
    upper: float = 0.0

    def validate(self) -> None:
        if not np.isfinite(self.upper):
            raise InvalidPriorError(f"Upper bound must be finite, got {self.upper}")

    def to_constrained(self, u):
        return self.upper - np.exp(np.asarray(u, dtype=float))

    def to_unconstrained(self, x):
        return np.log(self.upper - np.asarray(x, dtype=float))

    def contains(self, x) -> bool:
        return bool(np.all(np.asarray(x) < self.upper))


@dataclass(frozen=True)
class Bounded(Constraint):
    """Logistic map onto (lower, upper)."""
    lower: float = 0.0
    upper: float = 1.0

    def validate(self) -> None:
        if not (np.isfinite(self.lower) and np.isfinite(self.upper)):
            raise InvalidPriorError(
                f"Bounds must be finite, got ({self.lower}, {self.upper})"
            )
        if self.lower >= self.upper:
            raise InvalidPriorError(
                f"Lower bound {self.lower} must be below upper bound {self.upper}"
            )

    def to_constrained(self, u):
        e = np.exp(np.asarray(u, dtype=float))
        return (self.upper * e + self.lower) / (e + 1.0)

    def to_unconstrained(self, x):
        x = np.asarray(x, dtype=float)
        return np.log((x - self.lower) / (self.upper - x))

    def contains(self, x) -> bool:
        x = np.asarray(x)
        return bool(np.all((x > self.lower) & (x < self.upper)))


def make_constraint(
    kind: str,
    lower: Optional[float] = None,
    upper: Optional[float] = None,
) -> Constraint:
    """Build a constraint from its configuration name."""
    if kind in ('bounded_below', 'bounded') and lower is None:
        raise InvalidPriorError(f"Constraint '{kind}' needs a lower bound")
    if kind in ('bounded_above', 'bounded') and upper is None:
        raise InvalidPriorError(f"Constraint '{kind}' needs an upper bound")
    if kind == 'none':
        return NoConstraint()
    if kind == 'bounded_below':
        return BoundedBelow(lower)
    if kind == 'bounded_above':
        return BoundedAbove(upper)
    if kind == 'bounded':
        return Bounded(lower, upper)
    raise InvalidPriorError(f"Unknown constraint type: {kind}")


@dataclass(frozen=True)
class ParameterPrior:
    """Named scalar parameter with a Gaussian prior in unconstrained space.

    Args:
        name: Parameter name.
        mean: Prior mean in unconstrained space.
        std: Prior standard deviation in unconstrained space (> 0).
        constraint: Map to the physically admissible range.
        label: Human readable name for plots.
        units: Units of the constrained value.
    """
    name: str
    mean: float = 0.0
    std: float = 1.0
    constraint: Constraint = field(default_factory=NoConstraint)
    label: Optional[str] = None
    units: Optional[str] = None

    def __post_init__(self):
        if not self.name:
            raise InvalidPriorError("Prior name must not be empty")
        if not np.isfinite(self.mean):
            raise InvalidPriorError(f"Prior '{self.name}': mean must be finite, got {self.mean}")
        if not (np.isfinite(self.std) and self.std > 0):
            raise InvalidPriorError(
                f"Prior '{self.name}': scale must be positive, got {self.std}"
            )
        self.constraint.validate()

    @classmethod
    def from_config(cls, config: 'PriorConfig') -> 'ParameterPrior':
        return cls(
            name=config.name,
            mean=config.mean,
            std=config.std,
            constraint=make_constraint(config.constraint, config.lower, config.upper),
            label=config.label,
            units=config.units,
        )

    @property
    def distribution(self):
        """Frozen scipy distribution of the unconstrained parameter."""
        return stats.norm(loc=self.mean, scale=self.std)

    def sample(self, count: int, rng: np.random.Generator) -> np.ndarray:
        """Draw ``count`` unconstrained values."""
        return self.distribution.rvs(size=count, random_state=rng)

    @property
    def display_name(self) -> str:
        label = self.label or self.name
        if self.units:
            return f"{label} [{self.units}]"
        return label


class PriorSet:
    """Ordered, immutable collection of parameter priors.

    The order defines the layout of every parameter vector. Vectors have
    shape (n_params,); ensembles have shape (n_members, n_params).
    """

    def __init__(self, priors: Iterable[ParameterPrior]):
        self._priors: Tuple[ParameterPrior, ...] = tuple(priors)
        if not self._priors:
            raise InvalidPriorError("A prior set needs at least one parameter")
        names = [p.name for p in self._priors]
        if len(set(names)) != len(names):
            raise InvalidPriorError(f"Prior names must be unique, got {names}")
        self._index: Dict[str, int] = {name: i for i, name in enumerate(names)}

    @classmethod
    def from_config(cls, configs: Sequence['PriorConfig']) -> 'PriorSet':
        return cls(ParameterPrior.from_config(c) for c in configs)

    def __len__(self) -> int:
        return len(self._priors)

    def __iter__(self) -> Iterator[ParameterPrior]:
        return iter(self._priors)

    def __getitem__(self, key) -> ParameterPrior:
        if isinstance(key, str):
            return self._priors[self._index[key]]
        return self._priors[key]

    def __repr__(self) -> str:
        return f"PriorSet({list(self.names)})"

    @property
    def names(self) -> List[str]:
        return [p.name for p in self._priors]

    def index(self, name: str) -> int:
        return self._index[name]

    def _check_width(self, values: np.ndarray) -> np.ndarray:
        values = np.asarray(values, dtype=float)
        if values.ndim not in (1, 2) or values.shape[-1] != len(self):
            raise DimensionMismatchError(
                f"Expected trailing dimension {len(self)} for priors {self.names}, "
                f"got shape {values.shape}"
            )
        return values

    def to_constrained(self, u: np.ndarray) -> np.ndarray:
        """Map a vector (n_params,) or ensemble (n_members, n_params) to constrained space."""
        u = self._check_width(u)
        x = np.empty_like(u)
        for i, prior in enumerate(self._priors):
            x[..., i] = prior.constraint.to_constrained(u[..., i])
        return x

    def to_unconstrained(self, x: np.ndarray) -> np.ndarray:
        """Inverse of :meth:`to_constrained`.

        Raises:
            InvalidPriorError: If a value lies outside its constraint's support.
        """
        x = self._check_width(x)
        u = np.empty_like(x)
        for i, prior in enumerate(self._priors):
            if not prior.constraint.contains(x[..., i]):
                raise InvalidPriorError(
                    f"Value {x[..., i]} of '{prior.name}' is outside the support of {prior.constraint}"
                )
            u[..., i] = prior.constraint.to_unconstrained(x[..., i])
        return u

    def sample(self, count: int, rng: np.random.Generator) -> np.ndarray:
        """Draw an unconstrained ensemble of shape (count, n_params)."""
        return np.column_stack([prior.sample(count, rng) for prior in self._priors])

    def as_vector(self, values: Dict[str, float]) -> np.ndarray:
        """Order a name->value mapping by the prior layout."""
        missing = set(self.names) - set(values)
        if missing:
            raise DimensionMismatchError(f"Missing values for parameters: {sorted(missing)}")
        return np.array([values[name] for name in self.names], dtype=float)
