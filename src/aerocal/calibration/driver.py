# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Calibration driver.

Runs the Ensemble Kalman Inversion loop over a black-box forward model:
sample the prior ensemble, then repeatedly map members to constrained
space, evaluate them, and push the outputs through the EKI update.

Randomness is fully determined by the run seed. The seed is split into
independent streams, one for the prior draw and one per update for the
observation perturbations of the stochastic variant, so a run is
reproducible and the prior draw does not depend on the update variant.
"""

import logging
import threading
from collections import abc
from typing import Iterator, List, Optional, Sequence, Tuple

import numpy as np

from aerocal.core.exceptions import EnsembleEvaluationError, require
from aerocal.core.mixins import LoggingMixin

from . import diagnostics
from .eki import EKIAlgorithm, EnsembleState, ForwardModelEvaluator
from .eki.eki_algorithm import check_settings
from .forward_model import as_forward_model
from .observations import SamplePolicy, TruthObservation, generate_truth
from .priors import PriorSet


def _init_rng(seed: int) -> np.random.Generator:
    """Generator of the prior draw."""
    return np.random.default_rng(np.random.SeedSequence(seed, spawn_key=(0,)))


def _update_rng(seed: int, iteration: int) -> np.random.Generator:
    """Generator of the observation perturbations of one update.

    Fixed by the run seed and the iteration being advanced, so a single
    :meth:`CalibrationDriver.step` reproduces the matching update of a run.
    """
    return np.random.default_rng(np.random.SeedSequence(seed, spawn_key=(1, iteration)))


class CalibrationHistory(abc.Sequence):
    """Ordered, immutable record of a calibration run.

    Holds one EnsembleState per iteration (0 is the prior ensemble) and the
    forward outputs evaluated on every state that was updated.

    Args:
        states: Ensemble states in iteration order.
        outputs: Forward outputs, one (n_members, n_obs) array per updated state.
        stopped: True if the run was halted before its last iteration.
    """

    def __init__(
        self,
        states: Sequence[EnsembleState],
        outputs: Sequence[np.ndarray] = (),
        stopped: bool = False,
    ):
        require(len(states) > 0, "A calibration history needs at least one state")
        require(
            len(outputs) in (len(states) - 1, len(states)),
            f"Got {len(outputs)} output sets for {len(states)} states",
        )
        self._states: Tuple[EnsembleState, ...] = tuple(states)
        frozen = []
        for output in outputs:
            output = np.array(output, dtype=float, copy=True)
            output.setflags(write=False)
            frozen.append(output)
        self._outputs: Tuple[np.ndarray, ...] = tuple(frozen)
        self.stopped = stopped

    def __len__(self) -> int:
        return len(self._states)

    def __getitem__(self, index):
        return self._states[index]

    def __repr__(self) -> str:
        return (
            f"CalibrationHistory(iterations={self.n_iterations}, "
            f"members={self.final.n_members}, stopped={self.stopped})"
        )

    @property
    def states(self) -> Tuple[EnsembleState, ...]:
        return self._states

    @property
    def outputs(self) -> Tuple[np.ndarray, ...]:
        return self._outputs

    @property
    def final(self) -> EnsembleState:
        return self._states[-1]

    @property
    def n_iterations(self) -> int:
        """Number of completed updates."""
        return len(self._states) - 1

    def outputs_for(self, iteration: int) -> Optional[np.ndarray]:
        """Outputs evaluated on the state of ``iteration``, None if it was not evaluated."""
        if 0 <= iteration < len(self._outputs):
            return self._outputs[iteration]
        return None

    def unconstrained_array(self) -> np.ndarray:
        """Unconstrained parameters, shape (n_iterations + 1, n_members, n_params)."""
        return np.stack([state.unconstrained for state in self._states])

    def parameter_array(self, prior_set: PriorSet, constrained: bool = True) -> np.ndarray:
        """Parameter x member x iteration array for the reporting sink.

        Args:
            prior_set: Priors defining the constrained transform.
            constrained: Return constrained (physical) values.
        """
        values = self.unconstrained_array()
        if constrained:
            values = prior_set.to_constrained(values.reshape(-1, values.shape[-1])).reshape(values.shape)
        return np.transpose(values, (2, 1, 0))

    def output_array(self) -> np.ndarray:
        """Forward outputs, shape (n_evaluated, n_members, n_obs)."""
        if not self._outputs:
            return np.empty((0, self.final.n_members, 0))
        return np.stack(self._outputs)


class CalibrationDriver(LoggingMixin):
    """Ensemble Kalman Inversion loop.

    The forward model and the evaluation strategy are injected; the update
    rule is an :class:`EKIAlgorithm` built per update from ``variant`` and
    ``step_size`` with a generator derived from the run seed and the iteration.

    Args:
        variant: 'stochastic' or 'deterministic' EKI update.
        step_size: EKI pseudo time step.
        evaluator: Member evaluation strategy (serial by default).
        logger: Optional logger.

    Example:
        >>> driver = CalibrationDriver()
        >>> truth = driver.generate_truth(model, [0.058443, 0.9], 0.01, 10, seed=44)
        >>> history = driver.run(priors, model, truth, ensemble_size=50,
        ...                      iterations=10, seed=44)
        >>> priors.to_constrained(history.final.mean())
    """

    def __init__(
        self,
        variant: str = 'stochastic',
        step_size: float = 1.0,
        evaluator: Optional[ForwardModelEvaluator] = None,
        logger: Optional[logging.Logger] = None,
    ):
        check_settings(variant, step_size)
        self.variant = variant
        self.step_size = step_size
        self.evaluator = evaluator or ForwardModelEvaluator()
        if logger is not None:
            self.logger = logger

    def make_algorithm(self, seed: int, iteration: int) -> EKIAlgorithm:
        """Update rule for advancing ``iteration`` in a run seeded with ``seed``."""
        return EKIAlgorithm(self.variant, self.step_size, rng=_update_rng(seed, iteration))

    # =========================================================================
    # Contract operations
    # =========================================================================

    def initialize(self, prior_set: PriorSet, ensemble_size: int, seed: int) -> EnsembleState:
        """Draw the prior ensemble in unconstrained space.

        Raises:
            ValidationError: If ``ensemble_size`` is below 2.
        """
        return self._initialize(prior_set, ensemble_size, _init_rng(seed))

    def _initialize(
        self,
        prior_set: PriorSet,
        ensemble_size: int,
        rng: np.random.Generator,
    ) -> EnsembleState:
        require(
            ensemble_size >= 2,
            f"Ensemble size must be at least 2, got {ensemble_size}",
        )
        return EnsembleState(prior_set.sample(ensemble_size, rng), iteration=0)

    def generate_truth(
        self,
        forward_model,
        true_parameters: Sequence[float],
        relative_noise: float,
        replicates: int,
        seed: int,
        names: Optional[Sequence[str]] = None,
        sample_policy: SamplePolicy = 'index',
        sample_index: int = 0,
    ) -> TruthObservation:
        """Synthetic observations from the true parameters (see :func:`generate_truth`)."""
        truth = generate_truth(
            forward_model, true_parameters, relative_noise, replicates, seed,
            names=names, sample_policy=sample_policy, sample_index=sample_index,
        )
        self.logger.info(
            f"Generated truth: G_t={truth.baseline}, working sample={truth.sample} "
            f"({truth.sample_policy} policy, {truth.n_replicates} replicates)"
        )
        return truth

    def step(
        self,
        state: EnsembleState,
        prior_set: PriorSet,
        forward_model,
        truth: TruthObservation,
        seed: int,
    ) -> EnsembleState:
        """Advance the ensemble by one EKI update.

        The input state is not modified; a new state with
        ``iteration + 1`` is returned. The perturbations of the stochastic
        variant are drawn from ``seed`` and ``state.iteration``, so stepping
        the states of ``run(seed=seed)`` reproduces its history.
        """
        algorithm = self.make_algorithm(seed, state.iteration)
        new_state, _ = self._advance(
            state, prior_set, as_forward_model(forward_model), truth, algorithm
        )
        return new_state

    def _advance(
        self,
        state: EnsembleState,
        prior_set: PriorSet,
        forward_model,
        truth: TruthObservation,
        algorithm: EKIAlgorithm,
    ) -> Tuple[EnsembleState, np.ndarray]:
        constrained = state.constrained(prior_set)
        outputs = self.evaluator.evaluate(
            forward_model, constrained, iteration=state.iteration, n_obs=truth.n_obs
        )
        updated = algorithm.update(state.unconstrained, outputs, truth.sample, truth.noise_cov)
        new_state = EnsembleState(updated, iteration=state.iteration + 1)

        require(
            len(new_state) == len(state),
            f"Update changed the population size from {len(state)} to {len(new_state)}",
        )
        self.logger.debug(
            f"Iteration {state.iteration}: misfit="
            f"{diagnostics.data_misfit(outputs, truth.sample, truth.noise_cov):.4g}, "
            f"spread={diagnostics.ensemble_spread(new_state.unconstrained):.4g}"
        )
        return new_state, outputs

    def _run_steps(
        self,
        prior_set: PriorSet,
        forward_model,
        truth: TruthObservation,
        ensemble_size: int,
        iterations: int,
        seed: int,
        stop_event: Optional[threading.Event],
        record: List[EnsembleState],
    ) -> Iterator[Tuple[EnsembleState, Optional[np.ndarray]]]:
        """Yield ``(state, outputs evaluated on the previous state)``."""
        require(iterations >= 0, f"Iteration count must be non-negative, got {iterations}")
        forward_model = as_forward_model(forward_model)
        state = self._initialize(prior_set, ensemble_size, _init_rng(seed))
        record.append(state)
        yield state, None

        for _ in range(iterations):
            if stop_event is not None and stop_event.is_set():
                self.logger.info(f"Stop requested, halting after iteration {state.iteration}")
                return
            try:
                algorithm = self.make_algorithm(seed, state.iteration)
                state, outputs = self._advance(state, prior_set, forward_model, truth, algorithm)
            except EnsembleEvaluationError as e:
                e.states = tuple(record)
                self.logger.error(
                    f"Calibration aborted at iteration {e.iteration}, member {e.member}: {e}"
                )
                raise
            record.append(state)
            yield state, outputs

    def iterate(
        self,
        prior_set: PriorSet,
        forward_model,
        truth: TruthObservation,
        ensemble_size: int,
        iterations: int,
        seed: int,
        stop_event: Optional[threading.Event] = None,
    ) -> Iterator[EnsembleState]:
        """Lazily yield the prior ensemble and each updated ensemble."""
        for state, _ in self._run_steps(
            prior_set, forward_model, truth, ensemble_size, iterations, seed, stop_event, []
        ):
            yield state

    def run(
        self,
        prior_set: PriorSet,
        forward_model,
        truth: TruthObservation,
        ensemble_size: int,
        iterations: int,
        seed: int,
        stop_event: Optional[threading.Event] = None,
    ) -> CalibrationHistory:
        """Run the full calibration.

        Returns:
            History with ``iterations + 1`` states, unless ``stop_event``
            was set, in which case the run halts at an iteration boundary.

        Raises:
            ForwardModelError: A member evaluation failed; ``states`` holds
                the ensembles completed before the failure.
            DimensionMismatchError: A member output had the wrong length.
        """
        self.logger.info(
            f"Starting EKI ({self.variant}): {len(prior_set)} parameters "
            f"{prior_set.names}, {ensemble_size} members, {iterations} iterations, seed {seed}"
        )
        states: List[EnsembleState] = []
        outputs: List[np.ndarray] = []
        for _, step_outputs in self._run_steps(
            prior_set, forward_model, truth, ensemble_size, iterations, seed, stop_event, states
        ):
            if step_outputs is not None:
                outputs.append(step_outputs)

        history = CalibrationHistory(states, outputs, stopped=len(states) < iterations + 1)
        final_mean = history.final.constrained(prior_set).mean(axis=0)
        self.logger.info(
            f"EKI finished after {history.n_iterations} iterations; final ensemble mean "
            + ', '.join(f"{name}={value:.6g}" for name, value in zip(prior_set.names, final_mean))
        )
        return history
