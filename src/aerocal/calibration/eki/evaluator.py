# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 AEROCAL Team

"""
Forward model evaluation of ensemble members.

Members are independent, so they can be run serially or on a thread or
process pool. A run with a timeout always uses worker processes so that
a member stuck past its timeout can be terminated. Results always come
back in member order and are checked for length and finiteness before
the update sees them.
"""

import logging
import multiprocessing as mp
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from typing import List, Optional

import numpy as np

from aerocal.core.exceptions import DimensionMismatchError, ForwardModelError

from ..forward_model import ForwardModel, as_forward_model

logger = logging.getLogger(__name__)

EXECUTORS = ('serial', 'thread', 'process')


def _evaluate_member(model: ForwardModel, parameters: np.ndarray) -> np.ndarray:
    """Module level so process pools can pickle it."""
    return np.asarray(model(parameters), dtype=float)


class ForwardModelEvaluator:
    """Evaluate a forward model on every ensemble member.

    Args:
        executor: 'serial', 'thread' or 'process'.
        max_workers: Pool size for the thread and process executors.
        timeout: Optional per-member timeout in seconds. With a timeout
            members run in worker processes (one for 'serial'), so the
            model must be picklable; a member that times out is killed.
    """

    def __init__(
        self,
        executor: str = 'serial',
        max_workers: int = 1,
        timeout: Optional[float] = None,
    ):
        if executor not in EXECUTORS:
            raise ValueError(f"Unknown executor '{executor}', expected one of {EXECUTORS}")
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        if timeout is not None and timeout <= 0:
            raise ValueError(f"Timeout must be positive, got {timeout}")
        self.executor = executor
        self.max_workers = max_workers
        self.timeout = timeout

    def __repr__(self) -> str:
        return (
            f"ForwardModelEvaluator(executor={self.executor!r}, "
            f"max_workers={self.max_workers}, timeout={self.timeout})"
        )

    def evaluate(
        self,
        forward_model,
        constrained: np.ndarray,
        iteration: Optional[int] = None,
        n_obs: Optional[int] = None,
    ) -> np.ndarray:
        """Evaluate all members.

        Args:
            forward_model: ForwardModel or callable.
            constrained: Constrained parameters, shape (n_members, n_params).
            iteration: Iteration index, attached to any raised error.
            n_obs: Expected output length; inferred from member 0 if None.

        Returns:
            Outputs of shape (n_members, n_obs), in member order.

        Raises:
            ForwardModelError: A member raised, timed out or returned
                non-finite values.
            DimensionMismatchError: A member returned the wrong number of values.
        """
        model = as_forward_model(forward_model)
        constrained = np.asarray(constrained, dtype=float)

        if self.timeout is not None:
            outputs = self._evaluate_with_timeout(model, constrained, iteration)
        elif self.executor == 'serial':
            outputs = self._evaluate_serial(model, constrained, iteration)
        else:
            outputs = self._evaluate_pooled(model, constrained, iteration)

        return self._validate(outputs, iteration, n_obs)

    def _evaluate_serial(self, model, constrained, iteration) -> List[np.ndarray]:
        outputs = []
        for member, parameters in enumerate(constrained):
            try:
                outputs.append(_evaluate_member(model, parameters))
            except Exception as e:
                raise ForwardModelError(
                    f"Forward model failed for member {member} at iteration {iteration}: {e}",
                    iteration=iteration, member=member,
                ) from e
        return outputs

    def _make_pool(self) -> Executor:
        if self.executor == 'process':
            return ProcessPoolExecutor(max_workers=self.max_workers)
        return ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix='aerocal-member')

    def _evaluate_pooled(self, model, constrained, iteration) -> List[np.ndarray]:
        pool = self._make_pool()
        outputs = []
        try:
            futures = [
                pool.submit(_evaluate_member, model, parameters)
                for parameters in constrained
            ]
            for member, future in enumerate(futures):
                try:
                    outputs.append(future.result())
                except Exception as e:
                    raise ForwardModelError(
                        f"Forward model failed for member {member} at iteration {iteration}: {e}",
                        iteration=iteration, member=member,
                    ) from e
        finally:
            # Do not wait for members still queued behind a failure
            pool.shutdown(wait=False, cancel_futures=True)
        return outputs

    def _evaluate_with_timeout(self, model, constrained, iteration) -> List[np.ndarray]:
        """Run members in worker processes that can be killed.

        Leaving the pool context terminates the workers, including one that
        is still running past its timeout.
        """
        workers = 1 if self.executor == 'serial' else self.max_workers
        outputs = []
        with mp.Pool(processes=workers) as pool:
            results = [
                pool.apply_async(_evaluate_member, (model, parameters))
                for parameters in constrained
            ]
            for member, result in enumerate(results):
                try:
                    outputs.append(result.get(timeout=self.timeout))
                except mp.TimeoutError as e:
                    raise ForwardModelError(
                        f"Forward model timed out after {self.timeout}s for member "
                        f"{member} at iteration {iteration}",
                        iteration=iteration, member=member, timed_out=True,
                    ) from e
                except Exception as e:
                    raise ForwardModelError(
                        f"Forward model failed for member {member} at iteration {iteration}: {e}",
                        iteration=iteration, member=member,
                    ) from e
        return outputs

    def _validate(self, outputs, iteration, n_obs) -> np.ndarray:
        if not outputs:
            return np.empty((0, n_obs or 0))
        expected = n_obs if n_obs is not None else np.atleast_1d(outputs[0]).shape[0]

        for member, output in enumerate(outputs):
            if output.ndim != 1 or output.shape[0] != expected:
                raise DimensionMismatchError(
                    f"Member {member} returned shape {output.shape} at iteration "
                    f"{iteration}, expected ({expected},)",
                    iteration=iteration, member=member,
                )
            if not np.all(np.isfinite(output)):
                raise ForwardModelError(
                    f"Member {member} returned non-finite output {output} at "
                    f"iteration {iteration}",
                    iteration=iteration, member=member,
                )
        return np.vstack(outputs)
