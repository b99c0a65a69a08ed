"""Tests for member evaluation strategies."""

import subprocess
import sys
import textwrap
import time

import numpy as np
import pytest

from aerocal.calibration.eki import ForwardModelEvaluator
from aerocal.core.exceptions import DimensionMismatchError, ForwardModelError
from aerocal.models import AerosolActivationModel

pytestmark = pytest.mark.unit


def square(parameters):
    return np.asarray(parameters) ** 2


def slow_second_member(parameters):
    if parameters[0] == 2.0:
        time.sleep(10.0)
    return np.ones(2)


def failing_member(parameters):
    raise ArithmeticError("overflow")


HANGING_RUN = textwrap.dedent('''
    import time

    import numpy as np

    from aerocal.calibration.eki import ForwardModelEvaluator
    from aerocal.core.exceptions import ForwardModelError


    def hang(parameters):
        time.sleep(600)
        return np.ones(2)


    if __name__ == "__main__":
        evaluator = ForwardModelEvaluator("thread", max_workers=2, timeout=0.5)
        try:
            evaluator.evaluate(hang, np.ones((3, 2)), iteration=0)
        except ForwardModelError as e:
            print("timed out:", e.timed_out)
''')


PARAMETERS = np.arange(12, dtype=float).reshape(6, 2)


class TestEvaluatorExecutors:

    @pytest.mark.parametrize("executor", ['serial', 'thread'])
    def test_outputs_in_member_order(self, executor):
        evaluator = ForwardModelEvaluator(executor, max_workers=3)
        outputs = evaluator.evaluate(square, PARAMETERS)
        np.testing.assert_array_equal(outputs, PARAMETERS ** 2)

    def test_process_pool_matches_serial(self, scenario):
        model = AerosolActivationModel(scenario)
        parameters = np.array([[0.058443, 0.9], [0.1, 0.5], [0.03, 1.2]])
        serial = ForwardModelEvaluator('serial').evaluate(model, parameters)
        pooled = ForwardModelEvaluator('process', max_workers=2).evaluate(model, parameters)
        np.testing.assert_allclose(pooled, serial)

    def test_invalid_configuration(self):
        with pytest.raises(ValueError):
            ForwardModelEvaluator('gpu')
        with pytest.raises(ValueError):
            ForwardModelEvaluator('thread', max_workers=0)
        with pytest.raises(ValueError):
            ForwardModelEvaluator(timeout=-1.0)


class TestEvaluatorValidation:

    def test_non_finite_output_reports_member(self):
        def model(parameters):
            return np.array([np.nan, 1.0]) if parameters[0] == 4.0 else np.ones(2)

        with pytest.raises(ForwardModelError) as exc_info:
            ForwardModelEvaluator().evaluate(model, PARAMETERS, iteration=3)
        assert exc_info.value.member == 2
        assert exc_info.value.iteration == 3
        assert exc_info.value.timed_out is False

    def test_exception_is_wrapped(self):
        def model(parameters):
            if parameters[0] > 5.0:
                raise ArithmeticError("overflow")
            return np.ones(2)

        with pytest.raises(ForwardModelError, match="overflow") as exc_info:
            ForwardModelEvaluator('thread', max_workers=2).evaluate(model, PARAMETERS, iteration=0)
        assert exc_info.value.member == 3

    def test_wrong_length_output(self):
        with pytest.raises(DimensionMismatchError) as exc_info:
            ForwardModelEvaluator().evaluate(square, PARAMETERS, iteration=1, n_obs=3)
        assert exc_info.value.member == 0
        assert exc_info.value.iteration == 1

    def test_inconsistent_lengths(self):
        def model(parameters):
            return np.ones(2) if parameters[0] < 6.0 else np.ones(3)

        with pytest.raises(DimensionMismatchError) as exc_info:
            ForwardModelEvaluator().evaluate(model, PARAMETERS)
        assert exc_info.value.member == 3


class TestEvaluatorTimeout:

    @pytest.mark.parametrize("executor", ['serial', 'thread', 'process'])
    def test_timeout_raises(self, executor):
        evaluator = ForwardModelEvaluator(executor, max_workers=2, timeout=3.0)
        with pytest.raises(ForwardModelError) as exc_info:
            evaluator.evaluate(slow_second_member, PARAMETERS, iteration=0)
        assert exc_info.value.timed_out is True
        assert exc_info.value.member == 1

    def test_fast_members_within_timeout(self):
        evaluator = ForwardModelEvaluator('serial', timeout=5.0)
        outputs = evaluator.evaluate(square, PARAMETERS)
        np.testing.assert_array_equal(outputs, PARAMETERS ** 2)

    def test_model_failure_with_timeout(self):
        evaluator = ForwardModelEvaluator('thread', max_workers=2, timeout=30.0)
        with pytest.raises(ForwardModelError, match="overflow") as exc_info:
            evaluator.evaluate(failing_member, PARAMETERS, iteration=4)
        assert exc_info.value.timed_out is False
        assert exc_info.value.member == 0

    def test_hung_member_does_not_block_exit(self, tmp_path):
        script = tmp_path / 'hanging_run.py'
        script.write_text(HANGING_RUN)
        start = time.perf_counter()
        completed = subprocess.run(
            [sys.executable, str(script)], capture_output=True, text=True, timeout=120,
        )
        elapsed = time.perf_counter() - start
        assert completed.returncode == 0, completed.stderr
        assert "timed out: True" in completed.stdout
        assert elapsed < 60.0
