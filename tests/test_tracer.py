import math

import pytest

from gradientslide.config import LEARNING_RATE, MAX_STEPS
from gradientslide.model.tracer import GradientPathTracer, TerminationReason, TraceState


class AnalyticField:
    """Stand-in for FieldEvaluator with closed-form value and gradient."""

    def __init__(self, value, gradient):
        self.value = value
        self._gradient = gradient

    def evaluate(self, x, y):
        return self.value(x, y)

    def gradient(self, x, y):
        return self._gradient(x, y)


def bowl():
    return AnalyticField(lambda x, y: (x - 1) ** 2 + 2 * (y + 0.5) ** 2, lambda x, y: (2 * (x - 1), 4 * (y + 0.5)))


@pytest.mark.parametrize("start", [(2.5, 1.0), (-2.0, -3.0), (1.0, 2.0)])
def test_descent_on_bowl_stops_flat_near_minimum(start):
    result = GradientPathTracer(bowl(), start).run()

    assert result.reason is TerminationReason.FLAT_GRADIENT
    assert result.succeeded
    assert len(result) <= MAX_STEPS
    x, y, _ = result.waypoints[-1]
    assert x == pytest.approx(1.0, abs=1e-3)
    assert y == pytest.approx(-0.5, abs=1e-3)


def test_steps_are_bounded_by_learning_rate_times_gradient():
    field = bowl()
    result = GradientPathTracer(field, (2.5, 1.0)).run()

    for (x0, y0, _), (x1, y1, _) in zip(result.waypoints, result.waypoints[1:]):
        gx, gy = field.gradient(x0, y0)
        assert math.hypot(x1 - x0, y1 - y0) <= LEARNING_RATE * math.hypot(gx, gy) + 1e-12


def test_ascent_climbs():
    field = AnalyticField(lambda x, y: x, lambda x, y: (1.0, 0.0))
    result = GradientPathTracer(field, (0.0, 0.0), ascend=True, max_steps=5).run()

    assert [p[0] for p in result.waypoints] == pytest.approx([0.0, 0.04, 0.08, 0.12, 0.16])
    assert result.reason is TerminationReason.STEP_BUDGET_EXHAUSTED


def test_step_budget_limits_path_length():
    field = AnalyticField(lambda x, y: x, lambda x, y: (1.0, 0.0))
    result = GradientPathTracer(field, (0.0, 0.0)).run()

    assert len(result) == MAX_STEPS
    assert result.reason is TerminationReason.STEP_BUDGET_EXHAUSTED


def test_flat_start_is_insufficient():
    field = AnalyticField(lambda x, y: 5.0, lambda x, y: (0.0, 0.0))
    result = GradientPathTracer(field, (0.3, 0.3)).run()

    assert len(result) == 1
    assert not result.succeeded
    assert result.reason is TerminationReason.INSUFFICIENT_PATH


def test_non_finite_value_is_not_recorded():
    field = AnalyticField(lambda x, y: math.nan if x < -0.1 else x, lambda x, y: (1.0, 0.0))
    result = GradientPathTracer(field, (0.0, 0.0)).run()

    assert result.reason is TerminationReason.NON_FINITE_STATE
    assert all(math.isfinite(z) for _, _, z in result.waypoints)
    assert len(result) == 3


def test_non_finite_gradient_keeps_current_point():
    field = AnalyticField(lambda x, y: x, lambda x, y: (math.inf, 0.0) if x > 0.05 else (1.0, 0.0))
    result = GradientPathTracer(field, (0.0, 0.0), ascend=True).run()

    assert result.reason is TerminationReason.NON_FINITE_STATE
    assert len(result) == 3
    assert result.as_array().shape == (3, 3)


def test_step_after_termination_is_a_no_op():
    tracer = GradientPathTracer(AnalyticField(lambda x, y: 0.0, lambda x, y: (0.0, 0.0)), (0.0, 0.0))
    assert tracer.step() is TraceState.TERMINATED
    assert tracer.step() is TraceState.TERMINATED
    assert len(tracer.result) == 1
