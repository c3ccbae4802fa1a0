"""
Gradient Path Tracer
====================
Fixed-step steepest descent / ascent over the active field.

Why is this file needed?
------------------------
It produces the waypoint sequence the ball follows: a local walker with a
constant step size, a fixed step budget and no line search.

The tracer is a small state machine:

    STEPPING --step()--> STEPPING
    STEPPING --step()--> TERMINATED(reason)

Classes:
    TraceState: STEPPING / TERMINATED.
    TerminationReason: Why the walk stopped.
    TraceResult: Recorded waypoints + reason.
    GradientPathTracer: The walker.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, List, Optional, Tuple

import numpy as np

from gradientslide.config import GRADIENT_FLOOR, LEARNING_RATE, MAX_STEPS

if TYPE_CHECKING:
    import numpy.typing as npt

    from gradientslide.model.field import FieldEvaluator

logger = logging.getLogger(__name__)


class TraceState(Enum):
    STEPPING = "stepping"
    TERMINATED = "terminated"


class TerminationReason(Enum):
    STEP_BUDGET_EXHAUSTED = "step budget exhausted"
    NON_FINITE_STATE = "non-finite position or value"
    FLAT_GRADIENT = "gradient below floor"
    INSUFFICIENT_PATH = "fewer than two waypoints"


@dataclass
class TraceResult:
    """Outcome of one trace. ``waypoints[0]`` is the start point."""
    waypoints: List[Tuple[float, float, float]] = field(default_factory=list)
    reason: Optional[TerminationReason] = None
    ascend: bool = False

    @property
    def succeeded(self) -> bool:
        return len(self.waypoints) >= 2

    def __len__(self) -> int:
        return len(self.waypoints)

    def as_array(self) -> npt.NDArray[np.float64]:
        """(N, 3) array of x, y, z."""
        return np.asarray(self.waypoints, dtype=np.float64).reshape(-1, 3)


class GradientPathTracer:
    """
    Walks from ``start`` along +gradient (ascend) or -gradient (descend).
    """

    def __init__(
        self,
        field: FieldEvaluator,
        start: Tuple[float, float],
        ascend: bool = False,
        lr: float = LEARNING_RATE,
        max_steps: int = MAX_STEPS,
        gradient_floor: float = GRADIENT_FLOOR,
    ) -> None:
        """
        Args:
            field: Evaluator of the active field.
            start: (x0, y0).
            ascend: True for steepest ascent, False for descent.
            lr: Step size multiplier applied to the gradient.
            max_steps: Maximum number of samples.
            gradient_floor: Both partials below this magnitude stop the walk.
        """
        self.field = field
        self.x, self.y = float(start[0]), float(start[1])
        self.sign = 1.0 if ascend else -1.0
        self.lr = lr
        self.max_steps = max_steps
        self.gradient_floor = gradient_floor

        self.state = TraceState.STEPPING
        self.steps_taken = 0
        self.result = TraceResult(ascend=ascend)

    def step(self) -> TraceState:
        """Sample the current point, record it, and move once."""
        if self.state is TraceState.TERMINATED:
            return self.state

        if self.steps_taken >= self.max_steps:
            return self._terminate(TerminationReason.STEP_BUDGET_EXHAUSTED)
        self.steps_taken += 1

        z = self.field.evaluate(self.x, self.y)
        if not (math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(z)):
            return self._terminate(TerminationReason.NON_FINITE_STATE)

        self.result.waypoints.append((self.x, self.y, z))

        gx, gy = self.field.gradient(self.x, self.y)
        if not (math.isfinite(gx) and math.isfinite(gy)):
            return self._terminate(TerminationReason.NON_FINITE_STATE)
        if abs(gx) < self.gradient_floor and abs(gy) < self.gradient_floor:
            return self._terminate(TerminationReason.FLAT_GRADIENT)

        self.x += self.sign * self.lr * gx
        self.y += self.sign * self.lr * gy
        return self.state

    def run(self) -> TraceResult:
        """Step until terminated and return the recorded path."""
        while self.step() is TraceState.STEPPING:
            pass
        return self.result

    def _terminate(self, reason: TerminationReason) -> TraceState:
        self.state = TraceState.TERMINATED
        if len(self.result.waypoints) < 2:
            reason = TerminationReason.INSUFFICIENT_PATH
        self.result.reason = reason
        logger.debug(f"Trace terminated after {len(self.result)} point(s): {reason.value}.")
        return self.state
