"""
Field Evaluator
===============
Samples the active scalar field f(x, y) and its gradient as plain floats.

Why is this file needed?
------------------------
Compiled expressions can raise (1/0), return complex numbers (sqrt of a
negative), or return inf. The surface sampler and the path tracer only want
a float that is either finite or NaN; this module is the single place where
that conversion happens.

Classes:
    FieldSnapshot: Immutable bundle of the compiled field and its partials.
    FieldEvaluator: Domain-safe sampling of a snapshot.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from gradientslide.config import FINITE_DIFFERENCE_EPS, SINGULARITY_RADIUS
from gradientslide.model.cas import Evaluable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldSnapshot:
    """
    The currently active field. Replaced as a whole on every successful
    recompilation, never mutated.

    Radial singularity policy: when ``radial`` is set, points closer than
    SINGULARITY_RADIUS to the origin are not sampled. The evaluator returns
    ``radial_limit`` (lim f(r, 0) for r -> 0+) if it is known, otherwise it
    samples the offset point (SINGULARITY_RADIUS, 0).
    """
    expression: Evaluable
    gradient_x: Optional[Evaluable] = None
    gradient_y: Optional[Evaluable] = None
    radial: bool = False
    radial_limit: Optional[float] = None
    flat_expression: str = ""
    markup: str = ""

    @property
    def uses_numeric_fallback(self) -> bool:
        """True when the gradient is approximated by central differences."""
        return self.gradient_x is None or self.gradient_y is None


def as_real(value: Any) -> float:
    """
    Decode a raw CAS result into a float.

    The value is either real or complex-like (it carries separate ``real``
    and ``imag`` components, e.g. Python complex or mpmath mpc). A complex
    value with a non-zero imaginary part is replaced by its magnitude; a
    zero imaginary part yields the real component.

    Returns:
        The decoded value, NaN if it is not finite.
    """
    real = getattr(value, "real", None)
    imag = getattr(value, "imag", None)
    if real is not None and imag is not None and imag != 0:
        result = math.hypot(float(real), float(imag))
    elif real is not None and imag is not None:
        result = float(real)
    else:
        result = float(value)
    return result if math.isfinite(result) else math.nan


def as_strict_real(value: Any) -> float:
    """
    Like as_real(), but a non-zero imaginary part yields NaN.

    Decodes the partial derivatives. A complex slope has no direction on
    the drawn |f| surface, so it stops the tracer as a non-finite value.
    """
    imag = getattr(value, "imag", None)
    if imag is not None and imag != 0:
        return math.nan
    return as_real(value)


def _call(function: Evaluable, x: float, y: float, decode: Callable[[Any], float] = as_real) -> float:
    """Invoke a compiled callable, mapping any failure to NaN."""
    try:
        return decode(function(x, y))
    except Exception:
        return math.nan


class FieldEvaluator:
    """Domain-safe evaluation of a FieldSnapshot."""

    def __init__(self, snapshot: FieldSnapshot) -> None:
        self.snapshot = snapshot

    def evaluate(self, x: float, y: float) -> float:
        """
        Sample f at (x, y).

        Args:
            x: X coordinate.
            y: Y coordinate.

        Returns:
            A finite float, or NaN where the field is undefined.
        """
        if self.snapshot.radial and math.hypot(x, y) < SINGULARITY_RADIUS:
            if self.snapshot.radial_limit is not None:
                return self.snapshot.radial_limit
            return _call(self.snapshot.expression, SINGULARITY_RADIUS, 0.0)
        return _call(self.snapshot.expression, x, y)

    def gradient(self, x: float, y: float) -> Tuple[float, float]:
        """
        Sample (df/dx, df/dy) at (x, y).

        Uses the symbolic partials when the snapshot has them, central
        differences with step FINITE_DIFFERENCE_EPS otherwise. A symbolic
        partial with a non-zero imaginary part is reported as NaN.
        """
        if not self.snapshot.uses_numeric_fallback:
            return (
                _call(self.snapshot.gradient_x, x, y, as_strict_real),
                _call(self.snapshot.gradient_y, x, y, as_strict_real),
            )
        return self.numeric_gradient(x, y)

    def numeric_gradient(self, x: float, y: float) -> Tuple[float, float]:
        eps = FINITE_DIFFERENCE_EPS
        gx = (self.evaluate(x + eps, y) - self.evaluate(x - eps, y)) / (2 * eps)
        gy = (self.evaluate(x, y + eps) - self.evaluate(x, y - eps)) / (2 * eps)
        return gx, gy
