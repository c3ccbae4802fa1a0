"""
Session Controller
==================
User-level operations on the SessionState, free of any Qt code.

Why is this file needed?
------------------------
1. Orchestration: It chains translation, normalization, parsing, compilation,
   sampling and tracing in the right order.
2. Atomicity: The active field and surface are only replaced after the new
   ones were built successfully, so a typo never wipes the current plot.
3. Testability: The whole workflow runs headless.

Functions:
    build_snapshot: Markup -> FieldSnapshot.
    parse_start_point: Text inputs -> (x0, y0).
Classes:
    SessionController: Compile / sample / trace on a SessionState.
"""
from __future__ import annotations

import logging
import math
from typing import Optional, Tuple, Union

from gradientslide.model import cas
from gradientslide.model.errors import ExpressionError, InvalidStartPointError, PathTooShortError
from gradientslide.model.field import FieldEvaluator, FieldSnapshot
from gradientslide.model.latex import translate_latex
from gradientslide.model.sampler import SurfaceGrid, sample_surface
from gradientslide.model.state import SessionState, ViewSettings
from gradientslide.model.tokenizer import normalize_expression
from gradientslide.model.tracer import GradientPathTracer, TraceResult

logger = logging.getLogger(__name__)

NUMERIC_GRADIENT_ADVISORY = "Symbolic derivative unavailable, using a numeric gradient."


def build_snapshot(markup: str) -> FieldSnapshot:
    """
    Compile typeset markup into a FieldSnapshot.

    Args:
        markup: LaTeX from the expression editor.

    Returns:
        The new snapshot. Partials are None when symbolic differentiation
        failed (the evaluator then differentiates numerically).

    Raises:
        ExpressionError: If the expression cannot be parsed or compiled.
    """
    flat = normalize_expression(translate_latex(markup))
    logger.info(f"Translated '{markup}' -> '{flat}'")

    expr = cas.parse(flat)
    expression = cas.compile_expression(expr)

    try:
        gradient_x = cas.compile_expression(cas.derivative(expr, "x"))
        gradient_y = cas.compile_expression(cas.derivative(expr, "y"))
    except Exception as e:
        logger.warning(f"Symbolic differentiation failed for '{flat}': {e}")
        gradient_x = gradient_y = None

    radial = cas.has_radial_term(expr)
    limit = cas.radial_limit(expr) if radial else None
    if radial:
        logger.info(f"Radial field, value at the origin taken as {limit if limit is not None else 'f(1e-8, 0)'}.")

    return FieldSnapshot(
        expression=expression,
        gradient_x=gradient_x,
        gradient_y=gradient_y,
        radial=radial,
        radial_limit=limit,
        flat_expression=flat,
        markup=markup,
    )


def parse_start_point(x_text: Union[str, float], y_text: Union[str, float]) -> Tuple[float, float]:
    """
    Raises:
        InvalidStartPointError: If either coordinate is not a finite number.
    """
    try:
        x0, y0 = float(x_text), float(y_text)
    except (TypeError, ValueError) as e:
        raise InvalidStartPointError(
            "Please select a valid start point by right-clicking on the surface."
        ) from e
    if not (math.isfinite(x0) and math.isfinite(y0)):
        raise InvalidStartPointError("The start point must be finite.")
    return x0, y0


class SessionController:
    """Compile, sample and trace on behalf of the GUI."""

    def __init__(self, state: SessionState) -> None:
        self.state = state

    @property
    def field(self) -> FieldEvaluator:
        if self.state.snapshot is None:
            raise ExpressionError("No expression has been compiled yet.")
        return FieldEvaluator(self.state.snapshot)

    def update_expression(self, markup: str, settings: Optional[ViewSettings] = None) -> SurfaceGrid:
        """
        Compile ``markup`` and resample the surface.

        Args:
            markup: LaTeX from the expression editor.
            settings: Candidate view settings, the current ones if omitted.

        The state (settings included) is only touched once every step
        succeeded.

        Raises:
            ExpressionError: On parse/compile failure.
            SettingsError: On invalid ranges.
        """
        settings = settings if settings is not None else self.state.settings
        settings.validate()
        snapshot = build_snapshot(markup)
        surface = self._sample(FieldEvaluator(snapshot), settings)

        self.state.settings = settings
        self.state.markup = markup
        self.state.snapshot = snapshot
        self.state.surface = surface
        self.state.clear_path()
        return surface

    def resample(self, settings: Optional[ViewSettings] = None) -> SurfaceGrid:
        """Resample the active field with new ranges, keeping the compiled snapshot."""
        settings = settings if settings is not None else self.state.settings
        settings.validate()
        surface = self._sample(self.field, settings)

        self.state.settings = settings
        self.state.surface = surface
        self.state.clear_path()
        return surface

    def trace(self, x_text: Union[str, float], y_text: Union[str, float]) -> TraceResult:
        """
        Trace a path from the given start point with the current direction.

        Raises:
            InvalidStartPointError: Before tracing, on unparsable input.
            PathTooShortError: If fewer than two waypoints were recorded.
        """
        start = parse_start_point(x_text, y_text)
        field = self.field
        ascend = self.state.settings.ascend

        result = GradientPathTracer(field, start, ascend=ascend).run()
        logger.info(
            f"Traced {len(result)} point(s) from ({start[0]:g}, {start[1]:g}) "
            f"({'ascent' if ascend else 'descent'}): {result.reason.value}."
        )
        if not result.succeeded:
            self.state.clear_path()
            raise PathTooShortError("Cannot calculate path from this start point (gradient may be zero).")

        self.state.path = result
        return result

    @property
    def advisory(self) -> str:
        """Non-fatal notice about the active field, empty if none."""
        snapshot = self.state.snapshot
        if snapshot is not None and snapshot.uses_numeric_fallback:
            return NUMERIC_GRADIENT_ADVISORY
        return ""

    @staticmethod
    def _sample(field: FieldEvaluator, settings: ViewSettings) -> SurfaceGrid:
        return sample_surface(field, settings.x_range, settings.y_range)
