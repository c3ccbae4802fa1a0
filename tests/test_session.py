import dataclasses

import pytest

from gradientslide.config import DEFAULT_LATEX, GRID_RESOLUTION
from gradientslide.controller.session import (
    NUMERIC_GRADIENT_ADVISORY, SessionController, build_snapshot, parse_start_point
)
from gradientslide.model import cas
from gradientslide.model.errors import (
    ExpressionError, InvalidStartPointError, PathTooShortError, SettingsError
)
from gradientslide.model.state import SessionState, ViewSettings
from gradientslide.model.tracer import TerminationReason


@pytest.fixture
def controller():
    return SessionController(SessionState())


def test_build_snapshot_of_default_expression():
    snapshot = build_snapshot(DEFAULT_LATEX)

    assert snapshot.flat_expression == "x^2+y^2-(1)/(2)*cos(2*x)"
    assert not snapshot.uses_numeric_fallback
    assert not snapshot.radial


def test_bowl_descent_end_to_end(controller):
    controller.update_expression("x^2+y^2")
    result = controller.trace("1", "1")

    assert result.succeeded
    assert result.reason is TerminationReason.FLAT_GRADIENT
    zs = [z for _, _, z in result.waypoints]
    assert all(later < earlier for earlier, later in zip(zs, zs[1:]))
    x, y, z = result.waypoints[-1]
    assert (x, y, z) == pytest.approx((0.0, 0.0, 0.0), abs=1e-3)
    assert controller.state.path is result


def test_ascent_goes_uphill(controller):
    controller.state.settings.ascend = True
    controller.update_expression(r"-\left(x^2+y^2\right)")
    result = controller.trace(0.5, -0.5)

    zs = [z for _, _, z in result.waypoints]
    assert zs[-1] > zs[0]


def test_update_samples_surface(controller):
    surface = controller.update_expression(r"x\cdot y")

    assert surface.z.shape == (GRID_RESOLUTION, GRID_RESOLUTION)
    assert surface.z[0, 0] == pytest.approx(9.0)
    assert controller.state.surface is surface
    assert controller.state.markup == r"x\cdot y"


def test_failed_update_keeps_previous_field(controller):
    surface = controller.update_expression("x^2+y^2")
    snapshot = controller.state.snapshot

    with pytest.raises(ExpressionError):
        controller.update_expression(r"\frac{a}")

    assert controller.state.surface is surface
    assert controller.state.snapshot is snapshot
    assert controller.state.markup == "x^2+y^2"


def test_new_expression_clears_path(controller):
    controller.update_expression("x^2+y^2")
    controller.trace(1, 1)
    controller.update_expression("x^2+2y^2")
    assert controller.state.path is None


def test_invalid_settings_are_rejected(controller):
    controller.state.settings.x_min = 5.0
    with pytest.raises(SettingsError):
        controller.update_expression("x+y")
    assert controller.state.snapshot is None


@pytest.mark.parametrize("x_text, y_text", [("", "1"), ("abc", "0"), ("1", None), ("nan", "0"), ("inf", "1")])
def test_invalid_start_point(x_text, y_text):
    with pytest.raises(InvalidStartPointError):
        parse_start_point(x_text, y_text)


def test_start_point_is_checked_before_tracing(controller):
    with pytest.raises(InvalidStartPointError):
        controller.trace("left", "1")


def test_trace_without_expression(controller):
    with pytest.raises(ExpressionError):
        controller.trace("0", "0")


def test_flat_field_cannot_produce_a_path(controller):
    controller.update_expression("5")
    with pytest.raises(PathTooShortError):
        controller.trace("1", "1")
    assert controller.state.path is None


def test_numeric_gradient_advisory(controller, monkeypatch):
    def no_derivative(expr, name):
        raise NotImplementedError("no derivative")

    monkeypatch.setattr(cas, "derivative", no_derivative)
    controller.update_expression("x^2+y^2")

    assert controller.state.snapshot.uses_numeric_fallback
    assert controller.advisory == NUMERIC_GRADIENT_ADVISORY

    result = controller.trace("1", "1")
    x, y, _ = result.waypoints[-1]
    assert (x, y) == pytest.approx((0.0, 0.0), abs=1e-3)


def test_no_advisory_with_symbolic_gradient(controller):
    controller.update_expression("x^2+y^2")
    assert controller.advisory == ""


def test_resample_after_range_change(controller):
    controller.update_expression("x+y")
    controller.state.settings.x_min, controller.state.settings.x_max = 0.0, 1.0
    surface = controller.resample()

    assert surface.xs[0] == 0.0 and surface.xs[-1] == 1.0
    assert controller.state.surface is surface


def test_resample_with_new_settings(controller):
    controller.update_expression("x+y")
    snapshot = controller.state.snapshot
    settings = dataclasses.replace(controller.state.settings, y_min=-1.0, y_max=2.0)
    surface = controller.resample(settings)

    assert surface.ys[0] == -1.0 and surface.ys[-1] == 2.0
    assert controller.state.settings is settings
    assert controller.state.snapshot is snapshot


def test_rejected_settings_are_not_applied(controller):
    controller.update_expression("x+y")
    before = dataclasses.replace(controller.state.settings)
    bad = dataclasses.replace(before, x_min=5.0, x_max=1.0)

    with pytest.raises(SettingsError):
        controller.resample(bad)
    with pytest.raises(SettingsError):
        controller.update_expression("x-y", bad)

    assert controller.state.settings == before
    assert controller.state.markup == "x+y"


def test_failed_expression_keeps_previous_ranges(controller):
    controller.update_expression("x+y")
    before = dataclasses.replace(controller.state.settings)
    wider = ViewSettings(x_min=-10.0, x_max=10.0)

    with pytest.raises(ExpressionError):
        controller.update_expression(r"\frac{a}", wider)

    assert controller.state.settings == before


def test_descent_stops_where_the_field_is_complex(controller):
    # sqrt(x) is imaginary for x < 0, its drawn magnitude must not be climbed
    controller.update_expression(r"\sqrt{x}")
    with pytest.raises(PathTooShortError):
        controller.trace("-1", "0")
