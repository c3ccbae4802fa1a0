import math

import mpmath
import pytest

from gradientslide.controller.session import build_snapshot
from gradientslide.model.field import FieldEvaluator, FieldSnapshot, as_real, as_strict_real


def test_as_real_decodes_complex_like_values():
    assert as_real(complex(3, 4)) == pytest.approx(5.0)
    assert as_real(complex(2, 0)) == 2.0
    assert as_real(mpmath.mpc(0, 2)) == pytest.approx(2.0)
    assert as_real(mpmath.mpf(1.5)) == 1.5
    assert as_real(7) == 7.0


def test_as_real_maps_non_finite_to_nan():
    assert math.isnan(as_real(float("inf")))
    assert math.isnan(as_real(float("nan")))
    assert math.isnan(as_real(complex(float("inf"), 1)))


def test_evaluate_returns_nan_when_expression_raises():
    def explode(x, y):
        raise ZeroDivisionError("division by zero")

    field = FieldEvaluator(FieldSnapshot(expression=explode))
    assert math.isnan(field.evaluate(0.0, 0.0))


def test_symbolic_gradient_is_used_when_available():
    snapshot = FieldSnapshot(
        expression=lambda x, y: x * y,
        gradient_x=lambda x, y: y,
        gradient_y=lambda x, y: x,
    )
    assert not snapshot.uses_numeric_fallback
    assert FieldEvaluator(snapshot).gradient(2.0, 3.0) == (3.0, 2.0)


def test_numeric_gradient_fallback():
    snapshot = FieldSnapshot(expression=lambda x, y: x ** 2 + 3 * y)
    assert snapshot.uses_numeric_fallback

    gx, gy = FieldEvaluator(snapshot).gradient(1.5, -2.0)
    assert gx == pytest.approx(3.0, abs=1e-4)
    assert gy == pytest.approx(3.0, abs=1e-4)


def test_radial_field_uses_limit_at_the_origin():
    snapshot = build_snapshot(r"\frac{\sin\left(\sqrt{x^2+y^2}\right)}{\sqrt{x^2+y^2}}")
    assert snapshot.radial
    assert snapshot.radial_limit == pytest.approx(1.0)

    field = FieldEvaluator(snapshot)
    assert field.evaluate(0.0, 0.0) == pytest.approx(1.0)
    assert field.evaluate(1.0, 0.0) == pytest.approx(math.sin(1.0))


def test_radial_field_without_limit_samples_offset_point():
    calls = []

    def expression(x, y):
        calls.append((x, y))
        return 4.0

    field = FieldEvaluator(FieldSnapshot(expression=expression, radial=True))
    assert field.evaluate(0.0, 0.0) == 4.0
    assert calls == [(1e-8, 0.0)]


def test_out_of_domain_values_become_magnitudes():
    field = FieldEvaluator(build_snapshot(r"\sqrt{x}"))
    assert field.evaluate(-4.0, 0.0) == pytest.approx(2.0)


def test_as_strict_real_rejects_imaginary_parts():
    assert math.isnan(as_strict_real(complex(0, 0.5)))
    assert math.isnan(as_strict_real(mpmath.mpc(1, -2)))
    assert as_strict_real(complex(2, 0)) == 2.0
    assert as_strict_real(mpmath.mpf(-1.5)) == -1.5


def test_complex_partials_become_nan():
    snapshot = FieldSnapshot(
        expression=lambda x, y: complex(0, 2),
        gradient_x=lambda x, y: complex(0, 0.5),
        gradient_y=lambda x, y: 0.0,
    )
    field = FieldEvaluator(snapshot)
    gx, gy = field.gradient(-1.0, 0.0)

    assert math.isnan(gx)
    assert gy == 0.0
    assert field.evaluate(-1.0, 0.0) == pytest.approx(2.0)


def test_reciprocal_radial_field_is_finite_at_the_origin():
    snapshot = build_snapshot(r"\frac{x}{\sqrt{x^2+y^2}}")
    assert snapshot.radial

    field = FieldEvaluator(snapshot)
    assert field.evaluate(0.0, 0.0) == pytest.approx(1.0)
    assert field.evaluate(0.0, 2.0) == pytest.approx(0.0)
