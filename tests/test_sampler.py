import math

import numpy as np
import pytest

from gradientslide.config import GRID_RESOLUTION
from gradientslide.model.field import FieldEvaluator, FieldSnapshot
from gradientslide.model.sampler import sample_surface


def plane(x, y):
    return x + 10 * y


def test_grid_layout_is_row_major():
    surface = sample_surface(FieldEvaluator(FieldSnapshot(expression=plane)), (-3, 3), (-1, 2))

    assert surface.z.shape == (GRID_RESOLUTION, GRID_RESOLUTION)
    assert surface.xs[0] == -3 and surface.xs[-1] == 3
    assert surface.ys[0] == -1 and surface.ys[-1] == 2
    assert surface.z[0, -1] == pytest.approx(3 + 10 * -1)
    assert surface.z[-1, 0] == pytest.approx(-3 + 10 * 2)
    np.testing.assert_allclose(np.diff(surface.xs), 6 / (GRID_RESOLUTION - 1))


def test_undefined_cells_stay_nan():
    def half_plane(x, y):
        return math.nan if x < 0 else x

    surface = sample_surface(FieldEvaluator(FieldSnapshot(expression=half_plane)), (-1, 1), (-1, 1), resolution=10)

    assert surface.n_invalid == 50
    assert np.isnan(surface.z[:, :5]).all()
    assert surface.valid_mask[:, 5:].all()


def test_raising_cells_do_not_abort_sampling():
    def reciprocal(x, y):
        return 1 / x

    surface = sample_surface(FieldEvaluator(FieldSnapshot(expression=reciprocal)), (-1, 1), (0, 1), resolution=3)

    assert surface.n_invalid == 3
    assert surface.z[0, 0] == -1.0
    assert surface.z[0, 2] == 1.0
