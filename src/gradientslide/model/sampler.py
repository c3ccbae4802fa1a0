"""
Surface Sampler
Evaluates the active field over a rectangular grid for rendering.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

import numpy as np

from gradientslide.config import GRID_RESOLUTION

if TYPE_CHECKING:
    import numpy.typing as npt

    from gradientslide.model.field import FieldEvaluator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SurfaceGrid:
    """Height field on a regular grid. ``z[i, j]`` belongs to ``(xs[j], ys[i])``."""
    xs: npt.NDArray[np.float64]
    ys: npt.NDArray[np.float64]
    z: npt.NDArray[np.float64]

    @property
    def valid_mask(self) -> npt.NDArray[np.bool_]:
        return np.isfinite(self.z)

    @property
    def n_invalid(self) -> int:
        return int(self.z.size - np.count_nonzero(self.valid_mask))


def sample_surface(
    field: FieldEvaluator,
    x_range: Tuple[float, float],
    y_range: Tuple[float, float],
    resolution: int = GRID_RESOLUTION,
) -> SurfaceGrid:
    """
    Sample ``field`` on a resolution x resolution grid.

    Args:
        field: Evaluator of the active field.
        x_range: (x_min, x_max), both endpoints are sampled.
        y_range: (y_min, y_max), both endpoints are sampled.
        resolution: Samples per axis.

    Returns:
        The grid. Cells where the field is undefined stay NaN so the renderer
        can show a gap instead of a false surface.
    """
    xs = np.linspace(x_range[0], x_range[1], resolution)
    ys = np.linspace(y_range[0], y_range[1], resolution)

    z = np.empty((resolution, resolution), dtype=np.float64)
    for i, y in enumerate(ys):
        for j, x in enumerate(xs):
            z[i, j] = field.evaluate(float(x), float(y))

    grid = SurfaceGrid(xs=xs, ys=ys, z=z)
    if grid.n_invalid:
        logger.info(f"Surface sampled with {grid.n_invalid} undefined cell(s).")
    return grid
