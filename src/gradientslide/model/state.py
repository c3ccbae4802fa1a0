"""
Session State (Data Model)
==========================
This module defines the central data structure for the running application.

Why is this file needed?
------------------------
1. State Management: It holds the view settings, the active field snapshot,
   the last sampled surface and the last traced path in one place.
2. Decoupling: Views read from this object; the controller writes to it.

Nothing here is persisted; the state lives for one session only.

Classes:
    ViewSettings: Ranges, opacity, playback rate and walk direction.
    SessionState: The main container class.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

from gradientslide.config import (
    DEFAULT_FPS, DEFAULT_LATEX, DEFAULT_OPACITY, DEFAULT_X_RANGE, DEFAULT_Y_RANGE, DEFAULT_Z_RANGE, FPS_CHOICES
)
from gradientslide.model.errors import SettingsError
from gradientslide.model.field import FieldSnapshot
from gradientslide.model.sampler import SurfaceGrid
from gradientslide.model.tracer import TraceResult

logger = logging.getLogger(__name__)


@dataclass
class ViewSettings:
    x_min: float = DEFAULT_X_RANGE[0]
    x_max: float = DEFAULT_X_RANGE[1]
    y_min: float = DEFAULT_Y_RANGE[0]
    y_max: float = DEFAULT_Y_RANGE[1]
    z_min: float = DEFAULT_Z_RANGE[0]
    z_max: float = DEFAULT_Z_RANGE[1]
    opacity: float = DEFAULT_OPACITY
    fps: int = DEFAULT_FPS
    ascend: bool = False

    @property
    def x_range(self) -> tuple[float, float]:
        return self.x_min, self.x_max

    @property
    def y_range(self) -> tuple[float, float]:
        return self.y_min, self.y_max

    @property
    def z_range(self) -> tuple[float, float]:
        return self.z_min, self.z_max

    def validate(self) -> None:
        """
        Raises:
            SettingsError: If any range is empty or not finite, the opacity
                is outside [0, 1], or the frame rate is not offered.
        """
        for axis, (low, high) in (("x", self.x_range), ("y", self.y_range), ("z", self.z_range)):
            if not (math.isfinite(low) and math.isfinite(high)):
                raise SettingsError(f"The {axis} range must be finite.")
            if low >= high:
                raise SettingsError(f"The {axis} range needs min < max (got {low:g} >= {high:g}).")
        if not 0.0 <= self.opacity <= 1.0:
            raise SettingsError(f"Opacity must be within [0, 1], got {self.opacity:g}.")
        if self.fps not in FPS_CHOICES:
            raise SettingsError(f"Frame rate must be one of {FPS_CHOICES}, got {self.fps}.")


@dataclass
class SessionState:
    """
    Singleton-like class that holds the whole state of the session.
    Pass this instance to the controller and the views.
    """
    markup: str = DEFAULT_LATEX
    settings: ViewSettings = field(default_factory=ViewSettings)

    snapshot: Optional[FieldSnapshot] = None
    surface: Optional[SurfaceGrid] = None
    path: Optional[TraceResult] = None

    def clear_path(self) -> None:
        self.path = None

    def reset(self) -> None:
        """Back to defaults, dropping the compiled field."""
        self.markup = DEFAULT_LATEX
        self.settings = ViewSettings()
        self.snapshot = None
        self.surface = None
        self.path = None
        logger.info("Session state has been reset.")
