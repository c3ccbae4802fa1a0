"""
Configuration & Global Constants
================================
This module serves as the central registry for the numeric constants and
defaults shared by the model, controller and view layers.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (step sizes, tolerances, grid
   resolution) from being scattered throughout the code.
2. Consistency: The sampler, tracer and scheduler read the same values the
   GUI offers as defaults.

Exports:
    GRID_RESOLUTION (int): Samples per axis of the rendered surface.
    LEARNING_RATE (float): Fixed step size of the gradient walker.
    MAX_STEPS (int): Step budget of a single trace.
    GRADIENT_FLOOR (float): Magnitude below which a partial counts as flat.
    FPS_CHOICES (tuple): Playback frame rates offered in the GUI.
"""
from typing import Tuple

# --- Surface sampling ---
GRID_RESOLUTION: int = 80

# --- Path tracing ---
LEARNING_RATE: float = 0.04
MAX_STEPS: int = 250
GRADIENT_FLOOR: float = 1e-4

# --- Field evaluation ---
FINITE_DIFFERENCE_EPS: float = 1e-6
SINGULARITY_RADIUS: float = 1e-8

# --- Playback ---
FPS_CHOICES: Tuple[int, ...] = (10, 24, 30, 60)
DEFAULT_FPS: int = 30
# Approximate display refresh period used by the Qt tick source (ms)
TICK_INTERVAL_MS: int = 16

# --- View defaults ---
DEFAULT_X_RANGE: Tuple[float, float] = (-3.0, 3.0)
DEFAULT_Y_RANGE: Tuple[float, float] = (-3.0, 3.0)
DEFAULT_Z_RANGE: Tuple[float, float] = (-2.0, 10.0)
DEFAULT_OPACITY: float = 0.9
DEFAULT_LATEX: str = r"x^2+y^2-\frac{1}{2}\cos\left(2x\right)"
DEFAULT_CAMERA_EYE: Tuple[float, float, float] = (-1.5, -1.5, 1.5)
