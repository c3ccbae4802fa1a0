"""
3D Visualization Widget (PyVista Wrapper)
Renders the sampled surface, the traced path and the ball.
"""
from __future__ import annotations

from typing import Optional, Tuple

import logging
import numpy as np
import numpy.typing as npt

from PySide6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QFrame, QStyle
from PySide6.QtCore import Signal
from PySide6.QtGui import QCloseEvent, QResizeEvent

from pyvistaqt import QtInteractor
import pyvista as pv

from gradientslide.config import DEFAULT_CAMERA_EYE
from gradientslide.model.sampler import SurfaceGrid
from gradientslide.model.state import ViewSettings

logger = logging.getLogger(__name__)

PATH_COLOR = "#f57c00"
BALL_COLOR = "#d32f2f"


class PyVistaWidget(QWidget):
    # Signal: (x, y) of a right-clicked surface point
    point_picked = Signal(float, float)

    def __init__(self, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)

        self.layout_box: QVBoxLayout = QVBoxLayout(self)
        self.layout_box.setContentsMargins(0, 0, 0, 0)

        self.plotter: QtInteractor = QtInteractor(self)
        self.layout_box.addWidget(self.plotter)

        self._init_plotter()

        # --- Actors state ---
        self._surface_actor: Optional[pv.Actor] = None
        self._path_actor: Optional[pv.Actor] = None
        self._ball_actor: Optional[pv.Actor] = None

        # --- Data cache ---
        # Waypoints of the current path, the ball only swaps its point
        self._path_points: Optional[npt.NDArray[np.float64]] = None
        self._ball_mesh: Optional[pv.PolyData] = None
        self._z_scale: float = 1.0
        self._camera_initialized: bool = False

        # --- Visibility state ---
        self._visible_surface: bool = True
        self._visible_path: bool = True

        self._setup_overlay_controls()

    # ------------------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------------------

    def show_surface(self, surface: SurfaceGrid, settings: ViewSettings) -> None:
        """
        Replaces the surface, keeping the user's camera if a surface was
        already shown. Undefined (NaN) cells and cells outside the z range
        are blanked instead of drawn.
        """
        logger.info("Updating surface.")
        saved_camera = self.plotter.camera_position if self._camera_initialized else None

        self.clear_path(render=False)
        if self._surface_actor is not None:
            self.plotter.remove_actor(self._surface_actor)
            self._surface_actor = None

        mesh = self._build_surface_mesh(surface, settings.z_range)
        if mesh is None:
            logger.warning("No part of the surface lies within the z range, nothing to draw.")
        else:
            self._surface_actor = self.plotter.add_mesh(
                mesh,
                scalars="z",
                cmap="viridis",
                clim=list(settings.z_range),
                opacity=settings.opacity,
                show_scalar_bar=False,
                smooth_shading=True,
            )

        x_span = settings.x_max - settings.x_min
        z_span = settings.z_max - settings.z_min
        self._z_scale = x_span / z_span
        self._apply_scale()

        self.plotter.show_bounds(
            bounds=[settings.x_min, settings.x_max, settings.y_min, settings.y_max, settings.z_min, settings.z_max],
            xtitle="X", ytitle="Y", ztitle="Z",
            grid=False,
            location="outer",
        )

        self._apply_visibility()
        if saved_camera is not None:
            self.plotter.camera_position = saved_camera
        else:
            self.plotter.view_vector(DEFAULT_CAMERA_EYE, viewup=(0, 0, 1))
            self.plotter.reset_camera()
            self._camera_initialized = True
        self.plotter.render()

    def set_opacity(self, opacity: float) -> None:
        """Restyles the existing surface without resampling."""
        if self._surface_actor is not None:
            self._surface_actor.prop.opacity = opacity
            self.plotter.render()

    def show_path(self, waypoints: npt.NDArray[np.float64]) -> None:
        """Draws the path polyline and puts the ball on the first waypoint."""
        self.clear_path(render=False)
        self._path_points = np.asarray(waypoints, dtype=np.float64).reshape(-1, 3)

        self._path_actor = self.plotter.add_mesh(
            pv.lines_from_points(self._path_points),
            color=PATH_COLOR,
            line_width=5,
            pickable=False,
            show_scalar_bar=False,
        )

        self._ball_mesh = pv.PolyData(self._path_points[:1].copy())
        self._ball_actor = self.plotter.add_mesh(
            self._ball_mesh,
            color=BALL_COLOR,
            point_size=14,
            render_points_as_spheres=True,
            pickable=False,
            show_scalar_bar=False,
        )
        self._apply_scale()
        self._apply_visibility()
        self.plotter.render()

    def move_ball(self, index: int) -> None:
        """Moves the ball to waypoint ``index`` (updated in place)."""
        if self._ball_mesh is None or self._path_points is None:
            return
        self._ball_mesh.points = self._path_points[index:index + 1].copy()
        self.plotter.render()

    def clear_path(self, render: bool = True) -> None:
        """Removes the path and the ball."""
        for actor in (self._path_actor, self._ball_actor):
            if actor is not None:
                self.plotter.remove_actor(actor)
        self._path_actor = None
        self._ball_actor = None
        self._ball_mesh = None
        self._path_points = None
        if render:
            self.plotter.render()

    # ------------------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------------------

    @staticmethod
    def _build_surface_mesh(surface: SurfaceGrid, z_range: Tuple[float, float]) -> Optional[pv.DataSet]:
        """
        Create the surface mesh from the height field, leaving gaps open.

        Args:
            surface: Sampled height field, z[i, j] at (xs[j], ys[i]).
            z_range: Points outside (z_min, z_max) are dropped as well.

        Returns:
            A mesh with point scalars "z" holding only the cells whose corners
            are all defined, or None if no such cell exists.
        """
        x, y = np.meshgrid(surface.xs, surface.ys)
        z = surface.z
        visible = np.isfinite(z) & (z >= z_range[0]) & (z <= z_range[1])

        grid = pv.StructuredGrid(x, y, np.where(np.isfinite(z), z, 0.0))
        # StructuredGrid orders points column-major
        grid.point_data["z"] = z.ravel(order="F")
        if visible.all():
            return grid

        kept = np.flatnonzero(visible.ravel(order="F"))
        if kept.size == 0:
            return None
        mesh = grid.extract_points(kept, adjacent_cells=False)
        return mesh if mesh.n_cells else None

    def _apply_scale(self) -> None:
        # Equal visual extent for the x and z axes
        self.plotter.set_scale(zscale=self._z_scale, reset_camera=False)

    def _apply_visibility(self) -> None:
        """Applies visibility states to all layers."""
        if self._surface_actor:
            self._surface_actor.SetVisibility(self._visible_surface)
        for actor in (self._path_actor, self._ball_actor):
            if actor:
                actor.SetVisibility(self._visible_path)

    def _init_plotter(self) -> None:
        self.plotter.set_background("white")
        self.plotter.enable_surface_point_picking(
            callback=self._on_point_picked,
            show_message=False,
            show_point=False,
            left_clicking=False,
        )

    def _on_point_picked(self, point) -> None:
        if point is None:
            return
        self.point_picked.emit(float(point[0]), float(point[1]))

    def _setup_overlay_controls(self) -> None:
        """Floating toggle buttons."""
        self.overlay_widget = QFrame(self)
        self.overlay_widget.setStyleSheet("""
            QFrame { background-color: rgba(255, 255, 255, 200); border-radius: 6px; border: 1px solid #ccc; }
            QPushButton { background-color: transparent; border: none; padding: 4px; }
            QPushButton:checked { background-color: rgba(0, 120, 215, 50); border: 1px solid #0078D7; border-radius: 3px; }
            QPushButton:hover { background-color: rgba(0, 0, 0, 10); }
        """)

        layout = QHBoxLayout(self.overlay_widget)
        layout.setContentsMargins(4, 4, 4, 4)

        def make_btn(icon, slot, tooltip):
            btn = QPushButton()
            btn.setIcon(self.style().standardIcon(icon))
            btn.setCheckable(True)
            btn.setChecked(True)
            btn.setToolTip(tooltip)
            btn.toggled.connect(slot)
            layout.addWidget(btn)
            return btn

        self.btn_vis_surface = make_btn(QStyle.SP_FileDialogDetailedView, self.on_toggle_surface, "Show surface")
        self.btn_vis_path = make_btn(QStyle.SP_MediaPlay, self.on_toggle_path, "Show path")

        self.overlay_widget.adjustSize()
        self.overlay_widget.move(10, 10)

    # --- Toggle Slots ---
    def on_toggle_surface(self, checked: bool) -> None:
        self._visible_surface = checked
        self._apply_visibility()
        self.plotter.render()

    def on_toggle_path(self, checked: bool) -> None:
        self._visible_path = checked
        self._apply_visibility()
        self.plotter.render()

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        self.overlay_widget.raise_()

    def closeEvent(self, event: QCloseEvent) -> None:
        self.plotter.close()
        event.accept()
