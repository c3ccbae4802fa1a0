import logging
from dataclasses import replace

from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QLabel, QPushButton, QSlider, QHBoxLayout, QGroupBox, QFormLayout, QLineEdit,
    QDoubleSpinBox, QComboBox, QCheckBox, QMessageBox
)
from PySide6.QtCore import Qt, Signal

from gradientslide.config import FPS_CHOICES
from gradientslide.controller.session import SessionController
from gradientslide.model.animation import AnimationScheduler
from gradientslide.model.errors import GradientSlideError
from gradientslide.model.state import SessionState, ViewSettings
from gradientslide.view.dialogs.path_profile_dialog import PathProfileDialog
from gradientslide.view.widgets.ticker import QtTickSource


logger = logging.getLogger(__name__)

RANGE_LIMIT = 1e6


class FunctionControlPanel(QWidget):
    surface_changed = Signal()
    opacity_changed = Signal(float)
    path_traced = Signal()
    # Signal: waypoint index the ball should sit on
    frame_changed = Signal(int)
    path_cleared = Signal()

    def __init__(self, state: SessionState) -> None:
        super().__init__()
        self.state = state
        self.controller = SessionController(state)

        # Animation
        self.ticker = QtTickSource(parent=self)
        self.scheduler = AnimationScheduler(self.ticker, self.on_frame, self.on_animation_finished)

        layout = QVBoxLayout(self)

        # --- Function ---
        grp_function = QGroupBox("Function")
        form_function = QFormLayout(grp_function)

        self.edit_latex = QLineEdit()
        self.edit_latex.setPlaceholderText(r"e.g. x^2+y^2 or \sin\left(x\right)\cos\left(y\right)")
        self.edit_latex.returnPressed.connect(self.on_update_clicked)
        form_function.addRow("f(x, y) =", self.edit_latex)

        self.edit_flat = QLineEdit()
        self.edit_flat.setReadOnly(True)
        self.edit_flat.setToolTip("Expression as passed to the algebra engine")
        form_function.addRow("Parsed:", self.edit_flat)

        self.btn_update = QPushButton("Update Function")
        self.btn_update.setMinimumHeight(32)
        self.btn_update.clicked.connect(self.on_update_clicked)
        form_function.addRow(self.btn_update)

        layout.addWidget(grp_function)

        # --- Ranges ---
        grp_ranges = QGroupBox("Ranges")
        form_ranges = QFormLayout(grp_ranges)

        self.range_spins = {}
        for axis in ("x", "y", "z"):
            hbox = QHBoxLayout()
            spin_min = self._make_range_spin()
            spin_max = self._make_range_spin()
            hbox.addWidget(spin_min)
            hbox.addWidget(QLabel("to"))
            hbox.addWidget(spin_max)
            self.range_spins[axis] = (spin_min, spin_max)
            form_ranges.addRow(f"{axis}:", hbox)

        layout.addWidget(grp_ranges)

        # --- Appearance ---
        grp_view = QGroupBox("Appearance")
        form_view = QFormLayout(grp_view)

        self.slider_opacity = QSlider(Qt.Horizontal)
        self.slider_opacity.setRange(0, 100)
        self.slider_opacity.valueChanged.connect(self.on_opacity_changed)
        form_view.addRow("Opacity:", self.slider_opacity)

        layout.addWidget(grp_view)

        # --- Path ---
        grp_path = QGroupBox("Gradient Path")
        form_path = QFormLayout(grp_path)

        self.edit_x0 = QLineEdit()
        self.edit_x0.setPlaceholderText("right-click the surface")
        form_path.addRow("Start x:", self.edit_x0)

        self.edit_y0 = QLineEdit()
        self.edit_y0.setPlaceholderText("right-click the surface")
        form_path.addRow("Start y:", self.edit_y0)

        self.chk_ascend = QCheckBox("Gradient ascent")
        self.chk_ascend.setToolTip("Climb instead of descending")
        self.chk_ascend.toggled.connect(self.on_direction_changed)
        form_path.addRow(self.chk_ascend)

        self.combo_fps = QComboBox()
        for fps in FPS_CHOICES:
            self.combo_fps.addItem(f"{fps} FPS", fps)
        self.combo_fps.currentIndexChanged.connect(self.on_fps_changed)
        form_path.addRow("Speed:", self.combo_fps)

        hbox_buttons = QHBoxLayout()
        self.btn_animate = QPushButton("Animate")
        self.btn_animate.setMinimumHeight(32)
        self.btn_animate.clicked.connect(self.on_animate_clicked)
        hbox_buttons.addWidget(self.btn_animate)

        self.btn_clear = QPushButton("Clear")
        self.btn_clear.setMinimumHeight(32)
        self.btn_clear.clicked.connect(self.on_clear_clicked)
        hbox_buttons.addWidget(self.btn_clear)
        form_path.addRow(hbox_buttons)

        self.btn_profile = QPushButton("Path Profile...")
        self.btn_profile.setEnabled(False)
        self.btn_profile.clicked.connect(self.on_profile_clicked)
        form_path.addRow(self.btn_profile)

        layout.addWidget(grp_path)

        # --- Status ---
        self.lbl_status = QLabel("")
        self.lbl_status.setWordWrap(True)
        self.lbl_status.setStyleSheet("QLabel { padding: 5px; background-color: rgba(0,0,0,10); border-radius: 3px; }")
        layout.addWidget(self.lbl_status)

        layout.addStretch()

        self.load_from_state()

    @staticmethod
    def _make_range_spin() -> QDoubleSpinBox:
        spin = QDoubleSpinBox()
        spin.setDecimals(2)
        spin.setRange(-RANGE_LIMIT, RANGE_LIMIT)
        spin.setSingleStep(0.5)
        return spin

    def load_from_state(self) -> None:
        """Syncs the widgets from the SessionState."""
        settings = self.state.settings
        widgets = [self.edit_latex, self.slider_opacity, self.combo_fps, self.chk_ascend]
        widgets += [spin for pair in self.range_spins.values() for spin in pair]
        for widget in widgets:
            widget.blockSignals(True)

        self.edit_latex.setText(self.state.markup)
        for axis, (low, high) in (("x", settings.x_range), ("y", settings.y_range), ("z", settings.z_range)):
            spin_min, spin_max = self.range_spins[axis]
            spin_min.setValue(low)
            spin_max.setValue(high)
        self.slider_opacity.setValue(round(settings.opacity * 100))
        self.combo_fps.setCurrentIndex(max(self.combo_fps.findData(settings.fps), 0))
        self.chk_ascend.setChecked(settings.ascend)

        for widget in widgets:
            widget.blockSignals(False)

        self.edit_flat.setText(self.state.snapshot.flat_expression if self.state.snapshot else "")
        self.edit_x0.clear()
        self.edit_y0.clear()
        self.lbl_status.setText("")

    # --- FUNCTION SLOTS ---

    def on_update_clicked(self) -> None:
        """Recompile the function (or only resample it when just the ranges changed)."""
        self.stop_animation()
        markup = self.edit_latex.text()
        settings = self._settings_from_widgets()

        try:
            if self.state.snapshot is not None and markup == self.state.markup:
                self.controller.resample(settings)
            else:
                self.controller.update_expression(markup, settings)
        except GradientSlideError as e:
            # The previous surface and ranges stay active
            logger.warning(f"Update rejected: {e}")
            self.on_error(str(e))
            return
        except Exception as e:
            logger.exception("Unexpected failure while updating the function")
            self.on_error(f"Could not update the function:\n{e}")
            return

        self.edit_flat.setText(self.state.snapshot.flat_expression)
        self.lbl_status.setText(self.controller.advisory)
        self.btn_profile.setEnabled(False)
        self.surface_changed.emit()
        self.path_cleared.emit()

    def _settings_from_widgets(self) -> ViewSettings:
        """Candidate settings from the range spins, applied only if the update succeeds."""
        x_min, x_max = (spin.value() for spin in self.range_spins["x"])
        y_min, y_max = (spin.value() for spin in self.range_spins["y"])
        z_min, z_max = (spin.value() for spin in self.range_spins["z"])
        return replace(
            self.state.settings,
            x_min=x_min, x_max=x_max,
            y_min=y_min, y_max=y_max,
            z_min=z_min, z_max=z_max,
        )

    def on_opacity_changed(self, value: int) -> None:
        self.state.settings.opacity = value / 100.0
        self.opacity_changed.emit(self.state.settings.opacity)

    def on_fps_changed(self, index: int) -> None:
        self.state.settings.fps = self.combo_fps.itemData(index)

    def on_direction_changed(self, checked: bool) -> None:
        self.state.settings.ascend = checked

    def set_start_point(self, x: float, y: float) -> None:
        """Called when the user right-clicks the surface."""
        self.edit_x0.setText(f"{x:.4f}")
        self.edit_y0.setText(f"{y:.4f}")

    # --- ANIMATION LOGIC ---

    def on_animate_clicked(self) -> None:
        if self.scheduler.running:
            logger.debug("Animate ignored, an animation is already running.")
            return
        if self.state.snapshot is None:
            self.on_error("Update the function before animating.")
            return

        try:
            result = self.controller.trace(self.edit_x0.text(), self.edit_y0.text())
        except GradientSlideError as e:
            self._drop_path()
            self.on_error(str(e))
            return
        except Exception as e:
            logger.exception("Path tracing failed")
            self._drop_path()
            self.on_error(f"Could not trace a path:\n{e}")
            return

        self.lbl_status.setText(
            f"{len(result)} steps ({'ascent' if result.ascend else 'descent'}), stopped: "
            f"{result.reason.value}."
        )
        self.btn_profile.setEnabled(True)
        self.path_traced.emit()

        self.set_controls_enabled(False)
        self.scheduler.start(len(result), self.state.settings.fps)

    def on_frame(self, index: int) -> None:
        self.frame_changed.emit(index)

    def on_animation_finished(self) -> None:
        self.set_controls_enabled(True)

    def stop_animation(self) -> None:
        self.scheduler.cancel()
        self.set_controls_enabled(True)

    def on_clear_clicked(self) -> None:
        """Cancel the animation and remove the path and the ball."""
        self.stop_animation()
        self._drop_path()
        self.lbl_status.setText(self.controller.advisory)

    def _drop_path(self) -> None:
        self.state.clear_path()
        self.btn_profile.setEnabled(False)
        self.path_cleared.emit()

    def set_controls_enabled(self, enabled: bool) -> None:
        for widget in (self.btn_update, self.btn_animate, self.edit_latex, self.edit_x0, self.edit_y0,
                       self.chk_ascend, self.combo_fps):
            widget.setEnabled(enabled)

    def on_error(self, msg: str) -> None:
        self.set_controls_enabled(True)
        self.lbl_status.setText(msg)
        QMessageBox.warning(self, "Error", msg)

    def on_profile_clicked(self) -> None:
        """Plot z along the current path."""
        if self.state.path is None:
            return

        try:
            dialog = PathProfileDialog(self.state.path, parent=self)
            dialog.exec()
        except Exception as e:
            logger.exception("Failed to open path profile dialog")
            QMessageBox.critical(self, "Error", f"Could not open the path profile:\n{e}")
