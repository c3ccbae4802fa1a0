"""Dialog for plotting the coordinates of a traced path against the step index."""
from __future__ import annotations

import logging

import numpy as np
import pyqtgraph as pg
from pyqtgraph.exporters import ImageExporter
from PySide6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QCheckBox, QPushButton, QWidget, QLabel, QFileDialog, QMessageBox
)
from PySide6.QtCore import Qt

from gradientslide.model.tracer import TraceResult


logger = logging.getLogger(__name__)


class PathProfileDialog(QDialog):
    """Shows z (and optionally x, y) along the waypoints of a trace."""

    # Coordinate -> (column in the waypoint array, color)
    SERIES = {
        "z": (2, '#f57c00'),
        "x": (0, '#1f77b4'),
        "y": (1, '#2ca02c'),
    }

    def __init__(self, path: TraceResult, parent: QWidget | None = None) -> None:
        """Initialize the path profile dialog.

        Args:
            path: Trace whose waypoints are plotted.
            parent: Parent widget
        """
        super().__init__(parent)
        self.path = path
        self.points = path.as_array()
        self.checkboxes: dict[str, QCheckBox] = {}

        self.setWindowTitle("Path Profile")
        self.resize(900, 550)

        self._build_ui()
        self._update_plot()

    def _build_ui(self) -> None:
        main_layout = QHBoxLayout(self)

        # Left panel: Selection controls
        left_panel = QWidget()
        left_layout = QVBoxLayout(left_panel)
        left_panel.setMaximumWidth(200)

        title = QLabel("<h3>Series</h3>")
        title.setAlignment(Qt.AlignCenter)
        left_layout.addWidget(title)

        for name in self.SERIES:
            checkbox = QCheckBox(name)
            checkbox.setChecked(name == "z")
            checkbox.stateChanged.connect(self._update_plot)
            self.checkboxes[name] = checkbox
            left_layout.addWidget(checkbox)

        direction = "ascent" if self.path.ascend else "descent"
        info = QLabel(
            f"{len(self.path)} waypoints<br>{direction}<br>stopped: {self.path.reason.value}"
        )
        info.setWordWrap(True)
        left_layout.addWidget(info)
        left_layout.addStretch()

        export_btn = QPushButton("Export Image...")
        export_btn.clicked.connect(self._export_image)
        left_layout.addWidget(export_btn)

        close_btn = QPushButton("Close")
        close_btn.clicked.connect(self.accept)
        left_layout.addWidget(close_btn)

        main_layout.addWidget(left_panel)

        # Right panel: Plot
        self.plot_widget = pg.PlotWidget()
        self.plot_widget.setBackground('w')
        self.plot_widget.showGrid(x=True, y=True, alpha=0.3)
        self.plot_widget.setLabel('bottom', 'Step', color='black')
        self.plot_widget.setLabel('left', 'Value', color='black')
        self.plot_widget.setTitle('Gradient Path Profile', color='black', size='14pt')
        for axis in ('bottom', 'left'):
            self.plot_widget.getAxis(axis).setPen('k')
            self.plot_widget.getAxis(axis).setTextPen('k')

        main_layout.addWidget(self.plot_widget)

    def _update_plot(self) -> None:
        self.plot_widget.clear()
        self.plot_widget.addLegend(offset=(10, 10))

        steps = np.arange(len(self.points))
        for name, (column, color) in self.SERIES.items():
            if not self.checkboxes[name].isChecked():
                continue
            self.plot_widget.plot(
                steps, self.points[:, column],
                pen=pg.mkPen(color=color, width=2),
                name=name,
                symbol='o',
                symbolSize=4,
                symbolBrush=color,
                symbolPen=None,
            )

        self.plot_widget.autoRange()

    def _export_image(self) -> None:
        file_path, _ = QFileDialog.getSaveFileName(
            self,
            "Save Plot As Image",
            "path_profile.png",
            "PNG image (*.png);;JPEG image (*.jpg)"
        )
        if not file_path:
            return

        try:
            exporter = ImageExporter(self.plot_widget.plotItem)
            exporter.parameters()['width'] = 1920
            exporter.export(file_path)
            logger.info(f"Plot exported to {file_path}")
        except Exception as e:
            logger.exception("Failed to export plot")
            QMessageBox.critical(self, "Export Error", f"Could not export the plot:\n{e}")
