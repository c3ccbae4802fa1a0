"""
Main Application Window
=======================
The primary GUI container that holds the Menu Bar, the function panel and the
3D view.

Why is this file needed?
------------------------
1. Layout: It organizes the high-level visual structure of the application.
2. Routing: It connects the panel's signals to the renderer and global
   actions (like File -> New) to the state.
"""
from PySide6.QtWidgets import QMainWindow, QWidget, QVBoxLayout, QSplitter
from PySide6.QtCore import Qt
from PySide6.QtGui import QAction

from gradientslide.model.state import SessionState
from gradientslide.view.panels.function_panel import FunctionControlPanel
from gradientslide.view.widgets.plot_3d import PyVistaWidget


VISIBLE_APP_NAME = "Gradient Slide"


class MainWindow(QMainWindow):
    def __init__(self, state: SessionState) -> None:
        super().__init__()
        self.state: SessionState = state

        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(1400, 900)

        # --- MAIN CONTAINER ---
        main_widget = QWidget()
        self.setCentralWidget(main_widget)

        main_layout = QVBoxLayout(main_widget)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)

        splitter = QSplitter(Qt.Horizontal)
        main_layout.addWidget(splitter)

        # --- LEFT SIDE: Controls ---
        self.function_panel = FunctionControlPanel(self.state)
        splitter.addWidget(self.function_panel)

        # --- RIGHT SIDE: 3D Visualization ---
        self.visualizer = PyVistaWidget()
        splitter.addWidget(self.visualizer)

        # Set initial proportions (1 part sidebar : 3 parts 3D view)
        splitter.setSizes([350, 1050])

        # --- SIGNAL CONNECTIONS ---
        # 1. Function recompiled -> redraw surface
        self.function_panel.surface_changed.connect(self.on_surface_changed)
        self.function_panel.opacity_changed.connect(self.visualizer.set_opacity)

        # 2. Path lifecycle
        self.function_panel.path_traced.connect(self.on_path_traced)
        self.function_panel.frame_changed.connect(self.visualizer.move_ball)
        self.function_panel.path_cleared.connect(self.visualizer.clear_path)

        # 3. Right-click on the surface -> start point
        self.visualizer.point_picked.connect(self.function_panel.set_start_point)

        # --- ACTIONS & MENUS ---
        self._create_actions()
        self._create_menus()

        # Initial Render
        self.function_panel.on_update_clicked()

    def _create_actions(self) -> None:
        self.act_new = QAction("New Session", self)
        self.act_new.setShortcut("Ctrl+N")
        self.act_new.triggered.connect(self.on_file_new)

        self.act_exit = QAction("Exit", self)
        self.act_exit.triggered.connect(self.close)

        self.act_profile = QAction("Path Profile...", self)
        self.act_profile.triggered.connect(self.function_panel.on_profile_clicked)

        self.act_clear = QAction("Clear Path", self)
        self.act_clear.triggered.connect(self.function_panel.on_clear_clicked)

    def _create_menus(self) -> None:
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        file_menu.addAction(self.act_new)
        file_menu.addSeparator()
        file_menu.addAction(self.act_exit)

        path_menu = menu_bar.addMenu("&Path")
        path_menu.addAction(self.act_profile)
        path_menu.addAction(self.act_clear)

    # --- SLOTS ---

    def on_surface_changed(self) -> None:
        if self.state.surface is not None:
            self.visualizer.show_surface(self.state.surface, self.state.settings)

    def on_path_traced(self) -> None:
        if self.state.path is not None:
            self.visualizer.show_path(self.state.path.as_array())

    def on_file_new(self) -> None:
        self.function_panel.stop_animation()
        self.state.reset()
        self.function_panel.load_from_state()
        self.function_panel.on_update_clicked()

    def closeEvent(self, event, /) -> None:
        self.function_panel.stop_animation()

        # Close the PyVista plotter safely
        if self.visualizer and self.visualizer.plotter:
            self.visualizer.plotter.close()

        event.accept()
