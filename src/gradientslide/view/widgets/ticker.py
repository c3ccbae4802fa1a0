"""
Qt Tick Source
Feeds the AnimationScheduler from the Qt event loop, roughly once per
display refresh, with timestamps from a monotonic QElapsedTimer.
"""
from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QElapsedTimer, QObject, QTimer

from gradientslide.config import TICK_INTERVAL_MS
from gradientslide.model.animation import TickCallback


class QtTickSource(QObject):
    def __init__(self, interval_ms: int = TICK_INTERVAL_MS, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self.interval_ms = interval_ms
        self._clock = QElapsedTimer()
        self._clock.start()

    def request(self, callback: TickCallback) -> QTimer:
        timer = QTimer(self)
        timer.setSingleShot(True)
        timer.setInterval(self.interval_ms)
        timer.timeout.connect(lambda: self._fire(timer, callback))
        timer.start()
        return timer

    def cancel(self, handle: object) -> None:
        if isinstance(handle, QTimer):
            handle.stop()
            handle.deleteLater()

    def _fire(self, timer: QTimer, callback: TickCallback) -> None:
        timer.deleteLater()
        callback(float(self._clock.elapsed()))
