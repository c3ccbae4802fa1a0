"""
Animation Scheduler
===================
Replays a waypoint sequence at a target frame rate, independent of how often
the host actually calls back.

Why is this file needed?
------------------------
Display refresh callbacks jitter and slow down under load. The scheduler
keeps a time debt and skips frames to stay wall-clock accurate, so a 10 s
path always takes 10 s, however sluggish the display.

The host integration is injected as a TickSource (request a callback, cancel
a pending one). Cancelling drops the pending handle; the callback itself
never checks a flag.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)

TickCallback = Callable[[float], None]


class TickSource(Protocol):
    """Host capability: 'call me back on the next display refresh'."""

    def request(self, callback: TickCallback) -> object:
        """Schedule ``callback(timestamp_ms)`` once, return a handle."""
        ...

    def cancel(self, handle: object) -> None:
        """Drop a pending callback."""
        ...


@dataclass
class AnimationState:
    frame: int = 0
    time_debt: float = 0.0
    last_timestamp: Optional[float] = None
    running: bool = False


class AnimationScheduler:
    """
    Drives ``on_frame(index)`` over indices 0..count-1 at ``fps``.

    Only one replay is live at a time; start() discards any previous one.
    """

    def __init__(
        self,
        tick_source: TickSource,
        on_frame: Callable[[int], None],
        on_finished: Optional[Callable[[], None]] = None,
    ) -> None:
        self.tick_source = tick_source
        self.on_frame = on_frame
        self.on_finished = on_finished

        self.state = AnimationState()
        self.frame_count = 0
        self.interval = 0.0
        self._handle: Optional[object] = None

    @property
    def running(self) -> bool:
        return self.state.running

    def start(self, frame_count: int, fps: float) -> None:
        """
        Begin replaying ``frame_count`` frames.

        Args:
            frame_count: Number of waypoints.
            fps: Target logical frames per second.
        """
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}.")

        self.cancel()
        self.state = AnimationState(running=True)
        self.frame_count = frame_count
        self.interval = 1000.0 / fps
        logger.info(f"Animating {frame_count} frame(s) at {fps} FPS.")
        self._handle = self.tick_source.request(self._on_tick)

    def cancel(self) -> None:
        """Stop without calling on_finished."""
        if self._handle is not None:
            self.tick_source.cancel(self._handle)
            self._handle = None
        self.state.running = False

    def _on_tick(self, timestamp: float) -> None:
        state = self.state
        if state.last_timestamp is None:
            state.last_timestamp = timestamp
        state.time_debt += timestamp - state.last_timestamp
        state.last_timestamp = timestamp

        frames_to_advance = math.floor(state.time_debt / self.interval)
        if frames_to_advance >= 1:
            state.time_debt -= frames_to_advance * self.interval
            state.frame += frames_to_advance

        last_index = self.frame_count - 1
        if state.frame >= last_index:
            state.frame = max(last_index, 0)
            self.on_frame(state.frame)
            self._finish()
            return

        self.on_frame(state.frame)
        self._handle = self.tick_source.request(self._on_tick)

    def _finish(self) -> None:
        self._handle = None
        self.state.running = False
        logger.debug("Animation finished.")
        if self.on_finished is not None:
            self.on_finished()
