"""
Discrete, cycle-aware playback backend.

A Timeline plays a sorted list of keyframes over one cycle (the time of the
latest keyframe) and repeats it ``cycle_count`` times, optionally reversing
direction on every other cycle. It supports an initial delay and a playback
rate. Advancement is driven by the host calling ``tick(delta_ms)``; nothing
here blocks or owns a timer.

Keyframe handlers fire when the playhead crosses their time, in playback
order, after the values for that instant were applied:
- time 0 keyframes fire when playback begins and after each wrap back to 0
- at an auto-reverse turn the boundary keyframe fires once, not twice
"""
import bisect
import math
import time
from typing import Callable, List, Optional

from PySide6.QtCore import QObject, Signal

from keyframes.animation.types import PlaybackStatus
from keyframes.backends.keyframe import KeyFrame, Track, build_tracks
from keyframes.constants.timing import INDEFINITE, SLOW_CALLBACK_WARN_MS
from keyframes.events.event_types import ActionEvent, EventType
from keyframes.logging.logger import get_logger, is_perf_metrics_enabled, is_verbose_logging
from keyframes.logging.tags import TAG_PERF, TAG_TIMELINE

logger = get_logger(__name__)


class Timeline(QObject):
    """Full-feature keyframe player: cycles, auto-reverse, delay and rate."""

    # Signals
    started = Signal()
    cycle_completed = Signal(int)  # zero-based index of the finished cycle
    finished = Signal()

    def __init__(self, keyframes: Optional[List[KeyFrame]] = None, parent: Optional[QObject] = None):
        super().__init__(parent)

        self._keyframes: List[KeyFrame] = []
        self._tracks: List[Track] = []

        self._auto_reverse = False
        self._cycle_count = 1
        self._delay = 0.0
        self._rate = 1.0
        self._on_finished: Optional[Callable[[ActionEvent], None]] = None

        self._status = PlaybackStatus.STOPPED
        self._position = 0.0
        self._cycle = 0
        self._forward = True
        self._delay_remaining = 0.0
        self._begun = False

        for keyframe in keyframes or []:
            self.add_keyframe(keyframe)

    # ------------------------------------------------------------------
    # Keyframes and settings
    # ------------------------------------------------------------------

    def add_keyframe(self, keyframe: KeyFrame) -> None:
        """Insert a keyframe, keeping time order (stable for equal times)."""
        if self._status is not PlaybackStatus.STOPPED:
            raise RuntimeError("keyframes can only be added while the timeline is stopped")
        times = [kf.time for kf in self._keyframes]
        self._keyframes.insert(bisect.bisect_right(times, keyframe.time), keyframe)

    @property
    def keyframes(self) -> tuple:
        return tuple(self._keyframes)

    @property
    def cycle_duration(self) -> float:
        return self._keyframes[-1].time if self._keyframes else 0.0

    @property
    def total_duration(self) -> float:
        if self._cycle_count == INDEFINITE:
            return math.inf
        return self.cycle_duration * self._cycle_count

    @property
    def auto_reverse(self) -> bool:
        return self._auto_reverse

    @auto_reverse.setter
    def auto_reverse(self, value: bool) -> None:
        self._auto_reverse = bool(value)

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    @cycle_count.setter
    def cycle_count(self, value: int) -> None:
        if value != INDEFINITE and value < 1:
            raise ValueError(f"cycle_count must be >= 1 or INDEFINITE, got {value}")
        self._cycle_count = int(value)

    @property
    def delay(self) -> float:
        return self._delay

    @delay.setter
    def delay(self, value: float) -> None:
        if value < 0:
            raise ValueError(f"delay must be >= 0, got {value}")
        self._delay = float(value)

    @property
    def rate(self) -> float:
        return self._rate

    @rate.setter
    def rate(self, value: float) -> None:
        if not value > 0:
            raise ValueError(f"rate must be > 0, got {value}")
        self._rate = float(value)

    @property
    def on_finished(self) -> Optional[Callable[[ActionEvent], None]]:
        return self._on_finished

    def set_on_finished(self, callback: Optional[Callable[[ActionEvent], None]]) -> None:
        self._on_finished = callback

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def status(self) -> PlaybackStatus:
        return self._status

    def is_running(self) -> bool:
        return self._status is PlaybackStatus.RUNNING

    @property
    def current_time(self) -> float:
        """Playhead position inside the current cycle (ms)."""
        return self._position

    @property
    def current_cycle(self) -> int:
        """Zero-based index of the cycle being played."""
        return self._cycle

    # ------------------------------------------------------------------
    # Control
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start playback from the beginning, capturing the targets' current values."""
        if self._status is PlaybackStatus.RUNNING:
            logger.warning("%s Timeline already running", TAG_TIMELINE)
            return

        self._tracks = build_tracks(self._keyframes)
        for track in self._tracks:
            track.capture()

        self._position = 0.0
        self._cycle = 0
        self._forward = True
        self._delay_remaining = self._delay
        self._begun = False
        self._status = PlaybackStatus.RUNNING

        self.started.emit()
        logger.debug(
            "%s Timeline started (cycle=%.1fms, cycles=%s, reverse=%s, delay=%.1fms, rate=%.2f)",
            TAG_TIMELINE, self.cycle_duration,
            "INDEFINITE" if self._cycle_count == INDEFINITE else self._cycle_count,
            self._auto_reverse, self._delay, self._rate,
        )

    def stop(self) -> None:
        """Stop playback. The finish handler does not run."""
        if self._status is PlaybackStatus.STOPPED:
            return
        self._status = PlaybackStatus.STOPPED
        logger.debug("%s Timeline stopped at %.1fms (cycle %d)", TAG_TIMELINE, self._position, self._cycle)

    def pause(self) -> None:
        if self._status is PlaybackStatus.RUNNING:
            self._status = PlaybackStatus.PAUSED

    def resume(self) -> None:
        if self._status is PlaybackStatus.PAUSED:
            self._status = PlaybackStatus.RUNNING

    def tick(self, delta_ms: float) -> bool:
        """
        Advance playback by ``delta_ms`` of host time.

        Returns:
            False once the timeline is stopped (finished or stopped from a
            handler), True otherwise. A paused timeline stays alive.
        """
        if self._status is PlaybackStatus.PAUSED:
            return True
        if self._status is not PlaybackStatus.RUNNING:
            return False
        if delta_ms < 0:
            raise ValueError(f"delta_ms must be >= 0, got {delta_ms}")

        # Delay runs in host time, unaffected by rate.
        if self._delay_remaining > 0:
            if delta_ms < self._delay_remaining:
                self._delay_remaining -= delta_ms
                return True
            delta_ms -= self._delay_remaining
            self._delay_remaining = 0.0

        if not self._begun:
            self._begun = True
            self._fire_at_boundary(0.0)
            if self._status is not PlaybackStatus.RUNNING:
                return self._status is not PlaybackStatus.STOPPED

        # Zero-length cycles finish here even if the start firing raised last tick.
        cycle_duration = self.cycle_duration
        if cycle_duration <= 0:
            self._finish()
            return False

        remaining = delta_ms * self._rate
        while remaining > 0 and self._status is PlaybackStatus.RUNNING:
            distance = cycle_duration - self._position if self._forward else self._position
            step = min(remaining, distance)
            destination = self._position + step if self._forward else self._position - step
            self._cross(destination)
            if self._status is not PlaybackStatus.RUNNING:
                break
            self._position = destination
            remaining -= step
            if step >= distance and self._complete_cycle():
                return self._status is not PlaybackStatus.STOPPED

        if self._status is PlaybackStatus.RUNNING:
            self._apply(self._position)
            if is_verbose_logging():
                logger.debug("%s tick +%.2fms -> %.2fms (cycle %d)",
                             TAG_TIMELINE, delta_ms, self._position, self._cycle)
        return self._status is not PlaybackStatus.STOPPED

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _apply(self, position: float) -> None:
        for track in self._tracks:
            track.target.set(track.value_at(position))

    def _cross(self, destination: float) -> None:
        """Fire every keyframe strictly after the playhead up to destination."""
        if self._forward:
            crossed = [kf for kf in self._keyframes if self._position < kf.time <= destination]
        else:
            crossed = [kf for kf in reversed(self._keyframes) if destination <= kf.time < self._position]
        for keyframe in crossed:
            self._position = keyframe.time
            self._fire(keyframe)
            if self._status is not PlaybackStatus.RUNNING:
                return

    def _fire_at_boundary(self, position: float) -> None:
        self._position = position
        self._apply(position)
        for keyframe in [kf for kf in self._keyframes if kf.time == position]:
            self._fire(keyframe, apply=False)
            if self._status is not PlaybackStatus.RUNNING:
                return

    def _fire(self, keyframe: KeyFrame, apply: bool = True) -> None:
        if apply:
            self._apply(keyframe.time)
        if keyframe.on_finished is None:
            return
        event = ActionEvent(
            event_type=EventType.KEYFRAME_FINISHED,
            source=self,
            time=keyframe.time,
            cycle=self._cycle,
        )
        started = time.perf_counter()
        keyframe.on_finished(event)
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        if elapsed_ms > SLOW_CALLBACK_WARN_MS and is_perf_metrics_enabled():
            logger.warning("%s %s Slow keyframe handler at %.1fms: %.2fms",
                           TAG_PERF, TAG_TIMELINE, keyframe.time, elapsed_ms)

    def _complete_cycle(self) -> bool:
        """Book-keeping at a cycle boundary. Returns True when playback finished."""
        finished_cycle = self._cycle
        self._cycle += 1
        self.cycle_completed.emit(finished_cycle)

        if self._cycle_count != INDEFINITE and self._cycle >= self._cycle_count:
            self._cycle = finished_cycle
            self._apply(self._position)
            self._finish()
            return True

        if self._auto_reverse:
            self._forward = not self._forward
        else:
            self._fire_at_boundary(0.0)
        return self._status is not PlaybackStatus.RUNNING

    def _finish(self) -> None:
        self._status = PlaybackStatus.STOPPED
        event = ActionEvent(
            event_type=EventType.SCHEDULE_FINISHED,
            source=self,
            time=self._position,
            cycle=self._cycle,
        )
        logger.debug("%s Timeline finished after %d cycle(s)", TAG_TIMELINE, self._cycle + 1)
        try:
            if self._on_finished is not None:
                self._on_finished(event)
        finally:
            self.finished.emit()
