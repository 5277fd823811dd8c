"""
Continuous, running-clock playback backend.

An AnimationTimer is fed absolute timestamps (``handle(now_ms)``) or frame
deltas (``tick(delta_ms)``) and plays its checkpoints forward exactly once
per ``start()``. It has no cycles, reversal, delay, rate or per-checkpoint
handlers. Each frame, a key value whose ``animate_condition()`` is false
leaves its target untouched for that frame.
"""
from typing import Callable, List, Optional

from PySide6.QtCore import QObject, Signal

from keyframes.backends.keyframe import TimerKeyFrame, Track, build_tracks
from keyframes.errors import CheckpointRejectedError
from keyframes.logging.logger import get_logger, is_verbose_logging
from keyframes.logging.tags import TAG_TIMER

logger = get_logger(__name__)


class AnimationTimer(QObject):
    """Forward-only checkpoint player driven by a running clock."""

    finished = Signal()

    def __init__(self, *keyframes: TimerKeyFrame, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._keyframes: List[TimerKeyFrame] = []
        self._tracks: List[Track] = []
        self._running = False
        self._start_time: Optional[float] = None
        self._clock = 0.0
        self._elapsed = 0.0
        self._on_finished: Optional[Callable[[], None]] = None

        for keyframe in keyframes:
            self.add_keyframe(keyframe)

    def add_keyframe(self, keyframe: TimerKeyFrame) -> None:
        """Append a checkpoint.

        Raises:
            CheckpointRejectedError: the timer is running.
        """
        if self._running:
            raise CheckpointRejectedError(
                f"cannot add checkpoint at {keyframe.time}ms while the timer is running"
            )
        self._keyframes.append(keyframe)

    @property
    def keyframes(self) -> tuple:
        return tuple(self._keyframes)

    @property
    def total_duration(self) -> float:
        return max((kf.time for kf in self._keyframes), default=0.0)

    @property
    def elapsed(self) -> float:
        return self._elapsed

    def set_on_finished(self, callback: Optional[Callable[[], None]]) -> None:
        self._on_finished = callback

    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            logger.warning("%s AnimationTimer already running", TAG_TIMER)
            return
        self._tracks = build_tracks(self._keyframes)
        for track in self._tracks:
            track.capture()
        self._start_time = None
        self._clock = 0.0
        self._elapsed = 0.0
        self._running = True
        logger.debug("%s AnimationTimer started (%d checkpoints, %.1fms)",
                     TAG_TIMER, len(self._keyframes), self.total_duration)

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        logger.debug("%s AnimationTimer stopped at %.1fms", TAG_TIMER, self._elapsed)

    def handle(self, now_ms: float) -> None:
        """Process one frame at absolute clock time ``now_ms``.

        The first frame after ``start()`` anchors the clock.
        """
        if not self._running:
            return
        if self._start_time is None:
            self._start_time = now_ms
        self._elapsed = max(0.0, now_ms - self._start_time)

        total = self.total_duration
        position = min(self._elapsed, total)
        for track in self._tracks:
            key_value, start, fraction = track.segment_at(position)
            if not key_value.animate_condition():
                continue
            track.target.set(key_value.interpolator.interpolate(start, key_value.end_value, fraction))

        if is_verbose_logging():
            logger.debug("%s frame at %.2fms", TAG_TIMER, self._elapsed)

        if self._elapsed >= total:
            self._running = False
            logger.debug("%s AnimationTimer finished", TAG_TIMER)
            try:
                if self._on_finished is not None:
                    self._on_finished()
            finally:
                self.finished.emit()

    def tick(self, delta_ms: float) -> bool:
        """Advance the internal clock by ``delta_ms`` and process a frame."""
        if not self._running:
            return False
        if delta_ms < 0:
            raise ValueError(f"delta_ms must be >= 0, got {delta_ms}")
        if self._start_time is not None:
            self._clock += delta_ms
        self.handle(self._clock)
        return self._running

    def apply_end_values(self) -> None:
        """Jump every gated-in key value straight to its end value."""
        for keyframe in self._keyframes:
            for key_value in keyframe.values:
                if key_value.animate_condition():
                    key_value.target.set(key_value.end_value)
