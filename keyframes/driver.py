"""
Host loop for compiled schedules.

FrameDriver owns one precise QTimer and ticks every attached schedule
(Timeline, AnimationTimer, or anything else with ``tick(delta_ms)``) once
per frame. It must live on the thread that owns the animated targets; it
does no locking of its own.

FRAME PACING: the delta handed to schedules is measured with a monotonic
clock, not derived from the timer interval, and clamped to
MAX_FRAME_DELTA_MS so a stalled event loop does not teleport animations.
"""
import time
from typing import Any, Dict, Optional

from PySide6.QtCore import QObject, QTimer, Qt, Signal

from keyframes.constants.timing import (
    DEFAULT_FPS,
    MAX_FPS,
    MAX_FRAME_DELTA_MS,
    MIN_FPS,
    SLOW_TICK_WARN_MS,
)
from keyframes.logging.logger import get_logger, is_perf_metrics_enabled
from keyframes.logging.tags import TAG_ANIM, TAG_PERF
from keyframes.utils.decorators import suppress_exceptions

logger = get_logger(__name__)


class FrameDriver(QObject):
    """Drives attached schedules from a single QTimer."""

    schedule_finished = Signal(object)  # the schedule that stopped

    def __init__(self, fps: int = DEFAULT_FPS, parent: Optional[QObject] = None):
        """
        Initialize the driver.

        Args:
            fps: Target frames per second (clamped to MIN_FPS..MAX_FPS)
            parent: Optional Qt parent
        """
        super().__init__(parent)

        self.fps = max(MIN_FPS, min(MAX_FPS, int(fps)))
        self.frame_time_ms = 1000.0 / self.fps

        self._schedules: Dict[int, Any] = {}
        self._last_frame_ts: Optional[float] = None

        # Per-run profiling for `[PERF] [ANIM]` metrics, reset on every start.
        self._profile_start_ts: Optional[float] = None
        self._profile_last_ts: Optional[float] = None
        self._profile_frame_count: int = 0
        self._profile_min_dt: float = 0.0
        self._profile_max_dt: float = 0.0

        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.setInterval(int(self.frame_time_ms))
        self._timer.timeout.connect(self._on_frame)

        logger.debug("%s FrameDriver initialized (fps=%d)", TAG_ANIM, self.fps)

    def set_target_fps(self, fps: int) -> None:
        """Update target FPS and reconfigure the timer interval."""
        new_fps = max(MIN_FPS, min(MAX_FPS, int(fps)))
        if new_fps == self.fps:
            return
        self.fps = new_fps
        self.frame_time_ms = 1000.0 / self.fps
        self._timer.setInterval(int(self.frame_time_ms))
        logger.info("%s FrameDriver target FPS set to %d", TAG_ANIM, self.fps)

    def is_active(self) -> bool:
        return self._timer.isActive()

    def get_active_count(self) -> int:
        return len(self._schedules)

    def add(self, schedule: Any) -> None:
        """Attach a started schedule; the timer starts if it was idle."""
        if not callable(getattr(schedule, "tick", None)):
            raise TypeError(f"{schedule!r} has no tick(delta_ms) method")
        self._schedules[id(schedule)] = schedule
        if not self._timer.isActive():
            self.start()

    def remove(self, schedule: Any) -> bool:
        """Detach a schedule without stopping it. Returns True if it was attached."""
        removed = self._schedules.pop(id(schedule), None) is not None
        if not self._schedules and self._timer.isActive():
            self.stop()
        return removed

    def start(self) -> None:
        if self._timer.isActive():
            return
        now = time.perf_counter()
        self._last_frame_ts = now
        self._profile_start_ts = now
        self._profile_last_ts = None
        self._profile_frame_count = 0
        self._profile_min_dt = 0.0
        self._profile_max_dt = 0.0
        self._timer.start()
        logger.debug("%s FrameDriver started", TAG_ANIM)

    def stop(self) -> None:
        if self._timer.isActive():
            self._timer.stop()
            self._log_profile_summary()
            logger.debug("%s FrameDriver stopped", TAG_ANIM)

    def advance(self, delta_ms: float) -> None:
        """Tick every attached schedule by ``delta_ms``; detach finished ones."""
        for key, schedule in list(self._schedules.items()):
            tick_start = time.perf_counter()
            try:
                alive = schedule.tick(delta_ms)
            except Exception as e:
                # The failing schedule stays attached; the others still get this frame.
                logger.error("%s Error ticking %r: %s", TAG_ANIM, schedule, e, exc_info=True)
                continue
            tick_ms = (time.perf_counter() - tick_start) * 1000.0
            if tick_ms > SLOW_TICK_WARN_MS and is_perf_metrics_enabled():
                logger.warning("%s %s Slow schedule tick (%r): %.2fms",
                               TAG_PERF, TAG_ANIM, schedule, tick_ms)
            if not alive:
                self._schedules.pop(key, None)
                self.schedule_finished.emit(schedule)

        if not self._schedules and self._timer.isActive():
            self.stop()

    def _on_frame(self) -> None:
        """Timer callback: measure the real frame delta and advance."""
        now = time.perf_counter()
        if self._last_frame_ts is None:
            self._last_frame_ts = now
            return
        delta_ms = (now - self._last_frame_ts) * 1000.0
        self._last_frame_ts = now

        if delta_ms > MAX_FRAME_DELTA_MS:
            if is_perf_metrics_enabled():
                logger.info(
                    "%s %s Large frame dt=%.2fms clamped to %.0fms (target=%.2fms, active=%d)",
                    TAG_PERF, TAG_ANIM, delta_ms, MAX_FRAME_DELTA_MS,
                    self.frame_time_ms, len(self._schedules),
                )
            delta_ms = MAX_FRAME_DELTA_MS

        if delta_ms > 0.0:
            if self._profile_min_dt == 0.0 or delta_ms < self._profile_min_dt:
                self._profile_min_dt = delta_ms
            if delta_ms > self._profile_max_dt:
                self._profile_max_dt = delta_ms
        self._profile_last_ts = now
        self._profile_frame_count += 1

        self.advance(delta_ms)

    @suppress_exceptions(logger, f"{TAG_ANIM} Metrics logging failed", log_level="debug")
    def _log_profile_summary(self) -> None:
        """Emit a concise `[PERF] [ANIM]` summary for the last active run."""
        try:
            if (
                is_perf_metrics_enabled()
                and self._profile_start_ts is not None
                and self._profile_last_ts is not None
                and self._profile_frame_count > 0
            ):
                elapsed = max(0.0, self._profile_last_ts - self._profile_start_ts)
                if elapsed > 0.0:
                    logger.info(
                        "%s %s FrameDriver metrics: duration=%.1fms, frames=%d, "
                        "avg_fps=%.1f, dt_min=%.2fms, dt_max=%.2fms, fps_target=%d",
                        TAG_PERF, TAG_ANIM,
                        elapsed * 1000.0,
                        self._profile_frame_count,
                        self._profile_frame_count / elapsed,
                        self._profile_min_dt,
                        self._profile_max_dt,
                        self.fps,
                    )
        finally:
            self._profile_start_ts = None
            self._profile_last_ts = None
            self._profile_frame_count = 0
            self._profile_min_dt = 0.0
            self._profile_max_dt = 0.0
