"""
Template-wide playback policy.
"""
import math
from dataclasses import dataclass
from typing import Optional

from keyframes.animation.interpolator import LINEAR, Interpolator, InterpolatorLike
from keyframes.animation.types import FinishCallback
from keyframes.constants.timing import DEFAULT_DURATION_MS, DEFAULT_RATE, INDEFINITE
from keyframes.errors import TemplateConfigError


@dataclass(frozen=True)
class AnimationConfig:
    """Timing and playback policy for one template."""
    duration: float = DEFAULT_DURATION_MS          # Total duration in ms (> 0)
    interpolator: Interpolator = LINEAR            # Default for actions without one
    delay: float = 0.0                             # Delay before the first cycle (ms)
    rate: float = DEFAULT_RATE                     # Playback speed multiplier (> 0)
    cycle_count: int = 1                           # >= 1 or INDEFINITE
    auto_reverse: bool = False                     # Odd cycles play backwards
    on_finish: Optional[FinishCallback] = None     # Fired once when the run completes

    def __post_init__(self):
        """Validate the config; every problem is a TemplateConfigError."""
        if not _is_finite_number(self.duration) or self.duration <= 0:
            raise TemplateConfigError(f"duration must be > 0 ms, got {self.duration!r}")
        if not _is_finite_number(self.delay) or self.delay < 0:
            raise TemplateConfigError(f"delay must be >= 0 ms, got {self.delay!r}")
        if not _is_finite_number(self.rate) or self.rate <= 0:
            raise TemplateConfigError(f"rate must be > 0, got {self.rate!r}")
        if (isinstance(self.cycle_count, bool) or not isinstance(self.cycle_count, int)
                or (self.cycle_count < 1 and self.cycle_count != INDEFINITE)):
            raise TemplateConfigError(
                f"cycle_count must be >= 1 or INDEFINITE, got {self.cycle_count!r}"
            )
        if not isinstance(self.interpolator, Interpolator):
            raise TemplateConfigError(f"interpolator must be an Interpolator, got {self.interpolator!r}")
        if self.on_finish is not None and not callable(self.on_finish):
            raise TemplateConfigError("on_finish requires a callable")

    @staticmethod
    def builder() -> "AnimationConfigBuilder":
        return AnimationConfigBuilder()

    @property
    def is_indefinite(self) -> bool:
        return self.cycle_count == INDEFINITE

    def handle_on_finish(self, event) -> None:
        if self.on_finish is not None:
            self.on_finish(event)


def _is_finite_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


class AnimationConfigBuilder:
    """Collects config settings; validation happens in build()."""

    def __init__(self):
        self._values = {}

    def duration(self, duration_ms: float) -> "AnimationConfigBuilder":
        self._values["duration"] = duration_ms
        return self

    def interpolator(self, interpolator: InterpolatorLike) -> "AnimationConfigBuilder":
        try:
            self._values["interpolator"] = Interpolator.of(interpolator)
        except TypeError as e:
            raise TemplateConfigError(str(e)) from e
        return self

    def delay(self, delay_ms: float) -> "AnimationConfigBuilder":
        self._values["delay"] = delay_ms
        return self

    def rate(self, rate: float) -> "AnimationConfigBuilder":
        self._values["rate"] = rate
        return self

    def cycle_count(self, count: int) -> "AnimationConfigBuilder":
        self._values["cycle_count"] = count
        return self

    def infinite(self) -> "AnimationConfigBuilder":
        return self.cycle_count(INDEFINITE)

    def auto_reverse(self, enabled: bool = True) -> "AnimationConfigBuilder":
        self._values["auto_reverse"] = bool(enabled)
        return self

    def on_finish(self, callback: FinishCallback) -> "AnimationConfigBuilder":
        self._values["on_finish"] = callback
        return self

    def build(self) -> AnimationConfig:
        return AnimationConfig(**self._values)
