"""
Keyframes, key values and per-target tracks shared by both backends.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from keyframes.animation.interpolator import LINEAR, Interpolator
from keyframes.animation.properties import WritableProperty


def _always() -> bool:
    return True


@dataclass(frozen=True)
class KeyValue:
    """Target value reached at a keyframe, with the interpolator leading to it."""
    target: WritableProperty
    end_value: Any
    interpolator: Interpolator = LINEAR


@dataclass(frozen=True)
class KeyFrame:
    """Discrete-backend keyframe: time (ms), values and a completion handler."""
    time: float
    values: Tuple[KeyValue, ...] = ()
    on_finished: Optional[Callable[[Any], None]] = None

    def __post_init__(self):
        if self.time < 0:
            raise ValueError(f"keyframe time must be >= 0, got {self.time}")


@dataclass(frozen=True)
class TimerKeyValue(KeyValue):
    """Continuous-backend key value; skipped on frames where the condition is false."""
    animate_condition: Callable[[], bool] = field(default=_always)


@dataclass(frozen=True)
class TimerKeyFrame:
    """Continuous-backend checkpoint: time (ms) and values. No handler."""
    time: float
    values: Tuple[TimerKeyValue, ...] = ()

    def __post_init__(self):
        if self.time < 0:
            raise ValueError(f"checkpoint time must be >= 0, got {self.time}")


class Track:
    """
    Every key value of one target, ordered by time.

    The segment ending at a key value is driven by that key value's
    interpolator; the first segment starts from the value captured by
    ``capture()`` at time 0. Past the last key value the track holds.
    """

    def __init__(self, target: WritableProperty, points: List[Tuple[float, KeyValue]]):
        if not points:
            raise ValueError("a track needs at least one key value")
        self.target = target
        self.points = sorted(points, key=lambda p: p[0])
        self.start_value: Any = None

    def capture(self) -> None:
        self.start_value = self.target.get()

    def segment_at(self, t: float) -> Tuple[KeyValue, Any, float]:
        """(key value ahead of t, segment start value, fraction) at time t."""
        seg_time, seg_value = 0.0, self.start_value
        last = len(self.points) - 1
        for index, (time, key_value) in enumerate(self.points):
            if t <= time or index == last:
                span = time - seg_time
                fraction = 1.0 if span <= 0 else min(1.0, max(0.0, (t - seg_time) / span))
                return key_value, seg_value, fraction
            seg_time, seg_value = time, key_value.end_value
        raise AssertionError("unreachable")

    def value_at(self, t: float) -> Any:
        key_value, start, fraction = self.segment_at(t)
        return key_value.interpolator.interpolate(start, key_value.end_value, fraction)


def build_tracks(keyframes: Iterable[Any]) -> List[Track]:
    """Group key values by target identity, in first-seen order."""
    grouped: Dict[int, Tuple[WritableProperty, List[Tuple[float, KeyValue]]]] = {}
    for keyframe in keyframes:
        for key_value in keyframe.values:
            entry = grouped.setdefault(id(key_value.target), (key_value.target, []))
            entry[1].append((keyframe.time, key_value))
    return [Track(target, points) for target, points in grouped.values()]
