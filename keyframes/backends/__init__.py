"""Playback backends the compilers target."""

from .keyframe import KeyFrame, KeyValue, TimerKeyFrame, TimerKeyValue, Track
from .timeline import Timeline
from .animation_timer import AnimationTimer

__all__ = [
    'KeyFrame',
    'KeyValue',
    'TimerKeyFrame',
    'TimerKeyValue',
    'Track',
    'Timeline',
    'AnimationTimer',
]
