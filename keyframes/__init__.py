"""
Keyframe animation templates.

Describe an animation once as a percent -> actions template, then compile
it into a Timeline (cycles, auto-reverse, per-keyframe handlers) or an
AnimationTimer (single forward pass on a running clock).
"""

from .animation import (
    AnimationAction,
    AnimationConfig,
    AnimationTemplate,
    ConditionalInterpolator,
    Interpolator,
    ValueProperty,
    AttributeProperty,
    QtProperty,
    LINEAR,
    DISCRETE,
    EASE_IN,
    EASE_OUT,
    EASE_BOTH,
    INDEFINITE,
)
from .backends import AnimationTimer, Timeline
from .compilers import (
    ContinuousScheduleCompiler,
    DiscreteScheduleCompiler,
    build_animation_timer,
    build_timeline,
)
from .constants import millis, seconds
from .driver import FrameDriver
from .errors import CallbackError, CheckpointRejectedError, KeyframesError, TemplateConfigError
from .events import ActionEvent, EventType

__version__ = "0.1.0"

__all__ = [
    'AnimationAction',
    'AnimationConfig',
    'AnimationTemplate',
    'ConditionalInterpolator',
    'Interpolator',
    'ValueProperty',
    'AttributeProperty',
    'QtProperty',
    'LINEAR',
    'DISCRETE',
    'EASE_IN',
    'EASE_OUT',
    'EASE_BOTH',
    'INDEFINITE',
    'AnimationTimer',
    'Timeline',
    'ContinuousScheduleCompiler',
    'DiscreteScheduleCompiler',
    'build_animation_timer',
    'build_timeline',
    'millis',
    'seconds',
    'FrameDriver',
    'CallbackError',
    'CheckpointRejectedError',
    'KeyframesError',
    'TemplateConfigError',
    'ActionEvent',
    'EventType',
]
