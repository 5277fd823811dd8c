"""
Template layer: actions, configs, templates and the interpolation pieces
they are built from. Backends and compilers live outside this package.
"""

from .types import (
    EasingCurve,
    PlaybackStatus,
    GateState,
    RejectionPolicy,
    CallbackFailurePolicy,
    INDEFINITE,
)
from .easing import cubic_bezier, get_easing_function
from .interpolator import (
    Interpolator,
    blend,
    LINEAR,
    DISCRETE,
    EASE_IN,
    EASE_OUT,
    EASE_BOTH,
)
from .properties import WritableProperty, ValueProperty, AttributeProperty, QtProperty
from .action import AnimationAction, AnimationActionBuilder
from .config import AnimationConfig, AnimationConfigBuilder
from .template import AnimationTemplate, AnimationTemplateBuilder
from .conditional import ConditionalInterpolator
from .callbacks import ActionFinishHandler, CombinedCallback

__all__ = [
    # Types
    'EasingCurve',
    'PlaybackStatus',
    'GateState',
    'RejectionPolicy',
    'CallbackFailurePolicy',
    'INDEFINITE',
    # Interpolation
    'cubic_bezier',
    'get_easing_function',
    'Interpolator',
    'blend',
    'LINEAR',
    'DISCRETE',
    'EASE_IN',
    'EASE_OUT',
    'EASE_BOTH',
    'ConditionalInterpolator',
    # Targets
    'WritableProperty',
    'ValueProperty',
    'AttributeProperty',
    'QtProperty',
    # Templates
    'AnimationAction',
    'AnimationActionBuilder',
    'AnimationConfig',
    'AnimationConfigBuilder',
    'AnimationTemplate',
    'AnimationTemplateBuilder',
    # Completion
    'ActionFinishHandler',
    'CombinedCallback',
]
