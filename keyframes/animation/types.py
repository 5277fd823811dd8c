"""
Animation types and enums.

Defines the enums shared by the template data model, the compilers and the
two execution backends.
"""
from enum import Enum
from typing import Any, Callable

from keyframes.constants.timing import INDEFINITE


class EasingCurve(Enum):
    """
    Easing curves available through Interpolator.from_easing().

    Easing functions control the rate of change of the animated value over time.
    """
    # Basic
    LINEAR = "linear"
    DISCRETE = "discrete"

    # Quadratic
    QUAD_IN = "quad_in"
    QUAD_OUT = "quad_out"
    QUAD_IN_OUT = "quad_in_out"

    # Cubic
    CUBIC_IN = "cubic_in"
    CUBIC_OUT = "cubic_out"
    CUBIC_IN_OUT = "cubic_in_out"

    # Sine
    SINE_IN = "sine_in"
    SINE_OUT = "sine_out"
    SINE_IN_OUT = "sine_in_out"

    # Exponential
    EXPO_IN = "expo_in"
    EXPO_OUT = "expo_out"
    EXPO_IN_OUT = "expo_in_out"

    # Elastic
    ELASTIC_IN = "elastic_in"
    ELASTIC_OUT = "elastic_out"
    ELASTIC_IN_OUT = "elastic_in_out"

    # Back
    BACK_IN = "back_in"
    BACK_OUT = "back_out"
    BACK_IN_OUT = "back_in_out"

    # Bounce
    BOUNCE_IN = "bounce_in"
    BOUNCE_OUT = "bounce_out"
    BOUNCE_IN_OUT = "bounce_in_out"


class PlaybackStatus(Enum):
    """Status of a compiled schedule."""
    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"


class GateState(Enum):
    """State of a ConditionalInterpolator."""
    ARMED = "armed"      # Gate open, interpolation advances
    FROZEN = "frozen"    # Gate closed at least once, output pinned


class RejectionPolicy(Enum):
    """What the continuous compiler does with a refused checkpoint."""
    IGNORE = "ignore"    # Drop it silently
    LOG = "log"          # Drop it and log a warning
    RAISE = "raise"      # Propagate CheckpointRejectedError


class CallbackFailurePolicy(Enum):
    """How a combined completion callback treats failing handlers."""
    PROPAGATE = "propagate"  # Run every handler, then raise CallbackError
    ISOLATE = "isolate"      # Log each failure and carry on


# Type aliases for callbacks
FinishCallback = Callable[[Any], None]      # receives an ActionEvent
GatePredicate = Callable[[], bool]

__all__ = [
    'EasingCurve',
    'PlaybackStatus',
    'GateState',
    'RejectionPolicy',
    'CallbackFailurePolicy',
    'FinishCallback',
    'GatePredicate',
    'INDEFINITE',
]
