"""Engine-wide constants."""

from .timing import (
    DEFAULT_DURATION_MS,
    DEFAULT_RATE,
    DEFAULT_FPS,
    INDEFINITE,
    MAX_FRAME_DELTA_MS,
    millis,
    seconds,
)

__all__ = [
    'DEFAULT_DURATION_MS',
    'DEFAULT_RATE',
    'DEFAULT_FPS',
    'INDEFINITE',
    'MAX_FRAME_DELTA_MS',
    'millis',
    'seconds',
]
