"""Timing constants for the keyframes engine.

All timing values are in milliseconds unless otherwise noted.
"""

# =============================================================================
# Templates
# =============================================================================

DEFAULT_DURATION_MS = 1000.0
"""Template duration used when a config does not set one."""

DEFAULT_RATE = 1.0
"""Playback speed multiplier (1.0 = real time)."""

INDEFINITE = -1
"""Cycle count sentinel: repeat until stopped."""

# =============================================================================
# Host Loop
# =============================================================================

DEFAULT_FPS = 60
"""Target frames per second for FrameDriver."""

MIN_FPS = 10
"""Lowest accepted FrameDriver target FPS."""

MAX_FPS = 240
"""Highest accepted FrameDriver target FPS."""

MAX_FRAME_DELTA_MS = 500.0
"""Largest delta fed to a schedule in one host tick (stall clamp)."""

# =============================================================================
# Diagnostics
# =============================================================================

SLOW_CALLBACK_WARN_MS = 30.0
"""Keyframe callbacks slower than this are reported under [PERF]."""

SLOW_TICK_WARN_MS = 50.0
"""Schedule ticks slower than this are reported under [PERF]."""


def millis(value: float) -> float:
    """Return a duration expressed in milliseconds."""
    return float(value)


def seconds(value: float) -> float:
    """Convert seconds to the engine's millisecond unit."""
    return float(value) * 1000.0
