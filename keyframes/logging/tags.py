"""Standard logging tags for consistent log filtering.

Usage:
    from keyframes.logging.tags import TAG_PERF, TAG_TIMELINE
    logger.info(f"{TAG_PERF} Tick took {elapsed:.2f}ms")
"""

# =============================================================================
# Performance and Metrics
# =============================================================================

TAG_PERF = "[PERF]"
"""Performance metrics (only emitted when perf metrics are enabled)."""

TAG_ANIM = "[ANIM]"
"""Host loop and general animation plumbing."""

# =============================================================================
# Components
# =============================================================================

TAG_COMPILE = "[COMPILE]"
"""Template to schedule compilation."""

TAG_TIMELINE = "[TIMELINE]"
"""Discrete (cycle-aware) backend."""

TAG_TIMER = "[TIMER]"
"""Continuous (running clock) backend."""

TAG_GATE = "[GATE]"
"""Conditional interpolator state changes."""

# =============================================================================
# Status
# =============================================================================

TAG_FALLBACK = "[FALLBACK]"
"""Degraded path taken instead of the primary one."""

__all__ = [
    "TAG_PERF",
    "TAG_ANIM",
    "TAG_COMPILE",
    "TAG_TIMELINE",
    "TAG_TIMER",
    "TAG_GATE",
    "TAG_FALLBACK",
]
