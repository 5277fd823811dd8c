"""Logging helpers for the keyframes engine."""

from .logger import (
    get_logger,
    setup_logging,
    get_log_dir,
    is_verbose_logging,
    is_perf_metrics_enabled,
    set_perf_metrics_enabled,
)

__all__ = [
    'get_logger',
    'setup_logging',
    'get_log_dir',
    'is_verbose_logging',
    'is_perf_metrics_enabled',
    'set_perf_metrics_enabled',
]
