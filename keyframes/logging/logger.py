"""
Logging configuration for the keyframes engine.

Uses a rotating file handler with logs stored in a logs/ directory and an
optional colored console handler for debug sessions.
"""
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


_VERBOSE: bool = False
_PERF_METRICS_ENABLED: bool = False
_LOG_DIR: Path = Path.cwd() / "logs"

_env_perf = os.getenv("KEYFRAMES_PERF_METRICS")
if _env_perf is not None:
    if _env_perf.strip().lower() in ("0", "false", "off", "no"):
        _PERF_METRICS_ENABLED = False
    elif _env_perf.strip().lower() in ("1", "true", "on", "yes"):
        _PERF_METRICS_ENABLED = True

LOG_FORMAT = '%(asctime)s - %(name)-30s - %(levelname)-8s - %(message)s'


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors to console output."""

    COLORS = {
        'DEBUG': '\033[36m',       # Cyan
        'INFO': '\033[32m',        # Green
        'WARNING': '\033[33m',     # Yellow
        'ERROR': '\033[31m',       # Red
        'CRITICAL': '\033[35m',    # Magenta
    }
    FALLBACK_COLOR = '\033[38;5;208m'
    RESET = '\033[0m'
    BOLD = '\033[1m'

    def format(self, record):
        original_levelname = record.levelname

        if '[FALLBACK]' in str(record.msg):
            color = self.FALLBACK_COLOR
        else:
            color = self.COLORS.get(record.levelname)

        if color is None:
            return super().format(record)

        record.levelname = f"{self.BOLD}{color}{record.levelname}{self.RESET}"
        try:
            message = super().format(record)
        finally:
            record.levelname = original_levelname
        return f"{color}{message}{self.RESET}"


class SuppressingStreamHandler(logging.StreamHandler):
    """Stream handler that collapses consecutive lines from the same source.

    Repeated DEBUG/INFO lines from one logger/level (a timeline ticking at
    60 FPS, for example) are folded into a single "[N Suppressed]" summary.
    WARNING and above always pass through. File logs are unaffected.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._last_key: Optional[tuple] = None
        self._suppress_count: int = 0
        self._last_record: Optional[logging.LogRecord] = None

    def emit(self, record: logging.LogRecord) -> None:
        try:
            if record.levelno >= logging.WARNING:
                self._flush_summary()
                self._last_key = None
                super().emit(record)
                return

            key = (record.name, record.levelno)
            if key == self._last_key:
                self._suppress_count += 1
                self._last_record = record
                return

            self._flush_summary()
            self._last_key = key
            super().emit(record)
        except Exception:
            self.handleError(record)

    def _flush_summary(self) -> None:
        if self._suppress_count <= 0 or self._last_record is None:
            self._suppress_count = 0
            return

        last = self._last_record
        summary = logging.LogRecord(
            last.name,
            last.levelno,
            last.pathname,
            last.lineno,
            f"[{self._suppress_count} Suppressed: CHECK LOG]",
            args=None,
            exc_info=None,
        )
        summary.created = last.created
        summary.msecs = last.msecs
        super().emit(summary)

        self._suppress_count = 0
        self._last_record = None

    def close(self) -> None:
        try:
            self._flush_summary()
        finally:
            super().close()


def get_log_dir() -> Path:
    """Return the directory used for log files."""
    return _LOG_DIR


def setup_logging(debug: bool = False, verbose: bool = False,
                  log_dir: Optional[Path] = None) -> None:
    """
    Configure engine logging with file rotation.

    Args:
        debug: If True, set log level to DEBUG and enable console output.
        verbose: Enables high-volume per-frame debug logs (timeline ticks,
            interpolator transitions). Implies debug-level logging.
        log_dir: Directory for keyframes.log (defaults to ./logs).
    """
    global _VERBOSE, _LOG_DIR

    debug_enabled = debug or verbose
    if log_dir is not None:
        _LOG_DIR = Path(log_dir)

    log_dir_path = get_log_dir()
    log_dir_path.mkdir(parents=True, exist_ok=True)
    log_file = log_dir_path / "keyframes.log"

    level = logging.DEBUG if debug_enabled else logging.INFO

    # File handler with rotation (1MB max, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=1 * 1024 * 1024,
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
    file_handler.setLevel(level)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(file_handler)

    if debug_enabled:
        console_handler = SuppressingStreamHandler(sys.stdout)
        if sys.stdout.isatty():
            console_handler.setFormatter(ColoredFormatter(LOG_FORMAT, datefmt='%H:%M:%S'))
        else:
            console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt='%H:%M:%S'))
        console_handler.setLevel(level)
        root_logger.addHandler(console_handler)

    _VERBOSE = bool(verbose)

    root_logger.info(
        "Keyframes logging initialized (debug=%s, verbose=%s)",
        debug_enabled,
        _VERBOSE,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a keyframes module."""
    return logging.getLogger(name)


def is_verbose_logging() -> bool:
    """Return True when verbose debug logging is enabled globally."""

    return _VERBOSE


def is_perf_metrics_enabled() -> bool:
    """Return True when PERF metrics/telemetry are enabled globally."""

    return _PERF_METRICS_ENABLED


def set_perf_metrics_enabled(enabled: bool) -> None:
    """Toggle PERF metrics at runtime (overrides KEYFRAMES_PERF_METRICS)."""
    global _PERF_METRICS_ENABLED
    _PERF_METRICS_ENABLED = bool(enabled)
