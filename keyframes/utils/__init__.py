"""Shared utilities."""

from .decorators import suppress_exceptions, log_errors

__all__ = ['suppress_exceptions', 'log_errors']
