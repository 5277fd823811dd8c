"""
Exception types raised by the keyframes engine.

Configuration problems surface as TemplateConfigError while a template is
being built. Everything after that point degrades gracefully except
author callbacks, which are aggregated into CallbackError.
"""
from typing import List, Sequence


class KeyframesError(Exception):
    """Base class for all engine errors."""


class TemplateConfigError(KeyframesError, ValueError):
    """Invalid builder input (duration, percent, rate, cycle count, ...)."""


class CheckpointRejectedError(KeyframesError, RuntimeError):
    """The continuous engine refused a new checkpoint (it is running)."""


class CallbackError(KeyframesError):
    """One or more completion handlers raised during a single firing.

    Every handler of the firing was attempted before this was raised.
    ``errors`` keeps the exceptions in handler order.
    """

    def __init__(self, errors: Sequence[BaseException]):
        self.errors: List[BaseException] = list(errors)
        noun = "handler" if len(self.errors) == 1 else "handlers"
        first = self.errors[0] if self.errors else None
        super().__init__(f"{len(self.errors)} completion {noun} failed; first: {first!r}")
