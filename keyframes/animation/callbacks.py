"""
Completion callback composition.

Each keyframe of a compiled timeline gets one CombinedCallback: an ordered
list of handlers invoked one after another for every firing. A failing
handler never stops the handlers after it. What happens to the failure is
decided by the CallbackFailurePolicy:

- PROPAGATE: every handler runs, then a CallbackError carrying all the
  failures (in order) is raised to the caller of the firing.
- ISOLATE: each failure is logged with its traceback and dropped.
"""
import time
from typing import Any, Callable, List, Optional, Sequence

from keyframes.animation.action import AnimationAction
from keyframes.animation.types import CallbackFailurePolicy
from keyframes.constants.timing import SLOW_CALLBACK_WARN_MS
from keyframes.errors import CallbackError
from keyframes.logging.logger import get_logger, is_perf_metrics_enabled
from keyframes.logging.tags import TAG_PERF

logger = get_logger(__name__)

Handler = Callable[[Any], None]


class ActionFinishHandler:
    """Runs one action's on_finish when the action is executed this firing.

    The execution counter is read through ``is_executed()`` before the
    callback and incremented only after the callback returned normally.
    """

    def __init__(self, action: AnimationAction):
        self.action = action

    def __call__(self, event: Any) -> None:
        if not self.action.is_executed():
            return
        self.action.handle_on_finish(event)
        self.action.add_execution(1)

    def __repr__(self) -> str:
        return f"ActionFinishHandler({self.action!r})"


class CombinedCallback:
    """Ordered handlers invoked in sequence with per-handler failure isolation."""

    def __init__(self, handlers: Optional[Sequence[Handler]] = None,
                 policy: CallbackFailurePolicy = CallbackFailurePolicy.PROPAGATE):
        self._handlers: List[Handler] = list(handlers or [])
        self.policy = policy

    @classmethod
    def for_actions(cls, actions: Sequence[AnimationAction],
                    policy: CallbackFailurePolicy = CallbackFailurePolicy.PROPAGATE
                    ) -> "CombinedCallback":
        return cls([ActionFinishHandler(action) for action in actions], policy)

    @property
    def handlers(self) -> List[Handler]:
        return list(self._handlers)

    def add(self, handler: Handler) -> None:
        self._handlers.append(handler)

    def __len__(self) -> int:
        return len(self._handlers)

    def __call__(self, event: Any) -> None:
        errors: List[BaseException] = []
        for handler in self._handlers:
            started = time.perf_counter()
            try:
                handler(event)
            except Exception as e:
                if self.policy is CallbackFailurePolicy.ISOLATE:
                    logger.error("Completion handler %r failed: %s", handler, e, exc_info=True)
                else:
                    errors.append(e)
            elapsed_ms = (time.perf_counter() - started) * 1000.0
            if elapsed_ms > SLOW_CALLBACK_WARN_MS and is_perf_metrics_enabled():
                logger.warning("%s Slow completion handler %r: %.2fms", TAG_PERF, handler, elapsed_ms)

        if errors:
            raise CallbackError(errors) from errors[0]
