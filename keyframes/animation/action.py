"""
Animation actions.

An AnimationAction says "drive these targets to this end value", optionally
with its own interpolator, a gating predicate, an execution limit and a
completion callback. Actions are created through AnimationAction.builder()
and belong to exactly one template.
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from keyframes.animation.interpolator import Interpolator, InterpolatorLike
from keyframes.animation.properties import WritableProperty
from keyframes.animation.types import FinishCallback, GatePredicate
from keyframes.errors import TemplateConfigError

_UNSET = object()


def _always() -> bool:
    return True


@dataclass(eq=False)
class AnimationAction:
    """One property animation inside a template bucket."""
    targets: Tuple[WritableProperty, ...]
    end_value: Any
    interpolator: Optional[Interpolator] = None   # None = config default
    execute_when: GatePredicate = _always
    execution_limit: Optional[int] = None         # None = unlimited
    on_finish: Optional[FinishCallback] = None
    _executions: int = field(default=0, init=False, repr=False)
    _owner: Optional[object] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        if not self.targets:
            raise TemplateConfigError("AnimationAction requires at least one target")
        if self.execution_limit is not None and self.execution_limit < 0:
            raise TemplateConfigError(
                f"execution limit must be >= 0, got {self.execution_limit}"
            )

    @staticmethod
    def builder() -> "AnimationActionBuilder":
        return AnimationActionBuilder()

    @property
    def target(self) -> WritableProperty:
        """First (usually only) target."""
        return self.targets[0]

    @property
    def executions(self) -> int:
        """How many firings this action has completed."""
        return self._executions

    def add_execution(self, count: int = 1) -> None:
        if count < 0:
            raise ValueError("executions never decrease")
        self._executions += count

    def is_execute_when(self) -> bool:
        """Raw gating predicate."""
        return bool(self.execute_when())

    def is_executed(self) -> bool:
        """Gate open and execution limit not yet reached."""
        if self.execution_limit is not None and self._executions >= self.execution_limit:
            return False
        return self.is_execute_when()

    def handle_on_finish(self, event: Any) -> None:
        if self.on_finish is not None:
            self.on_finish(event)

    def resolve_interpolator(self, default: Interpolator) -> Interpolator:
        return self.interpolator if self.interpolator is not None else default


class AnimationActionBuilder:
    """Collects action settings and produces a validated AnimationAction."""

    def __init__(self):
        self._targets: List[WritableProperty] = []
        self._end_value: Any = _UNSET
        self._interpolator: Optional[Interpolator] = None
        self._execute_when: GatePredicate = _always
        self._execution_limit: Optional[int] = None
        self._on_finish: Optional[FinishCallback] = None

    def target(self, *targets: WritableProperty) -> "AnimationActionBuilder":
        for target in targets:
            if not isinstance(target, WritableProperty):
                raise TemplateConfigError(
                    f"{target!r} is not a writable property (needs get() and set())"
                )
        self._targets.extend(targets)
        return self

    def end_value(self, value: Any) -> "AnimationActionBuilder":
        self._end_value = value
        return self

    def interpolator(self, interpolator: InterpolatorLike) -> "AnimationActionBuilder":
        try:
            self._interpolator = Interpolator.of(interpolator)
        except TypeError as e:
            raise TemplateConfigError(str(e)) from e
        return self

    def execute_when(self, predicate: GatePredicate) -> "AnimationActionBuilder":
        if not callable(predicate):
            raise TemplateConfigError("execute_when requires a callable")
        self._execute_when = predicate
        return self

    def executions(self, limit: int) -> "AnimationActionBuilder":
        """Run this action at most ``limit`` times per template instance."""
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            raise TemplateConfigError(f"executions limit must be an int >= 0, got {limit!r}")
        self._execution_limit = limit
        return self

    def on_finish(self, callback: FinishCallback) -> "AnimationActionBuilder":
        if not callable(callback):
            raise TemplateConfigError("on_finish requires a callable")
        self._on_finish = callback
        return self

    def build(self) -> AnimationAction:
        if self._end_value is _UNSET:
            raise TemplateConfigError("AnimationAction requires an end_value")
        return AnimationAction(
            targets=tuple(self._targets),
            end_value=self._end_value,
            interpolator=self._interpolator,
            execute_when=self._execute_when,
            execution_limit=self._execution_limit,
            on_finish=self._on_finish,
        )
