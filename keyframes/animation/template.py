"""
Animation templates.

A template maps percent-of-duration to the actions that reach their end
value at that percent, plus one AnimationConfig. It is assembled with
AnimationTemplate.builder() and is read-only afterwards; compilers turn it
into a backend schedule.

Example:
    opacity = ValueProperty(0.0)
    template = (
        AnimationTemplate.builder()
        .from_()
        .action(AnimationAction.builder().target(opacity).end_value(0.0))
        .percent(50)
        .action(AnimationAction.builder().target(opacity).end_value(1.0))
        .config(AnimationConfig.builder().duration(seconds(1)).auto_reverse())
        .build()
    )
    timeline = template.build(DiscreteScheduleCompiler())
"""
import math
from collections import OrderedDict
from typing import Any, Dict, List, Optional, Tuple, Union

from keyframes.animation.action import AnimationAction, AnimationActionBuilder
from keyframes.animation.config import AnimationConfig, AnimationConfigBuilder
from keyframes.errors import TemplateConfigError
from keyframes.logging.logger import get_logger

logger = get_logger(__name__)

ActionLike = Union[AnimationAction, AnimationActionBuilder]
ConfigLike = Union[AnimationConfig, AnimationConfigBuilder]


class AnimationTemplate:
    """Immutable percent -> actions mapping with its config."""

    def __init__(self, config: AnimationConfig,
                 actions_by_percent: Dict[float, Tuple[AnimationAction, ...]]):
        self._config = config
        self._actions_by_percent: "OrderedDict[float, Tuple[AnimationAction, ...]]" = OrderedDict(
            (percent, tuple(actions)) for percent, actions in sorted(actions_by_percent.items())
        )
        owned = [a for actions in self._actions_by_percent.values() for a in actions]
        for action in owned:
            if action._owner is not None and action._owner is not self:
                raise TemplateConfigError(f"{action!r} already belongs to another template")
        for action in owned:
            action._owner = self

    @staticmethod
    def builder() -> "AnimationTemplateBuilder":
        return AnimationTemplateBuilder()

    def get_config(self) -> AnimationConfig:
        return self._config

    def get_actions_by_percent(self) -> "OrderedDict[float, Tuple[AnimationAction, ...]]":
        """Ascending percent -> actions. A fresh mapping on every call."""
        return OrderedDict(self._actions_by_percent)

    @property
    def percents(self) -> List[float]:
        return list(self._actions_by_percent)

    def actions(self) -> List[AnimationAction]:
        """Distinct actions in first-appearance order."""
        seen: Dict[int, AnimationAction] = {}
        for actions in self._actions_by_percent.values():
            for action in actions:
                seen.setdefault(id(action), action)
        return list(seen.values())

    def build(self, compiler: Any) -> Any:
        """Compile with a compiler object or a ``template -> schedule`` function."""
        compile_fn = getattr(compiler, "compile", compiler)
        return compile_fn(self)

    def __repr__(self) -> str:
        return (f"AnimationTemplate(percents={self.percents}, "
                f"duration={self._config.duration}ms)")


def _validate_percent(percent: Any) -> float:
    if isinstance(percent, bool) or not isinstance(percent, (int, float)):
        raise TemplateConfigError(f"percent must be a number, got {percent!r}")
    if not math.isfinite(percent) or percent < 0 or percent > 100:
        raise TemplateConfigError(f"percent must be within [0, 100], got {percent!r}")
    return float(percent)


class AnimationTemplateBuilder:
    """
    Fluent builder for AnimationTemplate.

    ``percent()`` selects one or more buckets; every following ``action()``
    goes into all selected buckets until the next ``percent()``. Action
    builders are built once per ``build()`` call so each template gets its
    own execution counters.
    """

    def __init__(self):
        self._buckets: "OrderedDict[float, List[ActionLike]]" = OrderedDict()
        self._current: Tuple[float, ...] = ()
        self._config: Optional[ConfigLike] = None

    def percent(self, *percents: float) -> "AnimationTemplateBuilder":
        if not percents:
            raise TemplateConfigError("percent() requires at least one value")
        selected = tuple(_validate_percent(p) for p in percents)
        for p in selected:
            self._buckets.setdefault(p, [])
        self._current = selected
        return self

    def from_(self) -> "AnimationTemplateBuilder":
        return self.percent(0)

    def to(self) -> "AnimationTemplateBuilder":
        return self.percent(100)

    def action(self, action: ActionLike) -> "AnimationTemplateBuilder":
        if not self._current:
            raise TemplateConfigError("call percent(), from_() or to() before action()")
        if not isinstance(action, (AnimationAction, AnimationActionBuilder)):
            raise TemplateConfigError(f"expected an action or action builder, got {action!r}")
        for p in self._current:
            self._buckets[p].append(action)
        return self

    def config(self, config: ConfigLike) -> "AnimationTemplateBuilder":
        if not isinstance(config, (AnimationConfig, AnimationConfigBuilder)):
            raise TemplateConfigError(f"expected a config or config builder, got {config!r}")
        self._config = config
        return self

    def build(self) -> AnimationTemplate:
        empty = [p for p, actions in self._buckets.items() if not actions]
        if empty:
            raise TemplateConfigError(f"percent buckets without actions: {empty}")

        if self._config is None:
            config = AnimationConfig()
        elif isinstance(self._config, AnimationConfigBuilder):
            config = self._config.build()
        else:
            config = self._config

        # One build per builder object, shared by every bucket it was added to.
        built: Dict[int, AnimationAction] = {}

        def resolve(item: ActionLike) -> AnimationAction:
            if isinstance(item, AnimationAction):
                return item
            if id(item) not in built:
                built[id(item)] = item.build()
            return built[id(item)]

        actions_by_percent = {
            p: tuple(resolve(item) for item in items)
            for p, items in self._buckets.items()
        }
        template = AnimationTemplate(config, actions_by_percent)
        logger.debug(
            "Template built: %d buckets, %d actions, duration=%.1fms",
            len(actions_by_percent),
            len(template.actions()),
            config.duration,
        )
        return template
