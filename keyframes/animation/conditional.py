"""
Gated interpolation.

ConditionalInterpolator wraps another interpolator and consults a gating
predicate on every query. While the gate is open (ARMED) it interpolates
normally. The first time the gate is found closed it snapshots the target's
current value and switches to FROZEN; from then on every query returns that
snapshot. FROZEN is terminal for the compiled schedule that owns the
interpolator.
"""
from typing import Any

from keyframes.animation.interpolator import Interpolator
from keyframes.animation.properties import WritableProperty
from keyframes.animation.types import GatePredicate, GateState
from keyframes.logging.logger import get_logger, is_verbose_logging
from keyframes.logging.tags import TAG_GATE

logger = get_logger(__name__)


class ConditionalInterpolator(Interpolator):
    """Interpolator that pins its output once its gate closes."""

    def __init__(self, interpolator: Interpolator, target: WritableProperty,
                 condition: GatePredicate):
        super().__init__(interpolator.curve, name=f"conditional({interpolator.name})")
        self._inner = interpolator
        self._target = target
        self._condition = condition
        self._state = GateState.ARMED
        self._frozen_value: Any = None

    @property
    def inner(self) -> Interpolator:
        return self._inner

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def frozen_value(self) -> Any:
        return self._frozen_value

    def interpolate(self, start_value: Any, end_value: Any, fraction: float) -> Any:
        if self._state is GateState.ARMED:
            if self._condition():
                return self._inner.interpolate(start_value, end_value, fraction)
            self._freeze()
        return self._frozen_value

    def _freeze(self) -> None:
        self._frozen_value = self._target.get()
        self._state = GateState.FROZEN
        if is_verbose_logging():
            logger.debug("%s %r frozen at %r", TAG_GATE, self._target, self._frozen_value)
