"""
Template compilers.

Both compilers share one capability, ``compile(template) -> schedule``, and
nothing else; their schedules support different operations.

- DiscreteScheduleCompiler -> Timeline. Everything is honoured: per-action
  interpolators, gating (through ConditionalInterpolator), per-action
  completion handlers and execution counting, and the config's delay, rate,
  cycle count, auto-reverse and finish handler.
- ContinuousScheduleCompiler -> AnimationTimer. Checkpoints, values,
  interpolators and gating (as a per-frame animate condition) only. Config
  delay, rate, cycle count and auto-reverse are ignored, as are per-action
  on_finish handlers and execution limits. The config finish handler is
  called with a synthetic ActionEvent.
"""
from typing import Any, Optional, Protocol

from keyframes.animation.action import AnimationAction
from keyframes.animation.callbacks import CombinedCallback
from keyframes.animation.conditional import ConditionalInterpolator
from keyframes.animation.config import AnimationConfig
from keyframes.animation.template import AnimationTemplate
from keyframes.animation.types import CallbackFailurePolicy, RejectionPolicy
from keyframes.backends.animation_timer import AnimationTimer
from keyframes.backends.keyframe import KeyFrame, KeyValue, TimerKeyFrame, TimerKeyValue
from keyframes.backends.timeline import Timeline
from keyframes.errors import CheckpointRejectedError
from keyframes.events.event_types import ActionEvent, EventType
from keyframes.logging.logger import get_logger
from keyframes.logging.tags import TAG_COMPILE, TAG_FALLBACK
from keyframes.utils.decorators import log_errors

logger = get_logger(__name__)


class ScheduleCompiler(Protocol):
    """Anything that turns a template into a backend schedule."""

    def compile(self, template: AnimationTemplate) -> Any:
        ...


def absolute_time(config: AnimationConfig, percent: float) -> float:
    """Milliseconds into the template at which ``percent`` is reached."""
    return config.duration * (percent / 100.0)


class DiscreteScheduleCompiler:
    """Compiles templates into full-feature Timelines."""

    def __init__(self, callback_policy: CallbackFailurePolicy = CallbackFailurePolicy.PROPAGATE):
        self.callback_policy = callback_policy

    @log_errors(logger, f"{TAG_COMPILE} {{func_name}} failed for discrete backend")
    def compile(self, template: AnimationTemplate) -> Timeline:
        config = template.get_config()
        timeline = Timeline()

        for percent, actions in template.get_actions_by_percent().items():
            values = tuple(
                KeyValue(
                    target=target,
                    end_value=action.end_value,
                    interpolator=ConditionalInterpolator(
                        action.resolve_interpolator(config.interpolator),
                        target,
                        action.is_executed,
                    ),
                )
                for action in actions
                for target in action.targets
            )
            on_finished = CombinedCallback.for_actions(actions, self.callback_policy)
            timeline.add_keyframe(KeyFrame(absolute_time(config, percent), values, on_finished))

        timeline.auto_reverse = config.auto_reverse
        timeline.cycle_count = config.cycle_count
        timeline.delay = config.delay
        timeline.rate = config.rate
        timeline.set_on_finished(config.handle_on_finish)

        logger.debug("%s Timeline compiled: %d keyframes over %.1fms",
                     TAG_COMPILE, len(timeline.keyframes), config.duration)
        return timeline


class ContinuousScheduleCompiler:
    """Compiles templates into forward-only AnimationTimers."""

    def __init__(self, rejection_policy: RejectionPolicy = RejectionPolicy.LOG):
        self.rejection_policy = rejection_policy

    @log_errors(logger, f"{TAG_COMPILE} {{func_name}} failed for continuous backend")
    def compile(self, template: AnimationTemplate,
                into: Optional[AnimationTimer] = None) -> AnimationTimer:
        """
        Add every checkpoint of ``template`` to a timer, one at a time.

        Args:
            template: Template to compile.
            into: Existing timer to extend; a new one is created when omitted.

        Raises:
            CheckpointRejectedError: only under RejectionPolicy.RAISE.
        """
        config = template.get_config()
        timer = into if into is not None else AnimationTimer()

        added = 0
        for percent, actions in template.get_actions_by_percent().items():
            checkpoint = TimerKeyFrame(
                absolute_time(config, percent),
                tuple(self._key_value(action, target, config)
                      for action in actions
                      for target in action.targets),
            )
            try:
                timer.add_keyframe(checkpoint)
                added += 1
            except CheckpointRejectedError as e:
                self._rejected(checkpoint, e)

        # A running timer keeps the finish hook of the template it is playing.
        if timer.is_running():
            logger.debug("%s %s Timer running; finish hook of %r not installed",
                         TAG_COMPILE, TAG_FALLBACK, template)
        else:
            timer.set_on_finished(lambda: config.handle_on_finish(
                ActionEvent(
                    event_type=EventType.SCHEDULE_FINISHED,
                    source=timer,
                    time=timer.elapsed,
                    synthetic=True,
                )
            ))

        logger.debug("%s AnimationTimer compiled: %d/%d checkpoints over %.1fms",
                     TAG_COMPILE, added, len(template.percents), config.duration)
        return timer

    @staticmethod
    def _key_value(action: AnimationAction, target: Any, config: AnimationConfig) -> TimerKeyValue:
        return TimerKeyValue(
            target=target,
            end_value=action.end_value,
            interpolator=action.resolve_interpolator(config.interpolator),
            animate_condition=action.is_execute_when,
        )

    def _rejected(self, checkpoint: TimerKeyFrame, error: CheckpointRejectedError) -> None:
        if self.rejection_policy is RejectionPolicy.RAISE:
            raise error
        if self.rejection_policy is RejectionPolicy.LOG:
            logger.warning("%s %s Dropped checkpoint at %.1fms: %s",
                           TAG_COMPILE, TAG_FALLBACK, checkpoint.time, error)


def build_timeline(template: AnimationTemplate) -> Timeline:
    """Compile with the default discrete compiler."""
    return DiscreteScheduleCompiler().compile(template)


def build_animation_timer(template: AnimationTemplate) -> AnimationTimer:
    """Compile with the default continuous compiler."""
    return ContinuousScheduleCompiler().compile(template)
