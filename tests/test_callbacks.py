"""Tests for completion callback composition."""
from unittest.mock import MagicMock, patch

import pytest

from keyframes.animation.action import AnimationAction
from keyframes.animation.callbacks import ActionFinishHandler, CombinedCallback
from keyframes.animation.types import CallbackFailurePolicy
from keyframes.errors import CallbackError


def _action(prop, on_finish=None, **kwargs):
    builder = AnimationAction.builder().target(prop).end_value(1.0)
    if on_finish is not None:
        builder.on_finish(on_finish)
    if "limit" in kwargs:
        builder.executions(kwargs["limit"])
    if "when" in kwargs:
        builder.execute_when(kwargs["when"])
    return builder.build()


def _boom(event):
    raise RuntimeError("boom")


class TestActionFinishHandler:
    """Per-action completion and execution counting."""

    def test_runs_and_counts(self, prop, recorder):
        action = _action(prop, recorder)
        handler = ActionFinishHandler(action)
        handler("e1")
        handler("e2")
        assert recorder.events == ["e1", "e2"]
        assert action.executions == 2

    def test_counts_without_on_finish(self, prop):
        action = _action(prop)
        ActionFinishHandler(action)("e")
        assert action.executions == 1

    def test_skipped_when_gate_closed(self, prop, recorder):
        action = _action(prop, recorder, when=lambda: False)
        ActionFinishHandler(action)("e")
        assert recorder.count == 0
        assert action.executions == 0

    def test_limit_reached_stops_running(self, prop, recorder):
        action = _action(prop, recorder, limit=1)
        handler = ActionFinishHandler(action)
        handler("e1")
        handler("e2")
        assert recorder.events == ["e1"]
        assert action.executions == 1

    def test_failure_does_not_count(self, prop):
        action = _action(prop, _boom)
        with pytest.raises(RuntimeError):
            ActionFinishHandler(action)("e")
        assert action.executions == 0

    def test_counter_feeds_back_into_gate(self, prop, recorder):
        holder = {}
        action = _action(prop, recorder, when=lambda: holder["action"].executions < 2)
        holder["action"] = action
        handler = ActionFinishHandler(action)
        for i in range(4):
            handler(i)
        assert recorder.events == [0, 1]


class TestCombinedCallback:
    """Ordered handler lists and failure policies."""

    def test_runs_in_order(self):
        order = []
        combined = CombinedCallback([lambda e: order.append("a"), lambda e: order.append("b")])
        combined.add(lambda e: order.append("c"))
        combined("e")
        assert order == ["a", "b", "c"]
        assert len(combined) == 3

    def test_propagate_runs_all_then_raises(self):
        order = []
        second_error = ValueError("second")

        def second(event):
            order.append("second")
            raise second_error

        combined = CombinedCallback([_boom, second, lambda e: order.append("third")])
        with pytest.raises(CallbackError) as excinfo:
            combined("e")

        assert order == ["second", "third"]
        assert len(excinfo.value.errors) == 2
        assert isinstance(excinfo.value.__cause__, RuntimeError)
        assert excinfo.value.errors[1] is second_error
        assert "2 completion handlers failed" in str(excinfo.value)

    def test_isolate_logs_and_continues(self):
        order = []
        combined = CombinedCallback(
            [_boom, lambda e: order.append("after")],
            policy=CallbackFailurePolicy.ISOLATE,
        )
        mock_logger = MagicMock()
        with patch("keyframes.animation.callbacks.logger", mock_logger):
            combined("e")
        assert order == ["after"]
        mock_logger.error.assert_called_once()

    def test_for_actions_counts_only_successful(self, prop, recorder):
        failing = _action(prop, _boom)
        ok = _action(prop, recorder)
        combined = CombinedCallback.for_actions([failing, ok])
        with pytest.raises(CallbackError):
            combined("e")
        assert failing.executions == 0
        assert ok.executions == 1
        assert recorder.events == ["e"]

    def test_handlers_is_a_copy(self):
        combined = CombinedCallback([print])
        combined.handlers.clear()
        assert len(combined) == 1
