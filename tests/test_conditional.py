"""Tests for gated interpolation."""
import pytest

from keyframes.animation.conditional import ConditionalInterpolator
from keyframes.animation.interpolator import LINEAR
from keyframes.animation.types import GateState


def test_armed_interpolates_normally(prop):
    gate = ConditionalInterpolator(LINEAR, prop, lambda: True)
    assert gate.state is GateState.ARMED
    assert gate.interpolate(0.0, 10.0, 0.5) == pytest.approx(5.0)
    assert gate.inner is LINEAR


def test_freezes_at_target_value_when_gate_closes(prop):
    flag = {"open": True}
    gate = ConditionalInterpolator(LINEAR, prop, lambda: flag["open"])

    prop.set(gate.interpolate(0.0, 10.0, 0.3))
    flag["open"] = False

    assert gate.interpolate(0.0, 10.0, 0.6) == pytest.approx(3.0)
    assert gate.state is GateState.FROZEN
    assert gate.frozen_value == pytest.approx(3.0)


def test_frozen_value_never_changes(prop):
    flag = {"open": True}
    gate = ConditionalInterpolator(LINEAR, prop, lambda: flag["open"])
    prop.set(2.0)
    flag["open"] = False
    frozen = gate.interpolate(0.0, 10.0, 0.5)

    prop.set(99.0)
    flag["open"] = True
    for fraction in (0.0, 0.7, 1.0):
        assert gate.interpolate(0.0, 10.0, fraction) == frozen
    assert gate.state is GateState.FROZEN


def test_predicate_checked_on_every_query(prop):
    calls = []

    def condition():
        calls.append(True)
        return True

    gate = ConditionalInterpolator(LINEAR, prop, condition)
    for fraction in (0.1, 0.2, 0.3):
        gate.interpolate(0.0, 1.0, fraction)
    assert len(calls) == 3


def test_predicate_not_checked_once_frozen(prop):
    calls = []

    def condition():
        calls.append(True)
        return False

    gate = ConditionalInterpolator(LINEAR, prop, condition)
    gate.interpolate(0.0, 1.0, 0.1)
    gate.interpolate(0.0, 1.0, 0.2)
    assert len(calls) == 1
