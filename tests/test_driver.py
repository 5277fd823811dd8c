"""Tests for the FrameDriver host loop."""
from unittest.mock import MagicMock, patch

import pytest

from keyframes.animation.action import AnimationAction
from keyframes.animation.config import AnimationConfig
from keyframes.animation.properties import ValueProperty
from keyframes.animation.template import AnimationTemplate
from keyframes.backends.keyframe import KeyFrame, KeyValue
from keyframes.backends.timeline import Timeline
from keyframes.compilers import build_animation_timer, build_timeline
from keyframes.constants.timing import MAX_FPS, MIN_FPS
from keyframes.driver import FrameDriver


class FakeSchedule:
    """Counts ticks and stops after ``lifetime`` of them."""

    def __init__(self, lifetime=3):
        self.deltas = []
        self.lifetime = lifetime

    def tick(self, delta_ms):
        self.deltas.append(delta_ms)
        return len(self.deltas) < self.lifetime


@pytest.fixture
def driver(qt_app):
    """Create a FrameDriver instance for testing."""
    d = FrameDriver(fps=60)
    yield d
    d.stop()


def _short_template(prop, duration=100.0):
    return (
        AnimationTemplate.builder()
        .to().action(AnimationAction.builder().target(prop).end_value(1.0))
        .config(AnimationConfig(duration=duration))
        .build()
    )


def test_driver_initialization(driver):
    assert driver.fps == 60
    assert driver.get_active_count() == 0
    assert not driver.is_active()
    assert driver._timer.interval() in (16, 17)


def test_set_target_fps_updates_timer_interval(driver):
    driver.set_target_fps(120)
    assert driver.fps == 120
    assert driver._timer.interval() in (8, 9)


def test_fps_clamped(qt_app):
    assert FrameDriver(fps=1).fps == MIN_FPS
    assert FrameDriver(fps=10_000).fps == MAX_FPS


def test_add_starts_and_idle_stops(driver):
    schedule = FakeSchedule(lifetime=2)
    finished = []
    driver.schedule_finished.connect(finished.append)

    driver.add(schedule)
    assert driver.is_active()
    assert driver.get_active_count() == 1

    driver.advance(16.0)
    assert driver.get_active_count() == 1
    driver.advance(16.0)

    assert finished == [schedule]
    assert driver.get_active_count() == 0
    assert not driver.is_active()
    assert schedule.deltas == [16.0, 16.0]


def test_remove_detaches_without_signal(driver):
    schedule = FakeSchedule()
    finished = []
    driver.schedule_finished.connect(finished.append)
    driver.add(schedule)

    assert driver.remove(schedule)
    assert not driver.remove(schedule)
    assert finished == []
    assert not driver.is_active()


def test_add_requires_tick(driver):
    with pytest.raises(TypeError):
        driver.add(object())


@pytest.mark.timeout(5)
def test_drives_timeline_to_completion(driver, qtbot, prop):
    timeline = build_timeline(_short_template(prop))
    timeline.start()

    with qtbot.waitSignal(driver.schedule_finished, timeout=3000) as blocker:
        driver.add(timeline)

    assert blocker.args == [timeline]
    assert prop.get() == pytest.approx(1.0)
    assert not timeline.is_running()


@pytest.mark.timeout(5)
def test_drives_animation_timer_to_completion(driver, qtbot, prop):
    timer = build_animation_timer(_short_template(prop))
    timer.start()

    with qtbot.waitSignal(timer.finished, timeout=3000):
        driver.add(timer)

    assert prop.get() == pytest.approx(1.0)
    qtbot.waitUntil(lambda: driver.get_active_count() == 0, timeout=1000)


def test_failing_schedule_does_not_starve_others(driver, prop):
    def boom(event):
        raise RuntimeError("handler failed")

    bad_prop = ValueProperty(0.0)
    bad = Timeline([
        KeyFrame(50.0, (KeyValue(bad_prop, 1.0),), boom),
        KeyFrame(100.0, (KeyValue(bad_prop, 2.0),)),
    ])
    healthy = build_timeline(_short_template(prop))
    bad.start()
    healthy.start()
    driver.add(bad)
    driver.add(healthy)

    mock_logger = MagicMock()
    with patch("keyframes.driver.logger", mock_logger):
        driver.advance(60.0)

    assert prop.get() == pytest.approx(0.6)
    mock_logger.error.assert_called_once()
    assert driver.get_active_count() == 2
