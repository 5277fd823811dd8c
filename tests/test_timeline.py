"""Tests for the discrete Timeline backend."""
import math

import pytest

from keyframes.animation.interpolator import DISCRETE
from keyframes.animation.properties import ValueProperty
from keyframes.animation.types import PlaybackStatus
from keyframes.backends.keyframe import KeyFrame, KeyValue
from keyframes.backends.timeline import Timeline
from keyframes.constants.timing import INDEFINITE
from keyframes.events.event_types import EventType


@pytest.fixture
def fired():
    """Records (label, cycle) for every keyframe firing."""
    return []


@pytest.fixture
def timeline(qt_app, prop, fired):
    """0 -> 10 over 1000ms with labelled handlers at both ends."""
    tl = Timeline([
        KeyFrame(1000.0, (KeyValue(prop, 10.0),), lambda e: fired.append(("end", e.cycle))),
        KeyFrame(0.0, (KeyValue(prop, 0.0),), lambda e: fired.append(("start", e.cycle))),
    ])
    yield tl
    tl.stop()


def test_keyframes_kept_in_time_order(timeline):
    assert [kf.time for kf in timeline.keyframes] == [0.0, 1000.0]
    assert timeline.cycle_duration == 1000.0
    assert timeline.total_duration == 1000.0


def test_linear_playback(timeline, prop, fired):
    timeline.start()
    assert timeline.tick(0)
    assert fired == [("start", 0)]

    assert timeline.tick(250)
    assert prop.get() == pytest.approx(2.5)
    assert timeline.current_time == pytest.approx(250)

    assert not timeline.tick(750)
    assert prop.get() == pytest.approx(10.0)
    assert fired == [("start", 0), ("end", 0)]
    assert timeline.status is PlaybackStatus.STOPPED


def test_finish_handler_and_signals(timeline, recorder):
    finished, started = [], []
    timeline.finished.connect(lambda: finished.append(True))
    timeline.started.connect(lambda: started.append(True))
    timeline.set_on_finished(recorder)

    timeline.start()
    timeline.tick(1000)

    assert started == [True]
    assert finished == [True]
    assert recorder.count == 1
    event = recorder.events[0]
    assert event.event_type == EventType.SCHEDULE_FINISHED
    assert event.source is timeline
    assert event.synthetic is False


def test_cycles_wrap_and_refire_start(timeline, prop, fired):
    completed = []
    timeline.cycle_completed.connect(completed.append)
    timeline.cycle_count = 2
    timeline.start()

    timeline.tick(1000)
    assert prop.get() == pytest.approx(0.0)
    assert timeline.current_cycle == 1

    timeline.tick(500)
    assert prop.get() == pytest.approx(5.0)
    assert not timeline.tick(500)

    assert completed == [0, 1]
    assert fired == [("start", 0), ("end", 0), ("start", 1), ("end", 1)]


def test_auto_reverse_fires_turn_keyframe_once(timeline, prop, fired):
    timeline.cycle_count = 2
    timeline.auto_reverse = True
    timeline.start()

    timeline.tick(1000)
    timeline.tick(250)
    assert prop.get() == pytest.approx(7.5)
    assert not timeline.tick(750)

    assert prop.get() == pytest.approx(0.0)
    assert fired == [("start", 0), ("end", 0), ("start", 1)]


def test_one_large_tick_runs_several_cycles(timeline, fired):
    completed = []
    timeline.cycle_completed.connect(completed.append)
    timeline.cycle_count = 3
    timeline.start()

    assert not timeline.tick(3500)
    assert completed == [0, 1, 2]
    assert [label for label, _ in fired].count("end") == 3


def test_delay_runs_in_host_time(timeline, prop, fired):
    timeline.delay = 100
    timeline.rate = 2.0
    timeline.start()

    timeline.tick(60)
    assert fired == []
    timeline.tick(60)
    assert fired == [("start", 0)]
    # 20ms past the delay at rate 2.0
    assert prop.get() == pytest.approx(0.4)


def test_rate_scales_playback(timeline, prop):
    timeline.rate = 4.0
    timeline.start()
    timeline.tick(100)
    assert prop.get() == pytest.approx(4.0)


def test_indefinite_keeps_running(timeline):
    timeline.cycle_count = INDEFINITE
    assert math.isinf(timeline.total_duration)
    timeline.start()
    for _ in range(20):
        assert timeline.tick(400)
    assert timeline.current_cycle == 8


def test_pause_and_resume(timeline, prop):
    timeline.start()
    timeline.tick(100)
    timeline.pause()
    assert timeline.tick(500)
    assert prop.get() == pytest.approx(1.0)
    timeline.resume()
    timeline.tick(100)
    assert prop.get() == pytest.approx(2.0)


def test_stop_skips_finish_handler(timeline, recorder):
    timeline.set_on_finished(recorder)
    timeline.start()
    timeline.tick(100)
    timeline.stop()
    assert not timeline.tick(100)
    assert recorder.count == 0


def test_stop_from_keyframe_handler(qt_app, prop):
    tl = Timeline()
    tl.add_keyframe(KeyFrame(500.0, (KeyValue(prop, 5.0),), lambda e: tl.stop()))
    tl.add_keyframe(KeyFrame(1000.0, (KeyValue(prop, 10.0),)))
    tl.start()
    assert not tl.tick(2000)
    assert prop.get() == pytest.approx(5.0)


def test_zero_length_cycle_finishes_immediately(qt_app, prop, recorder):
    tl = Timeline([KeyFrame(0.0, (KeyValue(prop, 3.0),), recorder)])
    tl.cycle_count = INDEFINITE
    tl.start()
    assert not tl.tick(0)
    assert prop.get() == 3.0
    assert recorder.count == 1


def test_restart_recaptures_start_value(timeline, prop):
    timeline.start()
    timeline.tick(1000)
    prop.set(4.0)
    # The time-0 key value overrides the captured start immediately.
    timeline.start()
    timeline.tick(0)
    assert prop.get() == pytest.approx(0.0)


def test_start_value_captured_without_time_zero_keyframe(qt_app):
    target = ValueProperty(4.0)
    tl = Timeline([KeyFrame(1000.0, (KeyValue(target, 8.0),))])
    tl.start()
    tl.tick(0)
    tl.tick(500)
    assert target.get() == pytest.approx(6.0)


def test_each_target_has_its_own_track(qt_app):
    a, b = ValueProperty(0.0), ValueProperty(100.0)
    tl = Timeline([
        KeyFrame(500.0, (KeyValue(a, 5.0),)),
        KeyFrame(1000.0, (KeyValue(a, 10.0), KeyValue(b, 0.0))),
    ])
    tl.start()
    tl.tick(0)
    tl.tick(750)
    assert a.get() == pytest.approx(7.5)
    assert b.get() == pytest.approx(25.0)


def test_next_keyframe_interpolator_drives_segment(qt_app, prop):
    tl = Timeline([KeyFrame(1000.0, (KeyValue(prop, 10.0, DISCRETE),))])
    tl.start()
    tl.tick(999)
    assert prop.get() == 0.0
    tl.tick(1)
    assert prop.get() == 10.0


def test_add_keyframe_while_running_rejected(timeline):
    timeline.start()
    with pytest.raises(RuntimeError):
        timeline.add_keyframe(KeyFrame(10.0))


@pytest.mark.parametrize("name,value", [
    ("cycle_count", 0),
    ("delay", -1),
    ("rate", 0),
    ("rate", -2),
])
def test_invalid_settings(timeline, name, value):
    with pytest.raises(ValueError):
        setattr(timeline, name, value)


def test_negative_keyframe_time_rejected():
    with pytest.raises(ValueError):
        KeyFrame(-1.0)


def test_zero_length_cycle_finishes_after_failed_start_firing(qt_app, prop):
    calls = []

    def fail_once(event):
        calls.append(event)
        if len(calls) == 1:
            raise RuntimeError("first firing fails")

    tl = Timeline([KeyFrame(0.0, (KeyValue(prop, 3.0),), fail_once)])
    tl.cycle_count = INDEFINITE
    tl.start()
    with pytest.raises(RuntimeError):
        tl.tick(10)
    assert not tl.tick(10)
    assert tl.status is PlaybackStatus.STOPPED
    assert len(calls) == 1


def test_pause_from_start_handler_keeps_timeline_alive(qt_app, prop):
    tl = Timeline([
        KeyFrame(0.0, (KeyValue(prop, 0.0),), lambda e: tl.pause()),
        KeyFrame(1000.0, (KeyValue(prop, 10.0),)),
    ])
    tl.start()
    assert tl.tick(100)
    assert tl.status is PlaybackStatus.PAUSED
    tl.resume()
    assert tl.tick(100)
    assert prop.get() == pytest.approx(1.0)


def test_pause_at_cycle_wrap_keeps_timeline_alive(qt_app, prop):
    tl = Timeline([
        KeyFrame(0.0, (KeyValue(prop, 0.0),), lambda e: tl.pause() if e.cycle == 1 else None),
        KeyFrame(1000.0, (KeyValue(prop, 10.0),)),
    ])
    tl.cycle_count = 2
    tl.start()
    assert tl.tick(1200)
    assert tl.status is PlaybackStatus.PAUSED
    assert tl.current_cycle == 1
