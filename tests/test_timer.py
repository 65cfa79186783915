import pytest

from ironlog.models import TimerState
from ironlog.storage import TIMER_KEY, TIMER_PRESETS_KEY
from ironlog.timer import (
    TimerEngine,
    compute_display_time,
    format_countdown,
    format_display,
    format_stopwatch,
)


@pytest.fixture
def engine(store):
    return TimerEngine(store)


def test_rest_start_with_duration(engine, clock):
    engine.start_timer(90000)
    assert engine.timer.is_running
    assert engine.timer.duration == 90000
    assert engine.display_time() == 90000

    clock.advance(30000)
    assert engine.display_time() == 60000


def test_rest_countdown_never_negative(engine, clock):
    engine.start_timer(1000)
    clock.advance(5000)
    assert engine.display_time() == 0


def test_pause_resume_keeps_elapsed_time(engine, clock):
    engine.set_timer_type("stopwatch")
    engine.start_timer()
    clock.advance(12000)
    engine.pause_timer()
    assert engine.display_time() == 12000

    clock.advance(60000)
    assert engine.display_time() == 12000

    engine.start_timer()
    assert engine.display_time() == 12000
    clock.advance(3000)
    assert engine.display_time() == 15000


def test_rest_resume_continues_countdown(engine, clock):
    engine.start_timer(60000)
    clock.advance(20000)
    engine.pause_timer()
    clock.advance(100000)
    engine.start_timer()
    assert engine.display_time() == 40000


def test_second_pause_does_not_move_mark(engine, clock):
    engine.start_timer()
    clock.advance(1000)
    first = engine.pause_timer()
    clock.advance(1000)
    assert engine.pause_timer() == first


def test_reset_keeps_type_and_duration(engine, clock):
    engine.set_timer_type("stopwatch")
    engine.start_timer()
    engine.reset_timer()
    assert engine.timer == TimerState(type="stopwatch", duration=60000)
    assert engine.display_time() == 0


def test_type_switch_resets_run_state(engine, clock):
    engine.start_timer(45000)
    engine.set_timer_type("stopwatch")
    timer = engine.timer
    assert not timer.is_running
    assert timer.start_time is None and timer.paused_at is None
    assert timer.duration == 45000

    with pytest.raises(ValueError):
        engine.set_timer_type("lap")


def test_negative_duration_rejected(engine):
    with pytest.raises(ValueError):
        engine.start_timer(-1)


def test_timer_persisted_on_every_change(engine, store, clock):
    engine.start_timer(30000)
    assert store.get(TIMER_KEY)["isRunning"] is True
    engine.pause_timer()
    saved = store.get(TIMER_KEY)
    assert saved["isRunning"] is False
    assert saved["pausedAt"] == clock.ms


def test_compute_display_without_anchor():
    assert compute_display_time(TimerState(type="rest", duration=90000), 0) == 90000
    assert compute_display_time(TimerState(type="stopwatch"), 0) == 0


def test_default_presets(engine):
    assert [(p.id, p.duration, p.label) for p in engine.presets] == [
        ("p30", 30000, "30s"),
        ("p60", 60000, "60s"),
        ("p90", 90000, "90s"),
        ("p120", 120000, "120s"),
    ]


def test_preset_crud(engine, store):
    preset = engine.save_preset(150000, "2:30")
    assert engine.get_preset(preset.id) == preset
    assert store.get(TIMER_PRESETS_KEY)[-1]["label"] == "2:30"

    updated = engine.update_preset(preset.id, 180000, "3:00")
    assert engine.get_preset(preset.id) == updated

    engine.delete_preset(preset.id)
    assert engine.get_preset(preset.id) is None
    assert len(store.get(TIMER_PRESETS_KEY)) == 4

    with pytest.raises(KeyError):
        engine.update_preset("missing", 1000, "1s")


def test_start_preset_switches_to_rest(engine, clock):
    engine.set_timer_type("stopwatch")
    engine.start_timer()
    clock.advance(5000)

    engine.start_preset("p90")

    assert engine.timer.type == "rest"
    assert engine.timer.is_running
    assert engine.display_time() == 90000


def test_start_preset_unknown(engine):
    with pytest.raises(KeyError):
        engine.start_preset("p15")


@pytest.mark.parametrize(
    "ms, expected",
    [(90000, "1:30"), (59001, "1:00"), (500, "0:01"), (0, "0:00")],
)
def test_format_countdown(ms, expected):
    assert format_countdown(ms) == expected


@pytest.mark.parametrize(
    "ms, expected",
    [(0, "0:00.00"), (12345, "0:12.34"), (61005, "1:01.00")],
)
def test_format_stopwatch(ms, expected):
    assert format_stopwatch(ms) == expected


def test_format_display_by_type():
    rest = TimerState(type="rest", duration=30000)
    watch = TimerState(type="stopwatch", start_time=0, is_running=True)
    assert format_display(rest, 0) == "0:30"
    assert format_display(watch, 2500) == "0:02.50"
