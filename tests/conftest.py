from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from ironlog import utils
from ironlog.state import AppState
from ironlog.storage import KeyValueStore


class FakeClock:
    """Controllable replacement for ``time.time`` measured in milliseconds."""

    def __init__(self, ms: int = 1_700_000_000_000):
        self.ms = ms

    def time(self) -> float:
        return self.ms / 1000

    def advance(self, ms: int) -> None:
        self.ms += ms


@pytest.fixture
def clock(monkeypatch) -> FakeClock:
    fake = FakeClock()
    monkeypatch.setattr(utils.time, "time", fake.time)
    return fake


@pytest.fixture
def store(tmp_path: Path) -> KeyValueStore:
    """A fresh key/value store backed by a temporary SQLite file."""
    return KeyValueStore(tmp_path / "ironlog.db")


@pytest.fixture
def app_state(store) -> AppState:
    return AppState.load(store)


class FakeEvent:
    def __init__(self, callback, interval):
        self.callback = callback
        self.interval = interval
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Stands in for ``kivy.clock.Clock`` and fires events on demand."""

    def __init__(self):
        self.events: list[FakeEvent] = []

    def schedule_interval(self, callback, interval):
        event = FakeEvent(callback, interval)
        self.events.append(event)
        return event

    def fire(self, dt: float = 0.1) -> None:
        for event in list(self.events):
            if not event.cancelled:
                event.callback(dt)


@pytest.fixture
def scheduler() -> FakeScheduler:
    return FakeScheduler()
