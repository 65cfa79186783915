"""Periodic refresh of the timer display.

A :class:`TimerTicker` recomputes the displayed time from the shared timer
on a fixed interval and reports the moment a rest countdown runs out.  It
only reads timer state; stopping the ticker leaves the timer untouched.
"""

from __future__ import annotations

import logging
from typing import Callable

from ironlog import TICK_INTERVAL
from ironlog.models import REST, TimerState
from ironlog.timer import TimerEngine, compute_display_time
from ironlog.utils import now_ms


class RestDoneDetector:
    """Edge-triggered detection of a rest countdown reaching zero.

    :meth:`update` returns ``True`` exactly once per countdown, on the first
    observation at zero after a positive one while the timer is running.
    A countdown that was already at zero when first observed never fires.
    """

    def __init__(self) -> None:
        self._armed: bool | None = None

    def update(self, timer: TimerState, display: int) -> bool:
        if timer.type != REST or timer.start_time is None:
            self._armed = True
            return False
        if display > 0:
            self._armed = True
            return False
        if self._armed is None:
            self._armed = False
            return False
        if self._armed and timer.is_running:
            self._armed = False
            return True
        return False


class TimerTicker:
    """Drive ``on_tick`` with the current display value every ``interval``.

    ``clock`` is any object with Kivy's ``schedule_interval`` signature; the
    Kivy :class:`~kivy.clock.Clock` is used when none is given.
    """

    def __init__(
        self,
        engine: TimerEngine,
        on_tick: Callable[[int], None],
        on_done: Callable[[], None] | None = None,
        clock=None,
        interval: float = TICK_INTERVAL,
    ) -> None:
        if clock is None:
            from kivy.clock import Clock as clock
        self.engine = engine
        self.on_tick = on_tick
        self.on_done = on_done
        self.clock = clock
        self.interval = interval
        self.detector = RestDoneDetector()
        self._event = None

    @property
    def running(self) -> bool:
        return self._event is not None

    def start(self) -> None:
        """Refresh immediately, then schedule the repeating refresh once."""

        if self._event is not None:
            return
        self.tick(0)
        self._event = self.clock.schedule_interval(self.tick, self.interval)

    def stop(self) -> None:
        if self._event is not None:
            self._event.cancel()
            self._event = None

    def tick(self, dt: float = 0) -> None:
        timer = self.engine.timer
        display = compute_display_time(timer, now_ms())
        self.on_tick(display)
        if self.detector.update(timer, display):
            logging.info("Rest countdown of %d ms finished", timer.duration)
            if self.on_done is not None:
                self.on_done()
