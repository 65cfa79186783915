"""Rest timer / stopwatch state and reusable rest presets.

The timer never stores a running counter.  It keeps anchor timestamps and
the displayed value is recomputed from them on every tick by
:func:`compute_display_time`, so a suspended process shows the right time
when it wakes up.
"""

from __future__ import annotations

import math
from dataclasses import replace

from ironlog.models import REST, STOPWATCH, TIMER_TYPES, TimerPreset, TimerState
from ironlog.storage import TIMER_KEY, TIMER_PRESETS_KEY, KeyValueStore
from ironlog.utils import new_id, now_ms

DEFAULT_PRESETS: list[TimerPreset] = [
    TimerPreset("p30", 30000, "30s"),
    TimerPreset("p60", 60000, "60s"),
    TimerPreset("p90", 90000, "90s"),
    TimerPreset("p120", 120000, "120s"),
]


def compute_display_time(timer: TimerState, now: int) -> int:
    """Return the milliseconds to show for ``timer`` at instant ``now``.

    A stopwatch counts up from its anchor; a rest timer counts down from its
    duration and never goes below zero.  A timer without an anchor shows
    its full duration (rest) or zero (stopwatch).
    """

    if timer.start_time is None:
        return timer.duration if timer.type == REST else 0
    reference = timer.paused_at if timer.paused_at is not None else now
    elapsed = reference - timer.start_time
    if timer.type == STOPWATCH:
        return elapsed
    return max(0, timer.duration - elapsed)


def format_countdown(ms: int) -> str:
    """Format a rest countdown as ``m:ss``, rounding seconds up."""

    total_seconds = math.ceil(ms / 1000)
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes}:{seconds:02d}"


def format_stopwatch(ms: int) -> str:
    """Format elapsed stopwatch time as ``m:ss.cc``."""

    total_seconds = ms // 1000
    minutes, seconds = divmod(total_seconds, 60)
    centis = (ms % 1000) // 10
    return f"{minutes}:{seconds:02d}.{centis:02d}"


def format_display(timer: TimerState, now: int) -> str:
    ms = compute_display_time(timer, now)
    return format_countdown(ms) if timer.type == REST else format_stopwatch(ms)


class TimerEngine:
    """Owns the shared :class:`TimerState` and the preset collection."""

    def __init__(
        self,
        store: KeyValueStore,
        timer: TimerState | None = None,
        presets: list[TimerPreset] | None = None,
    ) -> None:
        self.store = store
        self.timer = timer if timer is not None else TimerState()
        self.presets: list[TimerPreset] = list(
            presets if presets is not None else DEFAULT_PRESETS
        )

    def _set_timer(self, timer: TimerState) -> TimerState:
        self.timer = timer
        self.store.set(TIMER_KEY, timer.to_dict())
        return timer

    def _save_presets(self) -> None:
        self.store.set(TIMER_PRESETS_KEY, [p.to_dict() for p in self.presets])

    # ------------------------------------------------------------------
    # Timer state
    # ------------------------------------------------------------------

    def set_timer_type(self, timer_type: str) -> TimerState:
        """Switch mode and reset the run state; the duration is kept."""

        if timer_type not in TIMER_TYPES:
            raise ValueError(f"Unknown timer type '{timer_type}'")
        return self._set_timer(
            replace(
                self.timer,
                type=timer_type,
                is_running=False,
                start_time=None,
                paused_at=None,
            )
        )

    def start_timer(self, duration: int | None = None) -> TimerState:
        """Start, or resume after a pause.

        Resuming moves the start anchor forward by the length of the pause
        (``now - (paused_at - start_time)``) so elapsed time carries over.
        ``duration`` replaces the stored rest duration when given.
        """

        now = now_ms()
        timer = self.timer
        if timer.is_paused:
            elapsed = timer.paused_at - timer.start_time
            start_time = now - elapsed
        else:
            start_time = now
        if duration is not None and duration < 0:
            raise ValueError("duration must not be negative")
        return self._set_timer(
            replace(
                timer,
                is_running=True,
                start_time=start_time,
                paused_at=None,
                duration=timer.duration if duration is None else duration,
            )
        )

    def pause_timer(self) -> TimerState:
        """Freeze the display at the current instant.

        ``start_time`` is kept as the anchor.  Pausing a timer that is not
        running changes nothing, so a second pause cannot move the mark.
        """

        if not self.timer.is_running:
            return self.timer
        return self._set_timer(
            replace(self.timer, is_running=False, paused_at=now_ms())
        )

    def reset_timer(self) -> TimerState:
        """Clear the run state; type and duration are kept."""

        return self._set_timer(
            replace(self.timer, is_running=False, start_time=None, paused_at=None)
        )

    def display_time(self, now: int | None = None) -> int:
        return compute_display_time(self.timer, now_ms() if now is None else now)

    # ------------------------------------------------------------------
    # Presets
    # ------------------------------------------------------------------

    def get_preset(self, preset_id: str) -> TimerPreset | None:
        for preset in self.presets:
            if preset.id == preset_id:
                return preset
        return None

    def save_preset(self, duration: int, label: str) -> TimerPreset:
        if duration < 0:
            raise ValueError("duration must not be negative")
        preset = TimerPreset(id=new_id(), duration=duration, label=label)
        self.presets.append(preset)
        self._save_presets()
        return preset

    def update_preset(self, preset_id: str, duration: int, label: str) -> TimerPreset:
        if duration < 0:
            raise ValueError("duration must not be negative")
        for idx, preset in enumerate(self.presets):
            if preset.id == preset_id:
                updated = replace(preset, duration=duration, label=label)
                self.presets[idx] = updated
                self._save_presets()
                return updated
        raise KeyError(f"Preset '{preset_id}' not found")

    def delete_preset(self, preset_id: str) -> None:
        self.presets = [p for p in self.presets if p.id != preset_id]
        self._save_presets()

    def start_preset(self, preset_id: str) -> TimerState:
        """Restart the rest countdown from the duration of ``preset_id``."""

        preset = self.get_preset(preset_id)
        if preset is None:
            raise KeyError(f"Preset '{preset_id}' not found")
        if self.timer.type != REST:
            self.set_timer_type(REST)
        else:
            self.reset_timer()
        return self.start_timer(preset.duration)
