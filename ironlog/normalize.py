"""Decode and repair records read from storage or a backup file.

Every external ingress point (startup load and backup import) goes through
these functions; callers never trust stored data to be well formed.  All of
them are idempotent: feeding a normalised value back in yields the same
value.
"""

from __future__ import annotations

import math
from typing import Any

from ironlog import DEFAULT_REST_DURATION_MS, UNTITLED_WORKOUT
from ironlog.errors import BackupValidationError
from ironlog.models import (
    FINISHED,
    IN_PROGRESS,
    REST,
    TIMER_TYPES,
    Exercise,
    Note,
    TimerPreset,
    TimerState,
    Workout,
    WorkoutExercise,
    WorkoutSet,
)
from ironlog.utils import new_id, now_iso


def to_number(value: Any) -> int | float:
    """Cast ``value`` to a non-negative number, falling back to ``0``.

    Numeric strings such as ``"185"`` or ``" 7.5 "`` are parsed; anything
    unparseable, ``None``, NaN, infinities and integers too large for a
    float become ``0``.  Integral results
    are returned as ``int``.
    """

    if isinstance(value, bool):
        number: float = float(value)
    elif isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return 0
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            number = float(text)
        except ValueError:
            return 0
    else:
        return 0
    if math.isnan(number) or math.isinf(number) or number < 0:
        return 0
    if number.is_integer():
        return int(number)
    return number


def _text(value: Any) -> str | None:
    """Return ``value`` as a non-empty string, or ``None``."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str) and value:
        return value
    return None


def _timestamp(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return None


def normalize_set(raw: Any) -> WorkoutSet:
    if isinstance(raw, WorkoutSet):
        raw = raw.to_dict()
    if not isinstance(raw, dict):
        raw = {}
    return WorkoutSet(
        id=_text(raw.get("id")) or new_id(),
        reps=to_number(raw.get("reps")),
        weight=to_number(raw.get("weight")),
        completed=bool(raw.get("completed", False)),
    )


def normalize_workout_exercise(raw: Any) -> WorkoutExercise:
    if isinstance(raw, WorkoutExercise):
        raw = raw.to_dict()
    if not isinstance(raw, dict):
        raw = {}
    sets = raw.get("sets")
    notes = raw.get("notes")
    return WorkoutExercise(
        id=_text(raw.get("id")) or new_id(),
        exercise_id=_text(raw.get("exerciseId")) or "",
        sets=[normalize_set(s) for s in sets] if isinstance(sets, list) else [],
        notes=notes if isinstance(notes, str) else None,
    )


def normalize_workout(raw: Any) -> Workout:
    """Return a well-formed :class:`Workout` built from ``raw``.

    Missing identifiers are generated, the name defaults to
    ``"Untitled Workout"`` and missing ``date``/``startTime`` default to the
    current instant (each falling back to the other first).  The lifecycle
    is taken from ``status`` when it is a known value, otherwise from the
    presence of ``endTime``.  An explicit ``"in_progress"`` drops any end
    time; an explicit ``"finished"`` without an end time ends the workout at
    its start time.
    """

    if isinstance(raw, Workout):
        raw = raw.to_dict()
    if not isinstance(raw, dict):
        raise BackupValidationError("workout entries must be objects")

    now = now_iso()
    date = _text(raw.get("date"))
    start_time = _text(raw.get("startTime"))
    date, start_time = (date or start_time or now, start_time or date or now)

    end_time = _text(raw.get("endTime"))
    status = raw.get("status")
    if status == IN_PROGRESS:
        end_time = None
    elif status == FINISHED and end_time is None:
        end_time = start_time

    exercises = raw.get("exercises")
    notes = raw.get("notes")
    return Workout(
        id=_text(raw.get("id")) or new_id(),
        name=_text(raw.get("name")) or UNTITLED_WORKOUT,
        date=date,
        start_time=start_time,
        end_time=end_time,
        exercises=(
            [normalize_workout_exercise(e) for e in exercises]
            if isinstance(exercises, list)
            else []
        ),
        notes=notes if isinstance(notes, str) else "",
        photo_url=_text(raw.get("photoUrl")),
    )


def normalize_exercise(raw: Any) -> Exercise | None:
    """Return an :class:`Exercise` or ``None`` when ``raw`` has no name."""

    if isinstance(raw, Exercise):
        return raw
    if not isinstance(raw, dict):
        return None
    name = _text(raw.get("name"))
    if name is None:
        return None
    custom = raw.get("custom")
    return Exercise(
        id=_text(raw.get("id")) or new_id(),
        name=name,
        muscle_group=_text(raw.get("muscleGroup")) or "",
        custom=bool(custom) if custom is not None else None,
    )


def normalize_note(raw: Any) -> Note | None:
    if isinstance(raw, Note):
        return raw
    if not isinstance(raw, dict):
        return None
    text = raw.get("text")
    if not isinstance(text, str):
        return None
    return Note(
        id=_text(raw.get("id")) or new_id(),
        text=text,
        date=_text(raw.get("date")) or now_iso(),
    )


def normalize_timer(raw: Any) -> TimerState:
    """Return a :class:`TimerState` satisfying the running/paused invariants.

    A running timer never carries a pause mark, a timer without a start
    anchor is neither running nor paused, and a stopped timer that has a
    start anchor but no pause mark is treated as reset.
    """

    if isinstance(raw, TimerState):
        raw = raw.to_dict()
    if not isinstance(raw, dict):
        return TimerState(duration=DEFAULT_REST_DURATION_MS)

    timer_type = raw.get("type") if raw.get("type") in TIMER_TYPES else REST
    duration = raw.get("duration")
    duration = int(to_number(duration)) if duration is not None else DEFAULT_REST_DURATION_MS
    start_time = _timestamp(raw.get("startTime"))
    paused_at = _timestamp(raw.get("pausedAt"))
    is_running = bool(raw.get("isRunning", False))

    if start_time is None:
        is_running = False
        paused_at = None
    elif is_running:
        paused_at = None
    elif paused_at is None:
        start_time = None

    return TimerState(
        type=timer_type,
        start_time=start_time,
        duration=duration,
        paused_at=paused_at,
        is_running=is_running,
    )


def normalize_presets(raw: Any) -> list[TimerPreset]:
    if not isinstance(raw, list):
        return []
    presets: list[TimerPreset] = []
    for item in raw:
        if isinstance(item, TimerPreset):
            presets.append(item)
            continue
        if not isinstance(item, dict):
            continue
        duration = int(to_number(item.get("duration")))
        label = item.get("label")
        presets.append(
            TimerPreset(
                id=_text(item.get("id")) or new_id(),
                duration=duration,
                label=label if isinstance(label, str) else f"{duration // 1000}s",
            )
        )
    return presets
