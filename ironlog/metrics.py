"""Derived statistics over the workout collection.

All functions are pure: they take workouts (and the current instant where
time matters) and return plain values.  Progress series points are
``{"date": <iso instant>, "value": <number>}`` dictionaries in ascending
date order, ready to feed a line chart.
"""

from __future__ import annotations

import math
from datetime import date as date_type
from datetime import datetime, timedelta, tzinfo
from typing import Callable, Iterable

from ironlog.models import Workout, WorkoutExercise, WorkoutSet
from ironlog.utils import iso_to_ms, parse_iso

MAX_WEIGHT = "maxWeight"
VOLUME = "volume"
METRICS = (MAX_WEIGHT, VOLUME)

RANGE_DAYS = {"week": 7, "month": 30, "all": None}


def _parsed_date(workout: Workout) -> datetime | None:
    if not workout.date:
        return None
    try:
        return parse_iso(workout.date)
    except ValueError:
        return None


def _find_exercise(workout: Workout, exercise_id: str) -> WorkoutExercise | None:
    for ex in workout.exercises:
        if ex.exercise_id == exercise_id:
            return ex
    return None


def qualifying_sets(sets: Iterable[WorkoutSet]) -> list[WorkoutSet]:
    """Return sets that count as real data.

    A set counts when it is marked completed, or when both weight and reps
    were filled in even though the completed flag was never set.
    """

    return [s for s in sets if s.completed or (s.weight > 0 and s.reps > 0)]


def exercise_series(
    workouts: Iterable[Workout],
    exercise_id: str,
    metric: str = MAX_WEIGHT,
    time_range: str = "all",
    now: datetime | None = None,
) -> list[dict]:
    """Return the progress series of ``metric`` for ``exercise_id``.

    ``metric`` is ``"maxWeight"`` (heaviest qualifying set) or ``"volume"``
    (sum of weight x reps).  ``time_range`` keeps workouts dated within the
    last 7 (``"week"``) or 30 (``"month"``) days before ``now``, or all of
    them.  Workouts without qualifying sets and points whose value is zero
    are left out.
    """

    if metric not in METRICS:
        raise ValueError(f"Unknown metric '{metric}'")
    if time_range not in RANGE_DAYS:
        raise ValueError(f"Unknown range '{time_range}'")

    candidates: list[tuple[datetime, Workout, WorkoutExercise]] = []
    for workout in workouts:
        entry = _find_exercise(workout, exercise_id)
        when = _parsed_date(workout)
        if entry is None or when is None:
            continue
        candidates.append((when, workout, entry))

    days = RANGE_DAYS[time_range]
    if days is not None:
        reference = now or datetime.now().astimezone()
        if reference.tzinfo is None:
            reference = reference.astimezone()
        cutoff = reference - timedelta(days=days)
        candidates = [c for c in candidates if c[0] > cutoff]

    candidates.sort(key=lambda c: c[0])

    series: list[dict] = []
    for _when, workout, entry in candidates:
        sets = qualifying_sets(entry.sets)
        if not sets:
            continue
        if metric == MAX_WEIGHT:
            value = max(s.weight for s in sets)
        else:
            value = sum(s.volume for s in sets)
        if value == 0:
            continue
        series.append({"date": workout.date, "value": value})
    return series


def personal_record(series: list[dict]) -> float:
    """Return the best value in ``series`` or ``0`` when it is empty."""

    return max((p["value"] for p in series), default=0)


def session_count(series: list[dict]) -> int:
    return len(series)


def last_finished_workout(workouts: Iterable[Workout]) -> Workout | None:
    """Return the finished workout with the latest end time."""

    best: Workout | None = None
    best_end = None
    for workout in workouts:
        if not workout.is_finished:
            continue
        try:
            end = iso_to_ms(workout.end_time)
        except ValueError:
            continue
        if best_end is None or end > best_end:
            best, best_end = workout, end
    return best


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def workout_summary(workout: Workout) -> dict:
    """Return ``total_sets``, ``total_volume`` and ``duration_minutes``.

    Only completed sets are counted.  The duration is zero unless the
    workout has both a start and an end time.
    """

    completed = [s for ex in workout.exercises for s in ex.sets if s.completed]
    duration = 0
    if workout.start_time and workout.end_time:
        try:
            elapsed = iso_to_ms(workout.end_time) - iso_to_ms(workout.start_time)
        except ValueError:
            elapsed = 0
        duration = _round_half_up(elapsed / 60000)
    return {
        "total_sets": len(completed),
        "total_volume": sum(s.volume for s in completed),
        "duration_minutes": duration,
    }


def elapsed_seconds(workout: Workout, now: int) -> int:
    """Whole seconds since the workout started, up to its end if finished.

    ``now`` is in epoch milliseconds.  Unreadable timestamps give ``0``.
    """

    try:
        start = iso_to_ms(workout.start_time)
        end = iso_to_ms(workout.end_time) if workout.end_time else now
    except ValueError:
        return 0
    return max(0, (end - start) // 1000)


def format_elapsed(seconds: int) -> str:
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"


def exercise_preview(workout: Workout, resolve_name: Callable[[str], str]) -> str:
    """Summarise a workout by its first two exercise names.

    Longer workouts get a ``+N more`` suffix; empty ones read
    ``"No exercises"``.
    """

    count = len(workout.exercises)
    if count == 0:
        return "No exercises"
    names = ", ".join(resolve_name(ex.exercise_id) for ex in workout.exercises[:2])
    if count > 2:
        return f"{names} +{count - 2} more"
    return names


def finished_count(workouts: Iterable[Workout]) -> int:
    return sum(1 for w in workouts if w.is_finished)


def _local_day(workout: Workout, tz: tzinfo | None) -> date_type | None:
    when = _parsed_date(workout)
    if when is None:
        return None
    return when.astimezone(tz).date()


def workouts_on(
    workouts: Iterable[Workout], day: date_type, tz: tzinfo | None = None
) -> list[Workout]:
    """Return workouts dated on ``day`` in timezone ``tz`` (local by default)."""

    return [w for w in workouts if _local_day(w, tz) == day]


def recent_finished(
    workouts: Iterable[Workout],
    today: date_type,
    limit: int = 5,
    tz: tzinfo | None = None,
) -> list[Workout]:
    """Return up to ``limit`` finished workouts dated before ``today``."""

    recent = [w for w in workouts if w.is_finished and _local_day(w, tz) != today]
    return recent[:limit]
