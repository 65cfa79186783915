"""Pure helpers that build an edited copy of a workout.

Each helper returns a new :class:`~ironlog.models.Workout`; pass the result to
:meth:`ironlog.sessions.SessionManager.update_workout` to store it.  Finished
workouts are read-only except for their notes.
"""

from __future__ import annotations

from dataclasses import replace

from ironlog.errors import WorkoutFinishedError
from ironlog.models import Workout, WorkoutExercise, WorkoutSet
from ironlog.templates import empty_set
from ironlog.utils import new_id

_SET_FIELDS = ("reps", "weight", "completed")


def _require_editable(workout: Workout) -> None:
    if workout.is_finished:
        raise WorkoutFinishedError(f"Workout '{workout.id}' is finished")


def _map_exercise(workout: Workout, workout_exercise_id: str, func) -> Workout:
    if workout.find_exercise(workout_exercise_id) is None:
        raise KeyError(f"Exercise entry '{workout_exercise_id}' not found")
    exercises = [
        func(ex) if ex.id == workout_exercise_id else ex for ex in workout.exercises
    ]
    return replace(workout, exercises=exercises)


def add_exercise(workout: Workout, exercise_id: str) -> Workout:
    """Append ``exercise_id`` with a single empty set."""

    _require_editable(workout)
    entry = WorkoutExercise(id=new_id(), exercise_id=exercise_id, sets=[empty_set()])
    return replace(workout, exercises=[*workout.exercises, entry])


def remove_exercise(workout: Workout, workout_exercise_id: str) -> Workout:
    _require_editable(workout)
    return replace(
        workout,
        exercises=[ex for ex in workout.exercises if ex.id != workout_exercise_id],
    )


def add_set(workout: Workout, workout_exercise_id: str) -> Workout:
    """Append a set that copies reps and weight of the last one.

    The new set always starts uncompleted; an exercise with no sets gets an
    empty one.
    """

    _require_editable(workout)

    def _append(ex: WorkoutExercise) -> WorkoutExercise:
        if ex.sets:
            last = ex.sets[-1]
            new = WorkoutSet(id=new_id(), reps=last.reps, weight=last.weight)
        else:
            new = empty_set()
        return replace(ex, sets=[*ex.sets, new])

    return _map_exercise(workout, workout_exercise_id, _append)


def update_set(workout: Workout, workout_exercise_id: str, set_id: str, **fields) -> Workout:
    """Return ``workout`` with ``reps``, ``weight`` or ``completed`` changed."""

    _require_editable(workout)
    unknown = set(fields) - set(_SET_FIELDS)
    if unknown:
        raise KeyError(f"Unknown set field(s): {', '.join(sorted(unknown))}")
    for name in ("reps", "weight"):
        if name in fields and fields[name] < 0:
            raise ValueError(f"{name} must not be negative")

    def _update(ex: WorkoutExercise) -> WorkoutExercise:
        if not any(s.id == set_id for s in ex.sets):
            raise KeyError(f"Set '{set_id}' not found")
        return replace(
            ex, sets=[replace(s, **fields) if s.id == set_id else s for s in ex.sets]
        )

    return _map_exercise(workout, workout_exercise_id, _update)


def remove_set(workout: Workout, workout_exercise_id: str, set_id: str) -> Workout:
    """Drop one set; the exercise is kept even when no sets remain."""

    _require_editable(workout)
    return _map_exercise(
        workout,
        workout_exercise_id,
        lambda ex: replace(ex, sets=[s for s in ex.sets if s.id != set_id]),
    )


def set_exercise_notes(workout: Workout, workout_exercise_id: str, notes: str | None) -> Workout:
    _require_editable(workout)
    return _map_exercise(
        workout, workout_exercise_id, lambda ex: replace(ex, notes=notes)
    )


def set_workout_notes(workout: Workout, notes: str) -> Workout:
    return replace(workout, notes=notes)


def set_photo(workout: Workout, photo_url: str | None) -> Workout:
    """Attach ``photo_url``; ``None`` removes the current photo."""

    _require_editable(workout)
    return replace(workout, photo_url=photo_url)


def rename_workout(workout: Workout, name: str) -> Workout:
    _require_editable(workout)
    name = name.strip()
    if not name:
        raise ValueError("Workout name is required")
    return replace(workout, name=name)
