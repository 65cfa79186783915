"""Built-in exercise library and quick-start workout templates."""

from __future__ import annotations

from ironlog.models import Exercise, WorkoutExercise, WorkoutSet
from ironlog.utils import new_id

# Seed library used when nothing has been stored yet
DEFAULT_EXERCISES: list[Exercise] = [
    Exercise("e1", "Bench Press", "Chest"),
    Exercise("e2", "Squat", "Legs"),
    Exercise("e3", "Deadlift", "Back"),
    Exercise("e4", "Overhead Press", "Shoulders"),
    Exercise("e5", "Pull Up", "Back"),
    Exercise("e6", "Dumbbell Row", "Back"),
    Exercise("e7", "Incline Dumbbell Press", "Chest"),
    Exercise("e8", "Lateral Raise", "Shoulders"),
    Exercise("e9", "Tricep Extension", "Arms"),
    Exercise("e10", "Bicep Curl", "Arms"),
]

# Template name -> exercise ids, each started with one empty set
WORKOUT_TEMPLATES: dict[str, list[str]] = {
    "Push Day": ["e1", "e4", "e9"],
    "Pull Day": ["e3", "e5", "e10"],
    "Leg Day": ["e2"],
}


def empty_set() -> WorkoutSet:
    return WorkoutSet(id=new_id(), reps=0, weight=0, completed=False)


def build_template_exercises(template_name: str | None) -> list[WorkoutExercise]:
    """Return fresh exercises for ``template_name``.

    Matching is exact; unknown names produce an empty list.
    """

    return [
        WorkoutExercise(id=new_id(), exercise_id=ex_id, sets=[empty_set()])
        for ex_id in WORKOUT_TEMPLATES.get(template_name or "", [])
    ]
