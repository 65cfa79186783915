"""Canonical record types for workouts, the exercise library and the timer.

Records are immutable; mutators elsewhere build new values with
:func:`dataclasses.replace`.  ``to_dict``/``from_dict`` use the camelCase
keys of the persisted JSON and backup documents.  ``from_dict`` expects an
already well-formed mapping; untrusted input goes through
:mod:`ironlog.normalize` instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

IN_PROGRESS = "in_progress"
FINISHED = "finished"

STOPWATCH = "stopwatch"
REST = "rest"
TIMER_TYPES = (STOPWATCH, REST)


@dataclass(frozen=True)
class Exercise:
    """Library entry referenced by :class:`WorkoutExercise`."""

    id: str
    name: str
    muscle_group: str = ""
    custom: bool | None = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "muscleGroup": self.muscle_group,
        }
        if self.custom is not None:
            data["custom"] = self.custom
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Exercise":
        return cls(
            id=data["id"],
            name=data["name"],
            muscle_group=data.get("muscleGroup", ""),
            custom=data.get("custom"),
        )


@dataclass(frozen=True)
class WorkoutSet:
    id: str
    reps: float = 0
    weight: float = 0
    completed: bool = False

    @property
    def volume(self) -> float:
        return self.weight * self.reps

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "reps": self.reps,
            "weight": self.weight,
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutSet":
        return cls(
            id=data["id"],
            reps=data.get("reps", 0),
            weight=data.get("weight", 0),
            completed=bool(data.get("completed", False)),
        )


@dataclass(frozen=True)
class WorkoutExercise:
    """An exercise performed within one workout, owning its sets in order."""

    id: str
    exercise_id: str
    sets: list[WorkoutSet] = field(default_factory=list)
    notes: str | None = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "id": self.id,
            "exerciseId": self.exercise_id,
            "sets": [s.to_dict() for s in self.sets],
        }
        if self.notes is not None:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutExercise":
        return cls(
            id=data["id"],
            exercise_id=data["exerciseId"],
            sets=[WorkoutSet.from_dict(s) for s in data.get("sets", [])],
            notes=data.get("notes"),
        )


@dataclass(frozen=True)
class Workout:
    """One training session.

    The lifecycle state is carried by ``end_time`` alone: a workout without
    an end time is in progress, one with an end time is finished.  ``status``
    is derived so the two can never disagree.
    """

    id: str
    name: str
    date: str
    start_time: str
    end_time: str | None = None
    exercises: list[WorkoutExercise] = field(default_factory=list)
    notes: str = ""
    photo_url: str | None = None

    @property
    def status(self) -> str:
        return FINISHED if self.end_time is not None else IN_PROGRESS

    @property
    def is_finished(self) -> bool:
        return self.end_time is not None

    def finish(self, end_time: str) -> "Workout":
        """Return a finished copy ending at ``end_time``."""

        return replace(self, end_time=end_time)

    def find_exercise(self, workout_exercise_id: str) -> WorkoutExercise | None:
        for ex in self.exercises:
            if ex.id == workout_exercise_id:
                return ex
        return None

    def to_dict(self, *, include_photo: bool = True) -> dict:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "date": self.date,
            "status": self.status,
            "startTime": self.start_time,
            "exercises": [ex.to_dict() for ex in self.exercises],
            "notes": self.notes,
        }
        if self.end_time is not None:
            data["endTime"] = self.end_time
        if include_photo and self.photo_url is not None:
            data["photoUrl"] = self.photo_url
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Workout":
        return cls(
            id=data["id"],
            name=data["name"],
            date=data["date"],
            start_time=data["startTime"],
            end_time=data.get("endTime"),
            exercises=[WorkoutExercise.from_dict(e) for e in data.get("exercises", [])],
            notes=data.get("notes", ""),
            photo_url=data.get("photoUrl"),
        )


@dataclass(frozen=True)
class Note:
    """Free-text journal entry, independent of any workout."""

    id: str
    text: str
    date: str

    def to_dict(self) -> dict:
        return {"id": self.id, "text": self.text, "date": self.date}

    @classmethod
    def from_dict(cls, data: dict) -> "Note":
        return cls(id=data["id"], text=data["text"], date=data["date"])


@dataclass(frozen=True)
class TimerState:
    """The single shared rest timer / stopwatch value.

    ``start_time`` and ``paused_at`` are epoch milliseconds.  A running timer
    has a start anchor and no pause mark; a paused timer keeps both so that
    ``paused_at - start_time`` is the elapsed time at the pause.
    """

    type: str = REST
    start_time: int | None = None
    duration: int = 60000
    paused_at: int | None = None
    is_running: bool = False

    @property
    def is_paused(self) -> bool:
        return self.paused_at is not None and self.start_time is not None

    def to_dict(self) -> dict:
        return {
            "type": self.type,
            "startTime": self.start_time,
            "duration": self.duration,
            "pausedAt": self.paused_at,
            "isRunning": self.is_running,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TimerState":
        return cls(
            type=data["type"],
            start_time=data.get("startTime"),
            duration=data["duration"],
            paused_at=data.get("pausedAt"),
            is_running=bool(data.get("isRunning", False)),
        )


@dataclass(frozen=True)
class TimerPreset:
    id: str
    duration: int
    label: str

    def to_dict(self) -> dict:
        return {"id": self.id, "duration": self.duration, "label": self.label}

    @classmethod
    def from_dict(cls, data: dict) -> "TimerPreset":
        return cls(id=data["id"], duration=data["duration"], label=data["label"])
