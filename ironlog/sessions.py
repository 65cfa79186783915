"""Workout lifecycle and the exercise library.

:class:`SessionManager` owns the workout collection and the single active
workout pointer.  Workouts move from in progress to finished exactly once
through :meth:`SessionManager.finish_workout`; deletion ends the lifecycle
from either state.  Every mutation is written to the key/value store before
the call returns.
"""

from __future__ import annotations

import logging

from ironlog import CUSTOM_WORKOUT, UNKNOWN_EXERCISE
from ironlog.errors import ActiveWorkoutError, WorkoutFinishedError
from ironlog.models import Exercise, Workout
from ironlog.storage import EXERCISES_KEY, WORKOUTS_KEY, KeyValueStore
from ironlog.templates import build_template_exercises
from ironlog.utils import new_id, now_iso


class SessionManager:
    """Mutator surface for workouts and exercise definitions."""

    def __init__(
        self,
        store: KeyValueStore,
        workouts: list[Workout] | None = None,
        exercises: list[Exercise] | None = None,
        active_workout_id: str | None = None,
    ) -> None:
        self.store = store
        self.workouts: list[Workout] = list(workouts or [])
        self.exercises: list[Exercise] = list(exercises or [])
        self.active_workout_id = active_workout_id

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _save_workouts(self) -> None:
        self.store.set(WORKOUTS_KEY, [w.to_dict() for w in self.workouts])

    def _save_exercises(self) -> None:
        self.store.set(EXERCISES_KEY, [e.to_dict() for e in self.exercises])

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_workout(self, workout_id: str) -> Workout | None:
        for workout in self.workouts:
            if workout.id == workout_id:
                return workout
        return None

    def in_progress_workouts(self) -> list[Workout]:
        return [w for w in self.workouts if not w.is_finished]

    def _point_at_next_in_progress(self) -> None:
        """Hand the active pointer to the newest in-progress workout left."""

        remaining = self.in_progress_workouts()
        self.active_workout_id = remaining[0].id if remaining else None

    @property
    def active_workout(self) -> Workout | None:
        """Return the in-progress workout, or ``None``."""

        if self.active_workout_id is None:
            return None
        return self.get_workout(self.active_workout_id)

    def resolve_exercise_name(self, exercise_id: str) -> str:
        """Return the library name for ``exercise_id``.

        Unknown identifiers resolve to ``"Unknown Exercise"``; this never
        raises.
        """

        for exercise in self.exercises:
            if exercise.id == exercise_id:
                return exercise.name
        return UNKNOWN_EXERCISE

    def search_exercises(self, query: str) -> list[Exercise]:
        """Return library entries whose name contains ``query`` (any case)."""

        needle = query.lower()
        return [e for e in self.exercises if needle in e.name.lower()]

    # ------------------------------------------------------------------
    # Workout lifecycle
    # ------------------------------------------------------------------

    def start_workout(self, template_name: str | None = None) -> Workout:
        """Create, prepend and activate a new in-progress workout.

        ``template_name`` selects a quick-start exercise list by exact name;
        any other name starts an empty workout with that name.  Raises
        :class:`ActiveWorkoutError` while any workout is in progress so at
        most one workout is ever active.
        """

        in_progress = self.in_progress_workouts()
        if in_progress:
            raise ActiveWorkoutError(in_progress[0].id)

        now = now_iso()
        workout = Workout(
            id=new_id(),
            name=template_name or CUSTOM_WORKOUT,
            date=now,
            start_time=now,
            exercises=build_template_exercises(template_name),
            notes="",
        )
        self.workouts.insert(0, workout)
        self.active_workout_id = workout.id
        self._save_workouts()
        logging.info("Started workout %s (%s)", workout.id, workout.name)
        return workout

    def finish_workout(self) -> Workout | None:
        """Finish the active workout and move the active pointer on.

        Returns the finished workout, or ``None`` when nothing was active.
        The pointer passes to any other in-progress workout (for example
        one left over from an old backup) so it can be finished too.
        """

        workout = self.active_workout
        if workout is None or workout.is_finished:
            self._point_at_next_in_progress()
            return None

        finished = workout.finish(now_iso())
        self.workouts = [finished if w.id == workout.id else w for w in self.workouts]
        self._point_at_next_in_progress()
        self._save_workouts()
        logging.info("Finished workout %s", finished.id)
        return finished

    def update_workout(self, workout: Workout) -> Workout:
        """Replace the stored workout that has ``workout.id``.

        The caller supplies the complete record; no fields are merged.  The
        end time must match the stored one: workouts are finished only
        through :meth:`finish_workout` and never re-opened, so a change
        raises :class:`WorkoutFinishedError`.
        """

        existing = self.get_workout(workout.id)
        if existing is None:
            raise KeyError(f"Workout '{workout.id}' not found")
        if workout.end_time != existing.end_time:
            raise WorkoutFinishedError(
                f"Workout '{workout.id}' end time can only be set by finishing it"
            )

        self.workouts = [workout if w.id == workout.id else w for w in self.workouts]
        self._save_workouts()
        return workout

    def delete_workout(self, workout_id: str) -> None:
        """Remove a workout in any state.

        Deleting the active workout moves the pointer to the next
        in-progress workout, or clears it when there is none.
        """

        self.workouts = [w for w in self.workouts if w.id != workout_id]
        if self.active_workout_id == workout_id:
            self._point_at_next_in_progress()
        self._save_workouts()

    # ------------------------------------------------------------------
    # Exercise library
    # ------------------------------------------------------------------

    def add_exercise_definition(self, exercise: Exercise) -> Exercise:
        """Append ``exercise`` to the library."""

        self.exercises.append(exercise)
        self._save_exercises()
        return exercise

    def create_custom_exercise(self, name: str, muscle_group: str = "Custom") -> Exercise:
        """Define a user exercise called ``name`` and add it to the library."""

        name = name.strip()
        if not name:
            raise ValueError("Exercise name is required")
        return self.add_exercise_definition(
            Exercise(id=new_id(), name=name, muscle_group=muscle_group, custom=True)
        )

    def replace_all(
        self,
        workouts: list[Workout],
        exercises: list[Exercise],
        *,
        persist: bool = True,
    ) -> None:
        """Swap in a complete data set, e.g. after a backup import.

        The active pointer survives only if it still names an in-progress
        workout in ``workouts``.  Pass ``persist=False`` when the caller has
        already written the new data to the store.
        """

        self.workouts = list(workouts)
        self.exercises = list(exercises)
        active = self.active_workout
        if active is None or active.is_finished:
            self.active_workout_id = None
        if persist:
            self._save_workouts()
            self._save_exercises()

