"""Exception types raised by the core."""


class BackupValidationError(ValueError):
    """Raised when a backup document does not have the expected shape."""


class ExportCancelled(Exception):
    """Raised when the user dismisses the export destination chooser.

    This is not a failure; callers should treat it as a silent no-op.
    """


class ActiveWorkoutError(RuntimeError):
    """Raised when starting a workout while another is still in progress."""

    def __init__(self, workout_id: str):
        super().__init__(f"Workout {workout_id} is already in progress")
        self.workout_id = workout_id


class WorkoutFinishedError(ValueError):
    """Raised when editing a workout that has already been finished."""
