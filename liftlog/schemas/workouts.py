from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class SetResponse(BaseModel):
    id: int
    exercise_id: int
    set_number: int
    reps: int
    weight: float | None
    weight_unit: str
    rpe: int | None
    rir: int | None
    is_warmup: bool
    notes: str | None


class ExerciseResponse(BaseModel):
    id: int
    workout_id: int
    exercise_name: str
    exercise_order: int
    notes: str | None
    sets: list[SetResponse] = Field(default_factory=list)


class WorkoutResponse(BaseModel):
    id: int
    name: str
    notes: str | None
    started_at: datetime
    completed_at: datetime | None
    duration: int | None
    exercises: list[ExerciseResponse] = Field(default_factory=list)


class WorkoutStatsResponse(BaseModel):
    total_workouts: int = 0
    total_exercises: int = 0
    total_duration: int = 0
