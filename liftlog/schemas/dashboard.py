from __future__ import annotations

from datetime import date as date_cls

from pydantic import BaseModel, Field

from liftlog.schemas.workouts import WorkoutResponse, WorkoutStatsResponse


class DashboardDayResponse(BaseModel):
    date: date_cls
    workouts: list[WorkoutResponse] = Field(default_factory=list)
    stats: WorkoutStatsResponse
