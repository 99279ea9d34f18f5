from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from liftlog.api.deps import get_workout_service
from liftlog.core.dates import parse_date
from liftlog.schemas.workouts import WorkoutResponse, WorkoutStatsResponse
from liftlog.services.workouts import WorkoutQueryService

router = APIRouter(prefix="/v1/workouts", tags=["workouts"])


@router.get("", response_model=list[WorkoutResponse])
async def list_workouts_for_date(
    workout_date: str = Query(..., alias="date"),
    service: WorkoutQueryService = Depends(get_workout_service),
):
    return await service.get_workouts_for_date(parse_date(workout_date))


@router.get("/all", response_model=list[WorkoutResponse])
async def list_all_workouts(service: WorkoutQueryService = Depends(get_workout_service)):
    return await service.get_all_workouts_for_user()


@router.get("/stats", response_model=WorkoutStatsResponse)
async def workout_stats_for_date(
    workout_date: str = Query(..., alias="date"),
    service: WorkoutQueryService = Depends(get_workout_service),
):
    return await service.get_stats_for_date(parse_date(workout_date))
