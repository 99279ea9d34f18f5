from __future__ import annotations

import asyncio
from collections import defaultdict
from datetime import date as date_cls
from datetime import datetime
import logging
from zoneinfo import ZoneInfo

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from liftlog.core.dates import UTC, day_bounds, format_date, to_calendar_date
from liftlog.core.errors import storage_errors
from liftlog.db.models.exercise import Exercise
from liftlog.db.models.workout import Workout
from liftlog.db.models.workout_set import WorkoutSet
from liftlog.schemas.dashboard import DashboardDayResponse
from liftlog.schemas.workouts import (
    ExerciseResponse,
    SetResponse,
    WorkoutResponse,
    WorkoutStatsResponse,
)
from liftlog.services.identity import IdentityResolver

logger = logging.getLogger("liftlog.domain")


def _day_criteria(user_id: int, start: datetime, end: datetime) -> list[ColumnElement[bool]]:
    return [
        Workout.user_id == user_id,
        Workout.started_at >= start,
        Workout.started_at <= end,
    ]


class WorkoutQueryService:
    """Read side of the workout hierarchy, scoped to the calling user.

    Every public call resolves the caller first; no session is opened for an
    unauthenticated caller. Workouts, exercises and sets are loaded with three
    ordered queries and stitched together by foreign key.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        resolver: IdentityResolver,
        tz: ZoneInfo = UTC,
    ):
        self._session_factory = session_factory
        self._resolver = resolver
        self._tz = tz

    async def get_workouts_for_date(self, day: date_cls | datetime) -> list[WorkoutResponse]:
        user_id = await self._resolver.resolve_current_user_id()
        start, end = day_bounds(day, self._tz)
        workouts = await self._load_workout_tree(_day_criteria(user_id, start, end))
        logger.info(
            "domain_event event=workouts_fetched user_id=%s date=%s start=%s end=%s count=%s",
            user_id,
            format_date(to_calendar_date(day)),
            start.isoformat(),
            end.isoformat(),
            len(workouts),
        )
        return workouts

    async def get_stats_for_date(self, day: date_cls | datetime) -> WorkoutStatsResponse:
        user_id = await self._resolver.resolve_current_user_id()
        start, end = day_bounds(day, self._tz)
        return await self._load_stats(user_id, start, end)

    async def get_all_workouts_for_user(self) -> list[WorkoutResponse]:
        user_id = await self._resolver.resolve_current_user_id()
        workouts = await self._load_workout_tree([Workout.user_id == user_id])
        logger.info(
            "domain_event event=all_workouts_fetched user_id=%s count=%s",
            user_id,
            len(workouts),
        )
        return workouts

    async def get_dashboard_for_date(self, day: date_cls | datetime) -> DashboardDayResponse:
        """Workouts and stats for one day, with the two reads issued concurrently."""
        user_id = await self._resolver.resolve_current_user_id()
        start, end = day_bounds(day, self._tz)
        workouts, stats = await asyncio.gather(
            self._load_workout_tree(_day_criteria(user_id, start, end)),
            self._load_stats(user_id, start, end),
        )
        logger.info(
            "domain_event event=dashboard_fetched user_id=%s date=%s workouts=%s",
            user_id,
            format_date(to_calendar_date(day)),
            len(workouts),
        )
        return DashboardDayResponse(date=to_calendar_date(day), workouts=workouts, stats=stats)

    async def _load_workout_tree(self, criteria: list[ColumnElement[bool]]) -> list[WorkoutResponse]:
        with storage_errors("workout read"):
            async with self._session_factory() as db:
                workouts = (
                    await db.execute(
                        select(Workout)
                        .where(*criteria)
                        .order_by(Workout.started_at.desc(), Workout.id.desc())
                    )
                ).scalars().all()
                if not workouts:
                    return []

                workout_ids = [w.id for w in workouts]
                exercises = (
                    await db.execute(
                        select(Exercise)
                        .where(Exercise.workout_id.in_(workout_ids))
                        .order_by(Exercise.exercise_order.asc(), Exercise.id.asc())
                    )
                ).scalars().all()

                exercise_ids = [e.id for e in exercises]
                sets = []
                if exercise_ids:
                    sets = (
                        await db.execute(
                            select(WorkoutSet)
                            .where(WorkoutSet.exercise_id.in_(exercise_ids))
                            .order_by(WorkoutSet.set_number.asc(), WorkoutSet.id.asc())
                        )
                    ).scalars().all()

        sets_by_exercise: dict[int, list[SetResponse]] = defaultdict(list)
        for set_row in sets:
            sets_by_exercise[set_row.exercise_id].append(
                SetResponse(
                    id=set_row.id,
                    exercise_id=set_row.exercise_id,
                    set_number=set_row.set_number,
                    reps=set_row.reps,
                    weight=float(set_row.weight) if set_row.weight is not None else None,
                    weight_unit=set_row.weight_unit,
                    rpe=set_row.rpe,
                    rir=set_row.rir,
                    is_warmup=set_row.is_warmup,
                    notes=set_row.notes,
                )
            )

        exercises_by_workout: dict[int, list[ExerciseResponse]] = defaultdict(list)
        for exercise in exercises:
            exercises_by_workout[exercise.workout_id].append(
                ExerciseResponse(
                    id=exercise.id,
                    workout_id=exercise.workout_id,
                    exercise_name=exercise.exercise_name,
                    exercise_order=exercise.exercise_order,
                    notes=exercise.notes,
                    sets=sets_by_exercise.get(exercise.id, []),
                )
            )

        return [
            WorkoutResponse(
                id=workout.id,
                name=workout.name,
                notes=workout.notes,
                started_at=workout.started_at,
                completed_at=workout.completed_at,
                duration=workout.duration,
                exercises=exercises_by_workout.get(workout.id, []),
            )
            for workout in workouts
        ]

    async def _load_stats(self, user_id: int, start: datetime, end: datetime) -> WorkoutStatsResponse:
        criteria = _day_criteria(user_id, start, end)
        exercise_counts = (
            select(
                Exercise.workout_id.label("workout_id"),
                func.count(Exercise.id).label("exercise_count"),
            )
            .join(Workout, Exercise.workout_id == Workout.id)
            .where(*criteria)
            .group_by(Exercise.workout_id)
            .subquery()
        )
        stmt = (
            select(
                Workout.id,
                Workout.duration,
                func.coalesce(exercise_counts.c.exercise_count, 0).label("exercise_count"),
            )
            .outerjoin(exercise_counts, exercise_counts.c.workout_id == Workout.id)
            .where(*criteria)
        )

        with storage_errors("workout stats read"):
            async with self._session_factory() as db:
                rows = (await db.execute(stmt)).all()

        stats = WorkoutStatsResponse(
            total_workouts=len(rows),
            total_exercises=sum(int(exercise_count or 0) for _, _, exercise_count in rows),
            total_duration=sum(duration or 0 for _, duration, _ in rows),
        )
        logger.info(
            "domain_event event=stats_computed user_id=%s total_workouts=%s total_exercises=%s total_duration=%s",
            user_id,
            stats.total_workouts,
            stats.total_exercises,
            stats.total_duration,
        )
        return stats
