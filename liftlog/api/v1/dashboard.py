from __future__ import annotations

import logging
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Query

from liftlog.api.deps import get_client_timezone, get_workout_service
from liftlog.core.dates import parse_date, today
from liftlog.core.errors import InvalidDateInput
from liftlog.schemas.dashboard import DashboardDayResponse
from liftlog.services.workouts import WorkoutQueryService

router = APIRouter(prefix="/v1/dashboard", tags=["dashboard"])
logger = logging.getLogger("liftlog.api")


@router.get("/day", response_model=DashboardDayResponse)
async def dashboard_day(
    dashboard_date: str | None = Query(None, alias="date"),
    tz: ZoneInfo = Depends(get_client_timezone),
    service: WorkoutQueryService = Depends(get_workout_service),
):
    # The dashboard always renders a day: bad or missing input means today.
    if dashboard_date:
        try:
            selected = parse_date(dashboard_date)
        except InvalidDateInput:
            logger.warning("dashboard_date_fallback reason=invalid_date value=%s", dashboard_date)
            selected = today(tz)
    else:
        selected = today(tz)

    return await service.get_dashboard_for_date(selected)
