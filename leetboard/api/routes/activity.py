import logging
from datetime import UTC
from datetime import datetime

import httpx
from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Query

from leetboard.api.dependencies import get_calendar_fetcher
from leetboard.api.dependencies import get_current_identity
from leetboard.api.schemas.activity import ActivityResponse
from leetboard.api.schemas.activity import CalendarDayOut
from leetboard.clients.leetcode_client import LeetCodeAPIError
from leetboard.clients.leetcode_client import LeetCodeUserNotFoundError
from leetboard.services.activity import contribution_level
from leetboard.services.identity import Identity
from leetboard.services.leaderboard_service import CalendarFetcher
from leetboard.services.leaderboard_service import build_user_activity


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/users/{username}/activity")
async def get_user_activity(
    username: str,
    year: int | None = Query(default=None, ge=1970, le=9999),
    identity: Identity = Depends(get_current_identity),
    fetch_calendar: CalendarFetcher = Depends(get_calendar_fetcher),
) -> ActivityResponse:
    """Return the submission calendar grid and current streak of a handle."""

    today = datetime.now(UTC).date()
    selected_year = year if year is not None else today.year

    try:
        activity = await build_user_activity(
            username, selected_year, today, fetch_calendar
        )
    except LeetCodeUserNotFoundError as exc:
        raise HTTPException(status_code=404, detail="LeetCode user not found") from exc
    except (LeetCodeAPIError, httpx.HTTPError) as exc:
        logger.warning("Calendar fetch for %s failed: %r", username, exc)
        raise HTTPException(
            status_code=502, detail="LeetCode API request failed"
        ) from exc

    return ActivityResponse(
        username=activity.username,
        year=activity.year,
        total=activity.total,
        streak=activity.streak,
        active_years=activity.active_years,
        weeks=[
            [
                CalendarDayOut(
                    date=day.date, count=day.count, level=contribution_level(day.count)
                )
                for day in week
            ]
            for week in activity.weeks
        ],
    )
