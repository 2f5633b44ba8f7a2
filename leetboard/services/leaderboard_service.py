import asyncio
import logging
from collections.abc import Awaitable
from collections.abc import Callable
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field
from datetime import date

from leetboard.clients.leetcode_client import SubmissionCalendar
from leetboard.repositories.roster import RosterRepository
from leetboard.services.activity import Week
from leetboard.services.activity import current_streak
from leetboard.services.activity import expand_year
from leetboard.services.activity import year_total
from leetboard.services.ranking import RankedUser
from leetboard.services.ranking import UserSolveRecord
from leetboard.services.ranking import rank_users


logger = logging.getLogger(__name__)

StatsFetcher = Callable[[str], Awaitable[UserSolveRecord]]
CalendarFetcher = Callable[[str, int], Awaitable[SubmissionCalendar]]


@dataclass(frozen=True)
class Leaderboard:
    users: list[RankedUser]
    missing: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class UserActivity:
    username: str
    year: int
    total: int
    streak: int
    active_years: list[int]
    weeks: list[Week]


async def collect_records(
    usernames: Sequence[str], fetch_stats: StatsFetcher
) -> tuple[list[UserSolveRecord], list[str]]:
    """Fetch every handle concurrently and split successes from failures.

    Results keep the order of `usernames` regardless of completion order.
    """

    results = await asyncio.gather(
        *(fetch_stats(username) for username in usernames),
        return_exceptions=True,
    )

    records: list[UserSolveRecord] = []
    missing: list[str] = []
    for username, result in zip(usernames, results):
        if isinstance(result, Exception):
            logger.warning("Skipping %s from leaderboard: %r", username, result)
            missing.append(username)
        elif isinstance(result, BaseException):
            raise result
        else:
            records.append(result)

    return records, missing


async def build_leaderboard(
    roster: RosterRepository, fetch_stats: StatsFetcher
) -> Leaderboard:
    """Recompute the whole leaderboard from fresh upstream data."""

    usernames = roster.list_usernames()
    records, missing = await collect_records(usernames, fetch_stats)
    users = rank_users(records)
    logger.info(
        "Ranked %d of %d rostered users (%d missing)",
        len(users),
        len(usernames),
        len(missing),
    )
    return Leaderboard(users=users, missing=missing)


async def build_user_activity(
    username: str,
    year: int,
    today: date,
    fetch_calendar: CalendarFetcher,
) -> UserActivity:
    """Build the calendar grid for `year` and the streak ending at `today`.

    The streak always comes from the current year's calendar, so viewing a
    past year still reports the live streak.
    """

    calendar = await fetch_calendar(username, year)
    if year == today.year:
        streak_calendar = calendar
    else:
        streak_calendar = await fetch_calendar(username, today.year)

    weeks = expand_year(calendar.submissions, year)
    return UserActivity(
        username=username,
        year=year,
        total=year_total(weeks),
        streak=current_streak(streak_calendar.submissions, today),
        active_years=calendar.active_years,
        weeks=weeks,
    )
