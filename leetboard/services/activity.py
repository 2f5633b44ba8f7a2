from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC
from datetime import date
from datetime import datetime
from datetime import timedelta


SubmissionMap = Mapping[str | int, int]

# date.weekday() is 0 for Monday; the grid starts its weeks on Sunday.
SUNDAY = 6


@dataclass(frozen=True)
class CalendarDay:
    date: date
    count: int


Week = list[CalendarDay]


def day_timestamp(day: date) -> int:
    """Unix seconds of UTC midnight for `day`, matching submission calendar keys."""

    return int(datetime(day.year, day.month, day.day, tzinfo=UTC).timestamp())


def timestamp_to_date(raw_key: str | int) -> date | None:
    """Convert a submission calendar key to its UTC date, or None if malformed."""

    try:
        seconds = int(raw_key)
    except (TypeError, ValueError):
        return None

    try:
        return datetime.fromtimestamp(seconds, tz=UTC).date()
    except (OverflowError, OSError, ValueError):
        return None


def _counts_by_timestamp(submissions: SubmissionMap) -> dict[int, int]:
    counts: dict[int, int] = {}
    for raw_key, count in submissions.items():
        # Only canonical integer keys ("1704067200" or 1704067200) can match a day.
        if isinstance(raw_key, int):
            counts[raw_key] = count
        elif isinstance(raw_key, str) and raw_key.isdecimal():
            try:
                counts[int(raw_key)] = count
            except ValueError:
                continue
    return counts


def contribution_level(count: int) -> int:
    """Map a daily submission count to a heatmap intensity in range 0..4."""

    if count <= 0:
        return 0
    return min(count, 4)


def expand_year(submissions: SubmissionMap, year: int) -> list[Week]:
    """Lay out every day of `year` as Sunday-started week buckets.

    The first and last weeks are usually partial and are not padded.
    """

    counts = _counts_by_timestamp(submissions)

    weeks: list[Week] = []
    current_week: Week = []
    current_day = date(year, 1, 1)
    last_day = date(year, 12, 31)
    while current_day <= last_day:
        if current_day.weekday() == SUNDAY and current_week:
            weeks.append(current_week)
            current_week = []

        current_week.append(
            CalendarDay(
                date=current_day,
                count=counts.get(day_timestamp(current_day), 0),
            )
        )
        current_day += timedelta(days=1)

    if current_week:
        weeks.append(current_week)

    return weeks


def year_total(weeks: list[Week]) -> int:
    return sum(day.count for week in weeks for day in week)


def current_streak(submissions: SubmissionMap, today: date) -> int:
    """Count consecutive submission days ending at or next to `today`.

    Every key in the map is a submission day, including entries whose count is
    zero. The walk runs from the most recent date backwards and stops at the
    first gap longer than one day.
    """

    if not submissions:
        return 0

    submission_days = [
        parsed
        for parsed in (timestamp_to_date(key) for key in submissions)
        if parsed is not None
    ]
    submission_days.sort(reverse=True)

    streak = 0
    previous = today
    for submission_day in submission_days:
        if (previous - submission_day).days > 1:
            break
        streak += 1
        previous = submission_day

    return streak
