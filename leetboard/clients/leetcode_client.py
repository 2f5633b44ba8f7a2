import json
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from typing import Any

import httpx

from leetboard.services.ranking import DifficultyCount
from leetboard.services.ranking import UserSolveRecord


USER_AGENT = "leetboard"

USER_STATS_QUERY = """
query userSessionProgress($username: String!) {
  allQuestionsCount {
    difficulty
    count
  }
  matchedUser(username: $username) {
    submitStats {
      acSubmissionNum {
        difficulty
        count
        submissions
      }
    }
  }
}
"""

USER_CALENDAR_QUERY = """
query userProfileCalendar($username: String!, $year: Int) {
  matchedUser(username: $username) {
    userCalendar(year: $year) {
      activeYears
      streak
      totalActiveDays
      submissionCalendar
    }
  }
}
"""


class LeetCodeAPIError(Exception):
    """Raised when LeetCode returns an unusable GraphQL response."""


class LeetCodeUserNotFoundError(LeetCodeAPIError):
    """Raised when the requested handle does not exist on LeetCode."""


@dataclass(frozen=True)
class SubmissionCalendar:
    """Submission calendar of one user for one year."""

    username: str
    year: int
    submissions: dict[str, int] = field(default_factory=dict)
    active_years: list[int] = field(default_factory=list)
    total_active_days: int = 0


def parse_submission_calendar(raw_calendar: Any) -> dict[str, int]:
    """Decode LeetCode's `submissionCalendar` into a day-timestamp -> count map.

    The field arrives as a JSON-encoded string; an already decoded mapping is
    accepted too. Entries with non-integer counts are dropped.
    """

    if raw_calendar is None or raw_calendar == "":
        return {}

    if isinstance(raw_calendar, str):
        try:
            decoded = json.loads(raw_calendar)
        except json.JSONDecodeError as exc:
            raise LeetCodeAPIError("submissionCalendar is not valid JSON") from exc
    else:
        decoded = raw_calendar

    if not isinstance(decoded, Mapping):
        raise LeetCodeAPIError("submissionCalendar is not an object")

    return {
        str(key): value
        for key, value in decoded.items()
        if isinstance(value, int) and not isinstance(value, bool)
    }


async def _post_query(
    client: httpx.AsyncClient,
    graphql_url: str,
    query: str,
    variables: dict[str, object],
) -> Mapping[str, Any]:
    response = await client.post(
        graphql_url,
        json={"query": query, "variables": variables},
        headers={
            "Content-Type": "application/json",
            "Referer": "https://leetcode.com/",
            "User-Agent": USER_AGENT,
        },
    )
    response.raise_for_status()

    payload: Any = response.json()
    if not isinstance(payload, Mapping):
        raise LeetCodeAPIError("LeetCode GraphQL response is invalid")

    data = payload.get("data")
    if payload.get("errors") and not isinstance(data, Mapping):
        raise LeetCodeAPIError("LeetCode GraphQL returned errors")
    if not isinstance(data, Mapping):
        raise LeetCodeAPIError("LeetCode GraphQL data is missing")

    return data


async def fetch_user_stats(
    client: httpx.AsyncClient,
    username: str,
    graphql_url: str,
) -> UserSolveRecord:
    """Fetch accepted-submission counts per difficulty for one handle."""

    data = await _post_query(
        client, graphql_url, USER_STATS_QUERY, {"username": username}
    )

    user = data.get("matchedUser")
    if not isinstance(user, Mapping):
        raise LeetCodeUserNotFoundError(f"LeetCode user {username!r} not found")

    submit_stats = user.get("submitStats")
    if not isinstance(submit_stats, Mapping):
        raise LeetCodeAPIError("LeetCode submitStats is missing")

    raw_counts = submit_stats.get("acSubmissionNum")
    if not isinstance(raw_counts, list):
        raise LeetCodeAPIError("LeetCode acSubmissionNum is missing")

    counts: list[DifficultyCount] = []
    for item in raw_counts:
        if not isinstance(item, Mapping):
            continue
        raw_difficulty = item.get("difficulty")
        raw_count = item.get("count")
        raw_submissions = item.get("submissions")
        if not isinstance(raw_difficulty, str) or not isinstance(raw_count, int):
            continue
        counts.append(
            DifficultyCount(
                difficulty=raw_difficulty,
                count=raw_count,
                submissions=raw_submissions if isinstance(raw_submissions, int) else 0,
            )
        )

    return UserSolveRecord(username=username, counts=tuple(counts))


async def fetch_submission_calendar(
    client: httpx.AsyncClient,
    username: str,
    year: int,
    graphql_url: str,
) -> SubmissionCalendar:
    """Fetch the sparse day -> submission count map of one handle for `year`."""

    data = await _post_query(
        client,
        graphql_url,
        USER_CALENDAR_QUERY,
        {"username": username, "year": year},
    )

    user = data.get("matchedUser")
    if not isinstance(user, Mapping):
        raise LeetCodeUserNotFoundError(f"LeetCode user {username!r} not found")

    calendar = user.get("userCalendar")
    if not isinstance(calendar, Mapping):
        raise LeetCodeAPIError("LeetCode userCalendar is missing")

    raw_years = calendar.get("activeYears")
    active_years = (
        [value for value in raw_years if isinstance(value, int)]
        if isinstance(raw_years, list)
        else []
    )
    raw_active_days = calendar.get("totalActiveDays")

    return SubmissionCalendar(
        username=username,
        year=year,
        submissions=parse_submission_calendar(calendar.get("submissionCalendar")),
        active_years=active_years,
        total_active_days=raw_active_days if isinstance(raw_active_days, int) else 0,
    )
