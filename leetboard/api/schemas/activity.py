from datetime import date

from pydantic import BaseModel


class CalendarDayOut(BaseModel):
    """Single day item used in the calendar grid."""

    date: date
    count: int
    level: int


class ActivityResponse(BaseModel):
    """Submission calendar and streak of one user for one year."""

    username: str
    year: int
    total: int
    streak: int
    active_years: list[int]
    weeks: list[list[CalendarDayOut]]
