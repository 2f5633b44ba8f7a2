from pydantic import BaseModel
from pydantic import Field


class DifficultyStat(BaseModel):
    """Accepted-submission count for one difficulty tier."""

    difficulty: str
    count: int = Field(ge=0)
    submissions: int = Field(default=0, ge=0)


class UserStatsIn(BaseModel):
    """Per-user stats supplied by a caller that already fetched them."""

    username: str
    stats: list[DifficultyStat]


class RankRequest(BaseModel):
    users: list[UserStatsIn]


class DifficultyShareOut(BaseModel):
    name: str
    value: int
    percentage: float


class RankedUserOut(BaseModel):
    """Single leaderboard row."""

    username: str
    total_solved: int
    easy: int
    medium: int
    hard: int
    score: int
    rank: int
    distribution: list[DifficultyShareOut]


class LeaderboardResponse(BaseModel):
    """Ranked leaderboard plus the handles that could not be fetched."""

    users: list[RankedUserOut]
    missing: list[str] = []
