from collections.abc import Iterable
from collections.abc import Sequence
from dataclasses import dataclass
from dataclasses import field


DIFFICULTY_WEIGHTS: dict[str, int] = {"easy": 1, "medium": 2, "hard": 3}


@dataclass(frozen=True)
class DifficultyCount:
    """Solved-problem count for one difficulty label as reported upstream."""

    difficulty: str
    count: int
    submissions: int = 0


@dataclass(frozen=True)
class UserSolveRecord:
    """Per-user solve counts collected during one leaderboard refresh."""

    username: str
    counts: Sequence[DifficultyCount] = field(default_factory=tuple)


@dataclass(frozen=True)
class RankedUser:
    username: str
    total_solved: int
    easy: int
    medium: int
    hard: int
    score: int
    rank: int


@dataclass(frozen=True)
class DifficultyShare:
    name: str
    value: int
    percentage: float


def score_for(easy: int, medium: int, hard: int) -> int:
    """Weighted score: Easy x1, Medium x2, Hard x3."""

    return (
        easy * DIFFICULTY_WEIGHTS["easy"]
        + medium * DIFFICULTY_WEIGHTS["medium"]
        + hard * DIFFICULTY_WEIGHTS["hard"]
    )


def _tally(counts: Iterable[DifficultyCount]) -> dict[str, int]:
    tally = dict.fromkeys(DIFFICULTY_WEIGHTS, 0)
    for item in counts:
        label = item.difficulty.lower()
        # Unknown tiers (LeetCode also reports "All") are skipped.
        if label in tally:
            tally[label] = item.count
    return tally


def rank_users(records: Sequence[UserSolveRecord]) -> list[RankedUser]:
    """Score every record and return them ranked by descending score.

    Ordering is a stable sort on score alone, so users with equal scores keep
    their input order and receive consecutive, distinct ranks.
    """

    scored: list[tuple[str, dict[str, int], int]] = []
    for record in records:
        tally = _tally(record.counts)
        scored.append(
            (
                record.username,
                tally,
                score_for(tally["easy"], tally["medium"], tally["hard"]),
            )
        )

    scored.sort(key=lambda item: item[2], reverse=True)

    return [
        RankedUser(
            username=username,
            total_solved=tally["easy"] + tally["medium"] + tally["hard"],
            easy=tally["easy"],
            medium=tally["medium"],
            hard=tally["hard"],
            score=score,
            rank=index + 1,
        )
        for index, (username, tally, score) in enumerate(scored)
    ]


def difficulty_distribution(user: RankedUser) -> list[DifficultyShare]:
    """Split a user's solved total into Easy/Medium/Hard shares in percent."""

    values = [("Easy", user.easy), ("Medium", user.medium), ("Hard", user.hard)]
    total = user.total_solved
    return [
        DifficultyShare(
            name=name,
            value=value,
            percentage=round(value / total * 100, 1) if total > 0 else 0.0,
        )
        for name, value in values
    ]
