from dataclasses import asdict

from fastapi import APIRouter
from fastapi import Depends

from leetboard.api.dependencies import get_current_identity
from leetboard.api.dependencies import get_roster_repository
from leetboard.api.dependencies import get_stats_fetcher
from leetboard.api.schemas.leaderboard import LeaderboardResponse
from leetboard.api.schemas.leaderboard import RankedUserOut
from leetboard.api.schemas.leaderboard import RankRequest
from leetboard.repositories.roster import RosterRepository
from leetboard.services.identity import Identity
from leetboard.services.leaderboard_service import StatsFetcher
from leetboard.services.leaderboard_service import build_leaderboard
from leetboard.services.ranking import DifficultyCount
from leetboard.services.ranking import RankedUser
from leetboard.services.ranking import UserSolveRecord
from leetboard.services.ranking import difficulty_distribution
from leetboard.services.ranking import rank_users


router = APIRouter(prefix="/leaderboard")


def _to_row(user: RankedUser) -> RankedUserOut:
    return RankedUserOut(
        **asdict(user),
        distribution=[asdict(share) for share in difficulty_distribution(user)],
    )


@router.get("")
async def get_leaderboard(
    identity: Identity = Depends(get_current_identity),
    roster: RosterRepository = Depends(get_roster_repository),
    fetch_stats: StatsFetcher = Depends(get_stats_fetcher),
) -> LeaderboardResponse:
    """Fetch every rostered handle from LeetCode and return them ranked."""

    leaderboard = await build_leaderboard(roster, fetch_stats)
    return LeaderboardResponse(
        users=[_to_row(user) for user in leaderboard.users],
        missing=leaderboard.missing,
    )


@router.post("/rank")
def rank_supplied_stats(
    payload: RankRequest,
    identity: Identity = Depends(get_current_identity),
) -> LeaderboardResponse:
    """Rank stats the caller already holds without calling LeetCode."""

    records = [
        UserSolveRecord(
            username=user.username,
            counts=tuple(
                DifficultyCount(
                    difficulty=stat.difficulty,
                    count=stat.count,
                    submissions=stat.submissions,
                )
                for stat in user.stats
            ),
        )
        for user in payload.users
    ]
    return LeaderboardResponse(users=[_to_row(user) for user in rank_users(records)])
