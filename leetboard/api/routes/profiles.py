import logging

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException

from leetboard.api.dependencies import get_current_identity
from leetboard.api.dependencies import get_roster_repository
from leetboard.api.schemas.profile import ProfileCreate
from leetboard.api.schemas.profile import ProfileOut
from leetboard.repositories.roster import HandleAlreadyRegisteredError
from leetboard.repositories.roster import RosterRepository
from leetboard.services.identity import Identity


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/profiles")


@router.post("", status_code=201)
def create_profile(
    payload: ProfileCreate,
    identity: Identity = Depends(get_current_identity),
    roster: RosterRepository = Depends(get_roster_repository),
) -> ProfileOut:
    """Register the caller's LeetCode handle on the roster."""

    username = payload.username.strip()
    if not username:
        raise HTTPException(status_code=400, detail="username cannot be empty")

    try:
        entry = roster.register(identity.user_id, username)
    except HandleAlreadyRegisteredError as exc:
        raise HTTPException(status_code=409, detail="profile already exists") from exc

    logger.info("Registered LeetCode handle %s for user %s", username, identity.user_id)
    return ProfileOut(user_id=entry.user_id, username=entry.username)


@router.get("")
def list_profiles(
    identity: Identity = Depends(get_current_identity),
    roster: RosterRepository = Depends(get_roster_repository),
) -> list[str]:
    return roster.list_usernames()


@router.get("/me")
def get_my_profile(
    identity: Identity = Depends(get_current_identity),
    roster: RosterRepository = Depends(get_roster_repository),
) -> ProfileOut:
    entry = roster.get_by_user_id(identity.user_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="profile not found")
    return ProfileOut(user_id=entry.user_id, username=entry.username)
