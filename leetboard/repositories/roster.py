from dataclasses import dataclass
from typing import Protocol

from sqlalchemy import or_
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from leetboard.models import UserProfile


class HandleAlreadyRegisteredError(Exception):
    """Raised when the account or the LeetCode handle is already on the roster."""


@dataclass(frozen=True)
class RosterEntry:
    user_id: str
    username: str


class RosterRepository(Protocol):
    def list_usernames(self) -> list[str]: ...

    def get_by_user_id(self, user_id: str) -> RosterEntry | None: ...

    def register(self, user_id: str, username: str) -> RosterEntry: ...


class SqlRosterRepository:
    """Roster of tracked LeetCode handles stored in `user_profiles`."""

    def __init__(self, db: Session):
        self.db = db

    def list_usernames(self) -> list[str]:
        return list(
            self.db.scalars(
                select(UserProfile.leetcode_username).order_by(
                    UserProfile.leetcode_username.asc()
                )
            ).all()
        )

    def get_by_user_id(self, user_id: str) -> RosterEntry | None:
        profile = self.db.get(UserProfile, user_id)
        if profile is None:
            return None
        return RosterEntry(user_id=profile.id, username=profile.leetcode_username)

    def register(self, user_id: str, username: str) -> RosterEntry:
        existing_profile = self.db.scalar(
            select(UserProfile).where(
                or_(
                    UserProfile.id == user_id,
                    UserProfile.leetcode_username == username,
                )
            )
        )
        if existing_profile:
            raise HandleAlreadyRegisteredError(username)

        profile = UserProfile(id=user_id, leetcode_username=username)
        self.db.add(profile)
        try:
            self.db.commit()
        except IntegrityError as exc:
            # A concurrent registration won the unique constraint.
            self.db.rollback()
            raise HandleAlreadyRegisteredError(username) from exc
        self.db.refresh(profile)
        return RosterEntry(user_id=profile.id, username=profile.leetcode_username)
