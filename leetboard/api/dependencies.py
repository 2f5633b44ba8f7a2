from collections.abc import AsyncGenerator
from functools import lru_cache

import httpx
from fastapi import Depends
from fastapi import Security
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from leetboard.clients.leetcode_client import SubmissionCalendar
from leetboard.clients.leetcode_client import fetch_submission_calendar
from leetboard.clients.leetcode_client import fetch_user_stats
from leetboard.core.security import bearer_scheme
from leetboard.core.security import resolve_identity
from leetboard.db import get_db
from leetboard.repositories.roster import RosterRepository
from leetboard.repositories.roster import SqlRosterRepository
from leetboard.services.identity import Identity
from leetboard.services.identity import SessionProvider
from leetboard.services.identity import SupabaseSessionProvider
from leetboard.services.leaderboard_service import CalendarFetcher
from leetboard.services.leaderboard_service import StatsFetcher
from leetboard.services.ranking import UserSolveRecord
from leetboard.settings import Settings


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_session_provider(
    settings: Settings = Depends(get_settings),
) -> SessionProvider:
    return SupabaseSessionProvider(
        supabase_url=settings.supabase_url,
        anon_key=settings.supabase_anon_key,
    )


def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
    provider: SessionProvider = Depends(get_session_provider),
) -> Identity:
    return resolve_identity(credentials, provider)


def get_roster_repository(db: Session = Depends(get_db)) -> RosterRepository:
    return SqlRosterRepository(db)


async def get_leetcode_client(
    settings: Settings = Depends(get_settings),
) -> AsyncGenerator[httpx.AsyncClient, None]:
    async with httpx.AsyncClient(timeout=settings.upstream_timeout_seconds) as client:
        yield client


def get_stats_fetcher(
    client: httpx.AsyncClient = Depends(get_leetcode_client),
    settings: Settings = Depends(get_settings),
) -> StatsFetcher:
    async def fetch(username: str) -> UserSolveRecord:
        return await fetch_user_stats(
            client, username, graphql_url=settings.leetcode_graphql_url
        )

    return fetch


def get_calendar_fetcher(
    client: httpx.AsyncClient = Depends(get_leetcode_client),
    settings: Settings = Depends(get_settings),
) -> CalendarFetcher:
    async def fetch(username: str, year: int) -> SubmissionCalendar:
        return await fetch_submission_calendar(
            client, username, year, graphql_url=settings.leetcode_graphql_url
        )

    return fetch
