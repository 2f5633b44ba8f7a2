from datetime import UTC
from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from leetboard.api.dependencies import get_calendar_fetcher
from leetboard.api.dependencies import get_session_provider
from leetboard.api.dependencies import get_stats_fetcher
from leetboard.clients.leetcode_client import LeetCodeAPIError
from leetboard.clients.leetcode_client import LeetCodeUserNotFoundError
from leetboard.clients.leetcode_client import SubmissionCalendar
from leetboard.db import create_tables
from leetboard.db import get_db
from leetboard.main import app
from leetboard.services.activity import day_timestamp
from leetboard.services.identity import Identity
from leetboard.services.identity import IdentityProviderError
from leetboard.services.identity import InvalidSessionError
from leetboard.services.ranking import DifficultyCount
from leetboard.services.ranking import UserSolveRecord
from leetboard.settings import Settings


client = TestClient(app)

AUTH = {"Authorization": "Bearer token-alice"}

SOLVED = {
    "alice": {"Easy": 5, "Medium": 3, "Hard": 2},
    "bob": {"Easy": 20, "Medium": 0, "Hard": 0},
    "carol": {"Easy": 0, "Medium": 10, "Hard": 0},
}


class FakeSessionProvider:
    tokens = {
        "token-alice": Identity(user_id="uid-alice", email="alice@example.com"),
        "token-bob": Identity(user_id="uid-bob", email="bob@example.com"),
        "token-carol": Identity(user_id="uid-carol", email="carol@example.com"),
    }

    def authenticate(self, token: str) -> Identity:
        if token == "token-down":
            raise IdentityProviderError("unreachable")
        if token not in self.tokens:
            raise InvalidSessionError
        return self.tokens[token]


async def fake_fetch_stats(username: str) -> UserSolveRecord:
    if username not in SOLVED:
        raise LeetCodeUserNotFoundError(username)
    return UserSolveRecord(
        username=username,
        counts=tuple(
            DifficultyCount(difficulty, count)
            for difficulty, count in SOLVED[username].items()
        ),
    )


async def fake_fetch_calendar(username: str, year: int) -> SubmissionCalendar:
    if username == "ghost":
        raise LeetCodeUserNotFoundError(username)
    if username == "flaky":
        raise LeetCodeAPIError("bad payload")
    today = datetime.now(UTC).date()
    return SubmissionCalendar(
        username=username,
        year=year,
        submissions={str(day_timestamp(today)): 2},
        active_years=[year],
    )


@pytest.fixture
def db_client() -> TestClient:
    test_engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    testing_session_local = sessionmaker(
        bind=test_engine,
        autoflush=False,
        autocommit=False,
    )

    create_tables(test_engine)

    def override_get_db():
        db = testing_session_local()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_provider] = FakeSessionProvider
    app.dependency_overrides[get_stats_fetcher] = lambda: fake_fetch_stats
    app.dependency_overrides[get_calendar_fetcher] = lambda: fake_fetch_calendar

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def register(db_client: TestClient, token: str, username: str):
    return db_client.post(
        "/profiles",
        json={"username": username},
        headers={"Authorization": f"Bearer {token}"},
    )


def test_read_root_returns_greeting() -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "LeetCode leaderboard"}


def test_health_db_returns_ok_for_valid_database_url(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "sqlite+pysqlite:///:memory:")

    response = client.get("/health/db")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_health_db_returns_500_when_database_url_empty(monkeypatch) -> None:
    monkeypatch.setenv("DATABASE_URL", "")

    response = client.get("/health/db")

    assert response.status_code == 500
    assert response.json() == {"detail": "DATABASE_URL is not set"}


def test_settings_reads_leetcode_url_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("LEETCODE_GRAPHQL_URL", "https://leetcode.cn/graphql/")

    settings = Settings()

    assert settings.leetcode_graphql_url == "https://leetcode.cn/graphql/"


def test_leaderboard_requires_bearer_token(db_client: TestClient) -> None:
    response = db_client.get("/leaderboard")

    assert response.status_code == 401
    assert response.json() == {"detail": "Authorization Bearer token is required"}


def test_leaderboard_rejects_invalid_session(db_client: TestClient) -> None:
    response = db_client.get(
        "/leaderboard", headers={"Authorization": "Bearer expired"}
    )

    assert response.status_code == 401
    assert response.json() == {"detail": "Session is invalid"}


def test_identity_provider_outage_returns_502(db_client: TestClient) -> None:
    response = db_client.get(
        "/profiles", headers={"Authorization": "Bearer token-down"}
    )

    assert response.status_code == 502


def test_create_profile_returns_201(db_client: TestClient) -> None:
    response = register(db_client, "token-alice", "  alice ")

    assert response.status_code == 201
    assert response.json() == {"user_id": "uid-alice", "username": "alice"}

    me = db_client.get("/profiles/me", headers=AUTH)
    assert me.status_code == 200
    assert me.json()["username"] == "alice"


def test_create_profile_rejects_blank_username(db_client: TestClient) -> None:
    response = register(db_client, "token-alice", "   ")

    assert response.status_code == 400
    assert response.json() == {"detail": "username cannot be empty"}


def test_create_profile_rejects_duplicates(db_client: TestClient) -> None:
    register(db_client, "token-alice", "alice")

    same_account = register(db_client, "token-alice", "alice2")
    same_handle = register(db_client, "token-bob", "alice")

    assert same_account.status_code == 409
    assert same_handle.status_code == 409


def test_get_my_profile_returns_404_when_unregistered(db_client: TestClient) -> None:
    response = db_client.get("/profiles/me", headers=AUTH)

    assert response.status_code == 404
    assert response.json() == {"detail": "profile not found"}


def test_list_profiles_is_sorted(db_client: TestClient) -> None:
    register(db_client, "token-carol", "carol")
    register(db_client, "token-alice", "alice")

    response = db_client.get("/profiles", headers=AUTH)

    assert response.status_code == 200
    assert response.json() == ["alice", "carol"]


def test_leaderboard_ranks_rostered_users(db_client: TestClient) -> None:
    register(db_client, "token-alice", "alice")
    register(db_client, "token-bob", "bob")
    register(db_client, "token-carol", "carol")

    response = db_client.get("/leaderboard", headers=AUTH)

    assert response.status_code == 200
    body = response.json()
    assert body["missing"] == []
    assert [
        (user["username"], user["score"], user["rank"]) for user in body["users"]
    ] == [
        ("bob", 20, 1),
        ("carol", 20, 2),
        ("alice", 17, 3),
    ]
    alice = body["users"][2]
    assert alice["total_solved"] == 10
    assert alice["distribution"] == [
        {"name": "Easy", "value": 5, "percentage": 50.0},
        {"name": "Medium", "value": 3, "percentage": 30.0},
        {"name": "Hard", "value": 2, "percentage": 20.0},
    ]


def test_leaderboard_lists_handles_that_failed_to_fetch(db_client: TestClient) -> None:
    register(db_client, "token-alice", "alice")
    register(db_client, "token-bob", "nobody-here")

    response = db_client.get("/leaderboard", headers=AUTH)

    assert response.status_code == 200
    assert [user["username"] for user in response.json()["users"]] == ["alice"]
    assert response.json()["missing"] == ["nobody-here"]


def test_rank_supplied_stats(db_client: TestClient) -> None:
    response = db_client.post(
        "/leaderboard/rank",
        headers=AUTH,
        json={
            "users": [
                {"username": "x", "stats": [{"difficulty": "Easy", "count": 20}]},
                {"username": "y", "stats": [{"difficulty": "medium", "count": 10}]},
                {"username": "z", "stats": [{"difficulty": "All", "count": 99}]},
            ]
        },
    )

    assert response.status_code == 200
    assert [
        (user["username"], user["rank"]) for user in response.json()["users"]
    ] == [("x", 1), ("y", 2), ("z", 3)]


def test_user_activity_returns_grid_and_streak(db_client: TestClient) -> None:
    year = datetime.now(UTC).year

    response = db_client.get("/users/alice/activity", headers=AUTH)

    assert response.status_code == 200
    body = response.json()
    assert body["year"] == year
    assert body["total"] == 2
    assert body["streak"] == 1
    assert body["weeks"][0][0]["date"] == f"{year}-01-01"
    assert body["weeks"][-1][-1]["date"] == f"{year}-12-31"
    assert {day["level"] for week in body["weeks"] for day in week} == {0, 2}


def test_user_activity_for_past_year_has_no_current_submissions(
    db_client: TestClient,
) -> None:
    response = db_client.get("/users/alice/activity?year=2024", headers=AUTH)

    assert response.status_code == 200
    assert response.json()["total"] == 0
    assert response.json()["streak"] == 1
    assert sum(len(week) for week in response.json()["weeks"]) == 366


def test_user_activity_maps_upstream_errors(db_client: TestClient) -> None:
    missing = db_client.get("/users/ghost/activity", headers=AUTH)
    failing = db_client.get("/users/flaky/activity", headers=AUTH)

    assert missing.status_code == 404
    assert missing.json() == {"detail": "LeetCode user not found"}
    assert failing.status_code == 502
    assert failing.json() == {"detail": "LeetCode API request failed"}
