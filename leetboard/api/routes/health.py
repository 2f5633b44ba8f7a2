from fastapi import APIRouter
from fastapi import HTTPException
from sqlalchemy import text

from leetboard.db import engine
from leetboard.settings import Settings


router = APIRouter()


@router.get("/")
async def root() -> dict[str, str]:
    """Return a basic service greeting."""

    return {"message": "LeetCode leaderboard"}


@router.get("/health/live")
def health_live() -> dict[str, str]:
    """Return liveness probe response for health checks."""

    return {"status": "ok"}


@router.get("/health/db")
def health_db() -> dict[str, str]:
    settings = Settings()
    if not settings.database_url:
        raise HTTPException(status_code=500, detail="DATABASE_URL is not set")

    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except Exception as exc:
        raise HTTPException(
            status_code=500, detail="Database connection failed"
        ) from exc

    return {"status": "ok"}
