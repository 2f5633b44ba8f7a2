from collections.abc import Mapping
from typing import Any

import httpx


def fetch_session_user(
    token: str,
    supabase_url: str,
    anon_key: str,
    timeout: float = 15.0,
) -> dict[str, str]:
    """Fetch the account that owns an access token from Supabase Auth."""

    response = httpx.get(
        f"{supabase_url.rstrip('/')}/auth/v1/user",
        headers={
            "Authorization": f"Bearer {token}",
            "apikey": anon_key,
            "Accept": "application/json",
        },
        timeout=timeout,
    )
    response.raise_for_status()

    payload: Any = response.json()
    if not isinstance(payload, Mapping):
        raise ValueError("Supabase user response is invalid")

    raw_id = payload.get("id")
    raw_email = payload.get("email")
    if not isinstance(raw_id, str) or not raw_id:
        raise ValueError("Supabase user response is missing required fields")

    return {"id": raw_id, "email": raw_email if isinstance(raw_email, str) else ""}
