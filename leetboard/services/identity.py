import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

from leetboard.clients.supabase_client import fetch_session_user


logger = logging.getLogger(__name__)


class InvalidSessionError(Exception):
    """Raised when the identity provider rejects the access token."""


class IdentityProviderError(Exception):
    """Raised when the identity provider cannot be reached or misbehaves."""


@dataclass(frozen=True)
class Identity:
    user_id: str
    email: str = ""


class SessionProvider(Protocol):
    def authenticate(self, token: str) -> Identity: ...


class SupabaseSessionProvider:
    """Resolve bearer tokens to accounts through Supabase Auth."""

    def __init__(self, supabase_url: str, anon_key: str, timeout: float = 15.0):
        self.supabase_url = supabase_url
        self.anon_key = anon_key
        self.timeout = timeout

    def authenticate(self, token: str) -> Identity:
        if not self.supabase_url:
            raise IdentityProviderError("SUPABASE_URL is not set")

        try:
            user = fetch_session_user(
                token,
                supabase_url=self.supabase_url,
                anon_key=self.anon_key,
                timeout=self.timeout,
            )
        except httpx.HTTPStatusError as exc:
            if exc.response.status_code in {401, 403}:
                raise InvalidSessionError from exc
            logger.warning(
                "Supabase auth returned status %s", exc.response.status_code
            )
            raise IdentityProviderError from exc
        except Exception as exc:
            logger.exception("Supabase auth request failed")
            raise IdentityProviderError from exc

        return Identity(user_id=user["id"], email=user["email"])
