from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.security import HTTPBearer

from leetboard.services.identity import Identity
from leetboard.services.identity import IdentityProviderError
from leetboard.services.identity import InvalidSessionError
from leetboard.services.identity import SessionProvider


bearer_scheme = HTTPBearer(auto_error=False)

BEARER_REQUIRED = "Authorization Bearer token is required"


def extract_bearer_token(credentials: HTTPAuthorizationCredentials | None) -> str:
    """Extract and validate a Bearer token from authorization credentials.

    Raises:
        HTTPException: If credentials are missing, malformed, or empty.
    """

    if credentials is None:
        raise HTTPException(status_code=401, detail=BEARER_REQUIRED)

    if credentials.scheme.lower() != "bearer" or not credentials.credentials.strip():
        raise HTTPException(status_code=401, detail=BEARER_REQUIRED)

    return credentials.credentials.strip()


def resolve_identity(
    credentials: HTTPAuthorizationCredentials | None,
    provider: SessionProvider,
) -> Identity:
    """Authenticate the request's bearer token against the session provider."""

    token = extract_bearer_token(credentials)

    try:
        return provider.authenticate(token)
    except InvalidSessionError as exc:
        raise HTTPException(status_code=401, detail="Session is invalid") from exc
    except IdentityProviderError as exc:
        raise HTTPException(
            status_code=502, detail="Identity provider request failed"
        ) from exc
