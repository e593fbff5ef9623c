"""
API key authentication for the FastAPI API.
"""

import secrets
from typing import Optional

import structlog
from fastapi import HTTPException, Request, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

logger = structlog.get_logger(__name__)

API_KEY_PREFIX = "lib_"

# Missing credentials are rejected below with a 401 rather than by HTTPBearer
security = HTTPBearer(auto_error=False)


def generate_api_key() -> str:
    """Generate a new API key."""
    return f"{API_KEY_PREFIX}{secrets.token_urlsafe(32)}"


def mask_api_key(api_key: str) -> str:
    """Shorten an API key so it can be logged."""
    return api_key[:10] + "..."


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def verify_api_key(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> str:
    """
    Verify the API key sent as a bearer token.

    Args:
        request: Incoming request, used to reach the application's API config
        credentials: HTTP authorization credentials

    Returns:
        API key if valid

    Raises:
        HTTPException: If the API key is missing or invalid
    """
    if credentials is None:
        logger.warning("Request without API key", path=request.url.path)
        raise _unauthorized("Not authenticated")

    api_key = credentials.credentials
    valid_api_keys = request.app.state.api_config.get_api_keys()

    if not any(secrets.compare_digest(api_key.encode(), key.encode()) for key in valid_api_keys):
        logger.warning("Invalid API key attempted", api_key=mask_api_key(api_key))
        raise _unauthorized("Invalid API key")

    return api_key
