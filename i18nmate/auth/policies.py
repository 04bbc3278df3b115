"""
Policies - the clean interface for route authorization.

Just use: `ctx: AuthContext = Depends(require_project_owner)`

Design:
- `get_user_from_token` extracts the user from the bearer JWT
- `require_user` rejects anonymous requests with 401
- `require_project_owner` also loads the project from the path and
  rejects anything the user doesn't own with 404
"""

from __future__ import annotations

import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from i18nmate.auth.context import AuthContext, resolve_project, validate_project_id
from i18nmate.auth.jwt import TokenError, decode_token, extract_bearer_token
from i18nmate.core.errors import ApiError, ExportMessages
from i18nmate.storage.base import TranslationStorage

logger = logging.getLogger(__name__)


# =============================================================================
# JWT Token Handling
# =============================================================================


# Optional JWT bearer (doesn't fail if no token)
optional_bearer = HTTPBearer(auto_error=False)


def authenticate(token: str | None) -> str:
    """
    Resolve a bearer token to a user ID.

    Raises:
        ApiError: 401 if the token is missing, invalid or expired
    """
    if not token:
        raise ApiError(401, ExportMessages.MISSING_AUTHORIZATION)
    try:
        payload = decode_token(token)
    except TokenError as e:
        logger.info(f"Rejected bearer token: {e}")
        raise ApiError(401, ExportMessages.INVALID_TOKEN)
    return payload.sub


def authenticate_header(authorization: str | None) -> str:
    """Same as `authenticate`, from a raw Authorization header."""
    return authenticate(extract_bearer_token(authorization))


async def get_user_from_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_bearer),
) -> str:
    return authenticate(credentials.credentials if credentials else None)


# =============================================================================
# Dependencies
# =============================================================================


def get_storage(request: Request) -> TranslationStorage:
    """The storage configured on the app."""
    return request.app.state.storage


async def require_user(user_id: str = Depends(get_user_from_token)) -> AuthContext:
    """Require an authenticated user, no project."""
    return AuthContext(user_id=user_id)


async def require_project_owner(
    project_id: str,
    user_id: str = Depends(get_user_from_token),
    storage: TranslationStorage = Depends(get_storage),
) -> AuthContext:
    """Require an authenticated user who owns the project in the path."""
    validate_project_id(project_id)
    project = await resolve_project(storage, project_id, user_id)
    return AuthContext(user_id=user_id, project=project)
