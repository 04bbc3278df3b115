"""
Authorization system - bearer JWT plus project ownership.

Design principles:
1. Single dependency for all auth needs
2. Not found and not owned are indistinguishable
3. Zero boilerplate in route handlers
"""

from i18nmate.auth.context import AuthContext, resolve_project, validate_project_id
from i18nmate.auth.policies import (
    authenticate,
    authenticate_header,
    get_storage,
    get_user_from_token,
    require_user,
    require_project_owner,
)
from i18nmate.auth.jwt import (
    TokenPayload,
    TokenError,
    TokenExpiredError,
    TokenInvalidError,
    create_access_token,
    decode_token,
)

__all__ = [
    # Main interface
    "require_user",
    "require_project_owner",
    "get_user_from_token",
    "get_storage",
    "authenticate",
    "authenticate_header",
    "AuthContext",
    "resolve_project",
    "validate_project_id",
    # JWT
    "TokenPayload",
    "TokenError",
    "TokenExpiredError",
    "TokenInvalidError",
    "create_access_token",
    "decode_token",
]
