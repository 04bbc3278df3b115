# =============================================================================
# JWT Authentication Implementation
# =============================================================================
#
# This module provides bearer token authentication:
#   - Access token creation
#   - Token validation
#   - Authorization header parsing
#
# =============================================================================

from __future__ import annotations

from datetime import datetime, timedelta, timezone
import logging

from pydantic import BaseModel
import jwt

from i18nmate.config import get_settings
from i18nmate.core.utils import generate_id, utc_now

logger = logging.getLogger(__name__)
settings = get_settings()

BEARER_PREFIX = "Bearer "


# =============================================================================
# Models
# =============================================================================

class TokenPayload(BaseModel):
    """JWT token payload."""
    sub: str  # user_id
    exp: datetime
    iat: datetime
    type: str  # always "access"
    jti: str  # unique token ID (for revocation)


# =============================================================================
# Token Creation
# =============================================================================

def create_access_token(
    user_id: str,
    expires_delta: timedelta | None = None,
    extra_claims: dict | None = None,
) -> str:
    """Create a JWT access token."""
    now = utc_now()
    expire = now + (expires_delta or timedelta(minutes=settings.jwt_access_token_expire_minutes))

    payload = {
        "sub": user_id,
        "exp": expire,
        "iat": now,
        "type": "access",
        "jti": generate_id(),
        **(extra_claims or {}),
    }

    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


# =============================================================================
# Token Validation
# =============================================================================

class TokenError(Exception):
    """Base exception for token errors."""
    pass


class TokenExpiredError(TokenError):
    """Token has expired."""
    pass


class TokenInvalidError(TokenError):
    """Token is invalid or malformed."""
    pass


def decode_token(token: str) -> TokenPayload:
    """
    Decode and validate an access token.

    Returns:
        TokenPayload with validated claims

    Raises:
        TokenExpiredError: Token has expired
        TokenInvalidError: Token is invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise TokenInvalidError(f"Invalid token: {e}")

    if payload.get("type") != "access":
        raise TokenInvalidError(f"Expected access token, got {payload.get('type')}")
    if not payload.get("sub"):
        raise TokenInvalidError("Token has no subject")

    return TokenPayload(
        sub=payload["sub"],
        exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        type=payload["type"],
        jti=payload.get("jti", ""),
    )


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    return authorization[len(BEARER_PREFIX):].strip() or None
