"""
Public application configuration.

Feature gates read from storage at request time. If the settings can't be
loaded every gate closes: registration is off and email verification is
required.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from pydantic import BaseModel

logger = logging.getLogger(__name__)

REGISTRATION_ENABLED = "registration_enabled"
EMAIL_VERIFICATION_REQUIRED = "email_verification_required"


class AppConfig(BaseModel):
    registration_enabled: bool = False
    email_verification_required: bool = True

    @classmethod
    def fail_closed(cls) -> AppConfig:
        return cls(registration_enabled=False, email_verification_required=True)

    @classmethod
    def from_values(cls, values: dict[str, str]) -> AppConfig:
        """
        Build from raw key/value settings.

        Registration opens only on the literal string "true".
        Verification is dropped only on the literal string "false".
        Anything else, including a missing key, keeps the closed default.
        """
        return cls(
            registration_enabled=values.get(REGISTRATION_ENABLED) == "true",
            email_verification_required=values.get(EMAIL_VERIFICATION_REQUIRED, "true") != "false",
        )


async def load_app_config(fetch: Callable[[], Awaitable[dict[str, str]]]) -> AppConfig:
    """Load the config, falling back to closed gates on any failure."""
    try:
        values = await fetch()
    except Exception as e:
        logger.warning(f"Failed to load app config, using closed defaults: {e}")
        return AppConfig.fail_closed()
    return AppConfig.from_values(values)
