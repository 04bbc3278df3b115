"""
Shared utility functions for i18nmate.

This module contains common utilities used across the codebase.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone


def generate_id() -> str:
    """
    Generate a new UUID4 identifier.

    Projects, keys, users and jobs are all addressed by UUID so that the
    export endpoint and the views can validate identifiers up front.
    """
    return str(uuid.uuid4())


def is_uuid(value: str) -> bool:
    """Check whether a string is a canonical (hyphenated) UUID."""
    try:
        return str(uuid.UUID(value)) == value.lower()
    except (ValueError, AttributeError, TypeError):
        return False


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)
