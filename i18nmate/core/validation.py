"""
Validation rules for keys, locales and translation values.

These mirror the storage-level constraints so that callers get immediate
feedback before a write is attempted.
"""

from __future__ import annotations

import re

from i18nmate.core.errors import KeyMessages, TranslationMessages


# =============================================================================
# Constants
# =============================================================================

KEY_FORMAT_PATTERN = re.compile(r"^[a-z0-9._-]+$")
KEY_NAME_MIN_LENGTH = 1
KEY_NAME_MAX_LENGTH = 256

TRANSLATION_VALUE_MIN_LENGTH = 1
TRANSLATION_VALUE_MAX_LENGTH = 250

# BCP-47 subset: ll or ll-CC
LOCALE_CODE_PATTERN = re.compile(r"^[a-z]{2}(-[A-Z]{2})?$")
_LOCALE_INPUT_PATTERN = re.compile(r"^([a-zA-Z]{2})(?:-([a-zA-Z]{2}))?$")

PROJECT_PREFIX_MIN_LENGTH = 2
PROJECT_PREFIX_MAX_LENGTH = 4

UPDATE_SOURCES = ("user", "system")


# =============================================================================
# Keys
# =============================================================================


def key_format_error(key: str) -> str | None:
    """
    Return the first rule a full key breaks, or None if it is valid.

    Rules: 1-256 characters, only ``[a-z0-9._-]``, no consecutive dots,
    no trailing dot.
    """
    if not key:
        return KeyMessages.KEY_REQUIRED
    if len(key) > KEY_NAME_MAX_LENGTH:
        return KeyMessages.KEY_TOO_LONG
    if not KEY_FORMAT_PATTERN.fullmatch(key):
        return KeyMessages.KEY_INVALID_FORMAT
    if ".." in key:
        return KeyMessages.KEY_CONSECUTIVE_DOTS
    if key.endswith("."):
        return KeyMessages.KEY_TRAILING_DOT
    return None


def is_valid_key_format(key: str) -> bool:
    return key_format_error(key) is None


def validate_full_key(full_key: str, prefix: str | None = None) -> str:
    """
    Validate a full key, optionally against a project prefix.

    Raises:
        ValueError: with a user-facing message
    """
    error = key_format_error(full_key)
    if error:
        raise ValueError(error)
    if prefix is not None and not starts_with_prefix(full_key, prefix):
        raise ValueError(KeyMessages.KEY_INVALID_PREFIX)
    return full_key


def build_full_key(prefix: str, key_name: str) -> str:
    return f"{prefix}.{key_name}"


def starts_with_prefix(full_key: str, prefix: str) -> bool:
    return full_key.startswith(f"{prefix}.")


def extract_key_name(full_key: str, prefix: str) -> str:
    """Strip the project prefix from a full key, if present."""
    if not starts_with_prefix(full_key, prefix):
        return full_key
    return full_key[len(prefix) + 1:]


# =============================================================================
# Locales
# =============================================================================


def normalize_locale(code: str) -> str:
    """
    Normalize a locale code to ``ll`` / ``ll-CC`` casing.

    Input that does not look like a locale is returned unchanged so the
    format check can reject it.
    """
    match = _LOCALE_INPUT_PATTERN.fullmatch(code or "")
    if not match:
        return code
    language, region = match.groups()
    if region:
        return f"{language.lower()}-{region.upper()}"
    return language.lower()


def is_valid_locale(code: str) -> bool:
    return bool(code) and bool(LOCALE_CODE_PATTERN.fullmatch(code))


# =============================================================================
# Translation values
# =============================================================================


def validate_translation_value(text: str) -> str | None:
    """
    Check a raw input value.

    Returns an error message, or None when the value can be saved.
    Empty or whitespace-only input is valid: it clears the translation.
    A newline anywhere in the raw input is rejected, even a trailing one
    that trimming would remove.
    """
    trimmed = text.strip()
    if len(trimmed) > TRANSLATION_VALUE_MAX_LENGTH:
        return TranslationMessages.VALUE_TOO_LONG
    if "\n" in text:
        return TranslationMessages.VALUE_NO_NEWLINES
    return None


def normalize_translation_value(text: str | None) -> str | None:
    """Trim a value; empty means missing (None)."""
    if text is None:
        return None
    trimmed = text.strip()
    return trimmed or None
