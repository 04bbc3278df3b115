"""
API error envelope.

Every failure that crosses an API boundary is an ``ApiError`` carrying an
HTTP-style status code, a human-readable message and optional details.
Serialized, it becomes ``{"data": null, "error": {code, message, details?}}``.
"""

from __future__ import annotations

from typing import Any


class ApiError(Exception):
    """Structured error surfaced to API callers."""

    def __init__(self, code: int, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

    def to_body(self) -> dict[str, Any]:
        """Serialize to the standard error envelope."""
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            error["details"] = self.details
        return {"data": None, "error": error}

    def __repr__(self) -> str:
        return f"<ApiError(code={self.code}, message={self.message!r})>"


def create_api_error(code: int, message: str, details: dict[str, Any] | None = None) -> ApiError:
    """Error factory for standardized API errors."""
    return ApiError(code, message, details)


# =============================================================================
# Messages
# =============================================================================


class KeyMessages:
    """Error messages for key operations."""

    DATABASE_ERROR = "Database operation failed"
    DEFAULT_VALUE_EMPTY = "Default locale value cannot be empty"
    KEY_ALREADY_EXISTS = "Key already exists in project"
    KEY_CONSECUTIVE_DOTS = "Key cannot contain consecutive dots"
    KEY_INVALID_FORMAT = "Key can only contain lowercase letters, numbers, dots, underscores, and hyphens"
    KEY_INVALID_PREFIX = "Key must start with project prefix"
    KEY_NOT_FOUND = "Key not found or access denied"
    KEY_REQUIRED = "Key name is required"
    KEY_TOO_LONG = "Key name must be at most 256 characters"
    KEY_TRAILING_DOT = "Key cannot end with a dot"
    PROJECT_NOT_OWNED = "Project not owned by user"


class TranslationMessages:
    """Error messages for translation operations."""

    DEFAULT_LOCALE_EMPTY = "Default locale value cannot be empty"
    INVALID_UPDATE_SOURCE = 'Update source must be "user" or "system"'
    OPTIMISTIC_LOCK_FAILED = "Translation was modified by another user. Please refresh and try again."
    PROJECT_NOT_OWNED = "Project not owned by user"
    TRANSLATION_NOT_FOUND = "Translation not found"
    VALUE_NO_NEWLINES = "Value cannot contain newlines"
    VALUE_TOO_LONG = "Value must be at most 250 characters"


class LocaleMessages:
    """Error messages for locale operations."""

    INVALID_LOCALE = 'Locale must be in BCP-47 format (e.g., "en" or "en-US")'
    LOCALE_ALREADY_EXISTS = "Locale already exists in project"
    LOCALE_NOT_FOUND = "Locale not found in project"
    DEFAULT_LOCALE_DELETE = "Cannot delete default locale"


class JobMessages:
    """Error messages for translation jobs."""

    ACTIVE_JOB_EXISTS = "Another translation job is already active for this project"
    ALL_MODE_NO_KEYS = "All mode should not include specific key IDs"
    JOB_NOT_CANCELLABLE = "Job is not in a cancellable state"
    JOB_NOT_FOUND = "Translation job not found or access denied"
    SELECTED_MODE_REQUIRES_KEYS = "Selected mode requires at least one key ID"
    SINGLE_MODE_ONE_KEY = "Single mode requires exactly one key ID"
    TARGET_LOCALE_IS_DEFAULT = "Target locale cannot be the default locale"
    TARGET_LOCALE_NOT_FOUND = "Target locale does not exist in project"


class ExportMessages:
    """Error messages for the export endpoint."""

    METHOD_NOT_ALLOWED = "Method not allowed"
    PROJECT_ID_REQUIRED = "Project ID is required"
    INVALID_PROJECT_ID = "Invalid project ID format"
    MISSING_AUTHORIZATION = "Missing or invalid authorization"
    INVALID_TOKEN = "Invalid or expired token"
    PROJECT_NOT_FOUND = "Project not found or access denied"
    PROJECT_FETCH_FAILED = "Database operation failed"
    LOCALES_FETCH_FAILED = "Failed to fetch project locales"
    NO_LOCALES = "No locales found for project"
    ARCHIVE_FAILED = "Failed to generate export file"
    EXPORT_FAILED = "Export generation failed"

    @staticmethod
    def translations_fetch_failed(locale: str) -> str:
        return f"Failed to fetch translations for locale {locale}"
