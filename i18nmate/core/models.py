"""
Core data models for i18nmate.

These models represent the fundamental entities: Projects, Locales, Keys,
Translations and Translation Jobs. Translations carry full provenance
(who or what last wrote them, and when).
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from i18nmate.core.utils import generate_id, utc_now


# =============================================================================
# Enums
# =============================================================================


class UpdateSource(str, Enum):
    """Who wrote a translation value."""

    USER = "user"  # Edited by a person
    SYSTEM = "system"  # Written by a translation job


class JobMode(str, Enum):
    """Which keys a translation job covers."""

    ALL = "all"
    SELECTED = "selected"
    SINGLE = "single"


class JobStatus(str, Enum):
    """Lifecycle of a translation job."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_active(self) -> bool:
        return self in (JobStatus.PENDING, JobStatus.RUNNING)

    @property
    def is_finished(self) -> bool:
        return not self.is_active


# =============================================================================
# Project
# =============================================================================


class Project(BaseModel):
    """
    A translation project - the top-level container.

    The prefix and default locale are fixed at creation time.
    """

    id: str = Field(default_factory=generate_id)
    owner_user_id: str

    name: str
    description: str = ""

    # Every key in the project starts with "<prefix>."
    prefix: str
    default_locale: str

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class ProjectLocale(BaseModel):
    """A locale enabled for a project."""

    project_id: str
    locale: str  # ll or ll-CC
    label: str = ""
    is_default: bool = False
    created_at: datetime = Field(default_factory=utc_now)


# =============================================================================
# Keys & Translations
# =============================================================================


class Key(BaseModel):
    """A translation key, e.g. ``app.home.title``."""

    id: str = Field(default_factory=generate_id)
    project_id: str
    full_key: str
    created_at: datetime = Field(default_factory=utc_now)


class Translation(BaseModel):
    """
    The value of one key in one locale.

    ``value=None`` means the translation is missing.
    """

    project_id: str
    key_id: str
    locale: str
    value: str | None = None

    # Provenance
    is_machine_translated: bool = False
    updated_source: UpdateSource = UpdateSource.USER
    updated_by_user_id: str | None = None
    updated_at: datetime = Field(default_factory=utc_now)


class UpdateTranslationRequest(BaseModel):
    """Full tuple accepted by the translation write operation."""

    project_id: str
    key_id: str
    locale: str
    value: str | None
    is_machine_translated: bool = False
    updated_source: UpdateSource = UpdateSource.USER
    updated_by_user_id: str | None = None

    # Optimistic locking: only write if the row still has this timestamp
    updated_at: datetime | None = None


# =============================================================================
# View rows
# =============================================================================


class KeyDefaultViewItem(BaseModel):
    """A key with its default-locale value and missing translation count."""

    id: str
    full_key: str
    created_at: datetime
    value: str | None
    missing_count: int = 0


class KeyPerLanguageViewItem(BaseModel):
    """A key with its value and provenance in one locale."""

    key_id: str
    full_key: str
    value: str | None
    is_machine_translated: bool
    updated_at: datetime
    updated_source: UpdateSource
    updated_by_user_id: str | None = None


# =============================================================================
# Pagination
# =============================================================================


T = TypeVar("T")


class PaginationMetadata(BaseModel):
    """Range of the returned rows within the full result set."""

    start: int = 0
    end: int = -1
    total: int = 0

    @classmethod
    def calculate(cls, offset: int, item_count: int, total: int) -> PaginationMetadata:
        end = offset + item_count - 1 if item_count > 0 else offset - 1
        return cls(start=offset, end=end, total=total)


class PaginationParams(BaseModel):
    limit: int
    offset: int = 0


class Page(BaseModel, Generic[T]):
    """A page of rows plus pagination metadata."""

    data: list[T] = Field(default_factory=list)
    metadata: PaginationMetadata = Field(default_factory=PaginationMetadata)


# =============================================================================
# Translation Jobs
# =============================================================================


class TranslationJob(BaseModel):
    """
    A machine translation run from the default locale into a target locale.

    Only the status contract is modelled here; the translation work itself
    happens elsewhere and reports back through the counters.
    """

    id: str = Field(default_factory=generate_id)
    project_id: str
    mode: JobMode
    source_locale: str
    target_locale: str
    key_ids: list[str] = Field(default_factory=list)

    status: JobStatus = JobStatus.PENDING
    total_keys: int = 0
    completed_keys: int = 0
    failed_keys: int = 0

    params: dict[str, Any] = Field(default_factory=dict)

    created_at: datetime = Field(default_factory=utc_now)
    started_at: datetime | None = None
    finished_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status.is_active

    @property
    def progress(self) -> float:
        """Fraction of keys processed (0-1)."""
        if not self.total_keys:
            return 0.0
        return (self.completed_keys + self.failed_keys) / self.total_keys

    def cancel(self) -> None:
        self.status = JobStatus.CANCELLED
        self.finished_at = utc_now()
