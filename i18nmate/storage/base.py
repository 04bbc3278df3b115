"""
Storage abstraction layer.

All persistence goes through this interface. This allows swapping
implementations (in-memory → PostgreSQL) without changing the views,
the edit controller or the export pipeline.

Every read and write is scoped to the authenticated user: a project that
does not exist and a project owned by someone else are indistinguishable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from i18nmate.core.models import (
    JobMode,
    Key,
    KeyDefaultViewItem,
    KeyPerLanguageViewItem,
    Page,
    Project,
    ProjectLocale,
    Translation,
    TranslationJob,
    UpdateTranslationRequest,
)


class TranslationStorage(ABC):
    """
    Storage for projects, locales, keys, translations and jobs.

    Production Implementation: PostgreSQL (RPC functions + triggers)
    Local Implementation: In-memory
    """

    # =========================================================================
    # Projects & Locales
    # =========================================================================

    @abstractmethod
    async def create_project(
        self,
        owner_user_id: str,
        name: str,
        prefix: str,
        default_locale: str,
        description: str = "",
        default_locale_label: str = "",
    ) -> Project:
        """Create a project together with its default locale."""
        pass

    @abstractmethod
    async def get_project(self, project_id: str, owner_user_id: str) -> Project | None:
        """Get a project by ID, only if owned by the user."""
        pass

    @abstractmethod
    async def list_locales(self, project_id: str) -> list[ProjectLocale]:
        """List project locales ordered by locale code."""
        pass

    @abstractmethod
    async def add_locale(
        self,
        project_id: str,
        owner_user_id: str,
        locale: str,
        label: str = "",
    ) -> ProjectLocale:
        """Add a locale; creates a missing translation for every key."""
        pass

    @abstractmethod
    async def delete_locale(self, project_id: str, owner_user_id: str, locale: str) -> None:
        """Delete a non-default locale and its translations."""
        pass

    # =========================================================================
    # Keys
    # =========================================================================

    @abstractmethod
    async def create_key(
        self,
        project_id: str,
        owner_user_id: str,
        full_key: str,
        default_value: str,
    ) -> Key:
        """Create a key; creates a translation row for every locale."""
        pass

    @abstractmethod
    async def delete_key(self, project_id: str, owner_user_id: str, key_id: str) -> None:
        """Delete a key and all of its translations."""
        pass

    # =========================================================================
    # Keyed data views
    # =========================================================================

    @abstractmethod
    async def list_default_view(
        self,
        project_id: str,
        *,
        user_id: str,
        limit: int,
        offset: int = 0,
        search: str | None = None,
        missing_only: bool = False,
    ) -> Page[KeyDefaultViewItem]:
        """
        List keys with their default-locale value.

        ``missing_only`` keeps keys with at least one missing translation.
        """
        pass

    @abstractmethod
    async def list_per_language_view(
        self,
        project_id: str,
        locale: str,
        *,
        user_id: str,
        limit: int,
        offset: int = 0,
        search: str | None = None,
        missing_only: bool = False,
    ) -> Page[KeyPerLanguageViewItem]:
        """
        List keys with their value in one locale.

        ``missing_only`` keeps keys whose value in that locale is missing.
        """
        pass

    @abstractmethod
    async def get_translation(self, project_id: str, key_id: str, locale: str) -> Translation | None:
        """Get a single translation row."""
        pass

    @abstractmethod
    async def update_translation(self, request: UpdateTranslationRequest, user_id: str) -> Translation:
        """
        Write a translation value.

        Raises:
            ApiError: with a message suitable for showing on the edited row
        """
        pass

    # =========================================================================
    # Export
    # =========================================================================

    @abstractmethod
    async def list_locale_values(self, project_id: str, locale: str) -> list[tuple[str, str | None]]:
        """
        Every key's full name with its value in ``locale``.

        Keys without a translation row still appear, with ``None``.
        Ordered by full key.
        """
        pass

    # =========================================================================
    # Translation jobs
    # =========================================================================

    @abstractmethod
    async def create_job(
        self,
        project_id: str,
        owner_user_id: str,
        target_locale: str,
        mode: JobMode,
        key_ids: list[str] | None = None,
    ) -> TranslationJob:
        """Queue a translation job; at most one may be active per project."""
        pass

    @abstractmethod
    async def get_active_job(self, project_id: str, owner_user_id: str) -> TranslationJob | None:
        """Get the pending or running job for a project, if any."""
        pass

    @abstractmethod
    async def cancel_job(self, project_id: str, owner_user_id: str, job_id: str) -> TranslationJob:
        """Cancel a pending or running job."""
        pass

    # =========================================================================
    # App configuration
    # =========================================================================

    @abstractmethod
    async def get_public_app_config(self) -> dict[str, str]:
        """Public key/value application settings."""
        pass
