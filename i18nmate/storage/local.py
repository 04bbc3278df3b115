"""
Local storage implementation for development.

An in-memory implementation that works without any external services.
It enforces the same invariants the database does with triggers:
every key has a translation row for every project locale.
"""

from __future__ import annotations

import logging
from typing import Iterable

from i18nmate.core.errors import (
    ApiError,
    JobMessages,
    KeyMessages,
    LocaleMessages,
    TranslationMessages,
)
from i18nmate.core.models import (
    JobMode,
    Key,
    KeyDefaultViewItem,
    KeyPerLanguageViewItem,
    Page,
    PaginationMetadata,
    Project,
    ProjectLocale,
    Translation,
    TranslationJob,
    UpdateSource,
    UpdateTranslationRequest,
)
from i18nmate.core.utils import utc_now
from i18nmate.core.validation import (
    PROJECT_PREFIX_MAX_LENGTH,
    PROJECT_PREFIX_MIN_LENGTH,
    is_valid_locale,
    normalize_locale,
    normalize_translation_value,
    validate_full_key,
    validate_translation_value,
)
from i18nmate.storage.base import TranslationStorage

logger = logging.getLogger(__name__)

TranslationId = tuple[str, str, str]  # (project_id, key_id, locale)


def _matches_search(full_key: str, search: str | None) -> bool:
    """Case-insensitive substring match on the full key."""
    if not search:
        return True
    return search.lower() in full_key.lower()


def _paginate(rows: list, limit: int, offset: int) -> tuple[list, PaginationMetadata]:
    page = rows[offset:offset + limit]
    return page, PaginationMetadata.calculate(offset, len(page), len(rows))


# =============================================================================
# In-Memory Translation Storage
# =============================================================================


class InMemoryTranslationStorage(TranslationStorage):
    """In-memory translation storage for development and tests."""

    def __init__(self, app_config: dict[str, str] | None = None):
        self._projects: dict[str, Project] = {}
        self._locales: dict[str, dict[str, ProjectLocale]] = {}
        self._keys: dict[str, dict[str, Key]] = {}
        self._translations: dict[TranslationId, Translation] = {}
        self._jobs: dict[str, TranslationJob] = {}
        self._app_config: dict[str, str] = dict(app_config or {})

    # =========================================================================
    # Helpers
    # =========================================================================

    def _owned_project(self, project_id: str, user_id: str) -> Project | None:
        project = self._projects.get(project_id)
        if project is None or project.owner_user_id != user_id:
            return None
        return project

    def _require_project(self, project_id: str, user_id: str) -> Project:
        project = self._owned_project(project_id, user_id)
        if project is None:
            raise ApiError(403, TranslationMessages.PROJECT_NOT_OWNED)
        return project

    def _sorted_keys(self, project_id: str) -> list[Key]:
        return sorted(self._keys.get(project_id, {}).values(), key=lambda k: k.full_key)

    def _locale_codes(self, project_id: str) -> list[str]:
        return sorted(self._locales.get(project_id, {}))

    def _fanout(self, project_id: str, key_ids: Iterable[str], locales: Iterable[str]) -> None:
        """Create an empty translation row for every missing (key, locale) pair."""
        locales = list(locales)
        for key_id in key_ids:
            for locale in locales:
                tid = (project_id, key_id, locale)
                if tid not in self._translations:
                    self._translations[tid] = Translation(
                        project_id=project_id,
                        key_id=key_id,
                        locale=locale,
                        value=None,
                        updated_source=UpdateSource.SYSTEM,
                    )

    # =========================================================================
    # Projects & Locales
    # =========================================================================

    async def create_project(
        self,
        owner_user_id: str,
        name: str,
        prefix: str,
        default_locale: str,
        description: str = "",
        default_locale_label: str = "",
    ) -> Project:
        if not (PROJECT_PREFIX_MIN_LENGTH <= len(prefix) <= PROJECT_PREFIX_MAX_LENGTH):
            raise ApiError(400, "Prefix must be 2-4 characters")
        locale = normalize_locale(default_locale)
        if not is_valid_locale(locale):
            raise ApiError(400, LocaleMessages.INVALID_LOCALE)

        project = Project(
            owner_user_id=owner_user_id,
            name=name,
            description=description,
            prefix=prefix,
            default_locale=locale,
        )
        self._projects[project.id] = project
        self._keys[project.id] = {}
        self._locales[project.id] = {
            locale: ProjectLocale(
                project_id=project.id,
                locale=locale,
                label=default_locale_label or locale,
                is_default=True,
            )
        }
        logger.info(f"Created project {project.id} ({name}) with default locale {locale}")
        return project

    async def get_project(self, project_id: str, owner_user_id: str) -> Project | None:
        return self._owned_project(project_id, owner_user_id)

    async def list_locales(self, project_id: str) -> list[ProjectLocale]:
        locales = self._locales.get(project_id, {})
        return [locales[code] for code in sorted(locales)]

    async def add_locale(
        self,
        project_id: str,
        owner_user_id: str,
        locale: str,
        label: str = "",
    ) -> ProjectLocale:
        self._require_project(project_id, owner_user_id)
        code = normalize_locale(locale)
        if not is_valid_locale(code):
            raise ApiError(400, LocaleMessages.INVALID_LOCALE)
        if code in self._locales[project_id]:
            raise ApiError(409, LocaleMessages.LOCALE_ALREADY_EXISTS)

        project_locale = ProjectLocale(project_id=project_id, locale=code, label=label or code)
        self._locales[project_id][code] = project_locale
        self._fanout(project_id, self._keys[project_id], [code])
        logger.info(f"Added locale {code} to project {project_id}")
        return project_locale

    async def delete_locale(self, project_id: str, owner_user_id: str, locale: str) -> None:
        project = self._require_project(project_id, owner_user_id)
        code = normalize_locale(locale)
        if code == project.default_locale:
            raise ApiError(400, LocaleMessages.DEFAULT_LOCALE_DELETE)
        if code not in self._locales[project_id]:
            raise ApiError(404, LocaleMessages.LOCALE_NOT_FOUND)

        del self._locales[project_id][code]
        for tid in [t for t in self._translations if t[0] == project_id and t[2] == code]:
            del self._translations[tid]

    # =========================================================================
    # Keys
    # =========================================================================

    async def create_key(
        self,
        project_id: str,
        owner_user_id: str,
        full_key: str,
        default_value: str,
    ) -> Key:
        project = self._require_project(project_id, owner_user_id)
        try:
            validate_full_key(full_key, project.prefix)
        except ValueError as e:
            raise ApiError(400, str(e))
        if any(k.full_key == full_key for k in self._keys[project_id].values()):
            raise ApiError(409, KeyMessages.KEY_ALREADY_EXISTS)

        error = validate_translation_value(default_value or "")
        if error:
            raise ApiError(400, error)
        value = normalize_translation_value(default_value)
        if value is None:
            raise ApiError(400, KeyMessages.DEFAULT_VALUE_EMPTY)

        key = Key(project_id=project_id, full_key=full_key)
        self._keys[project_id][key.id] = key
        self._translations[(project_id, key.id, project.default_locale)] = Translation(
            project_id=project_id,
            key_id=key.id,
            locale=project.default_locale,
            value=value,
            updated_source=UpdateSource.USER,
            updated_by_user_id=owner_user_id,
        )
        self._fanout(project_id, [key.id], self._locale_codes(project_id))
        return key

    async def delete_key(self, project_id: str, owner_user_id: str, key_id: str) -> None:
        self._require_project(project_id, owner_user_id)
        if key_id not in self._keys[project_id]:
            raise ApiError(404, KeyMessages.KEY_NOT_FOUND)

        del self._keys[project_id][key_id]
        for tid in [t for t in self._translations if t[0] == project_id and t[1] == key_id]:
            del self._translations[tid]

    # =========================================================================
    # Keyed data views
    # =========================================================================

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
        project = self._owned_project(project_id, user_id)
        if project is None:
            return Page(metadata=PaginationMetadata.calculate(offset, 0, 0))

        locales = self._locale_codes(project_id)
        rows: list[KeyDefaultViewItem] = []
        for key in self._sorted_keys(project_id):
            if not _matches_search(key.full_key, search):
                continue
            missing = sum(
                1 for locale in locales
                if self._translations[(project_id, key.id, locale)].value is None
            )
            if missing_only and missing == 0:
                continue
            default = self._translations.get((project_id, key.id, project.default_locale))
            rows.append(KeyDefaultViewItem(
                id=key.id,
                full_key=key.full_key,
                created_at=key.created_at,
                value=default.value if default else None,
                missing_count=missing,
            ))

        data, metadata = _paginate(rows, limit, offset)
        return Page(data=data, metadata=metadata)

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
        project = self._owned_project(project_id, user_id)
        if project is None or locale not in self._locales.get(project_id, {}):
            return Page(metadata=PaginationMetadata.calculate(offset, 0, 0))

        rows: list[KeyPerLanguageViewItem] = []
        for key in self._sorted_keys(project_id):
            if not _matches_search(key.full_key, search):
                continue
            translation = self._translations[(project_id, key.id, locale)]
            if missing_only and translation.value is not None:
                continue
            rows.append(KeyPerLanguageViewItem(
                key_id=key.id,
                full_key=key.full_key,
                value=translation.value,
                is_machine_translated=translation.is_machine_translated,
                updated_at=translation.updated_at,
                updated_source=translation.updated_source,
                updated_by_user_id=translation.updated_by_user_id,
            ))

        data, metadata = _paginate(rows, limit, offset)
        return Page(data=data, metadata=metadata)

    async def get_translation(self, project_id: str, key_id: str, locale: str) -> Translation | None:
        return self._translations.get((project_id, key_id, locale))

    async def update_translation(self, request: UpdateTranslationRequest, user_id: str) -> Translation:
        project = self._require_project(request.project_id, user_id)

        current = self._translations.get((request.project_id, request.key_id, request.locale))
        if current is None:
            raise ApiError(404, TranslationMessages.TRANSLATION_NOT_FOUND)

        if request.value is not None:
            error = validate_translation_value(request.value)
            if error:
                raise ApiError(400, error)
        value = normalize_translation_value(request.value)
        if value is None and request.locale == project.default_locale:
            raise ApiError(400, TranslationMessages.DEFAULT_LOCALE_EMPTY)

        if request.updated_at is not None and current.updated_at != request.updated_at:
            raise ApiError(409, TranslationMessages.OPTIMISTIC_LOCK_FAILED)

        updated = current.model_copy(update={
            "value": value,
            "is_machine_translated": request.is_machine_translated,
            "updated_source": request.updated_source,
            "updated_by_user_id": request.updated_by_user_id,
            "updated_at": utc_now(),
        })
        self._translations[(request.project_id, request.key_id, request.locale)] = updated
        return updated

    # =========================================================================
    # Export
    # =========================================================================

    async def list_locale_values(self, project_id: str, locale: str) -> list[tuple[str, str | None]]:
        values = []
        for key in self._sorted_keys(project_id):
            translation = self._translations.get((project_id, key.id, locale))
            values.append((key.full_key, translation.value if translation else None))
        return values

    # =========================================================================
    # Translation jobs
    # =========================================================================

    async def create_job(
        self,
        project_id: str,
        owner_user_id: str,
        target_locale: str,
        mode: JobMode,
        key_ids: list[str] | None = None,
    ) -> TranslationJob:
        project = self._require_project(project_id, owner_user_id)
        key_ids = list(key_ids or [])

        if target_locale == project.default_locale:
            raise ApiError(400, JobMessages.TARGET_LOCALE_IS_DEFAULT)
        if target_locale not in self._locales[project_id]:
            raise ApiError(400, JobMessages.TARGET_LOCALE_NOT_FOUND)
        if mode == JobMode.ALL and key_ids:
            raise ApiError(400, JobMessages.ALL_MODE_NO_KEYS)
        if mode == JobMode.SELECTED and not key_ids:
            raise ApiError(400, JobMessages.SELECTED_MODE_REQUIRES_KEYS)
        if mode == JobMode.SINGLE and len(key_ids) != 1:
            raise ApiError(400, JobMessages.SINGLE_MODE_ONE_KEY)
        if await self.get_active_job(project_id, owner_user_id) is not None:
            raise ApiError(409, JobMessages.ACTIVE_JOB_EXISTS)

        total = len(self._keys[project_id]) if mode == JobMode.ALL else len(key_ids)
        job = TranslationJob(
            project_id=project_id,
            mode=mode,
            source_locale=project.default_locale,
            target_locale=target_locale,
            key_ids=key_ids,
            total_keys=total,
        )
        self._jobs[job.id] = job
        logger.info(f"Queued {mode.value} translation job {job.id} for project {project_id}")
        return job

    async def get_active_job(self, project_id: str, owner_user_id: str) -> TranslationJob | None:
        if self._owned_project(project_id, owner_user_id) is None:
            return None
        for job in self._jobs.values():
            if job.project_id == project_id and job.is_active:
                return job
        return None

    async def cancel_job(self, project_id: str, owner_user_id: str, job_id: str) -> TranslationJob:
        job = self._jobs.get(job_id)
        if (
            job is None
            or job.project_id != project_id
            or self._owned_project(project_id, owner_user_id) is None
        ):
            raise ApiError(404, JobMessages.JOB_NOT_FOUND)
        if not job.is_active:
            raise ApiError(409, JobMessages.JOB_NOT_CANCELLABLE)

        job.cancel()
        logger.info(f"Cancelled translation job {job_id}")
        return job

    # =========================================================================
    # App configuration
    # =========================================================================

    async def get_public_app_config(self) -> dict[str, str]:
        return dict(self._app_config)

    def set_app_config(self, key: str, value: str) -> None:
        self._app_config[key] = value


# =============================================================================
# Factory
# =============================================================================


def create_local_storage(app_config: dict[str, str] | None = None) -> TranslationStorage:
    """Create a TranslationStorage backed by memory."""
    return InMemoryTranslationStorage(app_config=app_config)
