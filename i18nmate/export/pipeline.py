"""
Translation export.

Builds a ZIP archive with one ``<locale>.json`` file per project locale.
Each file is a flat object of full key → value, keys sorted, values that
are missing exported as empty strings:

    {
      "app.home.title": "Home",
      "app.home.subtitle": ""
    }

The request runs through fixed stages, each of which can stop it with an
ApiError: validate → authenticate → authorize → aggregate → package.
Anything unexpected becomes a generic 500 after being logged.
"""

from __future__ import annotations

import io
import json
import logging
import re
import zipfile
from dataclasses import dataclass
from datetime import datetime

from i18nmate.auth.context import resolve_project, validate_project_id
from i18nmate.auth.policies import authenticate_header
from i18nmate.config import get_settings
from i18nmate.core.errors import ApiError, ExportMessages
from i18nmate.core.models import Project
from i18nmate.core.utils import utc_now
from i18nmate.integrations.sentry import capture_exception, set_user
from i18nmate.storage.base import TranslationStorage

logger = logging.getLogger(__name__)

ALLOWED_METHOD = "GET"
ZIP_CONTENT_TYPE = "application/zip"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9_-]")

# locale -> {full_key: value}
LocaleFiles = dict[str, dict[str, str]]


@dataclass
class ExportResult:
    filename: str
    content: bytes
    content_type: str = ZIP_CONTENT_TYPE

    @property
    def content_disposition(self) -> str:
        return f'attachment; filename="{self.filename}"'


# =============================================================================
# Packaging helpers
# =============================================================================


def sanitize_filename(name: str) -> str:
    """Replace anything outside ``[a-zA-Z0-9_-]`` with ``_``."""
    return _UNSAFE_FILENAME_CHARS.sub("_", name)


def build_export_filename(project_name: str, now: datetime | None = None) -> str:
    """``project-<name>-<YYYY-MM-DDTHH-MM-SS>.zip`` in UTC."""
    timestamp = (now or utc_now()).strftime("%Y-%m-%dT%H-%M-%S")
    return f"project-{sanitize_filename(project_name)}-{timestamp}.zip"


def render_locale_file(values: dict[str, str]) -> str:
    """Serialize one locale: sorted keys, two-space indent."""
    return json.dumps(dict(sorted(values.items())), indent=2, ensure_ascii=False)


def build_archive(files: LocaleFiles, compression_level: int | None = None) -> bytes:
    """Zip the locale files, in ascending locale order."""
    level = get_settings().export_compression_level if compression_level is None else compression_level
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=level) as archive:
        for locale in sorted(files):
            archive.writestr(f"{locale}.json", render_locale_file(files[locale]))
    return buffer.getvalue()


# =============================================================================
# Pipeline
# =============================================================================


class TranslationExporter:
    """Runs an export request against a storage backend."""

    def __init__(self, storage: TranslationStorage):
        self.storage = storage

    async def export(
        self,
        method: str,
        project_id: str | None,
        authorization: str | None,
    ) -> ExportResult:
        """
        Handle an export request.

        Raises:
            ApiError: with the status code and message to return
        """
        try:
            return await self._run(method, project_id, authorization)
        except ApiError:
            raise
        except Exception as e:
            logger.exception(f"Export failed for project {project_id}")
            capture_exception(e, project_id=project_id)
            raise ApiError(500, ExportMessages.EXPORT_FAILED)

    async def _run(self, method: str, project_id: str | None, authorization: str | None) -> ExportResult:
        # Validate
        if method.upper() != ALLOWED_METHOD:
            raise ApiError(405, ExportMessages.METHOD_NOT_ALLOWED)
        project_id = validate_project_id(project_id)

        # Authenticate
        user_id = authenticate_header(authorization)
        set_user(user_id)

        # Authorize
        project = await resolve_project(self.storage, project_id, user_id)

        # Aggregate
        files = await self.collect(project)

        # Package
        try:
            content = build_archive(files)
        except (zipfile.BadZipFile, OSError, ValueError) as e:
            logger.error(f"Failed to build export archive for project {project.id}: {e}")
            raise ApiError(500, ExportMessages.ARCHIVE_FAILED)

        logger.info(f"Exported {len(files)} locales for project {project.id}")
        return ExportResult(filename=build_export_filename(project.name), content=content)

    async def collect(self, project: Project) -> LocaleFiles:
        """Fetch every locale's values, one locale at a time."""
        try:
            locales = await self.storage.list_locales(project.id)
        except Exception as e:
            logger.error(f"Failed to fetch locales for project {project.id}: {e}")
            raise ApiError(500, ExportMessages.LOCALES_FETCH_FAILED)

        if not locales:
            raise ApiError(404, ExportMessages.NO_LOCALES)

        files: LocaleFiles = {}
        for project_locale in sorted(locales, key=lambda l: l.locale):
            locale = project_locale.locale
            try:
                rows = await self.storage.list_locale_values(project.id, locale)
            except Exception as e:
                logger.error(f"Failed to fetch translations for {project.id}/{locale}: {e}")
                raise ApiError(500, ExportMessages.translations_fetch_failed(locale))
            files[locale] = {full_key: value if value is not None else "" for full_key, value in rows}

        return files
