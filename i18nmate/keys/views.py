"""
Keys list views.

Validated fetch parameters for the two keyed views, plus view state that
ties URL filters, inline editing and the card list renderer together:

- KeysListState: every key with its default-locale value
- KeysPerLanguageState: every key with its value in one locale
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from i18nmate.config import get_settings
from i18nmate.core.errors import ApiError, LocaleMessages
from i18nmate.core.models import (
    KeyDefaultViewItem,
    KeyPerLanguageViewItem,
    Page,
    PaginationParams,
    Translation,
    UpdateSource,
    UpdateTranslationRequest,
)
from i18nmate.core.utils import is_uuid
from i18nmate.core.validation import is_valid_locale, normalize_locale
from i18nmate.keys.editing import InlineEditController
from i18nmate.keys.filters import KeysListFilters, QueryParams
from i18nmate.keys.pagination import CardListModel, render_card_list
from i18nmate.storage.base import TranslationStorage

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=BaseModel)


# =============================================================================
# Fetch parameters
# =============================================================================


class KeysViewParams(BaseModel):
    """Parameters for the default-locale keys view."""

    project_id: str
    limit: int = Field(default_factory=lambda: get_settings().keys_default_limit, ge=1)
    offset: int = Field(default=0, ge=0)
    search: str | None = None
    missing_only: bool = False

    @field_validator("project_id")
    @classmethod
    def _check_project_id(cls, v: str) -> str:
        if not is_uuid(v):
            raise ValueError("Invalid project ID format")
        return v

    @field_validator("limit")
    @classmethod
    def _check_limit(cls, v: int) -> int:
        max_limit = get_settings().keys_max_limit
        if v > max_limit:
            raise ValueError(f"Limit must be at most {max_limit}")
        return v

    @field_validator("search")
    @classmethod
    def _strip_search(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class KeyTranslationsViewParams(KeysViewParams):
    """Parameters for the per-language keys view."""

    locale: str

    @field_validator("locale")
    @classmethod
    def _check_locale(cls, v: str) -> str:
        code = normalize_locale(v)
        if not is_valid_locale(code):
            raise ValueError(LocaleMessages.INVALID_LOCALE)
        return code


def parse_view_params(model: type[P], **values: Any) -> P:
    """
    Validate view parameters.

    Raises:
        ApiError: 400 naming the first invalid field
    """
    try:
        return model(**values)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        message = first["msg"].removeprefix("Value error, ")
        raise ApiError(400, message, {"constraint": "validation", "field": field})


async def fetch_default_view(
    storage: TranslationStorage,
    user_id: str,
    params: KeysViewParams,
) -> Page[KeyDefaultViewItem]:
    return await storage.list_default_view(
        params.project_id,
        user_id=user_id,
        limit=params.limit,
        offset=params.offset,
        search=params.search,
        missing_only=params.missing_only,
    )


async def fetch_per_language_view(
    storage: TranslationStorage,
    user_id: str,
    params: KeyTranslationsViewParams,
) -> Page[KeyPerLanguageViewItem]:
    return await storage.list_per_language_view(
        params.project_id,
        params.locale,
        user_id=user_id,
        limit=params.limit,
        offset=params.offset,
        search=params.search,
        missing_only=params.missing_only,
    )


# =============================================================================
# View state
# =============================================================================


@dataclass(frozen=True)
class EmptyState:
    header: str
    description: str


NO_KEYS = EmptyState(
    header="No translation keys yet",
    description="Create your first translation key to start managing multilingual content for this project.",
)
ALL_TRANSLATED = EmptyState(
    header="All translations complete",
    description="All translation keys have been translated. Your project is fully localized.",
)


class _KeysViewState(ABC):
    """Shared state for the keys list views."""

    def __init__(
        self,
        storage: TranslationStorage,
        user_id: str,
        project_id: str,
        locale: str,
        params: QueryParams | None = None,
        autosave_delay: float | None = None,
    ):
        self.storage = storage
        self.user_id = user_id
        self.project_id = project_id
        self.locale = locale
        self.filters = KeysListFilters(params)
        self.editor = InlineEditController(self.save_value, delay=autosave_delay)
        self.page: Page | None = None

    @property
    def pagination_params(self) -> PaginationParams:
        size = self.filters.page_size
        return PaginationParams(limit=size, offset=(self.filters.page - 1) * size)

    def handle_page_change(self, params: PaginationParams) -> None:
        limit = params.limit or self.filters.page_size
        self.filters.set_page(params.offset // limit + 1 if limit > 0 else 1)

    @property
    def empty_state(self) -> EmptyState:
        return ALL_TRANSLATED if self.filters.missing_only else NO_KEYS

    @property
    def title(self) -> str | None:
        return None

    @abstractmethod
    async def refresh(self) -> Page:
        """Fetch the current page for the current filters."""
        pass

    def _row_updated_at(self, key_id: str):
        return None

    async def save_value(self, key_id: str, value: str | None) -> None:
        """
        Persist an edited value, then refetch the page.

        The saved row is patched into the current page first. A failed
        refetch is logged and leaves that patched page in place; only the
        write itself can fail the save.
        """
        request = UpdateTranslationRequest(
            project_id=self.project_id,
            key_id=key_id,
            locale=self.locale,
            value=value,
            is_machine_translated=False,
            updated_source=UpdateSource.USER,
            updated_by_user_id=self.user_id,
            updated_at=self._row_updated_at(key_id),
        )
        translation = await self.storage.update_translation(request, self.user_id)
        logger.info(f"Translation updated for key {key_id} ({self.locale})")
        self._apply_saved(translation)

        try:
            await self.refresh()
        except Exception as e:
            logger.warning(f"Refetch after saving key {key_id} failed, keeping local row: {e}")

    def _apply_saved(self, translation: Translation) -> None:
        pass

    def render(self) -> CardListModel:
        items = list(self.page.data) if self.page else []
        if not items:
            return render_card_list(items, title=self.title, empty_state=self.empty_state)
        return render_card_list(
            items,
            title=self.title,
            empty_state=self.empty_state,
            metadata=self.page.metadata,
            params=self.pagination_params,
            on_page_change=self.handle_page_change,
        )


class KeysListState(_KeysViewState):
    """Default view: edits values in the project's default locale."""

    async def refresh(self) -> Page[KeyDefaultViewItem]:
        params = parse_view_params(
            KeysViewParams,
            project_id=self.project_id,
            limit=self.filters.page_size,
            offset=self.pagination_params.offset,
            search=self.filters.search_value or None,
            missing_only=self.filters.missing_only,
        )
        self.page = await fetch_default_view(self.storage, self.user_id, params)
        return self.page

    def _apply_saved(self, translation: Translation) -> None:
        if self.page is None:
            return
        self.page.data = [
            row.model_copy(update={"value": translation.value}) if row.id == translation.key_id else row
            for row in self.page.data
        ]


class KeysPerLanguageState(_KeysViewState):
    """Per-language view: edits values in one locale."""

    @property
    def title(self) -> str:
        return f"Translations - {self.locale.upper()}"

    async def refresh(self) -> Page[KeyPerLanguageViewItem]:
        params = parse_view_params(
            KeyTranslationsViewParams,
            project_id=self.project_id,
            locale=self.locale,
            limit=self.filters.page_size,
            offset=self.pagination_params.offset,
            search=self.filters.search_value or None,
            missing_only=self.filters.missing_only,
        )
        self.page = await fetch_per_language_view(self.storage, self.user_id, params)
        return self.page

    def _apply_saved(self, translation: Translation) -> None:
        if self.page is None:
            return
        saved = {
            "value": translation.value,
            "is_machine_translated": translation.is_machine_translated,
            "updated_at": translation.updated_at,
            "updated_source": translation.updated_source,
            "updated_by_user_id": translation.updated_by_user_id,
        }
        self.page.data = [
            row.model_copy(update=saved) if row.key_id == translation.key_id else row
            for row in self.page.data
        ]

    def _row_updated_at(self, key_id: str):
        # Optimistic lock against the row as last fetched
        for row in self.page.data if self.page else []:
            if row.key_id == key_id:
                return row.updated_at
        return None
