"""
Keys list: URL-backed filters, inline editing, pagination and views.
"""

from i18nmate.keys.filters import KeysListFilters, QueryParams
from i18nmate.keys.editing import InlineEditController, Idle, Editing, Saving, EditState
from i18nmate.keys.pagination import (
    CardListModel,
    PageControls,
    generate_page_numbers,
    render_card_list,
)
from i18nmate.keys.views import (
    KeysViewParams,
    KeyTranslationsViewParams,
    KeysListState,
    KeysPerLanguageState,
    fetch_default_view,
    fetch_per_language_view,
    parse_view_params,
)

__all__ = [
    "KeysListFilters",
    "QueryParams",
    "InlineEditController",
    "Idle",
    "Editing",
    "Saving",
    "EditState",
    "CardListModel",
    "PageControls",
    "generate_page_numbers",
    "render_card_list",
    "KeysViewParams",
    "KeyTranslationsViewParams",
    "KeysListState",
    "KeysPerLanguageState",
    "fetch_default_view",
    "fetch_per_language_view",
    "parse_view_params",
]
