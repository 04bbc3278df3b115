"""
Keys list filters backed by URL query parameters.

The query string is the single source of truth for the list state, so a
list view can be bookmarked, shared and restored with the browser history.
Every change produces a fresh parameter bag and hands it to ``on_change``.

Query string contract:
- ``search``: free text, absent when empty
- ``missingOnly``: ``true`` or absent
- ``page``: 1-based page number
- ``pageSize``: rows per page, capped at ``keys_max_limit``
"""

from __future__ import annotations

from typing import Callable, Iterator
from urllib.parse import parse_qsl, urlencode

from i18nmate.config import get_settings

SEARCH_PARAM = "search"
MISSING_ONLY_PARAM = "missingOnly"
PAGE_PARAM = "page"
PAGE_SIZE_PARAM = "pageSize"

DEFAULT_PAGE = 1


class QueryParams:
    """An ordered, mutable bag of string query parameters."""

    def __init__(self, values: dict[str, str] | None = None):
        self._values: dict[str, str] = dict(values or {})

    @classmethod
    def parse(cls, query: str) -> QueryParams:
        return cls(dict(parse_qsl(query.lstrip("?"), keep_blank_values=True)))

    def get(self, name: str) -> str | None:
        return self._values.get(name)

    def set(self, name: str, value: str) -> None:
        self._values[name] = value

    def delete(self, name: str) -> None:
        self._values.pop(name, None)

    def copy(self) -> QueryParams:
        return QueryParams(self._values)

    def to_dict(self) -> dict[str, str]:
        return dict(self._values)

    def __str__(self) -> str:
        return urlencode(self._values)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return iter(self._values.items())

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QueryParams):
            return NotImplemented
        return self._values == other._values

    def __repr__(self) -> str:
        return f"<QueryParams {self}>"


def _parse_positive_int(value: str | None, default: int) -> int:
    """Parse a positive integer, falling back to ``default`` if malformed."""
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


class KeysListFilters:
    """
    Read and write keys list filters through query parameters.

    Changing the search, the missing-only toggle or the page size sends the
    user back to page 1. Changing the page leaves the other filters alone.
    """

    def __init__(
        self,
        params: QueryParams | None = None,
        on_change: Callable[[QueryParams], None] | None = None,
        default_page_size: int | None = None,
        max_page_size: int | None = None,
    ):
        settings = get_settings()
        self.params = params if params is not None else QueryParams()
        self.on_change = on_change
        self.default_page_size = default_page_size or settings.keys_default_limit
        self.max_page_size = max_page_size or settings.keys_max_limit

    # =========================================================================
    # Reads
    # =========================================================================

    @property
    def search_value(self) -> str:
        return self.params.get(SEARCH_PARAM) or ""

    @property
    def missing_only(self) -> bool:
        return self.params.get(MISSING_ONLY_PARAM) == "true"

    @property
    def page(self) -> int:
        return _parse_positive_int(self.params.get(PAGE_PARAM), DEFAULT_PAGE)

    @property
    def page_size(self) -> int:
        """Rows per page, capped at the largest page the views accept."""
        size = _parse_positive_int(self.params.get(PAGE_SIZE_PARAM), self.default_page_size)
        return min(size, self.max_page_size)

    # =========================================================================
    # Writes
    # =========================================================================

    def _update(self, mutate: Callable[[QueryParams], None]) -> None:
        params = self.params.copy()
        mutate(params)
        self.params = params
        if self.on_change:
            self.on_change(params)

    def set_search_value(self, value: str) -> None:
        def mutate(params: QueryParams) -> None:
            if value:
                params.set(SEARCH_PARAM, value)
            else:
                params.delete(SEARCH_PARAM)
            params.set(PAGE_PARAM, str(DEFAULT_PAGE))

        self._update(mutate)

    def set_missing_only(self, value: bool) -> None:
        def mutate(params: QueryParams) -> None:
            if value:
                params.set(MISSING_ONLY_PARAM, "true")
            else:
                params.delete(MISSING_ONLY_PARAM)
            params.set(PAGE_PARAM, str(DEFAULT_PAGE))

        self._update(mutate)

    def set_page(self, page: int) -> None:
        self._update(lambda params: params.set(PAGE_PARAM, str(page)))

    def set_page_size(self, size: int) -> None:
        def mutate(params: QueryParams) -> None:
            params.set(PAGE_SIZE_PARAM, str(size))
            params.set(PAGE_PARAM, str(DEFAULT_PAGE))

        self._update(mutate)
