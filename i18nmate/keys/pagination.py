"""
Paginated list rendering.

Turns a page of items plus offset/limit pagination into a render model:
a header, the items (or an empty state) and page controls. Page controls
only appear when there is more than one page.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, Literal, TypeVar, Union

from i18nmate.core.models import PaginationMetadata, PaginationParams

T = TypeVar("T")

ELLIPSIS = "ellipsis"
PageItem = Union[int, Literal["ellipsis"]]

# Up to this many pages are listed without ellipses
MAX_VISIBLE_PAGES = 7


def generate_page_numbers(total_pages: int, current_page: int) -> list[PageItem]:
    """
    Page links to show, with ``"ellipsis"`` for skipped ranges.

    The first and last pages are always present, plus the pages right
    around the current one:

        >>> generate_page_numbers(10, 5)
        [1, 'ellipsis', 4, 5, 6, 'ellipsis', 10]
    """
    if total_pages <= MAX_VISIBLE_PAGES:
        return list(range(1, total_pages + 1))

    pages: list[PageItem] = [1]
    start = max(2, current_page - 1)
    end = min(total_pages - 1, current_page + 1)

    if start > 2:
        pages.append(ELLIPSIS)
    pages.extend(range(start, end + 1))
    if end < total_pages - 1:
        pages.append(ELLIPSIS)

    pages.append(total_pages)
    return pages


# =============================================================================
# Page controls
# =============================================================================


@dataclass
class PageControls:
    """Page links plus previous/next for an offset/limit list."""

    metadata: PaginationMetadata
    params: PaginationParams
    on_page_change: Callable[[PaginationParams], None]

    @property
    def current_page(self) -> int:
        return self.params.offset // self.params.limit + 1

    @property
    def total_pages(self) -> int:
        return math.ceil(self.metadata.total / self.params.limit)

    @property
    def is_first_page(self) -> bool:
        return self.current_page == 1

    @property
    def is_last_page(self) -> bool:
        return self.current_page >= self.total_pages

    @property
    def pages(self) -> list[PageItem]:
        return generate_page_numbers(self.total_pages, self.current_page)

    def go_to(self, page: int) -> None:
        offset = (page - 1) * self.params.limit
        self.on_page_change(PaginationParams(limit=self.params.limit, offset=offset))

    def previous(self) -> None:
        if not self.is_first_page:
            self.go_to(self.current_page - 1)

    def next(self) -> None:
        if not self.is_last_page:
            self.go_to(self.current_page + 1)


# =============================================================================
# Card list
# =============================================================================


@dataclass
class CardListModel(Generic[T]):
    """Everything a card list needs to render."""

    items: list[T] = field(default_factory=list)
    title: str | None = None
    description: str | None = None
    action: Any = None
    empty_state: Any = None
    pagination: PageControls | None = None

    @property
    def show_header(self) -> bool:
        return bool(self.title or self.description or self.action)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def show_empty_state(self) -> bool:
        return self.is_empty and self.empty_state is not None


def render_card_list(
    items: list[T],
    *,
    title: str | None = None,
    description: str | None = None,
    action: Any = None,
    empty_state: Any = None,
    metadata: PaginationMetadata | None = None,
    params: PaginationParams | None = None,
    on_page_change: Callable[[PaginationParams], None] | None = None,
) -> CardListModel[T]:
    """
    Build the render model for a card list.

    Page controls are attached only when pagination is configured and
    ``metadata.total`` exceeds one page.
    """
    controls = None
    if metadata is not None and params is not None and on_page_change is not None:
        if metadata.total > params.limit:
            controls = PageControls(metadata=metadata, params=params, on_page_change=on_page_change)

    return CardListModel(
        items=list(items),
        title=title,
        description=description,
        action=action,
        empty_state=empty_state,
        pagination=controls,
    )
