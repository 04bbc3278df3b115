"""
Tests for the URL-backed keys list filters.
"""

import pytest

from i18nmate.keys.filters import KeysListFilters, QueryParams


@pytest.fixture
def history():
    """Every query string pushed by the filters, in order."""
    return []


@pytest.fixture
def filters(history):
    return KeysListFilters(
        QueryParams.parse("search=home&page=4&pageSize=20"),
        on_change=lambda params: history.append(str(params)),
        default_page_size=50,
    )


# =============================================================================
# QueryParams
# =============================================================================


class TestQueryParams:
    def test_parse_and_serialize(self):
        params = QueryParams.parse("?search=home%20page&missingOnly=true")
        assert params.get("search") == "home page"
        assert params.get("missingOnly") == "true"
        assert str(params) == "search=home+page&missingOnly=true"

    def test_copy_is_independent(self):
        params = QueryParams({"page": "2"})
        copy = params.copy()
        copy.set("page", "3")
        assert params.get("page") == "2"

    def test_delete_missing_is_noop(self):
        params = QueryParams()
        params.delete("search")
        assert str(params) == ""


# =============================================================================
# Reads
# =============================================================================


class TestReads:
    def test_defaults(self):
        filters = KeysListFilters(QueryParams(), default_page_size=50)
        assert filters.search_value == ""
        assert filters.missing_only is False
        assert filters.page == 1
        assert filters.page_size == 50

    def test_values_from_query(self, filters):
        assert filters.search_value == "home"
        assert filters.page == 4
        assert filters.page_size == 20

    def test_missing_only_needs_literal_true(self):
        assert KeysListFilters(QueryParams.parse("missingOnly=1")).missing_only is False
        assert KeysListFilters(QueryParams.parse("missingOnly=true")).missing_only is True

    @pytest.mark.parametrize("query", ["page=abc", "page=", "page=0", "page=-2"])
    def test_malformed_page_falls_back(self, query):
        assert KeysListFilters(QueryParams.parse(query)).page == 1

    def test_malformed_page_size_falls_back(self):
        filters = KeysListFilters(QueryParams.parse("pageSize=lots"), default_page_size=50)
        assert filters.page_size == 50

    def test_page_size_capped_at_max_limit(self):
        assert KeysListFilters(QueryParams.parse("pageSize=500")).page_size == 100
        assert KeysListFilters(QueryParams.parse("pageSize=500"), max_page_size=25).page_size == 25


# =============================================================================
# Writes
# =============================================================================


class TestWrites:
    def test_search_resets_page(self, filters):
        filters.set_search_value("title")
        assert filters.search_value == "title"
        assert filters.page == 1
        assert filters.page_size == 20

    def test_empty_search_removes_param(self, filters):
        filters.set_search_value("")
        assert "search" not in filters.params
        assert filters.page == 1

    def test_missing_only_resets_page(self, filters):
        filters.set_missing_only(True)
        assert filters.params.get("missingOnly") == "true"
        assert filters.page == 1

    def test_missing_only_false_removes_param(self, filters):
        filters.set_missing_only(True)
        filters.set_missing_only(False)
        assert "missingOnly" not in filters.params

    def test_page_size_resets_page(self, filters):
        filters.set_page_size(100)
        assert filters.page_size == 100
        assert filters.page == 1

    def test_set_page_keeps_other_filters(self, filters):
        filters.set_page(7)
        assert filters.page == 7
        assert filters.search_value == "home"
        assert filters.page_size == 20

    def test_every_change_is_pushed(self, filters, history):
        filters.set_page(2)
        filters.set_search_value("")
        assert history == [
            "search=home&page=2&pageSize=20",
            "page=1&pageSize=20",
        ]

    def test_writes_replace_the_bag(self, filters):
        before = filters.params
        filters.set_page(2)
        assert before.get("page") == "4"
        assert filters.params is not before
