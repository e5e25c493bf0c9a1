"""Unit tests for pagination normalization."""

import pytest

from scopedsearch.domain.search.pagination import (
    MAX_STORE_OFFSET,
    LimitPolicy,
    beyond_store_range,
    normalize_page,
    page_count,
)
from scopedsearch.domain.search.types import OverLimitPolicy, PageWindow
from scopedsearch.shared.exceptions import ValidationError

CLAMP = LimitPolicy(default_limit=20, max_limit=100)
REJECT = LimitPolicy(default_limit=20, max_limit=100, over_limit=OverLimitPolicy.REJECT)


class TestNormalizePage:
    """Test page/limit normalization."""

    def test_defaults_when_absent(self):
        window = normalize_page(None, None, CLAMP)

        assert (window.page, window.limit, window.skip) == (1, 20, 0)

    def test_skip_is_page_offset(self):
        window = normalize_page(3, 10, CLAMP)

        assert window.skip == 20

    @pytest.mark.parametrize("page", [0, -1, -50])
    def test_page_below_one_becomes_one(self, page):
        assert normalize_page(page, 10, CLAMP).page == 1

    @pytest.mark.parametrize("limit", [0, -5])
    def test_limit_below_one_uses_default(self, limit):
        assert normalize_page(1, limit, CLAMP).limit == 20

    def test_over_limit_is_clamped(self):
        assert normalize_page(1, 500, CLAMP).limit == 100

    def test_over_limit_is_rejected_when_policy_says_so(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_page(1, 101, REJECT)

        assert exc_info.value.field == "limit"

    def test_max_limit_itself_is_allowed_under_reject(self):
        assert normalize_page(1, 100, REJECT).limit == 100

    def test_numeric_strings_are_accepted(self):
        window = normalize_page("2", " 15 ", CLAMP)

        assert (window.page, window.limit) == (2, 15)

    def test_blank_string_counts_as_absent(self):
        assert normalize_page("", "", CLAMP).limit == 20

    def test_whole_float_is_accepted(self):
        assert normalize_page(2.0, 10.0, CLAMP).page == 2

    @pytest.mark.parametrize("raw", ["abc", 1.5, True, [1], {"n": 1}])
    def test_non_numeric_page_raises(self, raw):
        with pytest.raises(ValidationError) as exc_info:
            normalize_page(raw, 10, CLAMP)

        assert exc_info.value.field == "page"

    def test_non_numeric_limit_raises(self):
        with pytest.raises(ValidationError) as exc_info:
            normalize_page(1, "ten", CLAMP)

        assert exc_info.value.field == "limit"


class TestPageCount:
    """Test page arithmetic."""

    def test_no_records_means_no_pages(self):
        assert page_count(0, 20) == 0

    def test_partial_last_page_counts(self):
        assert page_count(25, 10) == 3

    def test_exact_multiple(self):
        assert page_count(20, 10) == 2


class TestBeyondStoreRange:
    """Test detection of windows no store can address."""

    def test_ordinary_page(self):
        assert not beyond_store_range(normalize_page(5, 10, CLAMP))

    def test_huge_page(self):
        window = normalize_page(10**18, 10, CLAMP)

        assert window.skip > MAX_STORE_OFFSET
        assert beyond_store_range(window)

    def test_last_addressable_window(self):
        limit = 10
        edge = PageWindow(page=2, limit=limit, skip=MAX_STORE_OFFSET - limit)
        past = PageWindow(page=2, limit=limit, skip=MAX_STORE_OFFSET - limit + 1)

        assert not beyond_store_range(edge)
        assert beyond_store_range(past)


class TestLimitPolicy:
    """Test LimitPolicy construction."""

    def test_default_above_max_is_rejected(self):
        with pytest.raises(ValueError):
            LimitPolicy(default_limit=200, max_limit=100)
