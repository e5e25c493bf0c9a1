"""Unit tests for sort allowlist resolution."""

import pytest

from scopedsearch.domain.search.sorting import SortAllowlist, resolve_sort
from scopedsearch.domain.search.types import SortDirection

ALLOWLIST = SortAllowlist(
    fields=frozenset({"created_at", "title", "priority"}),
    default_field="created_at",
    default_direction=SortDirection.DESC,
)


class TestResolveSort:
    """Test sort resolution never raises and never leaves the allowlist."""

    def test_allowed_field_and_direction(self):
        spec = resolve_sort(ALLOWLIST, "title", "asc")

        assert spec.field == "title"
        assert spec.direction is SortDirection.ASC

    def test_unknown_field_falls_back_to_default(self):
        spec = resolve_sort(ALLOWLIST, "password_hash", "asc")

        assert spec.field == "created_at"
        assert spec.direction is SortDirection.ASC

    @pytest.mark.parametrize("direction", ["ASC", "Asc", " asc "])
    def test_direction_is_case_insensitive(self, direction):
        assert resolve_sort(ALLOWLIST, "title", direction).direction is SortDirection.ASC

    @pytest.mark.parametrize("direction", ["up", "", None, 1, "ascending"])
    def test_invalid_direction_uses_default(self, direction):
        assert resolve_sort(ALLOWLIST, "title", direction).direction is SortDirection.DESC

    @pytest.mark.parametrize("field", [None, "", 42, ["title"], "title; DROP TABLE tasks"])
    def test_garbage_field_uses_default(self, field):
        assert resolve_sort(ALLOWLIST, field, None).field == "created_at"

    def test_default_must_be_allowlisted(self):
        with pytest.raises(ValueError):
            SortAllowlist(fields=frozenset({"title"}), default_field="created_at")
