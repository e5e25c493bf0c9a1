"""Unit tests for API dependency wiring."""

from unittest.mock import MagicMock, patch

from scopedsearch.api.deps import build_search_store, get_search_store
from scopedsearch.config import Settings
from scopedsearch.domain.resources import RESOURCE_MODELS
from scopedsearch.infrastructure.database.memory_store import InMemorySearchStore
from scopedsearch.infrastructure.database.search_store import SqlAlchemySearchStore


class TestBuildSearchStore:
    """Test store selection from settings."""

    def test_sql_is_the_default(self):
        with patch("scopedsearch.api.deps.get_session_factory") as session_factory:
            store = build_search_store(Settings(_env_file=None))

        assert isinstance(store, SqlAlchemySearchStore)
        session_factory.assert_called_once()

    def test_memory_store_for_local_development(self):
        store = build_search_store(Settings(_env_file=None, search_store="memory"))

        assert isinstance(store, InMemorySearchStore)
        assert set(store.rows) == set(RESOURCE_MODELS)
        assert all(rows == [] for rows in store.rows.values())


class TestGetSearchStore:
    """Test the per-app cached dependency."""

    def test_store_is_built_once_per_app(self):
        request = MagicMock()
        request.app.state = MagicMock(spec=[])
        settings = Settings(_env_file=None, search_store="memory")

        with patch("scopedsearch.api.deps.get_settings", return_value=settings):
            first = get_search_store(request)
            second = get_search_store(request)

        assert isinstance(first, InMemorySearchStore)
        assert first is second
