"""Unit tests for the authentication boundary."""

from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from scopedsearch.api.middleware.auth import build_auth_provider, get_current_principal
from scopedsearch.config import Settings
from scopedsearch.infrastructure.auth.dev import DEV_TENANT_ID, DEV_USER_ID, DevAuthProvider
from scopedsearch.shared.exceptions import AuthenticationError


def bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestDevAuthProvider:
    """Test the development provider."""

    async def test_returns_fixed_principal(self):
        principal = await DevAuthProvider().verify_token("anything")

        assert principal.id == DEV_USER_ID
        assert principal.tenant_id == DEV_TENANT_ID
        assert principal.role == "admin"

    async def test_empty_token_is_rejected(self):
        with pytest.raises(AuthenticationError):
            await DevAuthProvider().verify_token("  ")


class TestBuildAuthProvider:
    """Test provider selection."""

    def test_dev(self):
        assert isinstance(build_auth_provider(Settings(_env_file=None)), DevAuthProvider)

    def test_external_must_be_installed_by_host(self):
        with pytest.raises(RuntimeError):
            build_auth_provider(Settings(_env_file=None, auth_provider="external"))


class TestGetCurrentPrincipal:
    """Test the FastAPI dependency."""

    async def test_missing_credentials_is_401(self):
        with pytest.raises(HTTPException) as exc_info:
            await get_current_principal(MagicMock(), None, DevAuthProvider())

        assert exc_info.value.status_code == 401

    async def test_invalid_token_is_401(self):
        provider = AsyncMock()
        provider.verify_token.side_effect = AuthenticationError("Token expired")

        with pytest.raises(HTTPException) as exc_info:
            await get_current_principal(MagicMock(), bearer("expired"), provider)

        assert exc_info.value.status_code == 401

    async def test_principal_is_stored_on_request(self):
        request = MagicMock()

        principal = await get_current_principal(request, bearer("dev"), DevAuthProvider())

        assert request.state.principal == principal

    async def test_principal_is_bound_to_log_context(self):
        structlog.contextvars.clear_contextvars()
        try:
            await get_current_principal(MagicMock(), bearer("dev"), DevAuthProvider())

            context = structlog.contextvars.get_contextvars()
            assert context["principal_id"] == str(DEV_USER_ID)
            assert context["role"] == "admin"
        finally:
            structlog.contextvars.clear_contextvars()
