"""Development authentication provider for local testing.

This provider bypasses real authentication and returns a fixed principal.
NEVER use in production!
"""

from uuid import UUID

from scopedsearch.domain.search.types import Principal
from scopedsearch.infrastructure.auth.provider import AuthProvider
from scopedsearch.shared.exceptions import AuthenticationError
from scopedsearch.shared.logging import get_logger

logger = get_logger(__name__)

# Fixed UUIDs for development
DEV_USER_ID = UUID("00000000-0000-0000-0000-000000000001")
DEV_ORG_ID = UUID("00000000-0000-0000-0000-000000000001")
DEV_TENANT_ID = UUID("00000000-0000-0000-0000-000000000001")


class DevAuthProvider(AuthProvider):
    """Development auth provider that accepts any non-empty token."""

    def __init__(self, role: str = "admin") -> None:
        self.role = role

    async def verify_token(self, token: str) -> Principal:
        if not token.strip():
            raise AuthenticationError("Empty bearer token")

        logger.warning(
            "dev_auth_used",
            message="Using development auth - DO NOT USE IN PRODUCTION",
        )
        return Principal(
            id=DEV_USER_ID,
            role=self.role,
            organization_id=DEV_ORG_ID,
            tenant_id=DEV_TENANT_ID,
            email="dev@scopedsearch.local",
        )

    async def close(self) -> None:
        """No-op for dev."""
        pass
