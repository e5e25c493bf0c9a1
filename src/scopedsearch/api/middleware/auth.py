"""Authentication dependencies for FastAPI."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from scopedsearch.config import Settings, get_settings
from scopedsearch.domain.search.types import Principal
from scopedsearch.infrastructure.auth.provider import AuthProvider
from scopedsearch.shared.exceptions import AuthenticationError
from scopedsearch.shared.logging import bind_search_context, get_logger

logger = get_logger(__name__)

# HTTP Bearer scheme
security = HTTPBearer(auto_error=False)


def build_auth_provider(settings: Settings) -> AuthProvider:
    """Build the configured auth provider.

    Set AUTH_PROVIDER=dev for local testing. With AUTH_PROVIDER=external the
    hosting application must assign its own provider to
    ``app.state.auth_provider`` before serving requests.
    """
    if settings.auth_provider == "dev":
        from scopedsearch.infrastructure.auth.dev import DevAuthProvider

        return DevAuthProvider()

    raise RuntimeError("AUTH_PROVIDER=external but no provider is installed on app.state")


def get_auth_provider(request: Request) -> AuthProvider:
    """Get a cached auth provider instance (per FastAPI app)."""
    provider = getattr(request.app.state, "auth_provider", None)
    if provider is None:
        provider = build_auth_provider(get_settings())
        request.app.state.auth_provider = provider
    return provider


async def get_current_principal(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    auth_provider: Annotated[AuthProvider, Depends(get_auth_provider)],
) -> Principal:
    """Dependency resolving the authenticated caller.

    Usage:
        @router.patch("/search/{resource}")
        async def search(resource: str, principal: CurrentPrincipal): ...
    """
    if credentials is None:
        raise HTTPException(
            status_code=401,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        principal = await auth_provider.verify_token(credentials.credentials)
    except AuthenticationError as e:
        logger.warning("auth_failed", error=e.message)
        raise HTTPException(
            status_code=401,
            detail="Authentication failed",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    request.state.principal = principal
    bind_search_context(principal_id=principal.id, role=principal.role)
    logger.debug("principal_authenticated")
    return principal


# Type alias for the authenticated caller
CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
