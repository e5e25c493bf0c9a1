"""Abstract authentication provider interface.

Token verification is owned by an external identity service. The search
engine only needs the resulting principal, so any provider that can turn a
bearer token into a ``Principal`` can be plugged in here.
"""

from abc import ABC, abstractmethod

from scopedsearch.domain.search.types import Principal


class AuthProvider(ABC):
    """Turns bearer tokens into principals."""

    @abstractmethod
    async def verify_token(self, token: str) -> Principal:
        """Verify a token and return the caller it identifies.

        Raises:
            AuthenticationError: If the token is invalid or expired.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release any held resources."""
        ...
