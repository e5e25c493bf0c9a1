"""Authentication infrastructure."""

from scopedsearch.infrastructure.auth.dev import DevAuthProvider
from scopedsearch.infrastructure.auth.provider import AuthProvider

__all__ = [
    "AuthProvider",
    "DevAuthProvider",
]
