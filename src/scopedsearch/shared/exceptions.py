"""Custom exception hierarchy for the search engine."""

from typing import Any


class ScopedSearchError(Exception):
    """Base exception for all search engine errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)


# ----- Authentication Errors -----


class AuthenticationError(ScopedSearchError):
    """Authentication failed."""

    pass


# ----- Access Errors -----


class AuthorizationError(ScopedSearchError):
    """Principal's role does not grant access to the resource."""

    def __init__(self, resource: str, role: str) -> None:
        super().__init__(
            message=f"Role '{role}' may not search {resource}",
            details={"resource": resource, "role": role},
        )


class ScopeError(ScopedSearchError):
    """Principal is missing scope data the resource requires."""

    def __init__(self, resource: str, scope_field: str) -> None:
        super().__init__(
            message=f"Principal has no {scope_field} required to search {resource}",
            details={"resource": resource, "scope_field": scope_field},
        )


# ----- Resource Errors -----


class NotFoundError(ScopedSearchError):
    """Requested resource was not found."""

    def __init__(self, resource: str, identifier: str) -> None:
        super().__init__(
            message=f"{resource} not found",
            details={"resource": resource, "identifier": identifier},
        )


# ----- Validation Errors -----


class ValidationError(ScopedSearchError):
    """Input validation failed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, details={"field": field} if field else None)
        self.field = field


# ----- Storage Errors -----


class StorageError(ScopedSearchError):
    """Persistence engine failed or timed out."""

    pass
