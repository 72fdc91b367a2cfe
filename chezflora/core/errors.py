"""Error types for the ChezFlora storefront.

Services raise these exceptions to signal business rule violations. Each class
carries the HTTP status the API layer answers with, so routers never have to
translate them by hand.
"""

from __future__ import annotations

from typing import Optional


class ChezFloraError(Exception):
    """Base error for all storefront exceptions."""

    status_code: int = 500

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    @property
    def error_type(self) -> str:
        return type(self).__name__


class NotFoundError(ChezFloraError):
    """Raised when a requested record does not exist or is not visible to the caller."""

    status_code = 404

    def __init__(self, resource: str, identifier: object = None, detail: Optional[str] = None) -> None:
        if detail is None:
            detail = f"{resource} {identifier} not found" if identifier is not None else f"{resource} not found"
        super().__init__(detail)
        self.resource = resource
        self.identifier = identifier


class ConflictError(ChezFloraError):
    """Raised when a write collides with existing state (duplicate email, slug, link)."""

    status_code = 409


class InsufficientStockError(ConflictError):
    """Raised when a requested quantity exceeds what is on hand."""

    def __init__(self, detail: str, available: int = 0) -> None:
        super().__init__(detail)
        self.available = available


class InvalidOperationError(ChezFloraError):
    """Raised when an operation is not allowed in the current state."""

    status_code = 400


class AuthenticationError(ChezFloraError):
    """Raised for missing, invalid or expired credentials."""

    status_code = 401


class PermissionDeniedError(ChezFloraError):
    """Raised when the caller is authenticated but lacks the required role or status."""

    status_code = 403
