from __future__ import annotations

from typing import Any


class MarketplaceError(Exception):
    """
    Base for every error the core raises.

    `kind` is the machine-readable code surfaced to clients; `message` is for humans.
    Only TransientError is retryable: the rest describe outcomes a retry cannot change.
    """

    kind: str = "error"
    retryable: bool = False

    def __init__(self, message: str, *, details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or []


class ValidationError(MarketplaceError):
    kind = "validation_error"


class AuthError(MarketplaceError):
    kind = "auth_error"

    def __init__(
        self,
        message: str,
        *,
        authenticated: bool = False,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        # False -> no identity at all (401); True -> identity lacks capability (403)
        self.authenticated = authenticated


class NotFoundError(MarketplaceError):
    kind = "not_found"


class ConflictError(MarketplaceError):
    kind = "conflict"


class TransientError(MarketplaceError):
    kind = "transient_error"
    retryable = True
