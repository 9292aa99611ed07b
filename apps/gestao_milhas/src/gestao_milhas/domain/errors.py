"""Domain exceptions used across API, CLI and services."""

from __future__ import annotations

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any


def compose_error_message(*, cause: str, action: str) -> str:
    """Build a user-facing error message with cause and corrective action."""

    return f"Cause: {cause} Action: {action}"


@dataclass(slots=True)
class DomainError(Exception):
    """Base exception for predictable domain failures."""

    code: str
    message: str
    status_code: int
    details: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message


class InvalidRequestError(DomainError):
    """Raised when user sends semantically invalid input."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="INVALID_REQUEST",
            message=message
            or compose_error_message(
                cause="Request data violates business rules.",
                action="Adjust the input fields and try again.",
            ),
            status_code=HTTPStatus.BAD_REQUEST,
            details=details or {},
        )


class InvalidSessionError(DomainError):
    """Raised when the caller has no valid dashboard session."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="INVALID_SESSION",
            message=message
            or compose_error_message(
                cause="Session is missing or invalid.",
                action="Log in again and repeat the operation.",
            ),
            status_code=HTTPStatus.BAD_REQUEST,
            details=details or {},
        )


class PurchaseNotFoundError(DomainError):
    """Raised when a purchase id does not match any purchase."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="PURCHASE_NOT_FOUND",
            message=message
            or compose_error_message(
                cause="Purchase was not found.",
                action="Check the purchase id and retry.",
            ),
            status_code=HTTPStatus.NOT_FOUND,
            details=details or {},
        )


class CedenteNotFoundError(DomainError):
    """Raised when a cedente id does not match any cedente."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="CEDENTE_NOT_FOUND",
            message=message
            or compose_error_message(
                cause="Cedente was not found.",
                action="Check the cedente id and retry.",
            ),
            status_code=HTTPStatus.NOT_FOUND,
            details=details or {},
        )


class InvalidPurchaseStateError(DomainError):
    """Raised when a purchase cannot be released in its current state."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="INVALID_PURCHASE_STATE",
            message=message
            or compose_error_message(
                cause="Only OPEN purchases can be released.",
                action="Reload the purchase and check its current status.",
            ),
            status_code=HTTPStatus.BAD_REQUEST,
            details=details or {},
        )


class PurchaseReleaseFailedError(DomainError):
    """Raised when the release transaction fails for an unexpected reason."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="RELEASE_FAILED",
            message=message
            or compose_error_message(
                cause="Failed to release the purchase.",
                action="Retry later or contact support if the error persists.",
            ),
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            details=details or {},
        )
