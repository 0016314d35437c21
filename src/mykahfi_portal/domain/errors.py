"""Domain exceptions used across API and services."""

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
                cause="Request data is incomplete or malformed.",
                action="Adjust the input fields and try again.",
            ),
            status_code=HTTPStatus.BAD_REQUEST,
            details=details or {},
        )


class InvalidCredentialsError(DomainError):
    """Raised when NIS and password do not match a learner account."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="INVALID_CREDENTIALS",
            message=message or "NIS atau Password salah.",
            status_code=HTTPStatus.UNAUTHORIZED,
            details=details or {},
        )


class SessionRequiredError(DomainError):
    """Raised when a session-scoped endpoint is called without a session."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="SESSION_REQUIRED",
            message=message or "Sesi tidak valid.",
            status_code=HTTPStatus.UNAUTHORIZED,
            details=details or {},
        )


class ForbiddenError(DomainError):
    """Raised when the request targets a learner other than the session one."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="FORBIDDEN",
            message=message or "NIS tidak sesuai sesi.",
            status_code=HTTPStatus.FORBIDDEN,
            details=details or {},
        )


class RateLimitedError(DomainError):
    """Raised when a caller exceeds the login attempt budget."""

    def __init__(
        self,
        *,
        retry_after_seconds: int,
        message: str | None = None,
    ) -> None:
        super().__init__(
            code="RATE_LIMITED",
            message=message
            or compose_error_message(
                cause="Too many login attempts.",
                action=f"Wait {retry_after_seconds} seconds and try again.",
            ),
            status_code=HTTPStatus.TOO_MANY_REQUESTS,
            details={"retry_after_seconds": retry_after_seconds},
        )


class WebhookUnauthorizedError(DomainError):
    """Raised when no presented webhook credential matches a secret."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="UNAUTHORIZED_WEBHOOK",
            message=message or "Unauthorized webhook",
            status_code=HTTPStatus.UNAUTHORIZED,
            details=details
            or {"reason": "Invalid webhook secret or bearer token"},
        )


class ConfigurationError(DomainError):
    """Raised when a required secret or credential is not configured."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        *,
        code: str = "CONFIGURATION_ERROR",
    ) -> None:
        super().__init__(
            code=code,
            message=message
            or compose_error_message(
                cause="A required server credential is not configured.",
                action="Set the missing environment variable and restart.",
            ),
            status_code=HTTPStatus.SERVICE_UNAVAILABLE,
            details=details or {},
        )


class WebhookConfigurationError(ConfigurationError):
    """Raised when no webhook secret is configured; the gate fails closed."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message=message
            or compose_error_message(
                cause="Missing webhook auth secret.",
                action=(
                    "Set SUPABASE_WEBHOOK_SECRET or SUPABASE_SERVICE_ROLE_KEY."
                ),
            ),
            code="WEBHOOK_NOT_CONFIGURED",
        )


class LearnerNotFoundError(DomainError):
    """Raised when the learner record behind a request cannot be loaded."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="LEARNER_UNAVAILABLE",
            message=message or "Gagal memuat data siswa.",
            status_code=HTTPStatus.SERVICE_UNAVAILABLE,
            details=details or {},
        )


class DataUnavailableError(DomainError):
    """Raised when a required read against the data store fails."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="DATA_UNAVAILABLE",
            message=message or "Gagal memuat dashboard. Silakan coba lagi.",
            status_code=HTTPStatus.SERVICE_UNAVAILABLE,
            details=details or {},
        )


class PushDeliveryError(DomainError):
    """Raised after a failed push delivery so the relay retries the call."""

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            code="PUSH_DELIVERY_FAILED",
            message=message or "Push send failed",
            status_code=HTTPStatus.SERVICE_UNAVAILABLE,
            details=details or {},
        )
