"""Guardian login against learner accounts."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from sqlalchemy.orm import Session

from mykahfi_portal.db.models.learner import Learner
from mykahfi_portal.domain.errors import InvalidCredentialsError, RateLimitedError
from mykahfi_portal.domain.passwords import verify_password
from mykahfi_portal.domain.rate_limit import FixedWindowRateLimiter

logger = logging.getLogger(__name__)

WEB_APP_VERSION = "web-1.0.0"


class LearnerRepositoryProtocol(Protocol):
    """Learner account contract used by the login flow."""

    def find_by_nis(self, nis: str) -> Learner | None: ...

    def record_login(
        self,
        nis: str,
        *,
        logged_in_at: datetime,
        device: str,
        app_version: str,
    ) -> None: ...


@dataclass(frozen=True, slots=True)
class LoginInput:
    nis: str
    password: str
    client_address: str
    user_agent: str


@dataclass(frozen=True, slots=True)
class AuthenticatedLearner:
    nis: str
    nama_siswa: str
    jenjang: str | None


class AuthService:
    """Verifies credentials, applies the login rate limit, audits logins."""

    def __init__(
        self,
        *,
        learner_repository: LearnerRepositoryProtocol,
        rate_limiter: FixedWindowRateLimiter,
        session: Session,
    ) -> None:
        self._learner_repository = learner_repository
        self._rate_limiter = rate_limiter
        self._session = session

    def login(self, payload: LoginInput) -> AuthenticatedLearner:
        rate_key = f"login:{payload.client_address}:{payload.nis}"
        decision = self._rate_limiter.hit(rate_key)
        if not decision.allowed:
            logger.warning(
                "login_rate_limited",
                extra={"nis": payload.nis, "client": payload.client_address},
            )
            raise RateLimitedError(retry_after_seconds=decision.retry_after_seconds)

        learner = self._learner_repository.find_by_nis(payload.nis)
        if learner is None or not verify_password(payload.password, learner.password):
            logger.info("login_rejected", extra={"nis": payload.nis})
            raise InvalidCredentialsError()

        try:
            self._learner_repository.record_login(
                learner.nis,
                logged_in_at=datetime.now(tz=UTC),
                device=payload.user_agent or "unknown",
                app_version=WEB_APP_VERSION,
            )
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

        self._rate_limiter.reset(rate_key)
        logger.info("login_succeeded", extra={"nis": learner.nis})
        return AuthenticatedLearner(
            nis=learner.nis,
            nama_siswa=learner.nama_siswa,
            jenjang=learner.jenjang,
        )
