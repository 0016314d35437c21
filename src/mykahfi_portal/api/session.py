"""Cookie session helpers for guardian-facing endpoints."""

from __future__ import annotations

from fastapi import Request

from mykahfi_portal.domain.errors import SessionRequiredError
from mykahfi_portal.services.auth_service import AuthenticatedLearner

SESSION_COOKIE_NAME = "mykahfi_session"
SESSION_MAX_AGE_SECONDS = 60 * 60 * 24 * 7
MIN_SESSION_SECRET_LENGTH = 32


def start_session(request: Request, learner: AuthenticatedLearner) -> None:
    request.session.clear()
    request.session.update(
        {
            "nis": learner.nis,
            "nama_siswa": learner.nama_siswa,
            "jenjang": learner.jenjang,
            "is_logged_in": True,
        }
    )


def end_session(request: Request) -> None:
    request.session.clear()


def require_session_nis(request: Request) -> str:
    """Return the NIS of the logged-in guardian or fail with 401."""

    nis = request.session.get("nis")
    if not request.session.get("is_logged_in") or not isinstance(nis, str) or not nis:
        raise SessionRequiredError()
    return nis
