"""Login and logout routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from mykahfi_portal.api.dependencies import get_auth_service
from mykahfi_portal.api.schemas.auth import (
    LoggedInUser,
    LoginRequest,
    LoginResponse,
    OkResponse,
)
from mykahfi_portal.api.session import end_session, start_session
from mykahfi_portal.services.auth_service import AuthService, LoginInput

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "NIS atau password tidak valid"},
        401: {"description": "NIS atau password salah"},
        429: {"description": "Terlalu banyak percobaan login"},
    },
)
def login(
    payload: LoginRequest,
    request: Request,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> LoginResponse:
    """Verify guardian credentials and start a cookie session."""

    learner = service.login(
        LoginInput(
            nis=payload.nis,
            password=payload.password,
            client_address=request.client.host if request.client else "unknown",
            user_agent=request.headers.get("user-agent", "unknown"),
        )
    )
    start_session(request, learner)
    return LoginResponse(
        user=LoggedInUser(nis=learner.nis, nama_siswa=learner.nama_siswa)
    )


@router.post("/logout", response_model=OkResponse)
def logout(request: Request) -> OkResponse:
    """Clear the guardian session."""

    end_session(request)
    return OkResponse()
