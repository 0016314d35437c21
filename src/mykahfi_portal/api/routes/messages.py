"""Announcement read receipts."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Body, Depends

from mykahfi_portal.api.schemas.auth import OkResponse
from mykahfi_portal.api.schemas.messages import MarkReadRequest
from mykahfi_portal.api.session import require_session_nis
from mykahfi_portal.domain.errors import ForbiddenError, InvalidRequestError

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.post(
    "/mark-read",
    response_model=OkResponse,
    responses={
        400: {"description": "Data tidak lengkap"},
        401: {"description": "Sesi tidak valid"},
        403: {"description": "NIS tidak sesuai sesi"},
    },
)
def mark_message_read(
    session_nis: Annotated[str, Depends(require_session_nis)],
    payload: Annotated[MarkReadRequest | None, Body()] = None,
) -> OkResponse:
    """Acknowledge a read receipt; read state is kept on the client."""

    payload = payload or MarkReadRequest()
    nis = (payload.nis or "").strip()
    message_hash = (payload.last_read_message_hash or "").strip()
    if not nis or not message_hash:
        raise InvalidRequestError(message="Data tidak lengkap.")
    if nis != session_nis:
        raise ForbiddenError()
    return OkResponse()
