"""Dashboard route."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from mykahfi_portal.api.dependencies import get_app_settings, get_dashboard_service
from mykahfi_portal.api.schemas.dashboard import DashboardResponse
from mykahfi_portal.api.session import require_session_nis
from mykahfi_portal.core.settings import Settings
from mykahfi_portal.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get(
    "",
    response_model=DashboardResponse,
    responses={
        401: {"description": "Sesi tidak valid"},
        503: {"description": "Data siswa tidak dapat dimuat"},
    },
)
async def get_dashboard(
    response: Response,
    nis: Annotated[str, Depends(require_session_nis)],
    service: Annotated[DashboardService, Depends(get_dashboard_service)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> DashboardResponse:
    """Return profile, eleven payment months, announcement and contacts."""

    view = await service.load(nis)
    response.headers["Cache-Control"] = (
        f"private, max-age={settings.dashboard_cache_seconds}"
    )
    return DashboardResponse.from_view(view)
