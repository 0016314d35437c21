"""Session-scoped push routes: self-test and device registration."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Body, Depends

from mykahfi_portal.api.dependencies import (
    get_app_settings,
    get_device_service,
    get_notification_dispatcher,
)
from mykahfi_portal.api.schemas.auth import OkResponse
from mykahfi_portal.api.schemas.push import (
    DebugConfigResponse,
    DevicesResponse,
    OneSignalConfigStatus,
    PushTestRequest,
    PushTestResponse,
    RegisterDeviceRequest,
)
from mykahfi_portal.api.session import require_session_nis
from mykahfi_portal.core.settings import Settings
from mykahfi_portal.domain.errors import ForbiddenError
from mykahfi_portal.services.device_service import DeviceService, RegisterDeviceInput
from mykahfi_portal.services.notification_dispatcher import NotificationDispatcher

router = APIRouter(prefix="/push", tags=["Push"])


@router.post(
    "/test",
    response_model=PushTestResponse,
    responses={
        401: {"description": "Sesi tidak valid"},
        403: {"description": "NIS tidak sesuai sesi"},
        503: {"description": "Push gagal dikirim"},
    },
)
def send_test_push(
    session_nis: Annotated[str, Depends(require_session_nis)],
    dispatcher: Annotated[
        NotificationDispatcher,
        Depends(get_notification_dispatcher),
    ],
    payload: Annotated[PushTestRequest | None, Body()] = None,
) -> PushTestResponse:
    """Send a test notification to the logged-in guardian's devices."""

    requested_nis = (payload.nis or "").strip() if payload else ""
    nis = requested_nis or session_nis
    if nis != session_nis:
        raise ForbiddenError()

    outcome = dispatcher.send_test_notification(nis)
    return PushTestResponse(notification_id=outcome.notification_id)


@router.post(
    "/register-device",
    response_model=OkResponse,
    responses={
        400: {"description": "Data tidak lengkap atau platform tidak valid"},
        401: {"description": "Sesi tidak valid"},
        403: {"description": "NIS tidak sesuai sesi"},
        503: {"description": "Gagal mendaftarkan perangkat"},
    },
)
def register_device(
    session_nis: Annotated[str, Depends(require_session_nis)],
    service: Annotated[DeviceService, Depends(get_device_service)],
    payload: Annotated[RegisterDeviceRequest | None, Body()] = None,
) -> OkResponse:
    """Store the browser subscription and link it to the guardian's NIS."""

    payload = payload or RegisterDeviceRequest()
    service.register(
        session_nis,
        RegisterDeviceInput(
            nis=(payload.nis or "").strip(),
            subscription_id=(payload.onesignal_subscription_id or "").strip(),
            platform=(payload.platform or "").strip(),
            external_id=(payload.external_id or "").strip(),
        ),
    )
    return OkResponse()


@router.get(
    "/devices",
    response_model=DevicesResponse,
    responses={
        401: {"description": "Sesi tidak valid"},
        503: {"description": "Gagal memuat daftar perangkat"},
    },
)
def list_devices(
    session_nis: Annotated[str, Depends(require_session_nis)],
    service: Annotated[DeviceService, Depends(get_device_service)],
) -> DevicesResponse:
    return DevicesResponse.from_models(session_nis, service.list_devices(session_nis))


@router.get(
    "/debug-config",
    response_model=DebugConfigResponse,
    responses={401: {"description": "Sesi tidak valid"}},
)
def read_push_config(
    _session_nis: Annotated[str, Depends(require_session_nis)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> DebugConfigResponse:
    """Report whether OneSignal credentials are set, without exposing them."""

    return DebugConfigResponse(
        onesignal=OneSignalConfigStatus.from_values(
            settings.onesignal_app_id,
            settings.onesignal_rest_api_key,
        )
    )
