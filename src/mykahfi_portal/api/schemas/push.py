"""Schemas for push endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel

from mykahfi_portal.db.models.user_device import UserDevice
from mykahfi_portal.domain.masking import mask_identifier, mask_secret


class PushTestRequest(BaseModel):
    nis: str | None = None


class PushTestResponse(BaseModel):
    ok: bool = True
    notification_id: str | None


class RegisterDeviceRequest(BaseModel):
    """Browser subscription reported by the client SDK after opt-in."""

    nis: str | None = None
    onesignal_subscription_id: str | None = None
    platform: str | None = None
    external_id: str | None = None


class DeviceResponse(BaseModel):
    platform: str
    is_active: bool
    external_id: str
    subscription_id_masked: str
    last_seen_at: datetime | None
    updated_at: datetime | None
    created_at: datetime | None

    @classmethod
    def from_model(cls, device: UserDevice) -> DeviceResponse:
        return cls(
            platform=device.platform,
            is_active=device.is_active,
            external_id=device.external_id,
            subscription_id_masked=mask_identifier(device.onesignal_subscription_id),
            last_seen_at=device.last_seen_at,
            updated_at=device.updated_at,
            created_at=device.created_at,
        )


class DevicesResponse(BaseModel):
    """Registered devices of the logged-in guardian."""

    ok: bool = True
    nis: str
    total_devices: int
    active_devices: int
    devices: list[DeviceResponse]

    @classmethod
    def from_models(cls, nis: str, devices: list[UserDevice]) -> DevicesResponse:
        items = [DeviceResponse.from_model(device) for device in devices]
        return cls(
            nis=nis,
            total_devices=len(items),
            active_devices=sum(1 for item in items if item.is_active),
            devices=items,
        )


class OneSignalConfigStatus(BaseModel):
    app_id_configured: bool
    rest_api_key_configured: bool
    app_id_masked: str | None
    rest_api_key_masked: str | None

    @classmethod
    def from_values(
        cls,
        app_id: str | None,
        rest_api_key: str | None,
    ) -> OneSignalConfigStatus:
        return cls(
            app_id_configured=bool(app_id),
            rest_api_key_configured=bool(rest_api_key),
            app_id_masked=mask_secret(app_id),
            rest_api_key_masked=mask_secret(rest_api_key),
        )


class DebugConfigResponse(BaseModel):
    ok: bool = True
    onesignal: OneSignalConfigStatus
