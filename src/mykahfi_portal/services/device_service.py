"""Guardian push device registration."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol

from mykahfi_portal.db.models.user_device import UserDevice
from mykahfi_portal.domain.errors import ForbiddenError, InvalidRequestError
from mykahfi_portal.infrastructure.push.onesignal import PushClient

logger = logging.getLogger(__name__)

ALLOWED_PLATFORMS = ("ios_web", "android_web", "desktop_web")


class DeviceRepositoryProtocol(Protocol):
    """Device persistence contract used by registration."""

    def upsert_device(
        self,
        *,
        nis: str,
        subscription_id: str,
        external_id: str,
        platform: str,
        seen_at: datetime,
    ) -> UserDevice: ...

    def list_for_learner(self, nis: str) -> list[UserDevice]: ...


@dataclass(frozen=True, slots=True)
class RegisterDeviceInput:
    nis: str
    subscription_id: str
    platform: str
    external_id: str = ""


class DeviceService:
    """Records browser subscriptions and links them to the learner's NIS."""

    def __init__(
        self,
        *,
        device_repository: DeviceRepositoryProtocol,
        push_client: PushClient,
    ) -> None:
        self._device_repository = device_repository
        self._push_client = push_client

    def register(self, session_nis: str, payload: RegisterDeviceInput) -> UserDevice:
        if not payload.nis or not payload.subscription_id or not payload.platform:
            raise InvalidRequestError(message="Data tidak lengkap.")
        if payload.nis != session_nis:
            raise ForbiddenError()
        if payload.platform not in ALLOWED_PLATFORMS:
            raise InvalidRequestError(message="Platform tidak valid.")

        external_id = payload.external_id or payload.nis
        device = self._device_repository.upsert_device(
            nis=payload.nis,
            subscription_id=payload.subscription_id,
            external_id=external_id,
            platform=payload.platform,
            seen_at=datetime.now(tz=UTC),
        )

        if not self._push_client.set_external_id(payload.subscription_id, external_id):
            logger.warning(
                "push_external_id_not_set",
                extra={"nis": payload.nis, "platform": payload.platform},
            )
        logger.info(
            "push_device_registered",
            extra={"nis": payload.nis, "platform": payload.platform},
        )
        return device

    def list_devices(self, nis: str) -> list[UserDevice]:
        return self._device_repository.list_for_learner(nis)
