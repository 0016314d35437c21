"""Registered push device persistence operations."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mykahfi_portal.db.models.user_device import UserDevice
from mykahfi_portal.domain.errors import DataUnavailableError


class DeviceRepository:
    """Repository for guardian push subscriptions."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def upsert_device(
        self,
        *,
        nis: str,
        subscription_id: str,
        external_id: str,
        platform: str,
        seen_at: datetime,
    ) -> UserDevice:
        """Insert or refresh the row keyed by subscription id and platform."""

        statement = select(UserDevice).where(
            UserDevice.onesignal_subscription_id == subscription_id,
            UserDevice.platform == platform,
        )
        try:
            device = self._session.scalars(statement).first()
            if device is None:
                device = UserDevice(
                    onesignal_subscription_id=subscription_id,
                    platform=platform,
                )
                self._session.add(device)
            device.nis = nis
            device.external_id = external_id
            device.is_active = True
            device.last_seen_at = seen_at
            device.updated_at = seen_at
            self._session.commit()
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise DataUnavailableError(
                message="Gagal mendaftarkan perangkat.",
                details={"source": "user_devices_web"},
            ) from exc
        return device

    def list_for_learner(self, nis: str) -> list[UserDevice]:
        statement = (
            select(UserDevice)
            .where(UserDevice.nis == nis)
            .order_by(UserDevice.last_seen_at.desc(), UserDevice.id.desc())
        )
        try:
            return list(self._session.scalars(statement).all())
        except SQLAlchemyError as exc:
            self._session.rollback()
            raise DataUnavailableError(
                message="Gagal memuat daftar perangkat.",
                details={"source": "user_devices_web"},
            ) from exc
