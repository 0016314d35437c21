from __future__ import annotations

import httpx
from conftest import FakePushClient
from fastapi.testclient import TestClient
from sqlalchemy import func, select, text
from sqlalchemy.orm import Session, sessionmaker

from mykahfi_portal.db.models.user_device import UserDevice

SUBSCRIPTION_ID = "5f1c2b7a-0d3e-4c9b-8a61-2f7e9d4c1b08"


def register(client: TestClient, **overrides: object) -> httpx.Response:
    payload: dict[str, object] = {
        "nis": "123456",
        "onesignal_subscription_id": SUBSCRIPTION_ID,
        "platform": "android_web",
    }
    payload.update(overrides)
    return client.post("/api/push/register-device", json=payload)


def test_device_routes_require_session(client: TestClient) -> None:
    assert register(client).status_code == 401
    assert client.get("/api/push/devices").status_code == 401
    assert client.get("/api/push/debug-config").status_code == 401


def test_register_device_with_missing_fields_is_rejected(
    logged_in_client: TestClient,
) -> None:
    response = register(logged_in_client, platform=None)

    assert response.status_code == 400
    assert response.json()["error"] == "Data tidak lengkap."


def test_register_device_for_other_learner_is_forbidden(
    logged_in_client: TestClient,
    push_client: FakePushClient,
) -> None:
    response = register(logged_in_client, nis="654321")

    assert response.status_code == 403
    assert response.json()["error"] == "NIS tidak sesuai sesi."
    assert push_client.external_id_calls == []


def test_register_device_with_unknown_platform_is_rejected(
    logged_in_client: TestClient,
) -> None:
    response = register(logged_in_client, platform="ios_app")

    assert response.status_code == 400
    assert response.json()["error"] == "Platform tidak valid."


def test_register_device_stores_row_and_links_external_id(
    logged_in_client: TestClient,
    push_client: FakePushClient,
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    response = register(logged_in_client)

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert push_client.external_id_calls == [(SUBSCRIPTION_ID, "123456")]
    with sqlite_session_factory() as session:
        device = session.scalars(select(UserDevice)).one()
    assert device.nis == "123456"
    assert device.external_id == "123456"
    assert device.platform == "android_web"
    assert device.is_active


def test_register_device_twice_updates_the_same_row(
    logged_in_client: TestClient,
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    assert register(logged_in_client).status_code == 200
    assert register(logged_in_client, external_id="wali-123456").status_code == 200

    with sqlite_session_factory() as session:
        total = session.scalar(select(func.count()).select_from(UserDevice))
        device = session.scalars(select(UserDevice)).one()
    assert total == 1
    assert device.external_id == "wali-123456"


def test_register_device_storage_failure_returns_503(
    logged_in_client: TestClient,
    push_client: FakePushClient,
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    with sqlite_session_factory() as session:
        session.execute(text("DROP TABLE user_devices_web"))
        session.commit()

    response = register(logged_in_client)

    assert response.status_code == 503
    assert response.json()["error"] == "Gagal mendaftarkan perangkat."
    assert push_client.external_id_calls == []


def test_devices_lists_session_devices_with_masked_ids(
    logged_in_client: TestClient,
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    assert register(logged_in_client).status_code == 200
    assert (
        register(
            logged_in_client,
            onesignal_subscription_id="short",
            platform="desktop_web",
        ).status_code
        == 200
    )
    with sqlite_session_factory() as session:
        device = session.scalars(
            select(UserDevice).where(UserDevice.platform == "android_web")
        ).one()
        device.is_active = False
        session.add(
            UserDevice(
                nis="654321",
                onesignal_subscription_id="other-learner-subscription",
                external_id="654321",
                platform="ios_web",
                last_seen_at=device.last_seen_at,
            )
        )
        session.commit()

    response = logged_in_client.get("/api/push/devices")

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["nis"] == "123456"
    assert body["total_devices"] == 2
    assert body["active_devices"] == 1
    assert [device["platform"] for device in body["devices"]] == [
        "desktop_web",
        "android_web",
    ]
    assert [device["subscription_id_masked"] for device in body["devices"]] == [
        "*****",
        "5f1c...1b08",
    ]
    assert body["devices"][0]["external_id"] == "123456"
    assert set(body["devices"][0]) == {
        "platform",
        "is_active",
        "external_id",
        "subscription_id_masked",
        "last_seen_at",
        "updated_at",
        "created_at",
    }


def test_devices_storage_failure_returns_503(
    logged_in_client: TestClient,
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    with sqlite_session_factory() as session:
        session.execute(text("DROP TABLE user_devices_web"))
        session.commit()

    response = logged_in_client.get("/api/push/devices")

    assert response.status_code == 503
    assert response.json()["error"] == "Gagal memuat daftar perangkat."
