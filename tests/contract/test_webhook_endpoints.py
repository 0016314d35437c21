from __future__ import annotations

import json

from conftest import SERVICE_ROLE_KEY, WEBHOOK_SECRET, FakePushClient
from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from mykahfi_portal.api.app import create_app
from mykahfi_portal.core.settings import Settings
from mykahfi_portal.db.models.notification_log import (
    NotificationLog,
    NotificationStatus,
)
from mykahfi_portal.infrastructure.push.onesignal import PushResult

SECRET_HEADERS = {"x-webhook-secret": WEBHOOK_SECRET}

PAYMENT_INSERT = {
    "type": "INSERT",
    "table": "transactions",
    "record": {
        "idtrx": "TRX-100",
        "idtag": "TAG-100",
        "nis": "123456",
        "nominal": 150000,
        "sortasi": 2,
    },
}


def stored_logs(factory: sessionmaker[Session]) -> list[NotificationLog]:
    with factory() as session:
        return list(session.scalars(select(NotificationLog)).all())


def test_webhook_without_credentials_is_rejected(
    client: TestClient,
    push_client: FakePushClient,
) -> None:
    response = client.post("/api/push/notify-payment", json=PAYMENT_INSERT)

    assert response.status_code == 401
    assert response.json()["error"] == "Unauthorized webhook"
    assert push_client.calls == []


def test_webhook_accepts_bearer_service_role_key(
    client: TestClient,
    push_client: FakePushClient,
) -> None:
    response = client.post(
        "/api/push/notify-message",
        json={"record": {"nis": "123456", "msg_app": "Halo"}},
        headers={"Authorization": f"Bearer {SERVICE_ROLE_KEY}"},
    )

    assert response.status_code == 200
    assert response.json() == {"ok": True, "notification_id": "push-001"}
    assert push_client.calls[0]["body"] == "Halo"


def test_webhook_without_configured_secret_fails_closed(settings: Settings) -> None:
    app = create_app(
        settings.model_copy(update={"webhook_secret": None, "service_role_key": None})
    )

    with TestClient(app) as test_client:
        response = test_client.post(
            "/api/push/notify-payment",
            json=PAYMENT_INSERT,
            headers=SECRET_HEADERS,
        )

    assert response.status_code == 503
    assert response.json()["code"] == "WEBHOOK_NOT_CONFIGURED"


def test_payment_webhook_sends_once_then_reports_duplicate(
    client: TestClient,
    push_client: FakePushClient,
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    first = client.post(
        "/api/push/notify-payment",
        json=PAYMENT_INSERT,
        headers=SECRET_HEADERS,
    )
    second = client.post(
        "/api/push/notify-payment",
        json=PAYMENT_INSERT,
        headers=SECRET_HEADERS,
    )

    assert first.status_code == 200
    assert first.json() == {
        "ok": True,
        "notification_id": "push-001",
        "idtrx": "TRX-100",
    }
    assert second.status_code == 200
    assert second.json() == {"ok": True, "skipped": "duplicate", "idtrx": "TRX-100"}
    assert len(push_client.calls) == 1
    assert push_client.calls[0]["body"] == (
        "Pembayaran AGU sebesar Rp 150.000 sudah diterima."
    )
    [log] = stored_logs(sqlite_session_factory)
    assert log.status is NotificationStatus.SENT
    assert log.payload["idtrx"] == "TRX-100"


def test_payment_webhook_failure_returns_503_and_audits(
    client: TestClient,
    push_client: FakePushClient,
    sqlite_session_factory: sessionmaker[Session],
) -> None:
    push_client.result = PushResult(success=False, error="Invalid app_id")

    response = client.post(
        "/api/push/notify-payment",
        json=PAYMENT_INSERT,
        headers=SECRET_HEADERS,
    )

    assert response.status_code == 503
    assert response.json()["error"] == "Invalid app_id"
    [log] = stored_logs(sqlite_session_factory)
    assert log.status is NotificationStatus.FAILED
    assert log.error_message == "Invalid app_id"


def test_failed_payment_is_retried_on_next_delivery(
    client: TestClient,
    push_client: FakePushClient,
) -> None:
    push_client.result = PushResult(success=False, error="timeout")
    client.post("/api/push/notify-payment", json=PAYMENT_INSERT, headers=SECRET_HEADERS)
    push_client.result = PushResult(success=True, id="push-002")

    retry = client.post(
        "/api/push/notify-payment",
        json=PAYMENT_INSERT,
        headers=SECRET_HEADERS,
    )

    assert retry.json()["notification_id"] == "push-002"
    assert len(push_client.calls) == 2


def test_message_webhook_tolerates_malformed_body(
    client: TestClient,
    push_client: FakePushClient,
) -> None:
    response = client.post(
        "/api/push/notify-message",
        content=b"{not json",
        headers={**SECRET_HEADERS, "content-type": "application/json"},
    )

    assert response.status_code == 200
    assert response.json() == {"ok": True, "skipped": "missing_nis"}
    assert push_client.calls == []


def test_message_webhook_reads_nested_payload(
    client: TestClient,
    push_client: FakePushClient,
) -> None:
    body = {
        "payload": {
            "type": "INSERT",
            "table": "user_messages_web",
            "record": {"nis": "123456", "message_text": "  Ujian   akhir  "},
        }
    }

    response = client.post(
        "/api/push/notify-message",
        content=json.dumps(body),
        headers=SECRET_HEADERS,
    )

    assert response.status_code == 200
    assert push_client.calls[0]["body"] == "Ujian akhir"
