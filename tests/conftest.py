from __future__ import annotations

from collections.abc import Generator, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from mykahfi_portal.api.app import create_app
from mykahfi_portal.api.dependencies import get_push_client
from mykahfi_portal.core.settings import Settings
from mykahfi_portal.db.base import Base, import_orm_models
from mykahfi_portal.db.models.learner import Learner
from mykahfi_portal.db.models.payment_transaction import PaymentTransaction
from mykahfi_portal.db.session import get_db_session, get_session_factory
from mykahfi_portal.domain.passwords import hash_password
from mykahfi_portal.infrastructure.push.onesignal import PushResult

WEBHOOK_SECRET = "whsec-test-secret"
SERVICE_ROLE_KEY = "service-role-test-key"
LEARNER_NIS = "123456"
LEARNER_PASSWORD = "rahasia-ortu"


@dataclass
class FakePushClient:
    result: PushResult = field(
        default_factory=lambda: PushResult(success=True, id="push-001")
    )
    provider: str = "onesignal"
    calls: list[dict[str, object]] = field(default_factory=list)
    external_id_result: bool = True
    external_id_calls: list[tuple[str, str]] = field(default_factory=list)

    def send_notification(
        self,
        *,
        external_user_ids: Sequence[str],
        title: str,
        body: str,
        data: Mapping[str, str] | None = None,
    ) -> PushResult:
        self.calls.append(
            {
                "external_user_ids": list(external_user_ids),
                "title": title,
                "body": body,
                "data": dict(data or {}),
            }
        )
        return self.result

    def set_external_id(self, subscription_id: str, external_id: str) -> bool:
        self.external_id_calls.append((subscription_id, external_id))
        return self.external_id_result


@pytest.fixture
def sqlite_session_factory(
    tmp_path: Path,
) -> Generator[sessionmaker[Session], None, None]:
    import_orm_models()
    engine = create_engine(
        f"sqlite+pysqlite:///{tmp_path / 'portal.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    factory = sessionmaker(
        bind=engine,
        class_=Session,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
    )
    try:
        yield factory
    finally:
        Base.metadata.drop_all(engine)
        engine.dispose()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database_url="sqlite+pysqlite:///:memory:",
        webhook_secret=WEBHOOK_SECRET,
        service_role_key=SERVICE_ROLE_KEY,
        onesignal_app_id="test-app",
        onesignal_rest_api_key="test-key",
        session_secret="s" * 48,
        session_cookie_secure=False,
        login_rate_limit=3,
        login_rate_window_seconds=60,
        dashboard_cache_seconds=30,
    )


@pytest.fixture
def push_client() -> FakePushClient:
    return FakePushClient()


@pytest.fixture
def client(
    sqlite_session_factory: sessionmaker[Session],
    settings: Settings,
    push_client: FakePushClient,
) -> Generator[TestClient, None, None]:
    app = create_app(settings)

    def override_get_db_session() -> Generator[Session, None, None]:
        with sqlite_session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session
    app.dependency_overrides[get_session_factory] = lambda: sqlite_session_factory
    app.dependency_overrides[get_push_client] = lambda: push_client
    with TestClient(app) as test_client:
        yield test_client


def seed_learner(
    session: Session,
    *,
    nis: str = LEARNER_NIS,
    password: str | None = None,
    msg_app: str | None = None,
) -> Learner:
    learner = Learner(
        nis=nis,
        password=password or hash_password(LEARNER_PASSWORD, rounds=4),
        nama_siswa="Ahmad Fauzan",
        jenjang="SMP",
        msg_app=msg_app,
    )
    session.add(learner)
    session.commit()
    return learner


def make_transaction(
    idtrx: str,
    *,
    sortasi: int | None,
    tgl_trx: date,
    nominal: str = "150000",
    nis: str = LEARNER_NIS,
) -> PaymentTransaction:
    return PaymentTransaction(
        idtrx=idtrx,
        idtag=f"tag-{idtrx}",
        nis=nis,
        nama="Ahmad Fauzan",
        bulan=None,
        nominal=Decimal(nominal),
        tgl_trx=tgl_trx,
        jenjang="SMP",
        sortasi=sortasi,
    )


@pytest.fixture
def learner(sqlite_session_factory: sessionmaker[Session]) -> str:
    with sqlite_session_factory() as session:
        seed_learner(session)
    return LEARNER_NIS


@pytest.fixture
def logged_in_client(client: TestClient, learner: str) -> TestClient:
    response = client.post(
        "/api/auth/login",
        json={"nis": learner, "password": LEARNER_PASSWORD},
    )
    assert response.status_code == 200
    return client
