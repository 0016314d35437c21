from __future__ import annotations

from mykahfi_portal.domain.passwords import is_bcrypt_hash
from mykahfi_portal.services.password_migration_service import PasswordMigrationService


class FakeSession:
    def __init__(self) -> None:
        self.commits = 0
        self.rollbacks = 0

    def commit(self) -> None:
        self.commits += 1

    def rollback(self) -> None:
        self.rollbacks += 1


class FakeCredentialRepository:
    def __init__(self, credentials: dict[str, str]) -> None:
        self.credentials = dict(sorted(credentials.items()))

    def list_credentials_page(
        self, *, offset: int, limit: int
    ) -> list[tuple[str, str]]:
        return list(self.credentials.items())[offset : offset + limit]

    def update_password(self, nis: str, password_hash: str) -> None:
        if self.credentials[nis] == "boom":
            raise ValueError("cannot hash")
        self.credentials[nis] = password_hash


def fake_hasher(plain: str) -> str:
    return f"$2b$04$hashed-{plain}"


def build_service(
    repository: FakeCredentialRepository,
) -> tuple[PasswordMigrationService, FakeSession]:
    session = FakeSession()
    service = PasswordMigrationService(
        credential_repository=repository,
        session=session,  # type: ignore[arg-type]
        hasher=fake_hasher,
    )
    return service, session


def test_migrate_hashes_only_plaintext_passwords() -> None:
    repository = FakeCredentialRepository(
        {
            "000001": "plain-1",
            "000002": "$2b$12$alreadyhashed",
            "000003": "",
            "000004": "plain-4",
        }
    )
    service, session = build_service(repository)

    summary = service.migrate(batch_size=2)

    assert summary.scanned == 4
    assert summary.already_hashed == 1
    assert summary.plaintext_candidates == 2
    assert summary.migrated == 2
    assert summary.failures == 0
    assert session.commits == 2
    assert all(
        is_bcrypt_hash(password)
        for nis, password in repository.credentials.items()
        if nis != "000003"
    )


def test_dry_run_counts_without_writing() -> None:
    repository = FakeCredentialRepository({"000001": "plain-1"})
    service, session = build_service(repository)

    summary = service.migrate(dry_run=True)

    assert summary.migrated == 1
    assert repository.credentials["000001"] == "plain-1"
    assert session.commits == 0


def test_limit_stops_after_enough_migrations() -> None:
    repository = FakeCredentialRepository(
        {"000001": "a", "000002": "b", "000003": "c"}
    )
    service, _ = build_service(repository)

    summary = service.migrate(batch_size=1, limit=2)

    assert summary.migrated == 2
    assert repository.credentials["000003"] == "c"


def test_failures_are_counted_and_rolled_back() -> None:
    repository = FakeCredentialRepository({"000001": "boom", "000002": "ok"})
    service, session = build_service(repository)

    summary = service.migrate()

    assert summary.failures == 1
    assert summary.migrated == 1
    assert session.rollbacks == 1
