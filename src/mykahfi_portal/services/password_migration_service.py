"""Batch migration of legacy plaintext passwords to bcrypt hashes."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from mykahfi_portal.domain.passwords import hash_password, is_bcrypt_hash

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 200


class CredentialRepositoryProtocol(Protocol):
    """Credential read/write contract used by the migration."""

    def list_credentials_page(
        self, *, offset: int, limit: int
    ) -> list[tuple[str, str]]: ...

    def update_password(self, nis: str, password_hash: str) -> None: ...


@dataclass(slots=True)
class MigrationSummary:
    scanned: int = 0
    already_hashed: int = 0
    plaintext_candidates: int = 0
    migrated: int = 0
    failures: int = 0


class PasswordMigrationService:
    """Hashes every plaintext password, batch by batch, ordered by NIS."""

    def __init__(
        self,
        *,
        credential_repository: CredentialRepositoryProtocol,
        session: Session,
        hasher: Callable[[str], str] = hash_password,
    ) -> None:
        self._credential_repository = credential_repository
        self._session = session
        self._hasher = hasher

    def migrate(
        self,
        *,
        dry_run: bool = False,
        batch_size: int = DEFAULT_BATCH_SIZE,
        limit: int | None = None,
    ) -> MigrationSummary:
        if batch_size <= 0:
            raise ValueError("Batch size must be greater than zero.")
        if limit is not None and limit <= 0:
            raise ValueError("Limit must be greater than zero.")

        summary = MigrationSummary()
        offset = 0
        while limit is None or summary.migrated < limit:
            credentials = self._credential_repository.list_credentials_page(
                offset=offset,
                limit=batch_size,
            )
            if not credentials:
                break

            for nis, password in credentials:
                summary.scanned += 1
                if not password:
                    continue
                if is_bcrypt_hash(password):
                    summary.already_hashed += 1
                    continue

                summary.plaintext_candidates += 1
                if limit is not None and summary.migrated >= limit:
                    continue
                if dry_run:
                    summary.migrated += 1
                    continue
                self._migrate_one(nis, password, summary)

            offset += len(credentials)

        logger.info(
            "password_migration_finished",
            extra={
                "dry_run": dry_run,
                "scanned": summary.scanned,
                "migrated": summary.migrated,
                "failures": summary.failures,
            },
        )
        return summary

    def _migrate_one(self, nis: str, password: str, summary: MigrationSummary) -> None:
        try:
            self._credential_repository.update_password(nis, self._hasher(password))
            self._session.commit()
        except (SQLAlchemyError, ValueError):
            self._session.rollback()
            summary.failures += 1
            logger.exception("password_migration_failed", extra={"nis": nis})
            return
        summary.migrated += 1
