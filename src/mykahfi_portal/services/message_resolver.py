"""Resolves the current school announcement for a learner."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Protocol

from mykahfi_portal.repositories.message_repository import (
    PrimaryMessageTableMissingError,
)

logger = logging.getLogger(__name__)


class MessageRepositoryProtocol(Protocol):
    """Announcement read contract used by the resolver."""

    def get_latest_active_text(self, nis: str) -> str | None: ...

    def get_legacy_text(self, nis: str) -> str | None: ...


class MessageSource(enum.StrEnum):
    """Where the resolved announcement text came from."""

    PRIMARY = "primary"
    LEGACY = "legacy"
    NONE = "none"


@dataclass(frozen=True, slots=True)
class ResolvedMessage:
    """Announcement text plus provenance kept for diagnostics."""

    text: str | None
    source: MessageSource
    primary_table_missing: bool = False


def normalize_message(value: str | None) -> str | None:
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


class MessageResolver:
    """Primary per-message table first, legacy learner field second."""

    def __init__(self, *, message_repository: MessageRepositoryProtocol) -> None:
        self._message_repository = message_repository

    def resolve_latest_message(self, nis: str) -> ResolvedMessage:
        primary_table_missing = False
        try:
            primary_text = normalize_message(
                self._message_repository.get_latest_active_text(nis)
            )
        except PrimaryMessageTableMissingError:
            primary_table_missing = True
            primary_text = None
            logger.warning("primary_message_table_missing", extra={"nis": nis})

        if primary_text is not None:
            resolved = ResolvedMessage(text=primary_text, source=MessageSource.PRIMARY)
        else:
            legacy_text = normalize_message(
                self._message_repository.get_legacy_text(nis)
            )
            resolved = ResolvedMessage(
                text=legacy_text,
                source=MessageSource.LEGACY
                if legacy_text is not None
                else MessageSource.NONE,
                primary_table_missing=primary_table_missing,
            )

        logger.info(
            "message_resolved",
            extra={
                "nis": nis,
                "source": resolved.source.value,
                "primary_table_missing": resolved.primary_table_missing,
            },
        )
        return resolved
