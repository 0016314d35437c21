"""Normalization of change-capture webhook bodies.

Trigger and relay configurations deliver the same row change in different
shapes: fields at the top level, wrapped in a ``payload`` envelope, or under
``record`` / ``new_record`` / ``new``. Every shape is read through
``ChangeEventShape`` and resolved by one ordered fallback list.
"""

from __future__ import annotations

import enum
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


class ChangeEventType(enum.StrEnum):
    """Row-level change kinds reported by the upstream trigger."""

    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: str) -> ChangeEventType:
        try:
            return cls(value.strip().upper())
        except ValueError:
            return cls.UNKNOWN


def _as_mapping(value: object) -> dict[str, Any]:
    if isinstance(value, Mapping):
        return dict(value)
    return {}


def _as_text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True, slots=True)
class ChangeEventShape:
    """Named optional shapes a change event may arrive in."""

    raw: dict[str, Any]
    record: dict[str, Any]
    new_record: dict[str, Any]
    new: dict[str, Any]
    old_record: dict[str, Any]
    old: dict[str, Any]
    type: str
    table: str

    @classmethod
    def from_mapping(cls, value: object) -> ChangeEventShape:
        raw = _as_mapping(value)
        return cls(
            raw=raw,
            record=_as_mapping(raw.get("record")),
            new_record=_as_mapping(raw.get("new_record")),
            new=_as_mapping(raw.get("new")),
            old_record=_as_mapping(raw.get("old_record")),
            old=_as_mapping(raw.get("old")),
            type=_as_text(raw.get("type")),
            table=_as_text(raw.get("table")),
        )


def first_non_empty(*candidates: dict[str, Any]) -> dict[str, Any]:
    """Return the first non-empty mapping, or an empty one."""

    for candidate in candidates:
        if candidate:
            return candidate
    return {}


@dataclass(frozen=True, slots=True)
class WebhookEnvelope:
    """Canonical form of one inbound change notification."""

    event_type: ChangeEventType
    table: str | None
    record: dict[str, Any]
    old_record: dict[str, Any]
    payload: dict[str, Any] = field(default_factory=dict)
    envelope: dict[str, Any] = field(default_factory=dict)

    @property
    def raw_event_type(self) -> str | None:
        if self.event_type is ChangeEventType.UNKNOWN:
            return None
        return self.event_type.value


def parse_webhook_body(body: bytes | str | None) -> dict[str, Any]:
    """Decode a JSON object body; anything else becomes an empty mapping."""

    if not body:
        return {}
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return {}
    try:
        decoded = json.loads(body)
    except ValueError:
        return {}
    return _as_mapping(decoded)


def normalize_change_event(payload: Mapping[str, Any]) -> WebhookEnvelope:
    top = ChangeEventShape.from_mapping(payload)
    nested = ChangeEventShape.from_mapping(top.raw.get("payload"))

    record = first_non_empty(
        nested.record,
        nested.new_record,
        nested.new,
        top.record,
        top.new_record,
        top.new,
        nested.raw,
        top.raw,
    )
    old_record = first_non_empty(
        nested.old_record,
        nested.old,
        top.old_record,
        top.old,
    )
    return WebhookEnvelope(
        event_type=ChangeEventType.parse(top.type or nested.type),
        table=top.table or nested.table or None,
        record=record,
        old_record=old_record,
        payload=top.raw,
        envelope=nested.raw,
    )
