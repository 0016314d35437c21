"""Schemas for announcement endpoints."""

from __future__ import annotations

from pydantic import BaseModel


class MarkReadRequest(BaseModel):
    nis: str | None = None
    last_read_message_hash: str | None = None
