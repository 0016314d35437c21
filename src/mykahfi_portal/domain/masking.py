"""Masking of identifiers and credentials shown on diagnostic endpoints."""

from __future__ import annotations

MASK_KEEP = 4


def mask_identifier(value: str | None) -> str:
    """Keep the first and last four characters of a subscription id.

    Values too short to keep both ends are starred out entirely.
    """

    if not value:
        return ""
    if len(value) <= MASK_KEEP * 2:
        return "*" * len(value)
    return f"{value[:MASK_KEEP]}...{value[-MASK_KEEP:]}"


def mask_secret(value: str | None) -> str | None:
    if not value:
        return None
    if len(value) <= MASK_KEEP * 2:
        return "****"
    return f"{value[:MASK_KEEP]}...{value[-MASK_KEEP:]}"
