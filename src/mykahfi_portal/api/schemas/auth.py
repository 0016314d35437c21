"""Schemas for login endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

NIS_PATTERN = r"^[0-9]{6}$"


class LoginRequest(BaseModel):
    """Guardian credentials."""

    nis: str = Field(pattern=NIS_PATTERN)
    password: str = Field(min_length=1, max_length=128)

    @field_validator("nis", mode="before")
    @classmethod
    def trim_nis(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value


class LoggedInUser(BaseModel):
    nis: str
    nama_siswa: str


class LoginResponse(BaseModel):
    ok: bool = True
    user: LoggedInUser


class OkResponse(BaseModel):
    ok: bool = True
