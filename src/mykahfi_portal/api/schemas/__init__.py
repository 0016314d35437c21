"""API request and response schemas."""

from mykahfi_portal.api.schemas.auth import LoginRequest, LoginResponse
from mykahfi_portal.api.schemas.dashboard import DashboardResponse
from mykahfi_portal.api.schemas.push import PushTestRequest, PushTestResponse

__all__ = [
    "DashboardResponse",
    "LoginRequest",
    "LoginResponse",
    "PushTestRequest",
    "PushTestResponse",
]
