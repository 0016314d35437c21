"""OneSignal REST adapter for push delivery."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Protocol

import httpx

PROVIDER_NAME = "onesignal"


@dataclass(frozen=True, slots=True)
class PushResult:
    """Outcome of one push delivery call."""

    success: bool
    id: str | None = None
    error: str | None = None


class PushClient(Protocol):
    """Push delivery abstraction to simplify HTTP boundary testing."""

    provider: str

    def send_notification(
        self,
        *,
        external_user_ids: Sequence[str],
        title: str,
        body: str,
        data: Mapping[str, str] | None = None,
    ) -> PushResult: ...

    def set_external_id(self, subscription_id: str, external_id: str) -> bool: ...


@dataclass(slots=True, frozen=True)
class OneSignalPushClient:
    """HTTP client wrapper for the OneSignal notifications and players endpoints."""

    app_id: str | None
    rest_api_key: str | None
    base_url: str
    timeout_seconds: float
    transport: httpx.BaseTransport | None = None
    provider: str = PROVIDER_NAME

    def send_notification(
        self,
        *,
        external_user_ids: Sequence[str],
        title: str,
        body: str,
        data: Mapping[str, str] | None = None,
    ) -> PushResult:
        if not self.app_id or not self.rest_api_key:
            return PushResult(success=False, error="OneSignal is not configured")

        request_body: dict[str, object] = {
            "app_id": self.app_id,
            "include_external_user_ids": list(external_user_ids),
            "headings": {"en": title},
            "contents": {"en": body},
        }
        if data:
            request_body["data"] = dict(data)

        try:
            with self._client() as client:
                response = client.post("/notifications", json=request_body)
        except httpx.HTTPError as exc:
            return PushResult(success=False, error=str(exc) or "Network error")

        payload = _parse_json_response(response)
        if not response.is_success:
            return PushResult(
                success=False,
                error=_build_provider_error(response, payload),
            )

        notification_id = payload.get("id")
        if not notification_id:
            return PushResult(
                success=False,
                error=_build_provider_error(response, payload),
            )
        return PushResult(success=True, id=str(notification_id))

    def set_external_id(self, subscription_id: str, external_id: str) -> bool:
        """Bind a device subscription to the guardian's external user id."""

        if not self.app_id or not self.rest_api_key:
            return False
        try:
            with self._client() as client:
                response = client.put(
                    f"/players/{subscription_id}",
                    json={"app_id": self.app_id, "external_user_id": external_id},
                )
        except httpx.HTTPError:
            return False
        return response.is_success

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=_normalize_base_url(self.base_url),
            timeout=self.timeout_seconds,
            transport=self.transport,
            headers={"Authorization": f"Basic {self.rest_api_key}"},
        )


def _normalize_base_url(value: str) -> str:
    return value.rstrip("/")


def _parse_json_response(response: httpx.Response) -> dict[str, object]:
    try:
        payload = response.json()
    except ValueError:
        return {}
    if isinstance(payload, Mapping):
        return dict(payload)
    return {}


def _build_provider_error(
    response: httpx.Response,
    payload: Mapping[str, object],
) -> str:
    errors = payload.get("errors")
    if isinstance(errors, list) and errors:
        return str(errors[0])
    if isinstance(errors, Mapping) and errors:
        return str(next(iter(errors.values())))
    text = response.text.strip()
    if text and not payload:
        return f"OneSignal request failed with status {response.status_code}: {text}"
    return f"OneSignal request failed with status {response.status_code}"
