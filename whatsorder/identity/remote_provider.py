from __future__ import annotations

import logging
from typing import Any

import httpx

from whatsorder.identity.base import Identity, IdentityVerificationError

logger = logging.getLogger(__name__)
IDENTITY_PREFIX = "[IDENTITY]"


class RemoteIdentityProvider:
    """Asks the managed auth service who owns a token (``GET /auth/v1/user``)."""

    USER_PATH = "/auth/v1/user"

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        timeout_seconds: float = 5.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def _fetch_user(self, token: str) -> dict[str, Any]:
        headers = {"Authorization": f"Bearer {token}"}
        if self.api_key:
            headers["apikey"] = self.api_key
        try:
            with httpx.Client(timeout=self.timeout_seconds, transport=self._transport) as client:
                response = client.get(f"{self.base_url}{self.USER_PATH}", headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("%s provider unreachable error=%s", IDENTITY_PREFIX, exc.__class__.__name__)
            raise IdentityVerificationError("Identity provider unavailable") from exc

        if response.status_code != 200:
            logger.info("%s token rejected status=%s", IDENTITY_PREFIX, response.status_code)
            raise IdentityVerificationError("Token rejected")
        try:
            payload = response.json()
        except ValueError as exc:
            raise IdentityVerificationError("Malformed identity response") from exc
        if not isinstance(payload, dict):
            raise IdentityVerificationError("Malformed identity response")
        return payload

    def verify(self, token: str) -> Identity:
        if not self.base_url:
            raise IdentityVerificationError("Identity provider not configured")
        payload = self._fetch_user(token)
        subject = payload.get("id")
        if not subject:
            raise IdentityVerificationError("Identity response without id")
        return Identity(subject=str(subject), email=payload.get("email"))
