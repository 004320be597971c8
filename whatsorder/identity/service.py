from __future__ import annotations

import logging
from functools import lru_cache

from whatsorder.core import config
from whatsorder.identity.base import Identity, IdentityProvider, IdentityVerificationError
from whatsorder.identity.jwt_provider import JwtIdentityProvider
from whatsorder.identity.remote_provider import RemoteIdentityProvider

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


def extract_bearer_token(authorization: str | None, cookie_token: str | None = None) -> str | None:
    """Token from ``Authorization: Bearer``; falls back to the session cookie."""
    header = (authorization or "").strip()
    if header.lower().startswith(BEARER_PREFIX):
        token = header[len(BEARER_PREFIX):].strip()
        if token:
            return token
    cookie = (cookie_token or "").strip()
    return cookie or None


def build_identity_provider(name: str | None = None) -> IdentityProvider:
    selected = (name or config.IDENTITY_PROVIDER).strip().lower()
    if selected == "jwt":
        return JwtIdentityProvider(
            secret=config.IDENTITY_JWT_SECRET,
            algorithm=config.IDENTITY_JWT_ALGORITHM,
            audience=config.IDENTITY_JWT_AUDIENCE,
        )
    if selected == "remote":
        return RemoteIdentityProvider(
            base_url=config.IDENTITY_PROVIDER_URL,
            api_key=config.IDENTITY_PROVIDER_API_KEY,
            timeout_seconds=config.IDENTITY_PROVIDER_TIMEOUT_SECONDS,
        )
    raise ValueError(f"Unknown identity provider: {selected}")


@lru_cache(maxsize=1)
def get_identity_provider() -> IdentityProvider:
    return build_identity_provider()


class IdentityGateway:
    """Verifies every request's credential; nothing is cached between requests."""

    def __init__(self, provider: IdentityProvider) -> None:
        self.provider = provider

    def authenticate(self, authorization: str | None, cookie_token: str | None = None) -> Identity:
        token = extract_bearer_token(authorization, cookie_token)
        if not token:
            raise IdentityVerificationError("Missing credential")
        identity = self.provider.verify(token)
        logger.debug("[IDENTITY] verified subject=%s", identity.subject)
        return identity
