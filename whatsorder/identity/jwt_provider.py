from __future__ import annotations

from typing import Any, Dict

from jose import JWTError, jwt

from whatsorder.identity.base import Identity, IdentityVerificationError


class JwtIdentityProvider:
    """Verifies tokens signed with the provider's shared secret, without a network call."""

    def __init__(self, *, secret: str, algorithm: str = "HS256", audience: str | None = None) -> None:
        self.secret = secret
        self.algorithm = algorithm
        self.audience = audience

    def decode(self, token: str) -> Dict[str, Any]:
        if not self.secret:
            raise IdentityVerificationError("JWT secret not configured")
        options = {"verify_aud": self.audience is not None}
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                options=options,
            )
        except JWTError as exc:
            raise IdentityVerificationError("Invalid or expired token") from exc

    def verify(self, token: str) -> Identity:
        payload = self.decode(token)
        # "sub" must be a non-empty string subject
        subject = payload.get("sub")
        if subject is None or str(subject).strip() == "":
            raise IdentityVerificationError("Token without subject")
        return Identity(subject=str(subject).strip(), email=payload.get("email"))
