from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class Identity:
    subject: str
    email: str | None = None


class IdentityVerificationError(Exception):
    """The credential was rejected or could not be verified."""


class IdentityProvider(Protocol):
    def verify(self, token: str) -> Identity:
        """Return the identity behind ``token`` or raise ``IdentityVerificationError``."""
        ...
