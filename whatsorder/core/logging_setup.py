from __future__ import annotations

import json
import logging
import os
import re
from datetime import datetime, timezone
from typing import Iterable

from whatsorder.core import config
from whatsorder.core.request_context import get_business_id, get_owner_id, get_request_id

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
REDACTED = "***"

# Per-request fields set by the observability middleware through ``extra``.
REQUEST_FIELDS = ("endpoint", "method", "status_code", "duration_ms")


class SecretMasker:
    """Redacts credentials that can reach a log line.

    Covers bearer tokens, the identity ``apikey`` header, the session cookie,
    and the literal values of the configured identity secrets.
    """

    def __init__(self, cookie_name: str, secrets: Iterable[str] = ()) -> None:
        self._patterns = [
            re.compile(r"(bearer\s+)[A-Za-z0-9\-_.~+/=]+", re.IGNORECASE),
            re.compile(r"(apikey[\"']?\s*[:=]\s*[\"']?)[^\s\"',;}]+", re.IGNORECASE),
            re.compile(rf"({re.escape(cookie_name)}[\"']?\s*[:=]\s*[\"']?)[^\s\"',;}}]+"),
        ]
        self._literals = sorted({secret for secret in secrets if secret}, key=len, reverse=True)

    def __call__(self, text: str) -> str:
        for literal in self._literals:
            text = text.replace(literal, REDACTED)
        for pattern in self._patterns:
            text = pattern.sub(rf"\g<1>{REDACTED}", text)
        return text


def default_masker() -> SecretMasker:
    return SecretMasker(
        config.AUTH_COOKIE_NAME,
        secrets=(config.IDENTITY_JWT_SECRET, config.IDENTITY_PROVIDER_API_KEY),
    )


class JsonFormatter(logging.Formatter):
    """One JSON object per line, tagged with the current request's ids."""

    def __init__(self, masker: SecretMasker | None = None) -> None:
        super().__init__()
        self._mask = masker or default_masker()

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": self._mask(record.getMessage()),
            "request_id": getattr(record, "request_id", None) or get_request_id(),
            "business_id": getattr(record, "business_id", None) or get_business_id(),
            "owner_id": getattr(record, "owner_id", None) or get_owner_id(),
        }
        entry.update(
            (field, getattr(record, field)) for field in REQUEST_FIELDS if getattr(record, field, None) is not None
        )
        if record.exc_info:
            entry["exc_info"] = self._mask(self.formatException(record.exc_info))
        return json.dumps(entry, ensure_ascii=False)


def configure_logging() -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(LOG_LEVEL)
    root_logger.addHandler(handler)

    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(logger_name).setLevel(LOG_LEVEL)
