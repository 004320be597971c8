import re
import unicodedata

SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")
SLUG_MAX_LENGTH = 100


def normalize_slug(value: str) -> str:
    if not value:
        return ""

    value = unicodedata.normalize("NFKD", value)
    value = value.encode("ascii", "ignore").decode("ascii")
    value = value.lower()
    value = re.sub(r"[^a-z0-9]+", "-", value).strip("-")
    value = re.sub(r"-{2,}", "-", value)

    return value[:SLUG_MAX_LENGTH].strip("-")


def is_valid_slug(value: str) -> bool:
    return bool(value) and len(value) <= SLUG_MAX_LENGTH and SLUG_PATTERN.match(value) is not None
