#!/usr/bin/env python3
"""Lists stored businesses whose slug would no longer pass validation."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from sqlalchemy.orm import Session

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from whatsorder.core.database import SessionLocal  # noqa: E402
from whatsorder.models.business import Business  # noqa: E402
from whatsorder.services.validation import RESERVED_SLUGS  # noqa: E402
from whatsorder.utils.slug import is_valid_slug, normalize_slug  # noqa: E402


def find_invalid_slugs(db: Session) -> list[tuple[int, str, str]]:
    """(business id, stored slug, suggested replacement) for each bad slug."""
    problems: list[tuple[int, str, str]] = []
    for business in db.query(Business).order_by(Business.id.asc()).all():
        slug = business.slug or ""
        if is_valid_slug(slug) and slug not in RESERVED_SLUGS:
            continue
        suggestion = normalize_slug(business.name or "") or f"business-{business.id}"
        problems.append((business.id, slug, suggestion))
    return problems


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Audit stored business slugs.")
    parser.add_argument("--strict", action="store_true", help="Exit with 1 when any slug is invalid")
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    db = SessionLocal()
    try:
        problems = find_invalid_slugs(db)
    finally:
        db.close()

    for business_id, slug, suggestion in problems:
        print(f"business_id={business_id} slug={slug!r} suggestion={suggestion}")
    print(f"{len(problems)} invalid slug(s) found.")
    return 1 if problems and args.strict else 0


if __name__ == "__main__":
    raise SystemExit(main())
