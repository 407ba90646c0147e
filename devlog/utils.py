from __future__ import annotations

import datetime as dt
from typing import Optional


def join_url(base: str, path: str) -> str:
    base = base.rstrip("/")
    path = path.lstrip("/")
    if not path:
        return base
    return f"{base}/{path}"


def parse_post_date(value: object) -> Optional[dt.datetime]:
    """Best-effort parse of a frontmatter date for feed timestamps.

    Dates are free-form in frontmatter, so anything that is not ISO 8601
    (date or datetime) yields ``None`` rather than an error.
    """
    if not isinstance(value, str):
        return None
    value = value.strip()
    if not value:
        return None
    try:
        return dt.datetime.fromisoformat(value)
    except ValueError:
        pass
    try:
        return dt.datetime.combine(dt.date.fromisoformat(value), dt.time())
    except ValueError:
        return None


def rfc822_date(value: dt.datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    else:
        value = value.astimezone(dt.timezone.utc)
    return value.strftime("%a, %d %b %Y %H:%M:%S %z")
