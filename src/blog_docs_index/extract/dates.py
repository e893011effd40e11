from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

import structlog

log = structlog.get_logger()


def parse_date(value: str) -> Optional[datetime]:
    """
    Parse an ISO-8601 date or date/time string.

    Values without an offset are read as UTC. Empty or unparsable values give ``None``.
    """
    text = (value or "").strip()
    if not text:
        return None
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        log.debug("date_unparsable", value=text)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
