"""Time and parsing helpers."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import List
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import structlog

LOGGER = structlog.get_logger(__name__)


def get_zone(timezone_name: str) -> ZoneInfo:
    """Return a ZoneInfo instance, defaulting to UTC on failure."""
    try:
        return ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError):
        LOGGER.warning("timezone.unknown", timezone=timezone_name, fallback="UTC")
        return ZoneInfo("UTC")


def utc_now() -> datetime:
    """Current UTC time truncated to whole seconds."""
    return datetime.now(tz=timezone.utc).replace(microsecond=0)


def calendar_day(moment: datetime, zone: ZoneInfo) -> date:
    """Calendar date of ``moment`` in ``zone``; naive values are read as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(zone).date()


def parse_titles(raw: str | None) -> List[str]:
    """Split a comma separated title list, dropping blanks and repeats."""
    titles: List[str] = []
    for chunk in (raw or "").split(","):
        title = chunk.strip()
        if title and title not in titles:
            titles.append(title)
    return titles
