"""Building, comparing and persisting garage snapshots."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional, Sequence
from zoneinfo import ZoneInfo

import structlog
from pydantic import ValidationError

from .classifier import ALMOST_FULL_THRESHOLD, classify
from .models import GarageRecord, GarageStatus, Snapshot
from .utils import calendar_day

LOGGER = structlog.get_logger(__name__)

UTC = ZoneInfo("UTC")


def build_snapshot(
    records: Iterable[GarageRecord],
    titles: Sequence[str],
    timestamp: datetime,
    *,
    threshold: int = ALMOST_FULL_THRESHOLD,
) -> Snapshot:
    """Classify the monitored garages, keeping feed order and the first record per title."""
    wanted = set(titles)
    garages: list[GarageStatus] = []
    seen: set[str] = set()

    for record in records:
        if record.title not in wanted:
            continue
        if record.title in seen:
            LOGGER.warning("snapshot.duplicate_title", title=record.title)
            continue
        seen.add(record.title)
        garages.append(
            GarageStatus(
                title=record.title,
                tier=classify(record.occupied, record.total, threshold),
                total=record.total,
                occupied=record.occupied,
            )
        )

    for title in titles:
        if title not in seen:
            LOGGER.warning("snapshot.title_not_in_feed", title=title)

    return Snapshot(timestamp=timestamp, garages=garages)


def has_changed(previous: Optional[Snapshot], current: Snapshot, zone: ZoneInfo = UTC) -> bool:
    """
    Decide whether the current snapshot warrants a notification.

    A missing previous snapshot, a new calendar day, a different number of
    garages, or any garage whose tier differs from (or is absent in) the
    previous snapshot all count as a change.
    """
    if previous is None:
        return True
    if calendar_day(previous.timestamp, zone) != calendar_day(current.timestamp, zone):
        LOGGER.info("change.new_day")
        return True
    if len(previous.garages) != len(current.garages):
        return True

    try:
        index = previous.tier_index()
    except ValueError:
        LOGGER.warning("change.previous_duplicates")
        return True

    for garage in current.garages:
        previous_tier = index.lookup(garage.title)
        if previous_tier != garage.tier:
            LOGGER.info("change.tier", title=garage.title, previous=previous_tier, current=garage.tier)
            return True
    return False


class SnapshotStore:
    """Reads and writes the snapshot file shared between runs."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> Optional[Snapshot]:
        """Return the previous snapshot, or ``None`` when it is missing or unreadable."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            LOGGER.info("snapshot.load.missing", path=str(self.path))
            return None
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.warning("snapshot.load.failed", path=str(self.path), error=str(exc))
            return None

        try:
            return Snapshot.model_validate_json(raw)
        except ValidationError as exc:
            LOGGER.warning("snapshot.load.invalid", path=str(self.path), error=str(exc))
            return None

    def save(self, snapshot: Snapshot) -> bool:
        """Overwrite the snapshot file; returns False when the write fails."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(snapshot.to_json() + "\n", encoding="utf-8")
        except OSError as exc:
            LOGGER.error("snapshot.save.failed", path=str(self.path), error=str(exc))
            return False
        LOGGER.info("snapshot.save.success", path=str(self.path), garages=len(snapshot.garages))
        return True
