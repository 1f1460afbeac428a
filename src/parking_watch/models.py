"""Pydantic models for the parking feed and the persisted snapshot."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Tier(str, Enum):
    """Occupancy classification of a garage."""

    FREE = "free"
    ALMOST_FULL = "almost-full"
    FULL = "full"

    @property
    def icon(self) -> str:
        return TIER_ICONS[self]


TIER_ICONS = {
    Tier.FREE: "✅",
    Tier.ALMOST_FULL: "⚠️",
    Tier.FULL: "❌",
}


class GarageRecord(BaseModel):
    """One garage entry as published by the upstream feed."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    occupied: int = Field(alias="actuel")
    total: int


class ParkingFeed(BaseModel):
    """Top-level document returned by the data URL."""

    parking: List[GarageRecord] = Field(default_factory=list)


class GarageStatus(BaseModel):
    """Classified state of a single monitored garage."""

    model_config = ConfigDict(populate_by_name=True)

    title: str
    tier: Tier = Field(alias="status")
    total: int
    occupied: int


class Snapshot(BaseModel):
    """Timestamped tiers of every monitored garage, persisted between runs."""

    model_config = ConfigDict(populate_by_name=True)

    timestamp: datetime
    garages: List[GarageStatus] = Field(default_factory=list, alias="parkings")

    def tier_index(self) -> "TierIndex":
        return TierIndex(self.garages)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


class TierIndex(Mapping[str, Tier]):
    """
    Read-only mapping of garage title to tier.

    ``lookup`` returns ``None`` for a title the index does not know; callers
    comparing snapshots treat that as an absent garage. Titles must be unique.
    """

    def __init__(self, garages: Iterable[GarageStatus]):
        self._tiers: dict[str, Tier] = {}
        for garage in garages:
            if garage.title in self._tiers:
                raise ValueError(f"duplicate garage title: {garage.title!r}")
            self._tiers[garage.title] = garage.tier

    def lookup(self, title: str) -> Optional[Tier]:
        return self._tiers.get(title)

    def __getitem__(self, title: str) -> Tier:
        return self._tiers[title]

    def __iter__(self) -> Iterator[str]:
        return iter(self._tiers)

    def __len__(self) -> int:
        return len(self._tiers)
