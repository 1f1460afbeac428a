"""Occupancy tier classification."""

from __future__ import annotations

from .models import Tier

ALMOST_FULL_THRESHOLD = 20


def classify(occupied: int, total: int, threshold: int = ALMOST_FULL_THRESHOLD) -> Tier:
    """Map an occupied/total pair to a tier based on the places left."""
    remaining = total - occupied
    if remaining <= 0:
        return Tier.FULL
    if remaining <= threshold:
        return Tier.ALMOST_FULL
    return Tier.FREE
