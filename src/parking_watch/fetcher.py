"""Retrieve garage occupancy from the upstream JSON feed."""

from __future__ import annotations

from typing import List

import httpx
import structlog
from pydantic import ValidationError

from .models import GarageRecord, ParkingFeed

LOGGER = structlog.get_logger(__name__)


class FetchError(RuntimeError):
    """The feed could not be retrieved or decoded."""


def fetch_garages(client: httpx.Client, data_url: str) -> List[GarageRecord]:
    """Download and decode the parking feed."""
    LOGGER.info("fetch.start", url=data_url)
    try:
        response = client.get(data_url)
    except httpx.HTTPError as exc:
        raise FetchError(f"Request to {data_url} failed: {exc}") from exc

    if response.status_code != httpx.codes.OK:
        raise FetchError(f"Unexpected HTTP status {response.status_code} from {data_url}")

    try:
        feed = ParkingFeed.model_validate_json(response.content)
    except ValidationError as exc:
        raise FetchError(f"Invalid parking feed from {data_url}: {exc}") from exc

    LOGGER.info("fetch.success", garages=len(feed.parking))
    return feed.parking
