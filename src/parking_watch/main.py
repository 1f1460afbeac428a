"""Entry point for the parking watcher."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from typing import Optional

import httpx
import structlog
from pydantic import ValidationError

from .config import Settings
from .fetcher import FetchError, fetch_garages
from .notifier import notify
from .snapshot import SnapshotStore, build_snapshot, has_changed
from .utils import get_zone, utc_now


def configure_logging(level: int = logging.INFO) -> None:
    """Configure structlog + stdlib logging."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stdout,
    )
    logging.getLogger().setLevel(level)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"]),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


LOGGER = structlog.get_logger(__name__)


def run(
    settings: Settings,
    client: httpx.Client,
    *,
    now: Optional[datetime] = None,
    dry_run: bool = False,
) -> int:
    """Fetch, classify, compare, notify when needed, and persist the snapshot."""
    store = SnapshotStore(settings.status_file)

    try:
        records = fetch_garages(client, str(settings.data_url))
    except FetchError as exc:
        LOGGER.error("fetch.failed", error=str(exc))
        return 1

    current = build_snapshot(
        records,
        settings.monitored_titles,
        now or utc_now(),
        threshold=settings.almost_full_threshold,
    )
    previous = store.load()

    if has_changed(previous, current, get_zone(settings.timezone)):
        webhook_url = settings.webhook_url.get_secret_value() if settings.webhook_url else ""
        delivered = notify(client, webhook_url, current, dry_run=dry_run)
        LOGGER.info("notify.done", delivered=delivered, garages=len(current.garages))
    else:
        LOGGER.info("notify.unchanged", garages=len(current.garages))

    store.save(current)
    return 0


def build_client(settings: Settings, transport: Optional[httpx.BaseTransport] = None) -> httpx.Client:
    return httpx.Client(timeout=settings.timeout_seconds, follow_redirects=True, transport=transport)


def parse_args(argv: Optional[list[str]] = None) -> tuple[argparse.ArgumentParser, argparse.Namespace]:
    """CLI argument parsing."""
    parser = argparse.ArgumentParser(
        prog="parking-watch",
        description="Check parking garage occupancy and post tier changes to a chat webhook.",
    )
    parser.add_argument("--webhook", dest="webhook_url", help="Discord or Teams webhook URL.")
    parser.add_argument(
        "--titles",
        help="Comma separated garage titles to monitor (e.g. 'Bouillon,Gëlle Fra').",
    )
    parser.add_argument("--data-url", dest="data_url", help="URL of the JSON occupancy feed.")
    parser.add_argument(
        "--status-file",
        dest="status_file",
        help="Where the previous snapshot is kept (default: status.json).",
    )
    parser.add_argument(
        "--threshold",
        dest="almost_full_threshold",
        type=int,
        help="Places left at or below which a garage counts as almost full (default: 20).",
    )
    parser.add_argument("--timezone", help="Zone used to detect a new day (default: UTC).")
    parser.add_argument("--dry-run", action="store_true", help="Log messages instead of posting them.")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser, parser.parse_args(argv)


def cli(argv: Optional[list[str]] = None) -> int:
    """Console script entrypoint."""
    parser, args = parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    overrides = {
        key: value
        for key, value in vars(args).items()
        if key not in {"dry_run", "verbose"} and value is not None
    }
    try:
        settings = Settings(**overrides)
    except ValidationError as exc:
        LOGGER.error("settings.error", error=str(exc))
        return 2

    missing = settings.missing_required()
    if missing:
        parser.error(f"missing required option(s): {', '.join(missing)}")

    with build_client(settings) as client:
        return run(settings, client, dry_run=args.dry_run)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(cli())
