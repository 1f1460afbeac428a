import httpx

from conftest import NOW, WEBHOOK_URL, FakeServer
from parking_watch.models import GarageStatus, Snapshot, Tier
from parking_watch.notifier import format_message, notify, post_to_webhook


def garage(title, tier, occupied=100, total=100):
    return GarageStatus(title=title, tier=tier, occupied=occupied, total=total)


def test_format_message_per_tier():
    assert format_message(garage("Bouillon", Tier.FULL)) == "❌ *Bouillon*: full (100/100)"
    assert format_message(garage("Knuedler", Tier.ALMOST_FULL, 90, 100)) == "⚠️ *Knuedler*: almost-full (90/100)"
    assert format_message(garage("Gëlle Fra", Tier.FREE, 3, 400)) == "✅ *Gëlle Fra*: free (3/400)"


def test_post_accepts_ok_and_no_content():
    for status in (200, 204):
        server = FakeServer(webhook_status=status)
        with server.client() as client:
            assert post_to_webhook(client, WEBHOOK_URL, "hello") is True
        assert server.posts == [{"content": "hello"}]


def test_post_reports_other_status():
    server = FakeServer(webhook_status=201)

    with server.client() as client:
        assert post_to_webhook(client, WEBHOOK_URL, "hello") is False


def test_notify_sends_every_garage_and_survives_failures():
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ConnectTimeout("timed out", request=request)
        return httpx.Response(204)

    snapshot = Snapshot(
        timestamp=NOW,
        garages=[garage("Bouillon", Tier.FULL), garage("Knuedler", Tier.FREE, 0, 100)],
    )

    with httpx.Client(transport=httpx.MockTransport(handler)) as client:
        delivered = notify(client, WEBHOOK_URL, snapshot)

    assert len(calls) == 2
    assert delivered == 1


def test_notify_dry_run_posts_nothing():
    server = FakeServer()
    snapshot = Snapshot(timestamp=NOW, garages=[garage("Bouillon", Tier.FULL)])

    with server.client() as client:
        assert notify(client, WEBHOOK_URL, snapshot, dry_run=True) == 0

    assert server.posts == []
