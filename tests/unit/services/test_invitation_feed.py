import json

import pytest

from libs.result import Error, Return
from src.app.services.invitation_feed import watch_invitations
from src.app.use_cases.sharing import InvitationView
from tests.unit.factories import make_invitation


def snapshots(*batches):
    """Loader returning each batch in turn, repeating the last one"""
    batches = list(batches)

    async def load():
        batch = batches.pop(0) if len(batches) > 1 else batches[0]
        return Return.ok([InvitationView.from_entity(i) for i in batch])

    return load


async def collect(feed):
    return [event async for event in feed]


@pytest.mark.asyncio
async def test_feed_emits_snapshot_only_on_change():
    first = [make_invitation()]
    second = [make_invitation(), make_invitation(token="b" * 32)]
    load = snapshots(first, first, second)

    events = await collect(
        watch_invitations(load, poll_seconds=0, ping_seconds=100, max_events=2)
    )

    assert [e["event"] for e in events] == ["snapshot", "snapshot"]
    assert len(json.loads(events[0]["data"])) == 1
    tokens = [item["token"] for item in json.loads(events[1]["data"])]
    assert tokens == ["a" * 32, "b" * 32]


@pytest.mark.asyncio
async def test_feed_pings_when_idle():
    load = snapshots([make_invitation()])

    events = await collect(
        watch_invitations(load, poll_seconds=0, ping_seconds=0, max_events=3)
    )

    assert [e["event"] for e in events] == ["snapshot", "ping", "ping"]


@pytest.mark.asyncio
async def test_feed_stops_on_error():
    async def load():
        return Return.err(Error("NOT_PROJECT_OWNER", "nope"))

    events = await collect(watch_invitations(load, poll_seconds=0, ping_seconds=0))

    assert len(events) == 1
    assert events[0]["event"] == "error"
    assert json.loads(events[0]["data"])["code"] == "NOT_PROJECT_OWNER"
