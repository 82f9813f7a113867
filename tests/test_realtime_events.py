from __future__ import annotations

import json
from unittest.mock import Mock, patch

import pytest
from django.test import override_settings
from redis.exceptions import RedisError

from apps.core.pubsub import gig_channel, publish_event
from apps.gigs.events import publish_winners_announced
from apps.gigs.models import Winner


@override_settings(REALTIME_PUBLISH_ENABLED=True)
def test_publish_event_serializes_payload():
    client = Mock()
    with patch("apps.core.pubsub.get_redis_client", return_value=client):
        assert publish_event(gig_channel(5), {"type": "chat:new", "id": 1}) is True

    channel, raw = client.publish.call_args.args
    assert channel == "gig:5"
    assert json.loads(raw) == {"type": "chat:new", "id": 1}


@override_settings(REALTIME_PUBLISH_ENABLED=True)
def test_publish_failures_are_logged_not_raised():
    client = Mock()
    client.publish.side_effect = RedisError("down")
    with patch("apps.core.pubsub.get_redis_client", return_value=client):
        assert publish_event("gig:5", {"type": "chat:new"}) is False


@override_settings(REALTIME_PUBLISH_ENABLED=False)
def test_publishing_can_be_disabled():
    with patch("apps.core.pubsub.get_redis_client") as mocked:
        assert publish_event("gig:5", {}) is False
    assert mocked.called is False


def test_winners_event_payload():
    winners = [Winner(id=11, contributor_username="alice", place=1, amount="700.00")]
    with patch("apps.gigs.events.publish_event") as mocked:
        publish_winners_announced(9, winners)

    channel, payload = mocked.call_args.args
    assert channel == "gig:9"
    assert payload["type"] == "gig:winners"
    assert payload["payload"] == [{"id": "11", "contributor_username": "alice", "place": 1, "amount": "700.00"}]


@pytest.mark.django_db(transaction=True)
def test_winners_event_fires_after_commit(gig, business, make_user, as_principal):
    from apps.gigs.models import Submission
    from apps.gigs.services.winners import declare_winners

    for username in ("alice", "bob"):
        user = make_user(username)
        Submission.objects.create(
            gig=gig,
            contributor=user,
            contributor_username=username,
            submission_link="https://example.com",
            wallet_address="0x1",
        )
    proposed = [
        {"contributor_username": "alice", "place": 1, "amount": "700"},
        {"contributor_username": "bob", "place": 2, "amount": "300"},
    ]
    with patch("apps.gigs.events.publish_event") as mocked:
        declare_winners(gig_id=gig.id, caller=as_principal(business), proposed=proposed)

    assert mocked.call_count == 1
    assert mocked.call_args.args[1]["type"] == "gig:winners"
