from __future__ import annotations

from typing import Iterable

from apps.core.pubsub import gig_channel, publish_event

from .models import Winner


def _serialize_winner(winner: Winner) -> dict:
    return {
        "id": str(winner.id),
        "contributor_username": winner.contributor_username,
        "place": winner.place,
        "amount": str(winner.amount),
    }


def publish_winners_announced(gig_id: int, winners: Iterable[Winner]) -> None:
    payload = {
        "type": "gig:winners",
        "gig_id": str(gig_id),
        "payload": [_serialize_winner(winner) for winner in winners],
    }
    publish_event(gig_channel(gig_id), payload)
