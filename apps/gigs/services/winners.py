from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, List, Mapping, Sequence

from django.conf import settings
from django.db import IntegrityError, transaction

from apps.core.db import with_store_retry
from apps.core.exceptions import (
    AlreadyAnnounced,
    BreakdownMismatch,
    Unauthorized,
    UnknownContributor,
    ValidationFailed,
)
from apps.gigs.breakdown import parse_amount, parse_place, tiers_by_place
from apps.gigs.events import publish_winners_announced
from apps.gigs.lifecycle import can_declare_winners, is_gig_owner
from apps.gigs.models import Gig, Submission, Winner
from apps.gigs.services.store import conditional_update, get_gig
from apps.users.identity import Principal

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProposedWinner:
    contributor_username: str
    place: int
    amount: Decimal


def _coerce_proposed(entry: ProposedWinner | Mapping[str, Any]) -> ProposedWinner:
    if isinstance(entry, ProposedWinner):
        raw_username, raw_place, raw_amount = entry.contributor_username, entry.place, entry.amount
    elif isinstance(entry, Mapping):
        raw_username = entry.get("contributor_username", entry.get("username"))
        raw_place, raw_amount = entry.get("place"), entry.get("amount")
    else:
        raise ValidationFailed("Each winner needs a contributor_username, place and amount.")
    username = (raw_username or "").strip() if isinstance(raw_username, str) else ""
    if not username:
        raise ValidationFailed("contributor_username is required for every winner.")
    return ProposedWinner(contributor_username=username, place=parse_place(raw_place), amount=parse_amount(raw_amount))


def normalize_proposed(proposed: Iterable[ProposedWinner | Mapping[str, Any]] | None) -> List[ProposedWinner]:
    if proposed is None or isinstance(proposed, (str, bytes, Mapping)):
        raise ValidationFailed("winners must be a list.")
    entries = [_coerce_proposed(entry) for entry in proposed]
    if not entries:
        raise ValidationFailed("At least one winner is required.")
    places = [entry.place for entry in entries]
    if len(set(places)) != len(places):
        raise ValidationFailed("Each place can only be awarded once.")
    return entries


def match_breakdown(gig: Gig, entries: Sequence[ProposedWinner]) -> None:
    offered = tiers_by_place(gig.bounty_breakdown)
    for entry in entries:
        if offered.get(entry.place) != entry.amount:
            raise BreakdownMismatch(
                f"Place {entry.place} with amount {entry.amount} is not part of this gig's bounty breakdown."
            )
    if getattr(settings, "GIG_WINNERS_REQUIRE_ALL_PAID_PLACES", True):
        awarded = {entry.place for entry in entries}
        unawarded = sorted(place for place, amount in offered.items() if amount > 0 and place not in awarded)
        if unawarded:
            raise BreakdownMismatch(
                "Every paid place must be awarded; missing place(s): " + ", ".join(str(p) for p in unawarded) + "."
            )


@with_store_retry
def declare_winners(
    *,
    gig_id: Any,
    caller: Principal,
    proposed: Iterable[ProposedWinner | Mapping[str, Any]],
) -> List[Winner]:
    """
    Commit the winner set for a gig, exactly once.

    Winner rows and the ``winners_announced`` flip are written in one transaction
    under a row lock on the gig; the flip is a conditional update, so a second
    announcement that slipped past the lock still rolls back with AlreadyAnnounced.
    """
    with transaction.atomic():
        gig = get_gig(gig_id, for_update=True)
        if not can_declare_winners(gig, caller):
            if is_gig_owner(gig, caller):
                raise AlreadyAnnounced()
            raise Unauthorized("Only the posting organization can announce winners.")

        entries = normalize_proposed(proposed)
        match_breakdown(gig, entries)

        usernames = {entry.contributor_username for entry in entries}
        submissions = {
            submission.contributor_username: submission
            for submission in Submission.objects.filter(gig=gig, contributor_username__in=usernames)
        }
        unknown = sorted(usernames - submissions.keys())
        if unknown:
            raise UnknownContributor(f"No submission for this gig from: {', '.join(unknown)}.")

        rows = [
            Winner(
                gig=gig,
                submission=submissions[entry.contributor_username],
                contributor_username=entry.contributor_username,
                place=entry.place,
                amount=entry.amount,
            )
            for entry in sorted(entries, key=lambda e: e.place)
        ]
        try:
            with transaction.atomic():
                winners = Winner.objects.bulk_create(rows)
        except IntegrityError as exc:
            raise AlreadyAnnounced() from exc

        updated = conditional_update(gig.id, {"winners_announced": False}, {"winners_announced": True})
        if updated != 1:
            raise AlreadyAnnounced()
        transaction.on_commit(lambda: publish_winners_announced(gig.id, winners))

    logger.info(
        "Winners announced",
        extra={
            "gig_id": gig.id,
            "places": [winner.place for winner in winners],
            "total_awarded": str(sum((winner.amount for winner in winners), Decimal("0"))),
        },
    )
    return winners


@with_store_retry
def list_winners(*, gig_id: Any) -> List[Winner]:
    gig = get_gig(gig_id)
    return list(Winner.objects.filter(gig=gig).order_by("place"))
