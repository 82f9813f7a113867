"""
Gig lifecycle phases.

The phase is derived from the clock and the ``winners_announced`` flag; only the
flag is persisted, because "already finalized" cannot be recovered from time alone.

    Open ──(now >= deadline)──> PastDeadline
      │                              │
      └──(winners announced)──> Closed <┘

Only ``Open`` accepts submissions. Winner declaration is gated on ownership, not
time, so an organization may finalize early while the gig is still open.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from django.db import models
from django.utils import timezone

if TYPE_CHECKING:  # pragma: no cover
    from apps.users.identity import Principal

    from .models import Gig


class GigPhase(models.TextChoices):
    OPEN = "open", "Open"
    PAST_DEADLINE = "past_deadline", "Past deadline"
    CLOSED = "closed", "Closed"


def derive_phase(gig: "Gig", now: datetime | None = None) -> GigPhase:
    if gig.winners_announced:
        return GigPhase.CLOSED
    now = now or timezone.now()
    if now >= gig.deadline:
        return GigPhase.PAST_DEADLINE
    return GigPhase.OPEN


def can_submit(gig: "Gig", now: datetime | None = None) -> bool:
    now = now or timezone.now()
    return now < gig.deadline and not gig.winners_announced


def is_gig_owner(gig: "Gig", caller: "Principal") -> bool:
    return caller.is_business and caller.id == gig.owner_id


def can_declare_winners(gig: "Gig", caller: "Principal") -> bool:
    return is_gig_owner(gig, caller) and not gig.winners_announced


def can_edit(gig: "Gig", caller: "Principal", *, has_submissions: bool) -> bool:
    return is_gig_owner(gig, caller) and not gig.winners_announced and not has_submissions
