from __future__ import annotations

import logging
from typing import Any, Mapping

from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.core.db import with_store_retry
from apps.core.exceptions import AlreadyAnnounced, GigLocked, NotFound, Unauthorized, ValidationFailed
from apps.gigs.breakdown import parse_breakdown, serialize_breakdown, validate_breakdown
from apps.gigs.lifecycle import can_edit, is_gig_owner
from apps.gigs.models import Gig, GigType, Submission
from apps.users.identity import Principal
from apps.users.models import User

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    "title",
    "description",
    "type",
    "deadline",
    "total_bounty",
    "bounty_breakdown",
    "skills_required",
    "contact_info",
)


def gig_queryset() -> QuerySet[Gig]:
    return Gig.objects.select_related("owner")


def get_gig(gig_id: Any, *, for_update: bool = False) -> Gig:
    queryset = Gig.objects.all()
    if for_update:
        queryset = queryset.select_for_update()
    try:
        return queryset.get(pk=gig_id)
    except (Gig.DoesNotExist, ValueError, TypeError):
        raise NotFound("Gig not found.") from None


def insert_gig(**fields: Any) -> Gig:
    return Gig.objects.create(**fields)


def conditional_update(gig_id: Any, predicate: Mapping[str, Any], patch: Mapping[str, Any]) -> int:
    """Apply ``patch`` only where the gig still matches ``predicate``; returns rows touched."""
    values = dict(patch)
    values.setdefault("updated_at", timezone.now())
    return Gig.objects.filter(pk=gig_id, **predicate).update(**values)


def has_submissions(gig: Gig) -> bool:
    return Submission.objects.filter(gig=gig).exists()


def _validate_fields(data: Mapping[str, Any]) -> dict:
    cleaned: dict = {}
    title = (data.get("title") or "").strip()
    if len(title) < 3:
        raise ValidationFailed("Title must be at least 3 characters long.")
    description = (data.get("description") or "").strip()
    if len(description) < 10:
        raise ValidationFailed("Description must be at least 10 characters long.")
    gig_type = data.get("type")
    if gig_type not in GigType.values:
        raise ValidationFailed("Please select a valid type.")
    deadline = data.get("deadline")
    if deadline is None:
        raise ValidationFailed("deadline is required.")
    if timezone.is_naive(deadline):
        deadline = timezone.make_aware(deadline)
    tiers = parse_breakdown(data.get("bounty_breakdown"))
    total = validate_breakdown(tiers, data.get("total_bounty"))
    cleaned.update(
        title=title,
        description=description,
        type=gig_type,
        deadline=deadline,
        total_bounty=total,
        bounty_breakdown=serialize_breakdown(tiers),
        skills_required=(data.get("skills_required") or "").strip(),
        contact_info=(data.get("contact_info") or "").strip(),
    )
    return cleaned


@with_store_retry
def create_gig(*, owner: Principal, data: Mapping[str, Any]) -> Gig:
    if not owner.is_business:
        raise Unauthorized("Only business accounts can post gigs.")
    cleaned = _validate_fields(data)
    company = User.objects.filter(pk=owner.id).values_list("display_name", flat=True).first() or ""
    gig = insert_gig(owner_id=owner.id, company=company, username=owner.username, **cleaned)
    logger.info("Gig created", extra={"gig_id": gig.id, "owner_id": owner.id, "total_bounty": str(gig.total_bounty)})
    return gig


@with_store_retry
def update_gig(*, gig_id: Any, caller: Principal, data: Mapping[str, Any]) -> Gig:
    with transaction.atomic():
        gig = get_gig(gig_id, for_update=True)
        if not is_gig_owner(gig, caller):
            raise Unauthorized("Only the posting organization can edit this gig.")
        if gig.winners_announced:
            raise AlreadyAnnounced()
        if not can_edit(gig, caller, has_submissions=has_submissions(gig)):
            raise GigLocked()
        merged = {field: getattr(gig, field) for field in EDITABLE_FIELDS}
        merged.update({key: value for key, value in data.items() if key in EDITABLE_FIELDS})
        cleaned = _validate_fields(merged)
        for field, value in cleaned.items():
            setattr(gig, field, value)
        gig.save(update_fields=[*cleaned.keys(), "updated_at"])
    logger.info("Gig updated", extra={"gig_id": gig.id, "fields": sorted(data.keys())})
    return gig
