from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, List

from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.core.db import with_store_retry
from apps.core.exceptions import AlreadySubmitted, GigClosed, NotFound, Unauthorized, ValidationFailed
from apps.gigs.lifecycle import can_submit, is_gig_owner
from apps.gigs.models import Submission
from apps.gigs.services.store import get_gig
from apps.users.identity import Principal

logger = logging.getLogger(__name__)

SUBMISSION_LINK_MAX_LENGTH = Submission._meta.get_field("submission_link").max_length
WALLET_ADDRESS_MAX_LENGTH = Submission._meta.get_field("wallet_address").max_length


def _clean_required(value: Any, field: str, max_length: int) -> str:
    cleaned = "" if value is None else str(value).strip()
    if not cleaned:
        raise ValidationFailed(f"{field} is required.")
    if len(cleaned) > max_length:
        raise ValidationFailed(f"{field} must be at most {max_length} characters.")
    return cleaned


def _clean_email(value: Any, fallback: str) -> str:
    email = ("" if value is None else str(value)).strip() or (fallback or "").strip()
    if not email:
        return ""
    try:
        validate_email(email)
    except DjangoValidationError:
        raise ValidationFailed("contact_email must be a valid email address.") from None
    return email


@with_store_retry
def submit(
    *,
    gig_id: Any,
    contributor: Principal,
    submission_link: Any,
    wallet_address: Any,
    contact_email: Any = None,
    now: datetime | None = None,
) -> Submission:
    """
    Record a contributor's one and only submission to a gig.

    The gig row is locked for the duration of the write so the phase check cannot
    race a winner announcement or a gig edit; the (gig, contributor_username)
    unique constraint decides between concurrent submissions from the same
    contributor.
    """
    now = now or timezone.now()
    with transaction.atomic():
        gig = get_gig(gig_id, for_update=True)
        if not can_submit(gig, now):
            raise GigClosed()
        if contributor.is_business:
            raise Unauthorized("Business accounts cannot submit to gigs.")
        link = _clean_required(submission_link, "submission_link", SUBMISSION_LINK_MAX_LENGTH)
        wallet = _clean_required(wallet_address, "wallet_address", WALLET_ADDRESS_MAX_LENGTH)
        email = _clean_email(contact_email, contributor.email)
        try:
            with transaction.atomic():
                submission = Submission.objects.create(
                    gig=gig,
                    contributor_id=contributor.id,
                    contributor_username=contributor.username,
                    company_name=gig.company,
                    submission_link=link,
                    wallet_address=wallet,
                    contact_email=email,
                )
        except IntegrityError as exc:
            logger.info(
                "Duplicate submission rejected",
                extra={"gig_id": gig.id, "contributor": contributor.username},
            )
            raise AlreadySubmitted() from exc
    logger.info(
        "Submission accepted",
        extra={"gig_id": gig.id, "submission_id": submission.id, "contributor": contributor.username},
    )
    return submission


@with_store_retry
def list_submissions(*, gig_id: Any, caller: Principal) -> List[Submission]:
    gig = get_gig(gig_id)
    if not is_gig_owner(gig, caller):
        raise Unauthorized("Only the posting organization can view submissions.")
    return list(Submission.objects.filter(gig=gig).order_by("created_at", "id"))


@with_store_retry
def get_own_submission(*, gig_id: Any, caller: Principal) -> Submission:
    gig = get_gig(gig_id)
    submission = Submission.objects.filter(gig=gig, contributor_username=caller.username).first()
    if submission is None:
        raise NotFound("You have not submitted to this gig.")
    return submission
