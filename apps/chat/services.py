"""
Per-gig chat log.

Messages are appended in ``(created_at, id)`` order; snowflake ids are time-ordered,
so the pair is a stable total order. Readers page forward with an opaque ``after``
cursor and never hold server-side state. Chat is independent of the gig phase.
"""

from __future__ import annotations

import base64
import json
import logging
from datetime import datetime, timezone as dt_timezone
from typing import Any, List

from django.conf import settings
from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from apps.core.db import with_store_retry
from apps.core.exceptions import NotFound, Unauthorized, ValidationFailed
from apps.gigs.services.store import get_gig
from apps.users.identity import Principal

from .events import publish_chat_deleted, publish_chat_message
from .models import ChatMessage

logger = logging.getLogger(__name__)


def max_body_length() -> int:
    return int(getattr(settings, "GIG_CHAT_MAX_LENGTH", 250))


def encode_cursor(message: ChatMessage) -> str:
    ts = message.created_at.astimezone(dt_timezone.utc).isoformat()
    payload = json.dumps({"ts": ts, "id": message.id}, separators=(",", ":"), sort_keys=True).encode("utf-8")
    return base64.urlsafe_b64encode(payload).rstrip(b"=").decode("ascii")


def decode_cursor(cursor_raw: str) -> tuple[datetime, int]:
    padding = "=" * (-len(cursor_raw) % 4)
    try:
        decoded = base64.urlsafe_b64decode(cursor_raw + padding)
        payload = json.loads(decoded.decode("utf-8"))
    except (ValueError, UnicodeDecodeError):
        raise ValidationFailed("Invalid cursor.") from None
    if not isinstance(payload, dict):
        raise ValidationFailed("Invalid cursor.")
    ts_raw = payload.get("ts")
    message_id = payload.get("id")
    if not isinstance(ts_raw, str) or not isinstance(message_id, int) or isinstance(message_id, bool):
        raise ValidationFailed("Invalid cursor.")
    dt = parse_datetime(ts_raw)
    if dt is None:
        raise ValidationFailed("Invalid cursor.")
    if timezone.is_naive(dt):
        dt = timezone.make_aware(dt, dt_timezone.utc)
    return dt.astimezone(dt_timezone.utc), message_id


@with_store_retry
def post_message(*, gig_id: Any, author: Principal, body: Any) -> ChatMessage:
    gig = get_gig(gig_id)
    if not isinstance(body, str):
        raise ValidationFailed("Message body is required.")
    limit = max_body_length()
    if len(body) > limit:
        raise ValidationFailed(f"Messages are limited to {limit} characters.")
    text = body.strip()
    if not text:
        raise ValidationFailed("Message body cannot be blank.")
    with transaction.atomic():
        message = ChatMessage.objects.create(
            gig=gig,
            author_id=author.id,
            author_username=author.username,
            body=text,
        )
        transaction.on_commit(lambda: publish_chat_message(message))
    return message


@with_store_retry
def list_messages(*, gig_id: Any, after: str | None = None) -> List[ChatMessage]:
    gig = get_gig(gig_id)
    qs = ChatMessage.objects.filter(gig=gig).order_by("created_at", "id")
    if after:
        cursor_dt, cursor_id = decode_cursor(after)
        qs = qs.filter(Q(created_at__gt=cursor_dt) | Q(created_at=cursor_dt, id__gt=cursor_id))
    return list(qs)


@with_store_retry
def delete_message(*, message_id: Any, caller: Principal) -> None:
    with transaction.atomic():
        try:
            message = ChatMessage.objects.select_for_update().get(pk=message_id)
        except (ChatMessage.DoesNotExist, ValueError, TypeError):
            raise NotFound("Message not found.") from None
        if message.author_username != caller.username:
            raise Unauthorized("Only the author can delete this message.")
        gig_id = message.gig_id
        message.delete()
        transaction.on_commit(lambda: publish_chat_deleted(gig_id, message_id))
    logger.info("Chat message deleted", extra={"gig_id": gig_id, "message_id": message_id})
