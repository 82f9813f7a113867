from __future__ import annotations

from apps.core.pubsub import gig_channel, publish_event

from .models import ChatMessage


def _serialize_message(message: ChatMessage) -> dict:
    from .serializers import ChatMessageSerializer

    return dict(ChatMessageSerializer(message).data)


def publish_chat_message(message: ChatMessage) -> None:
    payload = {
        "type": "chat:new",
        "gig_id": str(message.gig_id),
        "payload": _serialize_message(message),
    }
    publish_event(gig_channel(message.gig_id), payload)


def publish_chat_deleted(gig_id: int, message_id: int) -> None:
    payload = {
        "type": "chat:deleted",
        "gig_id": str(gig_id),
        "payload": {"id": str(message_id)},
    }
    publish_event(gig_channel(gig_id), payload)
