from __future__ import annotations

from django.db import models

from apps.core.models import BaseModel


class ChatMessage(BaseModel):
    gig = models.ForeignKey("gigs.Gig", on_delete=models.CASCADE, related_name="chat_messages")
    author = models.ForeignKey("users.User", on_delete=models.CASCADE, related_name="chat_messages")
    author_username = models.CharField(max_length=30)
    body = models.TextField()

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["gig", "created_at", "id"], name="chat_message_gig_order_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover - debug helper
        return f"ChatMessage<{self.id}:{self.author_username}>"
