from __future__ import annotations

from rest_framework import serializers

from .models import ChatMessage


class ChatMessageSerializer(serializers.ModelSerializer):
    id = serializers.CharField(read_only=True)
    gig = serializers.CharField(source="gig_id", read_only=True)

    class Meta:
        model = ChatMessage
        fields = ["id", "gig", "author_username", "body", "created_at"]
        read_only_fields = fields


class PostMessageSerializer(serializers.Serializer):
    # Length and blankness are checked on the raw text by the chat service.
    body = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
