from __future__ import annotations

from rest_framework import permissions, status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.users.identity import principal_from_request

from .serializers import ChatMessageSerializer, PostMessageSerializer
from .services import delete_message, encode_cursor, list_messages, post_message


class GigChatView(APIView):
    permission_classes = [permissions.IsAuthenticatedOrReadOnly]
    throttle_scope = "chat"

    def get(self, request: Request, gig_id: int) -> Response:
        after = request.query_params.get("after") or None
        messages = list_messages(gig_id=gig_id, after=after)
        cursor = encode_cursor(messages[-1]) if messages else after
        return Response({"results": ChatMessageSerializer(messages, many=True).data, "cursor": cursor})

    def post(self, request: Request, gig_id: int) -> Response:
        serializer = PostMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        message = post_message(
            gig_id=gig_id,
            author=principal_from_request(request),
            body=serializer.validated_data.get("body"),
        )
        return Response(ChatMessageSerializer(message).data, status=status.HTTP_201_CREATED)


class ChatMessageDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated]
    throttle_scope = "chat"

    def delete(self, request: Request, message_id: int) -> Response:
        delete_message(message_id=message_id, caller=principal_from_request(request))
        return Response(status=status.HTTP_204_NO_CONTENT)
