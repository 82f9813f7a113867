from django.urls import path

from .views import ChatMessageDetailView, GigChatView

urlpatterns = [
    path("gigs/<int:gig_id>/chat/", GigChatView.as_view(), name="gig-chat"),
    path("chat/messages/<int:message_id>/", ChatMessageDetailView.as_view(), name="chat-message-detail"),
]
