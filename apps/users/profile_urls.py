from django.urls import path

from .views import MeView, ProfileDetailView

urlpatterns = [
    path("users/me/", MeView.as_view(), name="users-me"),
    path("profiles/<str:username>/", ProfileDetailView.as_view(), name="profile-detail"),
]
