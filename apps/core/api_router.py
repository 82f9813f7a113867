from django.urls import include, path

urlpatterns = [
    path("auth/", include("apps.users.urls")),
    path("", include("apps.users.profile_urls")),
    path("", include("apps.gigs.urls")),
    path("", include("apps.chat.urls")),
]
