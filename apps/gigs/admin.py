from __future__ import annotations

from django.contrib import admin

from .models import Gig, Submission, Winner


@admin.register(Gig)
class GigAdmin(admin.ModelAdmin):
    list_display = ("id", "title", "company", "type", "deadline", "total_bounty", "winners_announced")
    list_filter = ("type", "winners_announced")
    search_fields = ("title", "company", "username")
    ordering = ("-created_at", "-id")
    readonly_fields = ("winners_announced",)

    def has_delete_permission(self, request, obj=None):  # type: ignore[override]
        return False


class _ReadOnlyAdmin(admin.ModelAdmin):
    def has_add_permission(self, request):  # type: ignore[override]
        return False

    def has_change_permission(self, request, obj=None):  # type: ignore[override]
        return False

    def has_delete_permission(self, request, obj=None):  # type: ignore[override]
        return False


@admin.register(Submission)
class SubmissionAdmin(_ReadOnlyAdmin):
    list_display = ("created_at", "gig", "contributor_username", "company_name")
    search_fields = ("contributor_username", "company_name")
    ordering = ("-created_at", "-id")


@admin.register(Winner)
class WinnerAdmin(_ReadOnlyAdmin):
    list_display = ("gig", "place", "contributor_username", "amount", "created_at")
    search_fields = ("contributor_username",)
    ordering = ("gig", "place")
