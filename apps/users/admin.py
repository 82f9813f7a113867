from __future__ import annotations

from django.contrib import admin

from apps.users.models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ("username", "email", "display_name", "role", "is_active", "created_at")
    list_filter = ("role", "is_active", "is_staff")
    search_fields = ("username", "email", "display_name")
    readonly_fields = ("created_at", "updated_at", "last_login")
    exclude = ("password",)
