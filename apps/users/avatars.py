from __future__ import annotations

from django.conf import settings


def resolve_avatar_url(key: str | None) -> str:
    base_url = getattr(settings, "AVATAR_PUBLIC_BASE_URL", "").rstrip("/")
    object_key = (key or "").strip().lstrip("/") or getattr(settings, "AVATAR_DEFAULT_KEY", "bp.jpeg")
    return f"{base_url}/{object_key}"
