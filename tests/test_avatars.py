from __future__ import annotations

from django.test import override_settings

from apps.users.avatars import resolve_avatar_url


@override_settings(AVATAR_PUBLIC_BASE_URL="https://cdn.example.com/avatars/", AVATAR_DEFAULT_KEY="bp.jpeg")
def test_resolves_key_against_public_bucket():
    assert resolve_avatar_url("users/alice.png") == "https://cdn.example.com/avatars/users/alice.png"
    assert resolve_avatar_url("/users/alice.png") == "https://cdn.example.com/avatars/users/alice.png"


@override_settings(AVATAR_PUBLIC_BASE_URL="https://cdn.example.com/avatars", AVATAR_DEFAULT_KEY="bp.jpeg")
def test_blank_key_falls_back_to_default_avatar():
    assert resolve_avatar_url("") == "https://cdn.example.com/avatars/bp.jpeg"
    assert resolve_avatar_url(None) == "https://cdn.example.com/avatars/bp.jpeg"
