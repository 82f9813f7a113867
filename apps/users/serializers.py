from __future__ import annotations

from django.contrib.auth import authenticate
from rest_framework import serializers

from .avatars import resolve_avatar_url
from .models import Role, User
from .utils import USERNAME_MIN_LENGTH, normalize_username


class PublicProfileSerializer(serializers.ModelSerializer):
    avatar_url = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "display_name",
            "role",
            "about",
            "avatar_url",
            "twitter_url",
            "github_url",
            "telegram_url",
            "website_url",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_avatar_url(self, obj: User) -> str:
        return resolve_avatar_url(obj.avatar_key)


class UserSerializer(PublicProfileSerializer):
    class Meta(PublicProfileSerializer.Meta):
        fields = PublicProfileSerializer.Meta.fields + ["email", "avatar_key"]
        read_only_fields = fields


class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=8)
    role = serializers.ChoiceField(choices=Role.choices)

    class Meta:
        model = User
        fields = ["email", "username", "display_name", "role", "password"]

    def validate_username(self, value: str) -> str:
        max_length = User._meta.get_field("username").max_length
        normalized = normalize_username(value or "", max_length)
        if len(normalized) < USERNAME_MIN_LENGTH:
            raise serializers.ValidationError(
                f"Username must be at least {USERNAME_MIN_LENGTH} letters, numbers or underscores."
            )
        if User.objects.filter(username=normalized).exists():
            raise serializers.ValidationError("Username is already taken.")
        return normalized

    def validate_display_name(self, value: str) -> str:
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Please provide a display or company name.")
        return value

    def create(self, validated_data: dict) -> User:
        password = validated_data.pop("password")
        return User.objects.create_user(password=password, **validated_data)


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, attrs: dict) -> dict:
        email = attrs.get("email")
        password = attrs.get("password")
        user = authenticate(request=self.context.get("request"), email=email, password=password)
        if not user:
            raise serializers.ValidationError("Invalid credentials")
        attrs["user"] = user
        return attrs


class ProfileUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            "display_name",
            "about",
            "avatar_key",
            "twitter_url",
            "github_url",
            "telegram_url",
            "website_url",
        ]

    def validate_display_name(self, value: str) -> str:
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Display name cannot be blank.")
        return value
