from __future__ import annotations

from rest_framework import serializers

from apps.users.avatars import resolve_avatar_url

from .lifecycle import can_submit, derive_phase
from .models import Gig, GigType, Submission, Winner


class GigSerializer(serializers.ModelSerializer):
    id = serializers.CharField(read_only=True)
    owner_id = serializers.CharField(read_only=True)
    phase = serializers.SerializerMethodField()
    can_submit = serializers.SerializerMethodField()
    avatar_url = serializers.SerializerMethodField()

    class Meta:
        model = Gig
        fields = [
            "id",
            "owner_id",
            "company",
            "username",
            "avatar_url",
            "title",
            "description",
            "type",
            "deadline",
            "total_bounty",
            "bounty_breakdown",
            "skills_required",
            "contact_info",
            "winners_announced",
            "phase",
            "can_submit",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_phase(self, obj: Gig) -> str:
        return str(derive_phase(obj))

    def get_can_submit(self, obj: Gig) -> bool:
        request = self.context.get("request")
        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated or getattr(user, "is_business", False):
            return False
        return can_submit(obj)

    def get_avatar_url(self, obj: Gig) -> str:
        return resolve_avatar_url(obj.owner.avatar_key)


class GigWriteSerializer(serializers.Serializer):
    """
    Shape-only input for gig create/edit; business rules run in the store service.
    """

    title = serializers.CharField(max_length=200)
    description = serializers.CharField()
    type = serializers.ChoiceField(choices=GigType.choices)
    deadline = serializers.DateTimeField()
    total_bounty = serializers.DecimalField(max_digits=18, decimal_places=2)
    bounty_breakdown = serializers.ListField(child=serializers.DictField(), allow_empty=True)
    skills_required = serializers.CharField(max_length=500, required=False, allow_blank=True)
    contact_info = serializers.CharField(max_length=255, required=False, allow_blank=True)


class SubmissionSerializer(serializers.ModelSerializer):
    id = serializers.CharField(read_only=True)
    gig = serializers.CharField(source="gig_id", read_only=True)

    class Meta:
        model = Submission
        fields = [
            "id",
            "gig",
            "contributor_username",
            "company_name",
            "submission_link",
            "wallet_address",
            "contact_email",
            "created_at",
        ]
        read_only_fields = fields


class SubmitSerializer(serializers.Serializer):
    submission_link = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)
    wallet_address = serializers.CharField(required=False, allow_blank=True, allow_null=True, trim_whitespace=False)
    contact_email = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class WinnerSerializer(serializers.ModelSerializer):
    id = serializers.CharField(read_only=True)
    gig = serializers.CharField(source="gig_id", read_only=True)
    submission = serializers.CharField(source="submission_id", read_only=True)

    class Meta:
        model = Winner
        fields = ["id", "gig", "submission", "contributor_username", "place", "amount", "created_at"]
        read_only_fields = fields


class DeclareWinnersSerializer(serializers.Serializer):
    # Entries are validated by the arbitration service after the ownership check.
    winners = serializers.JSONField(required=False)
