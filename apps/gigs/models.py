from __future__ import annotations

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models

from apps.core.models import AppendOnlyModel, BaseModel


class GigType(models.TextChoices):
    PROJECT = "project", "Project"
    BOUNTY = "bounty", "Bounty"
    GRANT = "grant", "Grant"


class Gig(BaseModel):
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="gigs",
    )
    company = models.CharField(max_length=120)
    username = models.CharField(max_length=30)
    title = models.CharField(max_length=200)
    description = models.TextField()
    type = models.CharField(max_length=16, choices=GigType.choices)
    deadline = models.DateTimeField()
    total_bounty = models.DecimalField(max_digits=18, decimal_places=2)
    bounty_breakdown = models.JSONField(default=list, help_text="Ordered [{place, amount}] prize tiers.")
    skills_required = models.CharField(max_length=500, blank=True)
    contact_info = models.CharField(max_length=255, blank=True)
    winners_announced = models.BooleanField(default=False)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["company", "created_at"], name="gigs_gig_company_idx"),
            models.Index(fields=["deadline"], name="gigs_gig_deadline_idx"),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(total_bounty__gte=0), name="gigs_total_bounty_gte_0"),
        ]

    def delete(self, using=None, keep_parents=False):  # type: ignore[override]
        raise ValidationError("Gigs are never deleted.")

    def __str__(self) -> str:  # pragma: no cover - debug helper
        return f"Gig<{self.id}:{self.title}>"


class Submission(AppendOnlyModel):
    gig = models.ForeignKey(Gig, on_delete=models.PROTECT, related_name="submissions")
    contributor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="submissions",
    )
    contributor_username = models.CharField(max_length=30)
    company_name = models.CharField(max_length=120, blank=True)
    submission_link = models.CharField(max_length=500)
    wallet_address = models.CharField(max_length=255)
    contact_email = models.EmailField(blank=True)

    class Meta:
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["gig", "contributor_username"],
                name="gigs_submission_one_per_contributor",
            ),
        ]


class Winner(AppendOnlyModel):
    gig = models.ForeignKey(Gig, on_delete=models.PROTECT, related_name="winners")
    submission = models.ForeignKey(Submission, on_delete=models.PROTECT, related_name="awards")
    contributor_username = models.CharField(max_length=30)
    place = models.PositiveIntegerField()
    amount = models.DecimalField(max_digits=18, decimal_places=2)

    class Meta:
        ordering = ["place"]
        constraints = [
            models.UniqueConstraint(fields=["gig", "place"], name="gigs_winner_one_per_place"),
            models.CheckConstraint(condition=models.Q(amount__gte=0), name="gigs_winner_amount_gte_0"),
        ]
