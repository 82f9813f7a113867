from __future__ import annotations

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import libs.idgen


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Gig",
            fields=[
                (
                    "id",
                    models.BigIntegerField(
                        default=libs.idgen.generate_id,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("company", models.CharField(max_length=120)),
                ("username", models.CharField(max_length=30)),
                ("title", models.CharField(max_length=200)),
                ("description", models.TextField()),
                (
                    "type",
                    models.CharField(
                        choices=[("project", "Project"), ("bounty", "Bounty"), ("grant", "Grant")],
                        max_length=16,
                    ),
                ),
                ("deadline", models.DateTimeField()),
                ("total_bounty", models.DecimalField(decimal_places=2, max_digits=18)),
                (
                    "bounty_breakdown",
                    models.JSONField(default=list, help_text="Ordered [{place, amount}] prize tiers."),
                ),
                ("skills_required", models.CharField(blank=True, max_length=500)),
                ("contact_info", models.CharField(blank=True, max_length=255)),
                ("winners_announced", models.BooleanField(default=False)),
                (
                    "owner",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="gigs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["company", "created_at"], name="gigs_gig_company_idx"),
                    models.Index(fields=["deadline"], name="gigs_gig_deadline_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(total_bounty__gte=0), name="gigs_total_bounty_gte_0"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Submission",
            fields=[
                (
                    "id",
                    models.BigIntegerField(
                        default=libs.idgen.generate_id,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("contributor_username", models.CharField(max_length=30)),
                ("company_name", models.CharField(blank=True, max_length=120)),
                ("submission_link", models.CharField(max_length=500)),
                ("wallet_address", models.CharField(max_length=255)),
                ("contact_email", models.EmailField(blank=True, max_length=254)),
                (
                    "contributor",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="submissions",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "gig",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="submissions",
                        to="gigs.gig",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at", "id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("gig", "contributor_username"),
                        name="gigs_submission_one_per_contributor",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Winner",
            fields=[
                (
                    "id",
                    models.BigIntegerField(
                        default=libs.idgen.generate_id,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("contributor_username", models.CharField(max_length=30)),
                ("place", models.PositiveIntegerField()),
                ("amount", models.DecimalField(decimal_places=2, max_digits=18)),
                (
                    "gig",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="winners",
                        to="gigs.gig",
                    ),
                ),
                (
                    "submission",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="awards",
                        to="gigs.submission",
                    ),
                ),
            ],
            options={
                "ordering": ["place"],
                "constraints": [
                    models.UniqueConstraint(fields=("gig", "place"), name="gigs_winner_one_per_place"),
                    models.CheckConstraint(condition=models.Q(amount__gte=0), name="gigs_winner_amount_gte_0"),
                ],
            },
        ),
    ]
