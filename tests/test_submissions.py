from __future__ import annotations

from datetime import timedelta

import pytest
from django.utils import timezone

from apps.core.exceptions import AlreadySubmitted, GigClosed, NotFound, Unauthorized, ValidationFailed
from apps.gigs.models import Submission
from apps.gigs.services.submissions import get_own_submission, list_submissions, submit
from apps.users.models import Role


def _submit(gig, user, as_principal, **overrides):
    payload = {
        "submission_link": "https://github.com/example/pr/1",
        "wallet_address": "0xabc123",
    }
    payload.update(overrides)
    return submit(gig_id=gig.id, contributor=as_principal(user), **payload)


@pytest.mark.django_db
def test_submit_records_submission(gig, make_user, as_principal):
    alice = make_user("alice")

    submission = _submit(gig, alice, as_principal, submission_link="  https://example.com/work  ")

    assert submission.contributor_username == "alice"
    assert submission.company_name == "Acme Labs"
    assert submission.submission_link == "https://example.com/work"
    assert submission.contact_email == "alice@example.com"
    assert Submission.objects.filter(gig=gig).count() == 1


@pytest.mark.django_db
def test_duplicate_submission_is_rejected(gig, make_user, as_principal):
    alice = make_user("alice")
    _submit(gig, alice, as_principal)

    with pytest.raises(AlreadySubmitted):
        _submit(gig, alice, as_principal, submission_link="https://example.com/second")

    assert Submission.objects.filter(gig=gig, contributor_username="alice").count() == 1


@pytest.mark.django_db
def test_submit_after_deadline_is_closed_for_every_role(make_gig, make_user, business, as_principal):
    gig = make_gig(deadline=timezone.now() - timedelta(minutes=1))
    alice = make_user("alice")

    with pytest.raises(GigClosed):
        _submit(gig, alice, as_principal)
    with pytest.raises(GigClosed):
        _submit(gig, business, as_principal)


@pytest.mark.django_db
def test_submit_after_announcement_is_closed(make_gig, make_user, as_principal):
    gig = make_gig(winners_announced=True)

    with pytest.raises(GigClosed):
        _submit(gig, make_user("alice"), as_principal)


@pytest.mark.django_db
def test_business_accounts_cannot_submit(gig, make_user, as_principal):
    globex = make_user("globex", role=Role.BUSINESS)

    with pytest.raises(Unauthorized):
        _submit(gig, globex, as_principal)


@pytest.mark.django_db
@pytest.mark.parametrize("field", ["submission_link", "wallet_address"])
def test_blank_required_fields_fail_validation(gig, make_user, as_principal, field):
    with pytest.raises(ValidationFailed):
        _submit(gig, make_user("alice"), as_principal, **{field: "   "})
    assert not Submission.objects.exists()


@pytest.mark.django_db
def test_invalid_contact_email_fails_validation(gig, make_user, as_principal):
    with pytest.raises(ValidationFailed):
        _submit(gig, make_user("alice"), as_principal, contact_email="not-an-email")


@pytest.mark.django_db
def test_submit_to_unknown_gig_is_not_found(make_user, as_principal):
    alice = make_user("alice")

    with pytest.raises(NotFound):
        submit(gig_id=42, contributor=as_principal(alice), submission_link="x", wallet_address="y")


@pytest.mark.django_db
def test_only_owner_lists_submissions(gig, business, make_user, as_principal):
    alice = make_user("alice")
    bob = make_user("bob")
    _submit(gig, alice, as_principal)
    _submit(gig, bob, as_principal)

    rows = list_submissions(gig_id=gig.id, caller=as_principal(business))
    assert [row.contributor_username for row in rows] == ["alice", "bob"]

    with pytest.raises(Unauthorized):
        list_submissions(gig_id=gig.id, caller=as_principal(alice))


@pytest.mark.django_db
def test_own_submission_lookup(gig, make_user, as_principal):
    alice = make_user("alice")
    _submit(gig, alice, as_principal)

    assert get_own_submission(gig_id=gig.id, caller=as_principal(alice)).contributor_username == "alice"
    with pytest.raises(NotFound):
        get_own_submission(gig_id=gig.id, caller=as_principal(make_user("bob")))


@pytest.mark.django_db
def test_submissions_are_immutable(gig, make_user, as_principal):
    from django.core.exceptions import ValidationError

    submission = _submit(gig, make_user("alice"), as_principal)
    submission.wallet_address = "0xother"

    with pytest.raises(ValidationError):
        submission.save()
    with pytest.raises(ValidationError):
        submission.delete()


@pytest.mark.django_db
def test_non_string_contact_email_fails_validation(gig, make_user, as_principal):
    with pytest.raises(ValidationFailed):
        _submit(gig, make_user("alice"), as_principal, contact_email=12345)


@pytest.mark.django_db(transaction=True)
def test_concurrent_duplicate_submissions_admit_exactly_one(gig, make_user, as_principal, run_concurrently):
    alice = make_user("alice")

    outcomes = run_concurrently(lambda: _submit(gig, alice, as_principal), 5)

    accepted = [outcome for outcome in outcomes if isinstance(outcome, Submission)]
    rejected = [outcome for outcome in outcomes if isinstance(outcome, AlreadySubmitted)]
    assert len(accepted) == 1
    assert len(rejected) == 4
    assert Submission.objects.filter(gig=gig, contributor_username="alice").count() == 1
