from __future__ import annotations

from unittest.mock import patch

import pytest
from django.utils import timezone

from apps.chat.models import ChatMessage
from apps.chat.services import decode_cursor, delete_message, encode_cursor, list_messages, post_message
from apps.core.exceptions import NotFound, Unauthorized, ValidationFailed


@pytest.mark.django_db
def test_post_then_list_ends_with_new_message(gig, make_user, as_principal):
    alice = as_principal(make_user("alice"))
    bob = as_principal(make_user("bob"))
    post_message(gig_id=gig.id, author=alice, body="first")
    posted = post_message(gig_id=gig.id, author=bob, body="  second  ")

    messages = list_messages(gig_id=gig.id)

    assert [m.body for m in messages] == ["first", "second"]
    assert messages[-1].id == posted.id
    assert posted.author_username == "bob"


@pytest.mark.django_db
def test_body_length_is_limited_in_code_points(gig, make_user, as_principal):
    alice = as_principal(make_user("alice"))

    with pytest.raises(ValidationFailed):
        post_message(gig_id=gig.id, author=alice, body="é" * 251)

    accepted = post_message(gig_id=gig.id, author=alice, body="é" * 250)
    assert len(accepted.body) == 250


@pytest.mark.django_db
def test_length_is_checked_before_trimming(gig, make_user, as_principal):
    alice = as_principal(make_user("alice"))

    with pytest.raises(ValidationFailed):
        post_message(gig_id=gig.id, author=alice, body="x" * 249 + "   ")


@pytest.mark.django_db
@pytest.mark.parametrize("body", ["", "   \n\t", None])
def test_blank_messages_are_rejected(gig, make_user, as_principal, body):
    with pytest.raises(ValidationFailed):
        post_message(gig_id=gig.id, author=as_principal(make_user("alice")), body=body)
    assert not ChatMessage.objects.exists()


@pytest.mark.django_db
def test_post_to_unknown_gig_is_not_found(make_user, as_principal):
    with pytest.raises(NotFound):
        post_message(gig_id=999, author=as_principal(make_user("alice")), body="hello")


@pytest.mark.django_db
def test_chat_stays_open_after_winners_announced(make_gig, make_user, as_principal):
    gig = make_gig(winners_announced=True)

    post_message(gig_id=gig.id, author=as_principal(make_user("alice")), body="congrats")

    assert len(list_messages(gig_id=gig.id)) == 1


@pytest.mark.django_db
def test_non_author_cannot_delete(gig, make_user, as_principal):
    message = post_message(gig_id=gig.id, author=as_principal(make_user("alice")), body="mine")

    with pytest.raises(Unauthorized):
        delete_message(message_id=message.id, caller=as_principal(make_user("bob")))

    assert ChatMessage.objects.filter(pk=message.pk).exists()


@pytest.mark.django_db
def test_author_deletes_message(gig, make_user, as_principal):
    alice = as_principal(make_user("alice"))
    message = post_message(gig_id=gig.id, author=alice, body="oops")

    delete_message(message_id=message.id, caller=alice)

    assert list_messages(gig_id=gig.id) == []
    with pytest.raises(NotFound):
        delete_message(message_id=message.id, caller=alice)


@pytest.mark.django_db
def test_after_cursor_returns_only_newer_messages(gig, make_user, as_principal):
    alice = as_principal(make_user("alice"))
    first = post_message(gig_id=gig.id, author=alice, body="one")
    second = post_message(gig_id=gig.id, author=alice, body="two")
    third = post_message(gig_id=gig.id, author=alice, body="three")

    newer = list_messages(gig_id=gig.id, after=encode_cursor(first))

    assert [m.id for m in newer] == [second.id, third.id]
    assert list_messages(gig_id=gig.id, after=encode_cursor(third)) == []


def test_cursor_round_trip_and_garbage():
    message = ChatMessage(id=123, created_at=timezone.now())
    ts, message_id = decode_cursor(encode_cursor(message))
    assert message_id == 123
    assert ts == message.created_at

    with pytest.raises(ValidationFailed):
        decode_cursor("not-a-cursor")


@pytest.mark.django_db(transaction=True)
def test_new_message_is_published_on_commit(gig, make_user, as_principal):
    with patch("apps.chat.events.publish_event") as mocked:
        message = post_message(gig_id=gig.id, author=as_principal(make_user("alice")), body="ping")

    channel, payload = mocked.call_args.args
    assert channel == f"gig:{gig.id}"
    assert payload["type"] == "chat:new"
    assert payload["payload"]["id"] == str(message.id)


@pytest.mark.django_db
def test_created_at_ties_are_ordered_by_id(gig, make_user):
    alice = make_user("alice")
    inserted_first = ChatMessage.objects.create(id=2_000, gig=gig, author=alice, author_username="alice", body="b")
    inserted_second = ChatMessage.objects.create(id=1_000, gig=gig, author=alice, author_username="alice", body="a")
    same_instant = timezone.now()
    ChatMessage.objects.filter(gig=gig).update(created_at=same_instant)
    inserted_second.refresh_from_db()
    inserted_first.refresh_from_db()

    assert [m.id for m in list_messages(gig_id=gig.id)] == [1_000, 2_000]
    assert [m.id for m in list_messages(gig_id=gig.id, after=encode_cursor(inserted_second))] == [2_000]
    assert list_messages(gig_id=gig.id, after=encode_cursor(inserted_first)) == []
