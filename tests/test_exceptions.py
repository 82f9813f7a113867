from __future__ import annotations

from rest_framework import exceptions, status

from apps.core.exceptions import (
    AlreadySubmitted,
    GigClosed,
    StoreUnavailable,
    UnknownContributor,
    api_exception_handler,
)


def test_domain_errors_render_code_category_and_retryable():
    response = api_exception_handler(AlreadySubmitted(), {})

    assert response.status_code == status.HTTP_409_CONFLICT
    assert response.data == {
        "detail": "You have already submitted to this gig.",
        "code": "already_submitted",
        "category": "conflict",
        "retryable": False,
    }


def test_custom_detail_keeps_stable_code():
    response = api_exception_handler(UnknownContributor("No submission from bob."), {})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data["detail"] == "No submission from bob."
    assert response.data["code"] == "unknown_contributor"
    assert response.data["category"] == "validation"


def test_transient_errors_are_retryable():
    response = api_exception_handler(StoreUnavailable(), {})

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert response.data["retryable"] is True
    assert GigClosed().retryable is False


def test_framework_validation_errors_share_the_envelope():
    response = api_exception_handler(exceptions.ValidationError({"title": ["This field is required."]}), {})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.data["code"] == "validation_failed"
    assert response.data["detail"] == {"title": ["This field is required."]}


def test_unhandled_exceptions_are_left_to_django():
    assert api_exception_handler(RuntimeError("boom"), {}) is None
