"""
Typed failures raised by the gig core and rendered uniformly by the API.

Every failure carries a stable ``code`` plus a ``category`` telling the caller
whether to retry (``transient``), stop (``forbidden``), re-fetch state and
re-decide (``conflict``) or fix the request (``validation``).
"""

from __future__ import annotations

from django.core.exceptions import PermissionDenied as DjangoPermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler


class GigboardError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Request failed."
    default_code = "error"
    category = "validation"
    retryable = False

    @property
    def code(self) -> str:
        return self.default_code


class ValidationFailed(GigboardError):
    default_detail = "Invalid input."
    default_code = "validation_failed"


class Unauthenticated(GigboardError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Authentication credentials were not provided or are invalid."
    default_code = "unauthenticated"
    category = "forbidden"


class Unauthorized(GigboardError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You are not allowed to perform this action."
    default_code = "unauthorized"
    category = "forbidden"


class NotFound(GigboardError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class UnknownContributor(GigboardError):
    default_detail = "Contributor has no submission for this gig."
    default_code = "unknown_contributor"


class Conflict(GigboardError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The request conflicts with the current state."
    default_code = "conflict"
    category = "conflict"


class AlreadySubmitted(Conflict):
    default_detail = "You have already submitted to this gig."
    default_code = "already_submitted"


class AlreadyAnnounced(Conflict):
    default_detail = "Winners have already been announced for this gig."
    default_code = "already_announced"


class BreakdownMismatch(Conflict):
    default_detail = "Proposed prizes do not match the gig's bounty breakdown."
    default_code = "breakdown_mismatch"


class GigLocked(Conflict):
    default_detail = "This gig has submissions and can no longer be edited."
    default_code = "gig_locked"


class GigClosed(Conflict):
    default_detail = "This gig no longer accepts submissions."
    default_code = "gig_closed"


class StoreUnavailable(GigboardError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "The record store is temporarily unavailable. Try again shortly."
    default_code = "store_unavailable"
    category = "transient"
    retryable = True


# Framework-raised failures mapped onto the same taxonomy: (code, category, retryable).
_FRAMEWORK_ERRORS = (
    (exceptions.ValidationError, ("validation_failed", "validation", False)),
    (exceptions.ParseError, ("validation_failed", "validation", False)),
    (exceptions.NotAuthenticated, ("unauthenticated", "forbidden", False)),
    (exceptions.AuthenticationFailed, ("unauthenticated", "forbidden", False)),
    (exceptions.PermissionDenied, ("unauthorized", "forbidden", False)),
    (exceptions.NotFound, ("not_found", "validation", False)),
    (Http404, ("not_found", "validation", False)),
    (DjangoPermissionDenied, ("unauthorized", "forbidden", False)),
    (exceptions.MethodNotAllowed, ("method_not_allowed", "validation", False)),
    (exceptions.Throttled, ("throttled", "transient", True)),
)


def api_exception_handler(exc, context) -> Response | None:
    response = exception_handler(exc, context)
    if response is None:
        return response
    if isinstance(exc, GigboardError):
        response.data = {
            "detail": str(exc.detail),
            "code": exc.code,
            "category": exc.category,
            "retryable": exc.retryable,
        }
        return response
    for exc_class, (code, category, retryable) in _FRAMEWORK_ERRORS:
        if isinstance(exc, exc_class):
            data = response.data
            detail = data.get("detail", data) if isinstance(data, dict) and set(data) == {"detail"} else data
            response.data = {
                "detail": detail,
                "code": code,
                "category": category,
                "retryable": retryable,
            }
            break
    return response
