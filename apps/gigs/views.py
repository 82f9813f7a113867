from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, mixins, permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from apps.core.pagination import GigCursorPagination
from apps.users.identity import principal_from_request

from .filters import GigFilter
from .serializers import (
    DeclareWinnersSerializer,
    GigSerializer,
    GigWriteSerializer,
    SubmissionSerializer,
    SubmitSerializer,
    WinnerSerializer,
)
from .services.store import create_gig, gig_queryset, update_gig
from .services.submissions import get_own_submission, list_submissions, submit
from .services.winners import declare_winners, list_winners


class GigViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = GigSerializer
    pagination_class = GigCursorPagination
    filter_backends = [DjangoFilterBackend, filters.SearchFilter, filters.OrderingFilter]
    filterset_class = GigFilter
    search_fields = ["title", "skills_required", "company"]
    ordering_fields = ["created_at", "deadline", "total_bounty"]
    lookup_value_regex = r"\d+"
    throttle_scope: str | None = None

    def get_queryset(self):  # type: ignore[override]
        return gig_queryset()

    def get_permissions(self):  # type: ignore[override]
        if self.action in {"list", "retrieve"}:
            return [permissions.AllowAny()]
        if self.action == "winners" and self.request.method in permissions.SAFE_METHODS:
            return [permissions.AllowAny()]
        return [permissions.IsAuthenticated()]

    def _render_gig(self, gig, status_code: int = status.HTTP_200_OK) -> Response:
        gig = gig_queryset().get(pk=gig.pk)
        return Response(GigSerializer(gig, context=self.get_serializer_context()).data, status=status_code)

    def create(self, request: Request, *args, **kwargs) -> Response:
        principal = principal_from_request(request)
        serializer = GigWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        gig = create_gig(owner=principal, data=serializer.validated_data)
        return self._render_gig(gig, status.HTTP_201_CREATED)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        principal = principal_from_request(request)
        serializer = GigWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        gig = update_gig(gig_id=pk, caller=principal, data=serializer.validated_data)
        return self._render_gig(gig)

    @action(detail=True, methods=["get", "post"], url_path="submissions", throttle_scope="submissions")
    def submissions(self, request: Request, pk: str | None = None) -> Response:
        principal = principal_from_request(request)
        if request.method == "GET":
            rows = list_submissions(gig_id=pk, caller=principal)
            return Response(SubmissionSerializer(rows, many=True).data)
        serializer = SubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        submission = submit(
            gig_id=pk,
            contributor=principal,
            submission_link=data.get("submission_link"),
            wallet_address=data.get("wallet_address"),
            contact_email=data.get("contact_email"),
        )
        return Response(SubmissionSerializer(submission).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["get"], url_path="submissions/me")
    def my_submission(self, request: Request, pk: str | None = None) -> Response:
        submission = get_own_submission(gig_id=pk, caller=principal_from_request(request))
        return Response(SubmissionSerializer(submission).data)

    @action(detail=True, methods=["get", "post"], url_path="winners", throttle_scope="winners")
    def winners(self, request: Request, pk: str | None = None) -> Response:
        if request.method == "GET":
            return Response(WinnerSerializer(list_winners(gig_id=pk), many=True).data)
        principal = principal_from_request(request)
        serializer = DeclareWinnersSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        committed = declare_winners(
            gig_id=pk,
            caller=principal,
            proposed=serializer.validated_data.get("winners"),
        )
        return Response(WinnerSerializer(committed, many=True).data, status=status.HTTP_201_CREATED)
