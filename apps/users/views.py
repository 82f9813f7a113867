from __future__ import annotations

from django.conf import settings
from django.utils.decorators import method_decorator
from django_ratelimit.decorators import ratelimit
from rest_framework import generics, permissions, status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from .models import User
from .serializers import (
    LoginSerializer,
    ProfileUpdateSerializer,
    PublicProfileSerializer,
    RegisterSerializer,
    UserSerializer,
)

AUTH_RATE = f"{getattr(settings, 'AUTH_RPS_IP', 5)}/s"


def _build_auth_payload(user: User, request: Request, message: str = "") -> dict:
    refresh = RefreshToken.for_user(user)
    return {
        "token": str(refresh.access_token),
        "refreshToken": str(refresh),
        "user": UserSerializer(user, context={"request": request}).data,
        "message": message or "",
    }


@method_decorator(ratelimit(key="ip", rate=AUTH_RATE, method="POST", block=True), name="post")
class RegisterView(generics.CreateAPIView):
    serializer_class = RegisterSerializer
    permission_classes = [permissions.AllowAny]

    def create(self, request: Request, *args, **kwargs) -> Response:
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        payload = _build_auth_payload(user, request, message="Registration successful.")
        headers = self.get_success_headers(serializer.data)
        return Response(payload, status=status.HTTP_201_CREATED, headers=headers)


@method_decorator(ratelimit(key="ip", rate=AUTH_RATE, method="POST", block=True), name="post")
class LoginView(generics.GenericAPIView):
    serializer_class = LoginSerializer
    permission_classes = [permissions.AllowAny]

    def post(self, request: Request, *args, **kwargs) -> Response:
        serializer = self.get_serializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        user = serializer.validated_data["user"]
        payload = _build_auth_payload(user, request, message="Login successful.")
        return Response(payload, status=status.HTTP_200_OK)


class TokenRefreshAPIView(TokenRefreshView):
    permission_classes = [permissions.AllowAny]

    def post(self, request: Request, *args, **kwargs) -> Response:
        response = super().post(request, *args, **kwargs)
        if response.status_code != status.HTTP_200_OK:
            return response
        data = response.data or {}
        payload = {
            "token": data.get("access"),
            "refreshToken": data.get("refresh"),
            "message": "Token refreshed.",
        }
        return Response(payload, status=response.status_code)


class MeView(generics.GenericAPIView):
    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request: Request) -> Response:
        return Response(self.get_serializer(request.user).data)

    def patch(self, request: Request) -> Response:
        serializer = ProfileUpdateSerializer(
            request.user,
            data=request.data,
            partial=True,
            context={"request": request},
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(self.get_serializer(request.user).data)


class ProfileDetailView(generics.RetrieveAPIView):
    serializer_class = PublicProfileSerializer
    permission_classes = [permissions.AllowAny]
    queryset = User.objects.filter(is_active=True)
    lookup_field = "username"
