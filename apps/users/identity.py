"""
Identity context for the gig core.

Callers are resolved from the server-side user record behind the bearer
credential; role and username claims in request payloads are never trusted.
"""

from __future__ import annotations

from dataclasses import dataclass

from rest_framework.request import Request

from apps.core.exceptions import Unauthenticated

from .models import Role, User


@dataclass(frozen=True)
class Principal:
    id: int
    username: str
    role: str
    email: str

    @property
    def is_business(self) -> bool:
        return self.role == Role.BUSINESS

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        if user is None or not getattr(user, "is_authenticated", False) or not user.is_active:
            raise Unauthenticated()
        return cls(id=user.id, username=user.username, role=user.role, email=user.email)


def principal_from_request(request: Request) -> Principal:
    return Principal.from_user(getattr(request, "user", None))
