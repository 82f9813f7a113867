from __future__ import annotations

import threading
from datetime import timedelta
from decimal import Decimal

import pytest
from django.core.cache import cache
from django.db import connections
from django.utils import timezone
from rest_framework.test import APIClient

from apps.gigs.models import Gig, GigType
from apps.users.identity import Principal
from apps.users.models import Role, User

DEFAULT_BREAKDOWN = [{"place": 1, "amount": "700.00"}, {"place": 2, "amount": "300.00"}]


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def make_user(db):
    def _make(username: str, role: str = Role.FREELANCER, **extra) -> User:
        extra.setdefault("display_name", username.title())
        return User.objects.create_user(
            email=f"{username}@example.com",
            password="strongpassword",
            username=username,
            role=role,
            **extra,
        )

    return _make


@pytest.fixture
def business(make_user) -> User:
    return make_user("acme", role=Role.BUSINESS, display_name="Acme Labs")


@pytest.fixture
def make_gig(business):
    def _make(
        owner: User | None = None,
        *,
        deadline=None,
        breakdown: list | None = None,
        total: str = "1000.00",
        **extra,
    ) -> Gig:
        owner = owner or business
        return Gig.objects.create(
            owner=owner,
            company=owner.display_name,
            username=owner.username,
            title=extra.pop("title", "Build a landing page"),
            description=extra.pop("description", "Ship a responsive landing page for our launch."),
            type=extra.pop("type", GigType.BOUNTY),
            deadline=deadline or timezone.now() + timedelta(days=7),
            total_bounty=Decimal(total),
            bounty_breakdown=breakdown if breakdown is not None else list(DEFAULT_BREAKDOWN),
            **extra,
        )

    return _make


@pytest.fixture
def gig(make_gig) -> Gig:
    return make_gig()


@pytest.fixture
def as_principal():
    return Principal.from_user


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def run_concurrently():
    """Start ``count`` calls of ``target`` together and return each result or raised error."""

    def _run(target, count: int) -> list:
        barrier = threading.Barrier(count)
        outcomes: list = [None] * count

        def worker(index: int) -> None:
            try:
                barrier.wait()
                outcomes[index] = target()
            except Exception as exc:  # collected for the caller to assert on
                outcomes[index] = exc
            finally:
                connections.close_all()

        threads = [threading.Thread(target=worker, args=(index,)) for index in range(count)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=60)
        return outcomes

    return _run
