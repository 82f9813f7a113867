from __future__ import annotations

from unittest import mock

import pytest
from django.db import OperationalError
from django.test import override_settings

from apps.core.db import with_store_retry
from apps.core.exceptions import StoreUnavailable


@override_settings(STORE_RETRY_ATTEMPTS=3, STORE_RETRY_BACKOFF_SECONDS=0)
def test_transient_errors_are_retried_until_success():
    calls = mock.Mock(side_effect=[OperationalError("db gone"), OperationalError("db gone"), "ok"])

    @with_store_retry
    def read():
        return calls()

    assert read() == "ok"
    assert calls.call_count == 3


@override_settings(STORE_RETRY_ATTEMPTS=2, STORE_RETRY_BACKOFF_SECONDS=0)
def test_exhausted_retries_surface_store_unavailable():
    calls = mock.Mock(side_effect=OperationalError("db gone"))

    @with_store_retry
    def read():
        return calls()

    with pytest.raises(StoreUnavailable) as excinfo:
        read()
    assert calls.call_count == 2
    assert excinfo.value.retryable is True
    assert excinfo.value.category == "transient"


@pytest.mark.django_db
@override_settings(STORE_RETRY_ATTEMPTS=3, STORE_RETRY_BACKOFF_SECONDS=0)
def test_no_retry_inside_an_open_transaction():
    calls = mock.Mock(side_effect=OperationalError("db gone"))

    @with_store_retry
    def write():
        return calls()

    with pytest.raises(StoreUnavailable):
        write()
    assert calls.call_count == 1


def test_domain_errors_pass_through_untouched():
    @with_store_retry
    def fail():
        raise ValueError("boom")

    with pytest.raises(ValueError):
        fail()
