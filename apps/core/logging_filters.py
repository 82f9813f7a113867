from __future__ import annotations

import logging

REDACTED_ATTRS = ("request", "request_body", "data", "body", "wallet_address", "contact_email")


class StripRequestBodyFilter(logging.Filter):
    """
    Drop request bodies and contributor contact/payout fields from log records to avoid leaking PII.
    """

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        for attr in REDACTED_ATTRS:
            if hasattr(record, attr):
                setattr(record, attr, None)
        return True
