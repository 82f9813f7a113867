from __future__ import annotations

import re

USERNAME_MIN_LENGTH = 3


def normalize_username(value: str, max_length: int) -> str:
    cleaned = re.sub(r"[^a-z0-9_]", "", value.strip().lower())
    cleaned = re.sub(r"_+", "_", cleaned).strip("_")
    return cleaned[:max_length]
