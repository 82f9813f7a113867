"""
Time-ordered 64-bit identifiers.

Layout: 41 bits of milliseconds since ``EPOCH_MS``, 10 bits of node id, 12 bits of
per-millisecond sequence. Ids from one node increase monotonically, which is what
lets chat and ledger rows use ``(created_at, id)`` as a total order.
"""

from __future__ import annotations

import os
import threading
import time

EPOCH_MS = 1_704_067_200_000  # 2024-01-01T00:00:00Z
NODE_BITS = 10
SEQUENCE_BITS = 12
MAX_NODE_ID = (1 << NODE_BITS) - 1
SEQUENCE_MASK = (1 << SEQUENCE_BITS) - 1


class SnowflakeGenerator:
    def __init__(self, node_id: int = 1) -> None:
        if not 0 <= node_id <= MAX_NODE_ID:
            raise ValueError(f"node_id must be between 0 and {MAX_NODE_ID}")
        self.node_id = node_id
        self._lock = threading.Lock()
        self._last_ms = -1
        self._sequence = 0

    @staticmethod
    def _now_ms() -> int:
        return time.time_ns() // 1_000_000

    def _until_after(self, last_ms: int) -> int:
        now = self._now_ms()
        while now <= last_ms:
            time.sleep(0.0001)
            now = self._now_ms()
        return now

    def next_id(self) -> int:
        with self._lock:
            now = self._now_ms()
            if now < self._last_ms:
                # clock stepped back
                now = self._until_after(self._last_ms)
            if now == self._last_ms:
                self._sequence = (self._sequence + 1) & SEQUENCE_MASK
                if self._sequence == 0:
                    now = self._until_after(now)
            else:
                self._sequence = 0
            self._last_ms = now
            return ((now - EPOCH_MS) << (NODE_BITS + SEQUENCE_BITS)) | (self.node_id << SEQUENCE_BITS) | self._sequence


_generator: SnowflakeGenerator | None = None
_generator_lock = threading.Lock()


def _default_generator() -> SnowflakeGenerator:
    global _generator
    with _generator_lock:
        if _generator is None:
            _generator = SnowflakeGenerator(node_id=int(os.getenv("SNOWFLAKE_NODE_ID", "1")))
        return _generator


def generate_id() -> int:
    return _default_generator().next_id()
