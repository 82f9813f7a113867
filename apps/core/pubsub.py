from __future__ import annotations

import json
import logging
from functools import lru_cache

from django.conf import settings
from redis import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_redis_client() -> Redis:
    url = getattr(settings, "PUBSUB_REDIS_URL", "redis://redis:6379/1")
    return Redis.from_url(url)


def gig_channel(gig_id: int) -> str:
    return f"gig:{gig_id}"


def publish_event(channel: str, payload: dict) -> bool:
    if not getattr(settings, "REALTIME_PUBLISH_ENABLED", True):
        return False
    try:
        client = get_redis_client()
        client.publish(channel, json.dumps(payload, default=str))
        return True
    except RedisError as exc:  # pragma: no cover - log and continue
        logger.warning("Failed to publish event on %s: %s", channel, exc)
        return False
