from __future__ import annotations

from rest_framework.throttling import ScopedRateThrottle, SimpleRateThrottle


class IPRateThrottle(SimpleRateThrottle):
    """
    IP-based throttle applied globally in addition to user/anon throttles.
    """

    scope = "ip"

    def get_cache_key(self, request, view) -> str | None:  # type: ignore[override]
        ident = self.get_ident(request)
        if ident is None:
            return None
        return self.cache_format % {"scope": self.scope, "ident": ident}


class ScopedUserRateThrottle(ScopedRateThrottle):
    """
    Per-user limit for write-heavy gig endpoints (submissions, winners, chat).

    Views opt in by setting ``throttle_scope``; only unsafe methods count.
    """

    def allow_request(self, request, view) -> bool:  # type: ignore[override]
        if request.method in ("GET", "HEAD", "OPTIONS"):
            return True
        return super().allow_request(request, view)

    def get_cache_key(self, request, view) -> str | None:  # type: ignore[override]
        scope = getattr(view, "throttle_scope", None)
        if not scope or not getattr(request.user, "is_authenticated", False):
            return None
        self.scope = f"user:{scope}"
        ident = request.user.pk
        return self.cache_format % {"scope": self.scope, "ident": ident}
