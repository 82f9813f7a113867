from .base import BASE_DIR, REST_FRAMEWORK
from .base import *  # noqa: F403

# Keep tests self-contained without external services. The database is file-backed so
# threaded tests share it; IMMEDIATE transactions serialize writers the way row locks do.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "gigboard-test.sqlite3",
        "OPTIONS": {"transaction_mode": "IMMEDIATE", "timeout": 20},
        "TEST": {"NAME": str(BASE_DIR / ".gigboard-test.sqlite3")},
    }
}

REALTIME_PUBLISH_ENABLED = False
RATE_LIMITS_ENABLED = False
RATELIMIT_ENABLE = False

STORE_RETRY_BACKOFF_SECONDS = 0.0

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = ()

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "gigboard-tests",
    }
}
