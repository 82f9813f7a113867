from .base import *  # noqa

DEBUG = True
ALLOWED_HOSTS = ["*"]
REALTIME_PUBLISH_ENABLED = False
REST_FRAMEWORK["DEFAULT_PERMISSION_CLASSES"] = [  # type: ignore[index]
    "rest_framework.permissions.IsAuthenticatedOrReadOnly",
]
