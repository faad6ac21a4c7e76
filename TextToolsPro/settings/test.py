"""
Test settings for TextToolsPro.
"""

from .base import *  # noqa: F403, F401

DEBUG = False

# Use in-memory cache for tests
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "text-tools-pro-tests",
    }
}

LICENSE_PING_INTERVAL_SECONDS = 0.01
LICENSE_OFFLINE_DURATION_LIMIT_SECONDS = 30

# Disable logging during tests
LOGGING_CONFIG = None
