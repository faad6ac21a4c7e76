"""
Base Django settings for TextToolsPro.

These settings are shared across all environments.
Environment-specific overrides are in dev.py, test.py, and prod.py
"""
import os
from pathlib import Path

from .logging import get_logging_config

# Build paths inside the project
BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Only used by Django internals; nothing is signed with it
SECRET_KEY = os.environ.get("SECRET_KEY", "text-tools-pro-local-key")

INSTALLED_APPS = []

USE_TZ = True
TIME_ZONE = "UTC"

# Licensing service
LICENSE_STORE_ID = int(os.environ.get("LICENSE_STORE_ID", "157343"))
LICENSE_PRODUCT_ID = int(os.environ.get("LICENSE_PRODUCT_ID", "463516"))

LICENSE_API_ENDPOINTS = {
    "PING": os.environ.get("LICENSE_API_PING_URL", "https://api.lemonsqueezy.com/ping"),
    "ACTIVATE": "https://api.lemonsqueezy.com/v1/licenses/activate",
    "VALIDATE": "https://api.lemonsqueezy.com/v1/licenses/validate",
    "DEACTIVATE": "https://api.lemonsqueezy.com/v1/licenses/deactivate",
}

LICENSE_PING_INTERVAL_SECONDS = float(os.environ.get("LICENSE_PING_INTERVAL_SECONDS", "5"))
LICENSE_OFFLINE_DURATION_LIMIT_SECONDS = float(
    os.environ.get("LICENSE_OFFLINE_DURATION_LIMIT_SECONDS", str(7 * 24 * 60 * 60))
)
LICENSE_API_TIMEOUT_SECONDS = float(os.environ.get("LICENSE_API_TIMEOUT_SECONDS", "10"))
LICENSE_INSTANCE_NAME_PREFIX = "VSCode"
LICENSE_VALIDATE_ON_STARTUP = True

# Extension state survives restarts in a file-based cache
CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.filebased.FileBasedCache",
        "LOCATION": os.environ.get(
            "TEXT_TOOLS_STATE_DIR", str(Path.home() / ".text-tools-pro" / "state")
        ),
        "KEY_PREFIX": "text-tools-pro",
        "TIMEOUT": None,
    }
}

# Observability
LOGGING = get_logging_config(os.environ.get("TEXT_TOOLS_ENV", "production"))
