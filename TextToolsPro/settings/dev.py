"""
Development settings for TextToolsPro.
"""

from .base import *  # noqa: F403, F401
from .logging import get_logging_config

DEBUG = True

# Premium is suspended after 30 seconds offline so the grace path can be exercised by hand
LICENSE_OFFLINE_DURATION_LIMIT_SECONDS = 30

LOGGING = get_logging_config("development")
