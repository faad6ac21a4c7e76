"""
Production settings for TextToolsPro.
"""

import os

from .base import *  # noqa: F403, F401

DEBUG = False

LICENSE_OFFLINE_DURATION_LIMIT_SECONDS = 7 * 24 * 60 * 60

# Secret key from environment
SECRET_KEY = os.environ.get("SECRET_KEY", SECRET_KEY)  # noqa: F405
