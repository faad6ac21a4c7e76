"""
Logging configuration for structured logging.

JSON output on stdout, one record per line, tagged with the component
(top-level package) that emitted it.
"""

import sys

from pythonjsonlogger import jsonlogger

COMPONENTS = ("core", "licenses", "features", "api", "TextToolsPro")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter that adds the emitting component."""

    def add_fields(self, log_record, record, message_dict):
        """Add custom fields to log record."""
        super().add_fields(log_record, record, message_dict)
        log_record["component"] = record.name.split(".", 1)[0]


def get_logging_config(environment: str = "development") -> dict:
    """
    Get logging configuration for the extension.

    Args:
        environment: Environment name (development, production, test)

    Returns:
        Django logging configuration dictionary
    """
    log_level = "DEBUG" if environment == "development" else "INFO"

    loggers = {
        component: {
            "handlers": ["console"],
            "level": log_level,
            "propagate": False,
        }
        for component in COMPONENTS
    }
    loggers["django"] = {
        "handlers": ["console"],
        "level": "WARNING",
        "propagate": False,
    }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": CustomJsonFormatter,
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            },
            "simple": {
                "format": "{levelname} {message}",
                "style": "{",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
                "stream": sys.stdout,
            },
        },
        "root": {
            "handlers": ["console"],
            "level": log_level,
        },
        "loggers": loggers,
    }
