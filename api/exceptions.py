"""
Panel error handling.

Maps exceptions raised by panel commands to the error payloads posted
back to the status panel.
"""

import logging
from typing import Any, Dict

from core.domain.exceptions import (
    DomainException,
    InvalidLicenseKeyFormatError,
    LicenseApiTransportError,
)

logger = logging.getLogger(__name__)

ACTIVATION_FALLBACK = "An unknown error occurred during activation."
DEACTIVATION_FALLBACK = "An unknown error occurred during deactivation."
GENERIC_FALLBACK = "An unknown error occurred."

INVALID_KEY_FORMAT_MESSAGE = (
    "Invalid license key format. Expected XXXXXXXX-XXXX-XXXX-XXXX-XXXXXXXXXXXX."
)


def error_message_for(exc: Exception, fallback: str = GENERIC_FALLBACK) -> str:
    """
    Short user-facing message for an exception.

    Args:
        exc: Exception raised by a command
        fallback: Message used when the exception carries none

    Returns:
        Human-readable message
    """
    if isinstance(exc, InvalidLicenseKeyFormatError):
        return INVALID_KEY_FORMAT_MESSAGE
    if isinstance(exc, DomainException):
        return exc.message or fallback
    return str(exc) or fallback


def error_payload(exc: Exception, fallback: str = GENERIC_FALLBACK) -> Dict[str, Any]:
    """
    Build the ``error`` message posted to the panel.

    Args:
        exc: Exception raised by a command
        fallback: Message used when the exception carries none

    Returns:
        Panel message dictionary
    """
    if isinstance(exc, LicenseApiTransportError):
        logger.warning("Licensing service unreachable: %s", exc.message)
    elif isinstance(exc, DomainException):
        logger.info("Domain exception: %s - %s", exc.code, exc.message)
    else:
        logger.error("Unexpected error: %s", exc, exc_info=True)

    code = exc.code if isinstance(exc, DomainException) else "INTERNAL_ERROR"
    return {"type": "error", "value": error_message_for(exc, fallback), "code": code}
