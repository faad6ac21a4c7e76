"""
User notification abstraction (port).

The host editor shows short informational, warning and error messages.
The lifecycle engine and the sidebar route every user-facing message
through this port.
"""
import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class NotificationPort(ABC):
    """Abstract notification channel."""

    @abstractmethod
    def show_info(self, message: str) -> None:
        """Show an informational message."""
        pass

    @abstractmethod
    def show_warning(self, message: str) -> None:
        """Show a warning message."""
        pass

    @abstractmethod
    def show_error(self, message: str) -> None:
        """Show an error message."""
        pass


class LoggingNotifier(NotificationPort):
    """Notifier that writes messages to the log; used when no host UI is attached."""

    def show_info(self, message: str) -> None:
        logger.info(message, extra={"notification": "info"})

    def show_warning(self, message: str) -> None:
        logger.warning(message, extra={"notification": "warning"})

    def show_error(self, message: str) -> None:
        logger.error(message, extra={"notification": "error"})
