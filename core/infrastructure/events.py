"""
In-memory event bus implementation.

Each lifecycle engine owns one bus; status listeners, the audit log
and the metrics handler subscribe to it.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Type, Union

from core.domain.events import DomainEvent, EventBus, EventHandler

logger = logging.getLogger(__name__)


class CallbackEventHandler(EventHandler):
    """Adapts a plain callable (sync or async) to the EventHandler interface."""

    def __init__(self, callback: Callable[[DomainEvent], Union[None, Awaitable[None]]]):
        self.callback = callback

    async def handle(self, event: DomainEvent) -> None:
        result = self.callback(event)
        if asyncio.iscoroutine(result):
            await result


class InMemoryEventBus(EventBus):
    """
    In-memory event bus implementation.

    Handlers are kept per event type and run when an event is published.
    A failing handler is logged and never prevents the others from running.
    """

    def __init__(self):
        """Initialize the event bus."""
        self._handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        """
        Subscribe to a domain event type.

        Args:
            event_type: The type of event to subscribe to
            handler: The handler to call when event is published
        """
        if event_type not in self._handlers:
            self._handlers[event_type] = []
        self._handlers[event_type].append(handler)
        logger.debug(f"Subscribed {handler.__class__.__name__} to {event_type.__name__}")

    def unsubscribe(self, event_type: Type[DomainEvent], handler: EventHandler) -> None:
        """
        Remove a handler from an event type.

        Args:
            event_type: The event type the handler was subscribed to
            handler: The handler to remove
        """
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)
            logger.debug(f"Unsubscribed {handler.__class__.__name__} from {event_type.__name__}")

    async def publish(self, event: DomainEvent) -> None:
        """
        Publish a domain event.

        Args:
            event: The domain event to publish
        """
        event_type = type(event)
        # Copy so a handler may unsubscribe itself while being called
        handlers = list(self._handlers.get(event_type, []))

        if not handlers:
            logger.debug(f"No handlers registered for {event_type.__name__}")
            return

        logger.debug(f"Publishing {event_type.__name__} to {len(handlers)} handler(s)")

        tasks = [self._handle_event(handler, event) for handler in handlers]
        await asyncio.gather(*tasks, return_exceptions=True)

    async def _handle_event(self, handler: EventHandler, event: DomainEvent) -> None:
        """
        Handle an event with a specific handler.

        Args:
            handler: The handler to use
            event: The event to handle
        """
        try:
            await handler.handle(event)
            logger.debug(
                f"Successfully handled {event.event_type} with {handler.__class__.__name__}"
            )
        except Exception as e:
            logger.error(
                f"Error handling {event.event_type} with {handler.__class__.__name__}: {e}",
                exc_info=True,
            )
            raise
