"""
Message Bus

Central hub for routing commands and events to their handlers.
Views send commands through the bus; the unit of work publishes the
events collected from aggregates once a use case has committed.

There is no module-level bus: the composition root builds one per
registry and hands it to whoever needs it.
"""

from typing import Any, Callable, Dict, List, Optional, Tuple, Type
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], Any]


class MessageBus:
    """
    Message bus for commands and events

    Commands: One handler per command (1:1)
    Events: Multiple handlers per event (1:N)
    """

    def __init__(self):
        self._event_handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}
        self._command_handlers: Dict[Type, Callable[[Any], Any]] = {}

    def register_event_handler(self, event_type: Type[DomainEvent], handler: EventHandler):
        """Register one more handler for an event type."""
        self._event_handlers.setdefault(event_type, []).append(handler)
        logger.debug(f"Registered event handler {handler.__name__} for {event_type.__name__}")

    def register_command_handler(self, command_type: Type, handler: Callable[[Any], Any]):
        """
        Register a command handler

        Only one handler can be registered per command type.
        """
        if command_type in self._command_handlers:
            raise ValueError(
                f"Handler for {command_type.__name__} is already registered. "
                "Commands can have only one handler."
            )
        self._command_handlers[command_type] = handler
        logger.debug(f"Registered command handler for {command_type.__name__}")

    def handle_command(self, command: Any) -> Any:
        """
        Dispatch a command and return the handler's result.

        Domain exceptions raised by the handler propagate to the caller.
        """
        command_type = type(command)
        handler = self._command_handlers.get(command_type)

        if not handler:
            raise LookupError(f"No handler registered for command {command_type.__name__}")

        logger.info(f"Handling command: {command_type.__name__}")
        return handler(command)

    def publish_events(
        self,
        events: List[DomainEvent],
        results: Optional[List[Tuple[str, Any]]] = None,
    ) -> List[Tuple[str, Exception]]:
        """
        Publish domain events

        Every handler registered for an event runs even if an earlier one
        fails. Failures are logged and returned as ``(handler name, error)``
        pairs so callers can report them. When ``results`` is given, every
        value a handler returns (other than None) is appended to it as a
        ``(handler name, value)`` pair.
        """
        failures: List[Tuple[str, Exception]] = []

        for event in events:
            event_type = type(event)
            handlers = self._event_handlers.get(event_type, [])

            if not handlers:
                logger.debug(f"No handlers registered for event {event_type.__name__}")
                continue

            logger.info(f"Publishing event: {event_type.__name__} (ID: {event.event_id})")

            for handler in handlers:
                try:
                    outcome = handler(event)
                except Exception as e:
                    logger.error(
                        f"Error in event handler {handler.__name__} "
                        f"for event {event_type.__name__}: {e}",
                        exc_info=True
                    )
                    failures.append((handler.__name__, e))
                    continue

                if results is not None and outcome is not None:
                    results.append((handler.__name__, outcome))

        return failures
