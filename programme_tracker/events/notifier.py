"""
Change Notifier

DESIGN DECISION: Views register listeners instead of the core probing
for optional refresh functions. After every successful write the core
announces a ChangeEvent; every listener subscribed to one of the event's
topics is called.

The notifier:
- Always logs the event locally (structured, JSON)
- Calls zero or more listeners; having none is normal
- Gracefully handles listener failures (a broken view never undoes a write)
"""

import logging
from typing import Callable, Iterable, Optional

import structlog

from programme_tracker.models.events import ChangeEvent, ChangeTopic


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through the standard library at the given level."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))
    logging.getLogger().setLevel(getattr(logging, level.upper()))


Listener = Callable[[ChangeEvent], None]


class ChangeNotifier:
    """
    Registry of change listeners.

    A listener subscribed without topics hears every event.
    """

    def __init__(self):
        self._listeners: list[tuple[Listener, Optional[frozenset[ChangeTopic]]]] = []
        self._logger = structlog.get_logger()

    def subscribe(
        self,
        listener: Listener,
        topics: Optional[Iterable[ChangeTopic]] = None,
    ) -> Listener:
        """
        Register a listener.

        Returns the listener as a handle for unsubscribe().
        """
        wanted = frozenset(ChangeTopic(t) for t in topics) if topics is not None else None
        self._listeners.append((listener, wanted))
        return listener

    def unsubscribe(self, listener: Listener) -> None:
        self._listeners = [
            (registered, topics)
            for registered, topics in self._listeners
            if registered is not listener
        ]

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def notify(self, event: ChangeEvent) -> int:
        """
        Log an event and deliver it to matching listeners.

        Returns the number of listeners that handled it without raising.
        """
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("change_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("change_event", **log_dict)
        elif event.severity.value == "debug":
            self._logger.debug("change_event", **log_dict)
        else:
            self._logger.info("change_event", **log_dict)

        event_topics = set(event.topics)
        delivered = 0
        for listener, topics in list(self._listeners):
            if topics is not None and not (topics & event_topics):
                continue
            try:
                listener(event)
                delivered += 1
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "listener_failed",
                    listener=getattr(listener, "__name__", repr(listener)),
                    error=str(e),
                    event_id=str(event.event_id),
                )

        return delivered
