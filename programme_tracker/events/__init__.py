"""Change notification package."""

from programme_tracker.events.notifier import (
    ChangeNotifier,
    Listener,
    configure_logging,
)

__all__ = ["ChangeNotifier", "Listener", "configure_logging"]
