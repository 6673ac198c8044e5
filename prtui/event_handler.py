from __future__ import annotations

import contextlib
import logging
from typing import TYPE_CHECKING

from .session import KeyPress

if TYPE_CHECKING:
    from .tui import PRComposeApp

logger = logging.getLogger(__name__)

# Worker group for session key handling; the session itself refuses a second remote call.
SESSION_WORKER_GROUP = "session"


class EventHandler:
    """Routes terminal key events into the session."""

    def __init__(self, app: PRComposeApp) -> None:
        """Initialize with reference to the main app."""
        self.app = app

    def on_key(self, event) -> None:  # type: ignore[override]
        """Forward a Textual key event to the session.

        Args:
            event: The Textual `Key` event; it is consumed here.
        """
        key = getattr(event, "key", None)
        if key is None:
            return
        with contextlib.suppress(Exception):
            event.prevent_default()
        event.stop()
        self.dispatch(KeyPress(key, getattr(event, "character", None)))

    def dispatch(self, press: KeyPress) -> None:
        """Apply a key press in a worker so remote calls do not freeze redraws."""
        if self.app.session.busy:
            logger.debug(f"Dropping key {press.key!r} while a remote call is in flight")
            return
        self.app.run_worker(self.apply(press), group=SESSION_WORKER_GROUP)

    async def apply(self, press: KeyPress) -> None:
        await self.app.session.handle_key(press)
        self.app.refresh_view()
