"""Reusable trailing debounce timer and the search-text commit scheduler."""

import logging
from typing import Callable, Optional
from PyQt6.QtCore import QTimer

from newsdesk_console.core.cancellation import CancellationToken

logger = logging.getLogger(__name__)


class DebounceTimer:
    """
    Reusable trailing debounce timer.

    Restarts timer on each call. Handler fires only after delay_ms of inactivity.
    A cancelled token stops the pending shot and ignores later triggers.

    Usage:
        self._debounce = DebounceTimer(delay_ms=200, handler=self._do_update)

        def on_text_changed(self):
            self._debounce.trigger()  # Restarts timer
    """

    def __init__(
        self,
        delay_ms: int,
        handler: Callable[[], None],
        token: Optional[CancellationToken] = None,
    ):
        self._delay_ms = delay_ms
        self._handler = handler
        self._token = token
        self._timer: Optional[QTimer] = None
        if token is not None:
            token.add_callback(self.cancel)

    @property
    def is_pending(self) -> bool:
        return self._timer is not None and self._timer.isActive()

    def trigger(self):
        """Trigger debounce, restarting the timer."""
        if self._token is not None and self._token.cancelled:
            return
        if self._timer is not None:
            self._timer.stop()

        self._timer = QTimer()
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._fire)
        self._timer.start(self._delay_ms)

    def _fire(self):
        if self._token is not None and self._token.cancelled:
            return
        self._handler()

    def cancel(self):
        """Cancel pending trigger."""
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    def force(self):
        """Cancel timer and fire handler immediately."""
        self.cancel()
        self._fire()


class DebouncedCommit:
    """
    Trailing-edge scheduler for raw search text.

    Each ``commit()`` replaces the pending value and restarts the quiescence
    window; only the latest value is published, once, after the window
    elapses. The scheduler does no I/O itself.

    Usage:
        self._search = DebouncedCommit(500, on_publish=self._apply_search, token=token)
        search_input.textChanged.connect(self._search.commit)
    """

    def __init__(
        self,
        delay_ms: int,
        on_publish: Callable[[str], None],
        token: Optional[CancellationToken] = None,
    ):
        self._on_publish = on_publish
        self._pending: Optional[str] = None
        self._timer = DebounceTimer(delay_ms, self._publish, token=token)

    @property
    def pending_value(self) -> Optional[str]:
        return self._pending

    def commit(self, raw_text: str) -> None:
        self._pending = raw_text
        self._timer.trigger()

    def cancel(self) -> None:
        """Drop the pending value without publishing it."""
        self._pending = None
        self._timer.cancel()

    def flush(self) -> None:
        """Publish the pending value now, if any."""
        if self._pending is not None:
            self._timer.force()

    def _publish(self) -> None:
        if self._pending is None:
            return
        value, self._pending = self._pending, None
        logger.debug(f"Committing search text {value!r}")
        self._on_publish(value)
