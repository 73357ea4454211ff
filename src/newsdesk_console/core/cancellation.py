"""Explicit cancellation tokens for screen teardown."""

import logging
from typing import Callable, List

logger = logging.getLogger(__name__)


class CancellationToken:
    """
    One-shot cancellation flag shared by the parts of a screen.

    A screen owns one token and passes it to its debounce scheduler and
    retrieval bindings. Cancelling the token makes every pending publish or
    in-flight result arriving afterwards a no-op, without relying on widget
    lifecycle hooks.

    Usage:
        token = CancellationToken()
        token.add_callback(timer.cancel)
        ...
        token.cancel()  # Screen closed
    """

    def __init__(self):
        self._cancelled = False
        self._callbacks: List[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def add_callback(self, callback: Callable[[], None]) -> None:
        """Run callback on cancel (immediately if already cancelled)."""
        if self._cancelled:
            callback()
            return
        self._callbacks.append(callback)

    def cancel(self) -> None:
        """Cancel the token. Idempotent."""
        if self._cancelled:
            return
        self._cancelled = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()
        logger.debug(f"Cancellation token fired ({len(callbacks)} callbacks)")
