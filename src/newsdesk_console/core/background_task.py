"""Background task with cancellation and cleanup for blocking remote calls."""

import logging
from typing import Callable, Any, Optional, Set, Tuple
from PyQt6.QtCore import QThread, pyqtSignal
from PyQt6.QtWidgets import QPushButton

from newsdesk_console.core.cancellation import CancellationToken

logger = logging.getLogger(__name__)

# --- Module-level constants ---
CANCEL_WAIT_MS = 100      # Wait time when cancelling previous task
CLEANUP_WAIT_MS = 200     # Wait time during screen teardown


class BackgroundTask(QThread):
    """
    Background task with cancellation.

    Usage:
        task = BackgroundTask(target=client.list_items, kwargs={"page": 2})
        task.result_ready.connect(on_success)
        task.error_occurred.connect(on_error)  # Receives Exception, not str
        task.start()

        # Later:
        task.cancel()  # Safe cancellation

    Error handling:
        def on_error(e: Exception):
            logger.warning("Failed: %s", e)
            if isinstance(e, RetrievalError): ...  # Type checking
    """

    result_ready = pyqtSignal(object)
    error_occurred = pyqtSignal(Exception)  # Full exception, caller decides

    def __init__(
        self,
        target: Callable[..., Any],
        args: Tuple = (),
        kwargs: dict = None,
        parent=None
    ):
        super().__init__(parent)
        self._target = target
        self._args = args
        self._kwargs = kwargs or {}
        self.cancelled = False

    def run(self):
        """Execute target in background, respecting cancellation."""
        try:
            result = self._target(*self._args, **self._kwargs)
            if not self.cancelled:
                self.result_ready.emit(result)
        except Exception as e:
            if not self.cancelled:
                self.error_occurred.emit(e)  # Full exception object

    def cancel(self):
        """Cancel task. Signals do not emit after this."""
        self.cancelled = True


class BackgroundTaskManager:
    """
    Manages background task lifecycle for one consumer (a retrieval binding,
    a mutation coordinator).

    Handles:
    - Cancelling previous task before starting new one (``cancel_previous``)
    - Keeping started threads referenced until they finish
    - Cleanup on screen teardown (directly or through a CancellationToken)
    - Button state management (disable during operation, auto-restore)

    With ``cancel_previous=False`` tasks run side by side and every one of
    them reports its outcome; mutations use this mode.

    Usage:
        self._task_manager = BackgroundTaskManager(token=screen_token)

        def refresh(self):
            self._task_manager.run(
                target=self.client.list_items,
                kwargs={"page": 1, "limit": 10},
                on_success=self._on_data_ready,
                on_error=self._on_error,
            )
    """

    def __init__(self, token: Optional[CancellationToken] = None, cancel_previous: bool = True):
        self._cancel_previous = cancel_previous
        self._current_task: Optional[BackgroundTask] = None
        self._live: Set[BackgroundTask] = set()
        if token is not None:
            token.add_callback(self.cleanup)

    def run(
        self,
        target: Callable[..., Any],
        args: Tuple = (),
        kwargs: dict = None,
        on_success: Callable[[Any], None] = None,
        on_error: Callable[[Exception], None] = None,
        button: QPushButton = None,
    ) -> BackgroundTask:
        """
        Run a background task, cancelling the previous one unless disabled.

        Args:
            target: Function to execute in background
            args: Positional arguments for target
            kwargs: Keyword arguments for target
            on_success: Callback for successful result
            on_error: Callback for error (receives Exception, not str)
            button: Button to disable during operation (auto-restored on complete)

        Returns:
            The started BackgroundTask
        """
        if self._cancel_previous:
            self._retire(self._current_task, CANCEL_WAIT_MS)

        # Restore the button on both success and error
        original_button_text = None
        if button:
            original_button_text = button.text()
            button.setEnabled(False)
            button.setText(f"{original_button_text}...")

        def restore_button():
            if button:
                button.setEnabled(True)
                button.setText(original_button_text)

        # Wrap callbacks to restore button first
        def wrapped_success(result):
            restore_button()
            if on_success:
                on_success(result)

        def wrapped_error(error):
            restore_button()
            if on_error:
                on_error(error)

        task = BackgroundTask(target=target, args=args, kwargs=kwargs)
        task.result_ready.connect(wrapped_success)
        task.error_occurred.connect(wrapped_error)
        # Hold a reference until the thread exits
        self._live.add(task)
        task.finished.connect(lambda t=task: self._live.discard(t))

        self._current_task = task
        task.start()
        return task

    def cleanup(self):
        """Cancel and wait for all tasks. Call on screen teardown."""
        for task in list(self._live):
            self._retire(task, CLEANUP_WAIT_MS)
        self._current_task = None

    def _retire(self, task: Optional[BackgroundTask], wait_ms: int):
        if task is None or not task.isRunning():
            return
        task.cancel()
        if not task.wait(wait_ms):
            logger.debug("Cancelled task still running; kept until finished")
