"""Refetch-after-confirm for create, update and delete."""

import logging
from enum import Enum
from typing import Any, Callable, Optional, Tuple

from newsdesk_console.core.background_task import BackgroundTaskManager
from newsdesk_console.core.cancellation import CancellationToken

logger = logging.getLogger(__name__)


class MutationKind(Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class MutationRefetchCoordinator:
    """
    Keeps the visible list in sync after mutations.

    On success only the active facet's retrieval is refetched; on failure
    nothing is refetched and the error goes to ``on_failure``. The local
    result list is never edited optimistically. Mutations may overlap; each
    one is reported and each success triggers its own refetch.

    Usage:
        coordinator = MutationRefetchCoordinator(
            refetch_active=controller.refetch,
            on_failure=lambda kind, error: notify(str(error)),
        )
        coordinator.submit(MutationKind.DELETE, client.delete_item, args=(item_id,))
    """

    def __init__(
        self,
        refetch_active: Callable[[], Any],
        on_success: Optional[Callable[[MutationKind, Any], None]] = None,
        on_failure: Optional[Callable[[MutationKind, Exception], None]] = None,
        task_manager: Optional[Any] = None,
        token: Optional[CancellationToken] = None,
    ):
        self._refetch_active = refetch_active
        self._on_success = on_success
        self._on_failure = on_failure
        if task_manager is None:
            # Overlapping mutations each report their own outcome
            task_manager = BackgroundTaskManager(token=token, cancel_previous=False)
        self._task_manager = task_manager
        self._token = token

    def after_mutation(
        self,
        kind: MutationKind,
        error: Optional[Exception] = None,
        payload: Any = None,
    ) -> bool:
        """Handle the outcome of a mutation.

        Returns:
            True if a refetch was issued
        """
        if self._token is not None and self._token.cancelled:
            return False
        if error is not None:
            logger.warning(f"{kind.value} failed: {error}")
            if self._on_failure:
                self._on_failure(kind, error)
            return False

        logger.info(f"{kind.value} succeeded; refetching active listing")
        self._refetch_active()
        if self._on_success:
            self._on_success(kind, payload)
        return True

    def submit(
        self,
        kind: MutationKind,
        target: Callable[..., Any],
        args: Tuple = (),
        kwargs: dict = None,
        button=None,
    ):
        """Run a mutation off the UI thread and handle its outcome."""
        return self._task_manager.run(
            target=target,
            args=args,
            kwargs=kwargs,
            on_success=lambda payload: self.after_mutation(kind, payload=payload),
            on_error=lambda error: self.after_mutation(kind, error=error),
            button=button,
        )
