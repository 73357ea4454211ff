"""pytest configuration and fixtures for newsdesk-console tests."""

import os
from typing import Any, Callable, List, Optional

import pytest
from PyQt6.QtWidgets import QApplication

# Headless CI has no display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from newsdesk_console.config import set_console_config
from newsdesk_console.listing import Facet, ListingResult


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture(autouse=True)
def reset_console_config():
    set_console_config(None)
    yield
    set_console_config(None)


class FakeFetcher:
    """Fetch function for one facet returning a synthetic page."""

    def __init__(self, facet: Facet, total: int = 42, error: Optional[Exception] = None):
        self.facet = facet
        self.total = total
        self.error = error
        self.calls: List[tuple] = []

    def __call__(self, facet_value: str, page: int, page_size: int) -> ListingResult:
        self.calls.append((facet_value, page, page_size))
        if self.error is not None:
            raise self.error
        items = [
            {"_id": f"{self.facet.value}-{facet_value}-{page}-{i}", "title": f"Item {i}"}
            for i in range(page_size)
        ]
        total_pages = max(1, -(-self.total // page_size))
        return ListingResult(items=items, total=self.total, total_pages=total_pages, current_page=page)


class PendingCall:
    """A dispatched background call the test resolves explicitly."""

    def __init__(self, target, args, kwargs, on_success, on_error):
        self.target = target
        self.args = args
        self.kwargs = kwargs or {}
        self.on_success = on_success
        self.on_error = on_error
        self.done = False

    @property
    def facet(self) -> Optional[Facet]:
        return getattr(self.target, "facet", None)

    def resolve(self):
        """Run the target and deliver its outcome."""
        self.done = True
        try:
            result = self.target(*self.args, **self.kwargs)
        except Exception as e:
            self.on_error(e)
            return
        self.on_success(result)

    def resolve_with(self, result: Any):
        self.done = True
        self.on_success(result)

    def fail(self, error: Exception):
        self.done = True
        self.on_error(error)


class ManualTaskManager:
    """Stand-in for BackgroundTaskManager that defers every call."""

    def __init__(self, dispatcher: "Dispatcher"):
        self._dispatcher = dispatcher
        self.cleaned_up = False

    def run(self, target, args=(), kwargs=None, on_success=None, on_error=None, **_):
        call = PendingCall(target, args, kwargs, on_success, on_error)
        self._dispatcher.calls.append(call)
        if self._dispatcher.immediate:
            call.resolve()
        return call

    def cleanup(self):
        self.cleaned_up = True


class Dispatcher:
    """Shared log of calls across the task managers of one controller."""

    def __init__(self, immediate: bool = False):
        self.immediate = immediate
        self.calls: List[PendingCall] = []

    def factory(self) -> Callable[[], ManualTaskManager]:
        return lambda: ManualTaskManager(self)

    def retrieval_calls(self, facet: Optional[Facet] = None) -> List[PendingCall]:
        return [
            call for call in self.calls
            if call.facet is not None and (facet is None or call.facet is facet)
        ]

    def pending(self) -> List[PendingCall]:
        return [call for call in self.calls if not call.done]

    def resolve_all(self):
        for call in self.pending():
            call.resolve()


@pytest.fixture
def dispatcher():
    return Dispatcher()


@pytest.fixture
def immediate_dispatcher():
    return Dispatcher(immediate=True)


@pytest.fixture
def fetchers():
    return {facet: FakeFetcher(facet) for facet in Facet}
