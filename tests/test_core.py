"""Tests for core utilities."""

import time

import pytest
from PyQt6.QtTest import QTest


def _wait_until(predicate, timeout_ms=2000, step_ms=10):
    waited = 0
    while not predicate() and waited < timeout_ms:
        QTest.qWait(step_ms)
        waited += step_ms
    return predicate()


def test_cancellation_token_runs_callbacks_once():
    from newsdesk_console.core import CancellationToken

    fired = []
    token = CancellationToken()
    token.add_callback(lambda: fired.append("a"))
    assert not token.cancelled

    token.cancel()
    token.cancel()
    assert token.cancelled
    assert fired == ["a"]

    # Late registration runs immediately
    token.add_callback(lambda: fired.append("b"))
    assert fired == ["a", "b"]


def test_debounce_timer_fires_once_after_quiet_period(qapp):
    """Test DebounceTimer trailing-edge behaviour."""
    from newsdesk_console.core import DebounceTimer

    called = []
    timer = DebounceTimer(delay_ms=60, handler=lambda: called.append(1))

    for _ in range(5):
        timer.trigger()
        QTest.qWait(15)
    assert called == []
    assert timer.is_pending

    QTest.qWait(200)
    assert called == [1]
    assert not timer.is_pending


def test_debounce_timer_cancel_and_force(qapp):
    from newsdesk_console.core import DebounceTimer

    called = []
    timer = DebounceTimer(delay_ms=30, handler=lambda: called.append(1))

    timer.trigger()
    timer.cancel()
    QTest.qWait(100)
    assert called == []

    timer.trigger()
    timer.force()
    assert called == [1]
    QTest.qWait(100)
    assert called == [1]


def test_debounce_timer_respects_cancelled_token(qapp):
    from newsdesk_console.core import CancellationToken, DebounceTimer

    called = []
    token = CancellationToken()
    timer = DebounceTimer(delay_ms=30, handler=lambda: called.append(1), token=token)

    timer.trigger()
    token.cancel()
    QTest.qWait(100)
    timer.trigger()
    QTest.qWait(100)
    assert called == []


def test_debounced_commit_publishes_only_last_value(qapp):
    from newsdesk_console.core import DebouncedCommit

    published = []
    scheduler = DebouncedCommit(50, on_publish=published.append)

    for prefix in ("b", "bu", "bud", "budg", "budge", "budget"):
        scheduler.commit(prefix)
        QTest.qWait(10)
    assert published == []
    assert scheduler.pending_value == "budget"

    QTest.qWait(200)
    assert published == ["budget"]
    assert scheduler.pending_value is None


def test_debounced_commit_cancel_and_flush(qapp):
    from newsdesk_console.core import DebouncedCommit

    published = []
    scheduler = DebouncedCommit(50, on_publish=published.append)

    scheduler.commit("draft")
    scheduler.cancel()
    QTest.qWait(120)
    assert published == []

    scheduler.commit("now")
    scheduler.flush()
    assert published == ["now"]

    # Nothing pending: flush is a no-op
    scheduler.flush()
    assert published == ["now"]


def test_background_task_manager_delivers_result(qapp):
    from newsdesk_console.core import BackgroundTaskManager

    results = []
    manager = BackgroundTaskManager()
    manager.run(target=lambda a, b: a + b, args=(2, 3), on_success=results.append)

    assert _wait_until(lambda: results)
    assert results == [5]
    manager.cleanup()


def test_background_task_manager_delivers_error(qapp):
    from newsdesk_console.core import BackgroundTaskManager

    errors = []

    def boom():
        raise RuntimeError("server down")

    manager = BackgroundTaskManager()
    manager.run(target=boom, on_error=errors.append)

    assert _wait_until(lambda: errors)
    assert isinstance(errors[0], RuntimeError)
    assert str(errors[0]) == "server down"
    manager.cleanup()


def test_background_task_manager_cancels_previous_by_default(qapp):
    from newsdesk_console.core import BackgroundTaskManager

    results = []
    manager = BackgroundTaskManager()
    manager.run(target=lambda: time.sleep(0.2) or "first", on_success=results.append)
    manager.run(target=lambda: "second", on_success=results.append)

    assert _wait_until(lambda: results)
    QTest.qWait(300)
    assert results == ["second"]
    manager.cleanup()


def test_background_task_manager_runs_side_by_side(qapp):
    from PyQt6.QtWidgets import QPushButton
    from newsdesk_console.core import BackgroundTaskManager

    results = []
    button = QPushButton("Delete")
    manager = BackgroundTaskManager(cancel_previous=False)
    manager.run(target=lambda: time.sleep(0.2) or "first", on_success=results.append, button=button)
    assert not button.isEnabled()
    assert button.text() == "Delete..."
    manager.run(target=lambda: "second", on_success=results.append)

    assert _wait_until(lambda: len(results) == 2)
    assert sorted(results) == ["first", "second"]
    assert button.isEnabled()
    assert button.text() == "Delete"
    manager.cleanup()


def test_cancelled_background_task_does_not_emit(qapp):
    from newsdesk_console.core import BackgroundTask

    results = []
    task = BackgroundTask(target=lambda: "late")
    task.result_ready.connect(results.append)
    task.cancel()
    task.start()
    task.wait(1000)
    QTest.qWait(50)
    assert results == []


def test_performance_timer_logs_slow_operations(caplog):
    from newsdesk_console.core.performance_monitor import timer

    with caplog.at_level("WARNING", logger="newsdesk_console.performance"):
        with timer("GET ghanapolitan/article/", threshold_ms=0.0, log_args=True, page=2):
            pass
        with timer("fast call", threshold_ms=10_000.0):
            pass

    messages = [record.getMessage() for record in caplog.records]
    assert any("GET ghanapolitan/article/" in m and "page=2" in m for m in messages)
    assert not any("fast call" in m for m in messages)


@pytest.mark.parametrize("delay_ms", [0, 10])
def test_debounce_timer_zero_and_short_delay(qapp, delay_ms):
    from newsdesk_console.core import DebounceTimer

    called = []
    timer = DebounceTimer(delay_ms=delay_ms, handler=lambda: called.append(1))
    timer.trigger()
    assert _wait_until(lambda: called, timeout_ms=500)
