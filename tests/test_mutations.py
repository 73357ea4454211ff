"""Tests for MutationRefetchCoordinator."""

import time

from PyQt6.QtTest import QTest

from newsdesk_console.core import CancellationToken
from newsdesk_console.listing import MutationKind, MutationRefetchCoordinator

from conftest import ManualTaskManager


def _coordinator(dispatcher, token=None):
    refetches = []
    failures = []
    successes = []
    coordinator = MutationRefetchCoordinator(
        refetch_active=lambda: refetches.append(1),
        on_success=lambda kind, payload: successes.append((kind, payload)),
        on_failure=lambda kind, error: failures.append((kind, error)),
        task_manager=ManualTaskManager(dispatcher),
        token=token,
    )
    return coordinator, refetches, successes, failures


def test_success_refetches_once(dispatcher):
    coordinator, refetches, successes, failures = _coordinator(dispatcher)

    for kind in MutationKind:
        assert coordinator.after_mutation(kind, payload={"ok": True}) is True

    assert len(refetches) == 3
    assert [kind for kind, _ in successes] == list(MutationKind)
    assert failures == []


def test_failure_reports_without_refetch(dispatcher):
    coordinator, refetches, successes, failures = _coordinator(dispatcher)
    error = RuntimeError("conflict")

    assert coordinator.after_mutation(MutationKind.UPDATE, error=error) is False
    assert refetches == []
    assert successes == []
    assert failures == [(MutationKind.UPDATE, error)]


def test_submit_runs_target_then_refetches(dispatcher):
    coordinator, refetches, successes, _ = _coordinator(dispatcher)

    coordinator.submit(MutationKind.CREATE, lambda payload: {"created": payload}, args=("draft",))
    assert refetches == []

    dispatcher.resolve_all()
    assert refetches == [1]
    assert successes == [(MutationKind.CREATE, {"created": "draft"})]


def test_outcome_after_teardown_is_ignored(dispatcher):
    token = CancellationToken()
    coordinator, refetches, _, failures = _coordinator(dispatcher, token=token)

    coordinator.submit(MutationKind.DELETE, lambda: None)
    token.cancel()
    dispatcher.resolve_all()

    assert refetches == []
    assert failures == []


def test_overlapping_submits_each_report(qapp):
    refetches = []
    successes = []
    failures = []
    coordinator = MutationRefetchCoordinator(
        refetch_active=lambda: refetches.append(1),
        on_success=lambda kind, payload: successes.append((kind, payload)),
        on_failure=lambda kind, error: failures.append((kind, str(error))),
    )

    def slow_delete():
        time.sleep(0.3)
        return {"status": "success"}

    def failing_update():
        raise RuntimeError("conflict")

    coordinator.submit(MutationKind.DELETE, slow_delete)
    coordinator.submit(MutationKind.UPDATE, failing_update)

    waited = 0
    while not (successes and failures) and waited < 2000:
        QTest.qWait(10)
        waited += 10

    assert successes == [(MutationKind.DELETE, {"status": "success"})]
    assert failures == [(MutationKind.UPDATE, "conflict")]
    assert refetches == [1]
