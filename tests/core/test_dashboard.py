"""Dashboard — tests for per-requester aggregation over visible tasks."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

from taskboard.core.dashboard import compute_dashboard

T0 = datetime(2026, 10, 18, 9, 0, 0, tzinfo=timezone.utc)
ME, OTHER = uuid4(), uuid4()


@dataclass
class FakeSession:
    user_id: UUID
    start_time: datetime
    end_time: datetime | None = None
    duration: int = 0
    is_active: bool = False


@dataclass
class FakeTask:
    title: str
    status: str
    sessions: list = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)


def _closed(user_id, seconds):
    return FakeSession(user_id, T0, T0 + timedelta(seconds=seconds), seconds, False)


def test_empty_dashboard():
    summary = compute_dashboard([], ME, T0)
    assert summary["total_tasks"] == 0
    assert summary["status_counts"] == {}
    assert summary["total_seconds"] == 0
    assert summary["formatted_total"] == "00:00:00"
    assert summary["active_sessions"] == 0


def test_status_counts_group_by_status():
    tasks = [FakeTask("a", "Open"), FakeTask("b", "Open"), FakeTask("c", "Blocked")]
    summary = compute_dashboard(tasks, ME, T0)
    assert summary["status_counts"] == {"Open": 2, "Blocked": 1}
    assert summary["total_tasks"] == 3


def test_task_total_is_closed_plus_live():
    task = FakeTask("a", "Open", [
        _closed(ME, 100),
        _closed(ME, 20),
        FakeSession(ME, T0, is_active=True),
    ])
    now = T0 + timedelta(seconds=30)
    row = compute_dashboard([task], ME, now)["tasks"][0]
    assert row["total_seconds"] == 150
    assert row["is_active"] is True


def test_total_grows_by_one_second_per_second():
    task = FakeTask("a", "Open", [_closed(ME, 10), FakeSession(ME, T0, is_active=True)])
    now = T0 + timedelta(seconds=60)
    first = compute_dashboard([task], ME, now)
    second = compute_dashboard([task], ME, now + timedelta(seconds=1))
    assert second["tasks"][0]["total_seconds"] == first["tasks"][0]["total_seconds"] + 1
    assert second["total_seconds"] == first["total_seconds"] + 1


def test_other_users_sessions_are_excluded():
    task = FakeTask("a", "Open", [_closed(OTHER, 999), FakeSession(OTHER, T0, is_active=True)])
    summary = compute_dashboard([task], ME, T0 + timedelta(seconds=5))
    assert summary["total_seconds"] == 0
    assert summary["active_sessions"] == 0


def test_overall_total_and_active_count():
    tasks = [
        FakeTask("a", "Open", [_closed(ME, 3600)]),
        FakeTask("b", "In Progress", [FakeSession(ME, T0, is_active=True)]),
    ]
    summary = compute_dashboard(tasks, ME, T0 + timedelta(seconds=65))
    assert summary["total_seconds"] == 3665
    assert summary["formatted_total"] == "01:01:05"
    assert summary["active_sessions"] == 1
