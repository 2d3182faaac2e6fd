"""Board Projection — tests for grouping, ordering, due-date labels, avatar colors."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

from taskboard.core.board_projection import (
    AVATAR_PALETTE, NO_DUE_DATE, avatar_color, due_date_label, name_hash,
    project_board,
)

NOW = datetime(2026, 10, 18, 12, 0, 0, tzinfo=timezone.utc)


@dataclass
class FakeUser:
    name: str
    email: str | None = None
    id: UUID = field(default_factory=uuid4)


@dataclass
class FakeContainer:
    title: str
    is_default: bool = True
    owner_id: UUID | None = None
    color: str = "#3B82F6"
    id: UUID = field(default_factory=uuid4)
    created_at: datetime = NOW


@dataclass
class FakeTask:
    title: str
    container_id: UUID
    sort_index: float
    created_at: datetime = NOW
    description: str | None = None
    status: str = "Open"
    priority: str = "Normal"
    due_date: datetime | None = None
    assignees: list = field(default_factory=list)
    time_tracked: int = 0
    attachments: list = field(default_factory=list)
    creator_id: UUID = field(default_factory=uuid4)
    id: UUID = field(default_factory=uuid4)


def _titles(column: dict) -> list[str]:
    return [card["title"] for card in column["tasks"]]


# ─── ordering ────────────────────────────────────────────────────

def test_tasks_sorted_by_sort_index_within_column():
    open_ = FakeContainer("Open")
    tasks = [
        FakeTask("C", open_.id, 3),
        FakeTask("A", open_.id, 1),
        FakeTask("B", open_.id, 2),
    ]
    board = project_board([open_], tasks, NOW)
    assert _titles(board[0]) == ["A", "B", "C"]


def test_midpoint_reindex_moves_task_to_front():
    open_ = FakeContainer("Open")
    a = FakeTask("A", open_.id, 1)
    b = FakeTask("B", open_.id, 2)
    c = FakeTask("C", open_.id, 3)
    b.sort_index = 0.5
    board = project_board([open_], [a, b, c], NOW)
    assert _titles(board[0]) == ["B", "A", "C"]


def test_equal_sort_index_falls_back_to_creation_time():
    open_ = FakeContainer("Open")
    later = FakeTask("later", open_.id, 1, created_at=NOW + timedelta(seconds=1))
    earlier = FakeTask("earlier", open_.id, 1, created_at=NOW)
    board = project_board([open_], [later, earlier], NOW)
    assert _titles(board[0]) == ["earlier", "later"]


def test_tasks_partitioned_by_container_and_columns_keep_input_order():
    open_, done = FakeContainer("Open"), FakeContainer("Completed")
    tasks = [FakeTask("x", done.id, 1), FakeTask("y", open_.id, 1)]
    board = project_board([open_, done], tasks, NOW)
    assert [col["title"] for col in board] == ["Open", "Completed"]
    assert _titles(board[0]) == ["y"]
    assert _titles(board[1]) == ["x"]


def test_task_in_unlisted_container_is_not_placed():
    open_ = FakeContainer("Open")
    stray = FakeTask("stray", uuid4(), 1)
    board = project_board([open_], [stray], NOW)
    assert board[0]["tasks"] == []


def test_projection_does_not_mutate_tasks():
    open_ = FakeContainer("Open")
    task = FakeTask("A", open_.id, 2, attachments=[{"name": "f"}])
    project_board([open_], [task], NOW)
    assert task.sort_index == 2
    assert task.attachments == [{"name": "f"}]


def test_card_counts_attachments():
    open_ = FakeContainer("Open")
    task = FakeTask("A", open_.id, 1, attachments=[{"name": "a"}, {"name": "b"}])
    card = project_board([open_], [task], NOW)[0]["tasks"][0]
    assert card["attachments"] == 2


# ─── due-date labels ─────────────────────────────────────────────

def test_due_label_absent():
    assert due_date_label(None, NOW) == NO_DUE_DATE == "No due date"


def test_due_label_overdue_when_strictly_before_now():
    due = datetime(2026, 10, 17, 9, 0, tzinfo=timezone.utc)
    assert due_date_label(due, NOW) == "Overdue: Oct 17, 26"


def test_due_label_future_is_plain_date():
    due = datetime(2026, 11, 5, tzinfo=timezone.utc)
    assert due_date_label(due, NOW) == "Nov 5, 26"


def test_due_label_exactly_now_is_not_overdue():
    assert due_date_label(NOW, NOW) == "Oct 18, 26"


# ─── avatar colors ───────────────────────────────────────────────

def test_name_hash_matches_shift_subtract_recurrence():
    assert name_hash("A") == 65
    assert name_hash("Al") == 108 + (65 * 32 - 65)


def test_avatar_color_known_buckets():
    assert avatar_color("A") == "bg-indigo-500"
    assert avatar_color("Al") == "bg-pink-500"


def test_avatar_color_is_stable_for_long_names():
    name = "Maximiliana Wolfeschlegelsteinhausen-Bergerdorff"
    assert avatar_color(name) == avatar_color(name)
    assert avatar_color(name) in AVATAR_PALETTE


def test_assignee_badges_carry_avatar():
    open_ = FakeContainer("Open")
    alice = FakeUser("Alice", "alice@example.com")
    task = FakeTask("A", open_.id, 1, assignees=[alice])
    badge = project_board([open_], [task], NOW)[0]["tasks"][0]["assignees"][0]
    assert badge["name"] == "Alice"
    assert badge["avatar"] == avatar_color("Alice")
