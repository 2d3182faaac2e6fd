"""Access Enforcement — tests for the task and container authorization predicates."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4

import pytest

from taskboard.core.domain_types import Capability
from taskboard.core.enforce_access import (
    authorize, can, check_container_mutable, is_container_visible,
)
from taskboard.core.errors import (
    DefaultContainerImmutableError, ErrorCategory, ForbiddenError,
)


@dataclass
class FakeTask:
    creator_id: UUID
    assignee_ids: set = field(default_factory=set)
    id: UUID = field(default_factory=uuid4)


@dataclass
class FakeContainer:
    is_default: bool
    owner_id: UUID | None
    id: UUID = field(default_factory=uuid4)
    title: str = "Custom"
    color: str = "#3B82F6"
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


CREATOR, ASSIGNEE, STRANGER = uuid4(), uuid4(), uuid4()


@pytest.mark.parametrize("capability", list(Capability))
def test_creator_has_every_capability(capability):
    assert can(FakeTask(CREATOR, {ASSIGNEE}), CREATOR, capability)


@pytest.mark.parametrize(
    "capability,allowed",
    [
        (Capability.VIEW, True),
        (Capability.MOVE, True),
        (Capability.TRACK_TIME, True),
        (Capability.EDIT, False),
        (Capability.DELETE, False),
    ],
)
def test_assignee_capabilities(capability, allowed):
    assert can(FakeTask(CREATOR, {ASSIGNEE}), ASSIGNEE, capability) is allowed


def test_stranger_cannot_view():
    task = FakeTask(CREATOR, {ASSIGNEE})
    with pytest.raises(ForbiddenError) as exc:
        authorize(task, STRANGER, Capability.VIEW)
    assert exc.value.kind == "forbidden"
    assert exc.value.http_status == 403


def test_default_container_visible_to_everyone():
    assert is_container_visible(FakeContainer(True, None), STRANGER)


def test_custom_container_visible_to_owner_only():
    container = FakeContainer(False, CREATOR)
    assert is_container_visible(container, CREATOR)
    assert not is_container_visible(container, STRANGER)


@pytest.mark.parametrize("requester", [CREATOR, STRANGER])
def test_default_container_immutable_for_any_requester(requester):
    with pytest.raises(DefaultContainerImmutableError) as exc:
        check_container_mutable(FakeContainer(True, None), requester)
    assert exc.value.category == ErrorCategory.CONFLICT


def test_custom_container_mutable_by_owner():
    check_container_mutable(FakeContainer(False, CREATOR), CREATOR)


def test_custom_container_forbidden_for_others():
    with pytest.raises(ForbiddenError):
        check_container_mutable(FakeContainer(False, CREATOR), STRANGER)
