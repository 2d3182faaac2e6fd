"""Access Enforcement — one authorization predicate for tasks, one for containers.

Invariants:
    - Creator holds every capability on a task
    - Assignees hold VIEW, MOVE, TRACK_TIME only (ASSIGNEE_CAPABILITIES)
    - Containers are visible when default or owned by the requester
    - Default containers are immutable for everyone, including their seeder
    - Pure functions: raise typed errors, never touch IO
"""

from taskboard.core.domain_types import Capability, UserId, ASSIGNEE_CAPABILITIES
from taskboard.core.errors import (
    ErrorContext, ForbiddenError, DefaultContainerImmutableError,
)
from taskboard.core.repository_protocols import TaskLike, ContainerLike


_DENIED_MESSAGES = {
    Capability.VIEW: "Not authorized to access this task",
    Capability.MOVE: "Not authorized to move this task",
    Capability.TRACK_TIME: "Not authorized to track time on this task",
    Capability.EDIT: "Only the task creator can modify this task",
    Capability.DELETE: "Only the task creator can delete this task",
}


def can(task: TaskLike, user_id: UserId, capability: Capability) -> bool:
    """True when user_id may exercise capability on task."""
    if task.creator_id == user_id:
        return True
    if capability not in ASSIGNEE_CAPABILITIES:
        return False
    return user_id in task.assignee_ids


def authorize(task: TaskLike, user_id: UserId, capability: Capability) -> None:
    """Raise ForbiddenError unless user_id may exercise capability on task."""
    if not can(task, user_id, capability):
        raise ForbiddenError(
            _DENIED_MESSAGES[capability],
            ErrorContext(task_id=str(task.id), user_id=str(user_id)),
        )


def is_container_visible(container: ContainerLike, user_id: UserId) -> bool:
    return container.is_default or container.owner_id == user_id


def check_container_mutable(container: ContainerLike, user_id: UserId) -> None:
    """Guard for container update/delete. Default check precedes ownership."""
    if container.is_default:
        raise DefaultContainerImmutableError(str(container.id))
    if not is_container_visible(container, user_id):
        raise ForbiddenError(
            "Not authorized to modify this container",
            ErrorContext(container_id=str(container.id), user_id=str(user_id)),
        )
