"""Durations — pure time arithmetic for tracked sessions.

Invariants:
    - All durations are whole seconds, floored, never negative
    - A closed session's end_time is never earlier than its start_time
    - Live duration of an active session = now - start_time, never persisted
    - Naive datetimes (SQLite round-trips) are treated as UTC
"""

from datetime import datetime, timezone
from typing import Iterable

from taskboard.core.domain_types import Seconds, SessionState, UserId
from taskboard.core.repository_protocols import SessionLike


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def elapsed_seconds(start: datetime, end: datetime) -> Seconds:
    seconds = int((ensure_utc(end) - ensure_utc(start)).total_seconds())
    return Seconds(max(seconds, 0))


def closing_values(start: datetime, now: datetime) -> tuple[datetime, Seconds]:
    """(end_time, duration) for closing a session started at start."""
    end = max(ensure_utc(now), ensure_utc(start))
    return end, elapsed_seconds(start, end)


def session_seconds(session: SessionLike, now: datetime) -> Seconds:
    """Stored duration for closed sessions, live duration for active ones."""
    if session.is_active:
        return elapsed_seconds(session.start_time, now)
    return Seconds(session.duration or 0)


def format_hms(seconds: Seconds) -> str:
    """HH:MM:SS; hours are not capped at 24."""
    seconds = max(int(seconds), 0)
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def user_sessions(
    sessions: Iterable[SessionLike], user_id: UserId,
) -> list[SessionLike]:
    return [s for s in sessions if s.user_id == user_id]


def active_session(
    sessions: Iterable[SessionLike], user_id: UserId,
) -> SessionLike | None:
    for s in sessions:
        if s.user_id == user_id and s.is_active:
            return s
    return None


def user_total_seconds(
    sessions: Iterable[SessionLike], user_id: UserId, now: datetime,
) -> Seconds:
    """Closed durations plus live duration of the user's active session."""
    return Seconds(sum(session_seconds(s, now) for s in user_sessions(sessions, user_id)))


def session_state(
    sessions: Iterable[SessionLike], user_id: UserId,
) -> SessionState:
    """Where user_id stands on one task: never tracked, tracking, or done."""
    own = user_sessions(sessions, user_id)
    if not own:
        return SessionState.NO_SESSION
    if any(s.is_active for s in own):
        return SessionState.ACTIVE
    return SessionState.CLOSED
