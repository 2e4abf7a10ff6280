# pomotask/utils/db/models.py
from enum import Enum
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from pomotask.utils.error_handler import (
    NoActiveSession, SessionAlreadyActive, ValidationError)
from pomotask.utils.time_utils import (
    elapsed_between, format_rfc3339, minutes, parse_rfc3339, to_utc)

POMODORO_MINUTES = 25
POMODORO_DURATION = minutes(POMODORO_MINUTES)


class SessionState(Enum):
    OPEN = "open"
    CLOSED = "closed"


@dataclass
class Session:
    """
    One pomodoro: a start instant and, once finished, an end instant.
    On disk this keeps the {start_time, end_time|null} shape.
    """
    start: datetime
    end: Optional[datetime] = None

    def __post_init__(self):
        self.start = to_utc(self.start)
        # end < start only happens under clock skew; kept as recorded
        if self.end is not None:
            self.end = to_utc(self.end)

    @property
    def state(self) -> SessionState:
        return SessionState.OPEN if self.end is None else SessionState.CLOSED

    @property
    def is_open(self) -> bool:
        return self.end is None

    def elapsed(self, now: datetime) -> timedelta:
        return elapsed_between(self.start, self.end, now)

    def close(self, end: datetime):
        self.end = to_utc(end)

    def to_dict(self) -> dict:
        return {
            "start_time": format_rfc3339(self.start),
            "end_time": format_rfc3339(self.end) if self.end is not None else None,
        }


@dataclass
class Task:
    id: int
    description: str
    done: bool = False
    archived: bool = False
    sessions: List[Session] = field(default_factory=list)

    # ── queries ─────────────────────────────────────────────────────────────

    def time_spent(self, now: datetime) -> timedelta:
        """Sum of all sessions; an open session counts up to `now`."""
        total = timedelta(0)
        for session in self.sessions:
            total += session.elapsed(now)
        return total

    def has_open_session(self) -> bool:
        return bool(self.sessions) and self.sessions[-1].is_open

    def remaining(self, now: datetime, duration: timedelta = POMODORO_DURATION) -> Optional[timedelta]:
        """
        Time left on the running pomodoro, or None when nothing is running.
        Goes negative once the pomodoro is overdue.
        """
        if not self.has_open_session():
            return None
        return duration - self.sessions[-1].elapsed(now)

    # ── state transitions ───────────────────────────────────────────────────

    def start_session(self, now: datetime) -> Session:
        if self.has_open_session():
            raise SessionAlreadyActive(self.id)
        session = Session(start=now)
        self.sessions.append(session)
        return session

    def finish_session(self, now: datetime) -> Session:
        if not self.sessions:
            raise NoActiveSession(self.id, never_started=True)
        last = self.sessions[-1]
        if not last.is_open:
            raise NoActiveSession(self.id)
        last.close(now)
        return last

    def track_manual(self, minutes_spent: int, now: datetime) -> Session:
        """
        Log a finished interval of `minutes_spent` ending at `now`.
        An open session must stay last, so the interval goes in front of it.
        """
        if minutes_spent < 0:
            raise ValidationError(f"Invalid time {minutes_spent}.")
        session = Session(start=now - minutes(minutes_spent), end=now)
        if self.has_open_session():
            self.sessions.insert(len(self.sessions) - 1, session)
        else:
            self.sessions.append(session)
        return session

    def mark_due_and_close(self, now: datetime, duration: timedelta = POMODORO_DURATION) -> bool:
        """
        Close the running pomodoro if its time is up. The end is pinned to
        start + duration, not to `now`, so late scans do not inflate time spent.
        Returns True when a session was closed.
        """
        left = self.remaining(now, duration)
        if left is None or left > timedelta(0):
            return False
        last = self.sessions[-1]
        last.close(last.start + duration)
        return True

    # ── serialization ───────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "description": self.description,
            "done": self.done,
            "archived": self.archived,
            "pomodoros": [s.to_dict() for s in self.sessions],
        }


def session_from_record(record: Dict[str, Any]) -> Session:
    start = parse_rfc3339(record["start_time"])
    end_raw = record.get("end_time")
    end = parse_rfc3339(end_raw) if end_raw is not None else None
    return Session(start=start, end=end)


def task_from_record(record: Dict[str, Any]) -> Task:
    """
    Build a Task from one entry of the task file. Missing or mistyped
    fields raise KeyError/TypeError/ValueError.
    """
    if not isinstance(record, dict):
        raise TypeError(f"Task record must be an object, got {type(record).__name__}")
    task_id = record["id"]
    if isinstance(task_id, bool) or not isinstance(task_id, int) or task_id < 1:
        raise ValueError(f"Invalid task id {task_id!r}")
    description = record["description"]
    if not isinstance(description, str):
        raise TypeError(f"Task {task_id} description must be a string")
    for flag in ("done", "archived"):
        if not isinstance(record[flag], bool):
            raise TypeError(f"Task {task_id} field '{flag}' must be a boolean")

    sessions = [session_from_record(p) for p in record["pomodoros"]]
    open_positions = [i for i, s in enumerate(sessions) if s.is_open]
    if open_positions and open_positions != [len(sessions) - 1]:
        raise ValueError(
            f"Task {task_id} has an open pomodoro that is not the last one")

    return Task(
        id=task_id,
        description=description,
        done=record["done"],
        archived=record["archived"],
        sessions=sessions,
    )
