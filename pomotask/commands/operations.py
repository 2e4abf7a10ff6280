# pomotask/commands/operations.py
'''
pomotask - Task Operations
The things `pt` can do to a task store. Every operation either mutates the
store and returns a one-line confirmation, or raises one of the domain
errors in error_handler, leaving the store as it was.
'''
import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence

from pomotask.utils.db.task_store import Notification, TaskStore
from pomotask.utils.error_handler import DomainError, InvalidInput
from pomotask.utils.time_utils import now_utc

logger = logging.getLogger(__name__)


def parse_task_ids(args: Sequence[str]) -> List[int]:
    """
    Convert raw id arguments to ints. The first one that is not a
    non-negative integer aborts the whole batch. 0 parses but never
    matches a task, since ids start at 1.
    """
    if not args:
        raise InvalidInput("No task ID specified.")
    ids = []
    for arg in args:
        try:
            task_id = int(arg)
        except ValueError:
            raise InvalidInput(f"Invalid task ID {arg}.")
        if task_id < 0:
            raise InvalidInput(f"Invalid task ID {arg}.")
        ids.append(task_id)
    return ids


def parse_minutes(arg: str, now: Optional[datetime] = None) -> int:
    """
    Parse a minute count for manual tracking. Values that would put the
    start of the interval before datetime.min are refused.
    """
    try:
        value = int(arg)
    except ValueError:
        raise InvalidInput(f"Invalid time {arg}.")
    if value < 0:
        raise InvalidInput(f"Invalid time {arg}.")
    try:
        (now or now_utc()) - timedelta(minutes=value)
    except OverflowError:
        raise InvalidInput(f"Invalid time {arg}.")
    return value


def apply_to_ids(store: TaskStore, ids: Sequence[int],
                 op: Callable[[TaskStore, int], str]) -> List[str]:
    """
    Run op for each id in order. A domain error is reported for its id and
    the batch continues.
    """
    messages = []
    for task_id in ids:
        try:
            messages.append(op(store, task_id))
        except DomainError as e:
            logger.info(f"Skipped task {task_id}: {e}")
            messages.append(str(e))
    return messages


def add_task(store: TaskStore, description: str) -> str:
    task_id = store.add(description)
    return f"Task {task_id} added."


def start_pomodoro(store: TaskStore, task_id: int, now: datetime) -> str:
    store.find(task_id).start_session(now)
    return f"Pomodoro started for task {task_id}."


def finish_pomodoro(store: TaskStore, task_id: int, now: datetime) -> str:
    store.find(task_id).finish_session(now)
    return f"Pomodoro finished for task {task_id}."


def track_time(store: TaskStore, task_id: int, minutes: int, now: datetime) -> str:
    store.find(task_id).track_manual(minutes, now)
    return f"Tracked {minutes} minutes for task {task_id}."


def check_task(store: TaskStore, task_id: int) -> str:
    store.set_done(task_id, True)
    return f"Task {task_id} checked."


def uncheck_task(store: TaskStore, task_id: int) -> str:
    store.set_done(task_id, False)
    return f"Task {task_id} unchecked."


def archive_task(store: TaskStore, task_id: int) -> str:
    store.set_archived(task_id, True)
    return f"Task {task_id} moved to archive."


def unarchive_task(store: TaskStore, task_id: int) -> str:
    store.set_archived(task_id, False)
    return f"Task {task_id} moved out of archive."


def archive_all_checked(store: TaskStore) -> List[str]:
    return [f"Task {t.id} moved to archive." for t in store.archive_all_done()]


def compute_due_notifications(store: TaskStore, now: datetime) -> List[Notification]:
    return store.compute_due_notifications(now)


def sample_notification() -> Notification:
    return Notification(
        title="This is a test notification",
        body="Here is some information about this test notification",
    )

