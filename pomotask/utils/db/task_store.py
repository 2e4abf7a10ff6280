# pomotask/utils/db/task_store.py
'''
In-memory task collection for a single invocation.
Holds tasks in id order, hands out ids and runs the due-pomodoro scan.
Nothing here touches the disk; see task_file.py for that.
'''
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from pomotask.utils.db.models import POMODORO_DURATION, Task
from pomotask.utils.error_handler import TaskNotFound, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    title: str
    body: str


class TaskStore:
    def __init__(self, tasks: Optional[Iterable[Task]] = None,
                 pomodoro_duration: timedelta = POMODORO_DURATION):
        self.tasks: List[Task] = list(tasks or [])
        self.pomodoro_duration = pomodoro_duration

    def __len__(self):
        return len(self.tasks)

    def __iter__(self):
        return iter(self.tasks)

    def __eq__(self, other):
        if not isinstance(other, TaskStore):
            return NotImplemented
        return self.tasks == other.tasks

    # ── lookup ──────────────────────────────────────────────────────────────

    def find(self, task_id: int) -> Task:
        for task in self.tasks:
            if task.id == task_id:
                return task
        raise TaskNotFound(task_id)

    def next_id(self) -> int:
        return max((t.id for t in self.tasks), default=0) + 1

    def active_tasks(self) -> List[Task]:
        return [t for t in self.tasks if not t.archived]

    def archived_tasks(self) -> List[Task]:
        return [t for t in self.tasks if t.archived]

    # ── mutation ────────────────────────────────────────────────────────────

    def add(self, description: str) -> int:
        """
        Append a new task and return its id. The description is stored
        exactly as given; only an empty string is refused.
        """
        if not description:
            raise ValidationError("Task description cannot be empty.")
        task = Task(id=self.next_id(), description=description)
        self.tasks.append(task)
        logger.debug(f"Added task {task.id}")
        return task.id

    def set_done(self, task_id: int, value: bool) -> Task:
        task = self.find(task_id)
        task.done = value
        return task

    def set_archived(self, task_id: int, value: bool) -> Task:
        task = self.find(task_id)
        task.archived = value
        return task

    def archive_all_done(self) -> List[Task]:
        """
        Archive every checked task. Returns the tasks that are done,
        including ones that were already archived.
        """
        done = [t for t in self.tasks if t.done]
        for task in done:
            task.archived = True
        return done

    def compute_due_notifications(self, now: datetime) -> List[Notification]:
        """
        Close every pomodoro whose time is up and return one notification
        per task that was closed by this scan.
        """
        notifications = []
        for task in self.tasks:
            if task.mark_due_and_close(now, self.pomodoro_duration):
                logger.info(f"Pomodoro for task {task.id} is due")
                notifications.append(Notification(
                    title=f"Pomodoro finished for task {task.id}.",
                    body=task.description,
                ))
        return notifications

    # ── serialization ───────────────────────────────────────────────────────

    def to_records(self) -> List[dict]:
        return [t.to_dict() for t in self.tasks]
