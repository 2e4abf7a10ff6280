# pomotask/commands/display.py
from datetime import datetime, timedelta
from typing import Optional

from rich.console import Console
from rich.markup import escape

from pomotask.utils.db.models import POMODORO_DURATION, Task
from pomotask.utils.db.task_store import TaskStore
from pomotask.utils.time_utils import format_countdown, whole_minutes

console = Console(highlight=False)


def format_task(task: Task, now: datetime,
                pomodoro_duration: timedelta = POMODORO_DURATION) -> str:
    """
    One plain-text line per task:
        003 [x]: Write report (Σ75 min)
        004 [ ]: Review PR (12m 05s)      <- pomodoro running
    """
    status = "x" if task.done else " "
    left = task.remaining(now, pomodoro_duration)
    if left is None:
        time_str = f"Σ{whole_minutes(task.time_spent(now))} min"
    else:
        time_str = format_countdown(left)
    return f"{task.id:03d} [{status}]: {task.description} ({time_str})"


def _style_for(task: Task, now: datetime, store: TaskStore) -> Optional[str]:
    if task.done:
        return "dim"
    left = task.remaining(now, store.pomodoro_duration)
    if left is None:
        return None
    return "bold red" if left.total_seconds() <= 0 else "bold green"


def list_tasks(store: TaskStore, now: datetime, archived: bool = False):
    """Print active (or archived) tasks in id order."""
    if len(store) == 0:
        console.print("No tasks found.")
        return
    tasks = store.archived_tasks() if archived else store.active_tasks()
    for task in tasks:
        line = escape(format_task(task, now, store.pomodoro_duration))
        style = _style_for(task, now, store)
        console.print(f"[{style}]{line}[/]" if style else line)
