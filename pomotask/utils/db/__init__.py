# pomotask/utils/db/__init__.py

"""
Task model, in-memory store and the locked task file.
"""

from pomotask.utils.db.models import (
    POMODORO_DURATION,
    POMODORO_MINUTES,
    Session,
    SessionState,
    Task,
    task_from_record,
)
from pomotask.utils.db.task_store import Notification, TaskStore
from pomotask.utils.db.task_file import TaskFile
