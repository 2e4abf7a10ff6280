# pomotask/utils/db/task_file.py
"""
The task file: the only place pomotask reads or writes task data.

A TaskFile is opened once per invocation and holds an exclusive flock on
the file until it is closed, so a scheduled `pt --notify` and a manual edit
never interleave. Saving rewrites the whole file in place while the lock
is held.
"""
import fcntl
import json
import logging
import os
from datetime import timedelta
from pathlib import Path
from typing import IO, Optional, Union

from pomotask.utils.db.models import POMODORO_DURATION, task_from_record
from pomotask.utils.db.task_store import TaskStore
from pomotask.utils.error_handler import StoreError, handle_store_errors

logger = logging.getLogger(__name__)


class TaskFile:
    """
    Usage:
        with TaskFile(path) as tf:
            store = tf.load()
            ...
            tf.save(store)
    The lock is released when the block exits, including on errors.
    """

    def __init__(self, path: Union[str, Path],
                 pomodoro_duration: timedelta = POMODORO_DURATION):
        self.path = Path(path).expanduser()
        self.pomodoro_duration = pomodoro_duration
        self._fh: Optional[IO[str]] = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    @property
    def is_open(self) -> bool:
        return self._fh is not None

    @handle_store_errors("Open task file")
    def open(self):
        """
        Open (creating if needed) and lock the task file. Blocks until any
        other pt process holding the lock lets go.
        """
        if self._fh is not None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_RDWR | os.O_CREAT, 0o600)
        fh = os.fdopen(fd, "r+", encoding="utf-8")
        try:
            fcntl.flock(fh, fcntl.LOCK_EX)
        except OSError:
            fh.close()
            raise
        self._fh = fh
        logger.debug(f"Locked task file {self.path}")

    def close(self):
        if self._fh is None:
            return
        fh, self._fh = self._fh, None
        try:
            fcntl.flock(fh, fcntl.LOCK_UN)
        finally:
            fh.close()
        logger.debug(f"Released task file {self.path}")

    def _handle(self) -> IO[str]:
        if self._fh is None:
            raise StoreError(f"Task file {self.path} is not open.")
        return self._fh

    @handle_store_errors("Read task file")
    def load(self) -> TaskStore:
        """
        Decode the whole file into a TaskStore. An empty file is an empty
        store; anything that is not a valid task array raises StoreError.
        """
        fh = self._handle()
        fh.seek(0)
        text = fh.read()
        if not text:
            return TaskStore(pomodoro_duration=self.pomodoro_duration)

        records = json.loads(text)
        if not isinstance(records, list):
            raise StoreError(
                f"Failed to parse task file: expected a JSON array, got {type(records).__name__}")
        tasks = [task_from_record(r) for r in records]

        ids = [t.id for t in tasks]
        if len(ids) != len(set(ids)):
            raise StoreError("Failed to parse task file: duplicate task ids")

        logger.debug(f"Loaded {len(tasks)} tasks from {self.path}")
        return TaskStore(tasks, pomodoro_duration=self.pomodoro_duration)

    @handle_store_errors("Write task file")
    def save(self, store: TaskStore):
        """Truncate and rewrite the file with the full store."""
        fh = self._handle()
        payload = json.dumps(store.to_records(), indent=2, ensure_ascii=False)
        fh.seek(0)
        fh.truncate(0)
        fh.write(payload)
        fh.flush()
        os.fsync(fh.fileno())
        logger.debug(f"Saved {len(store)} tasks to {self.path}")
