# pomotask/utils/error_handler.py
"""
Error types and the error-translation decorator used around the task file.

Three families:
 - input errors (InvalidInput, ValidationError): bad command-line values,
   reported and the command is aborted before anything is saved.
 - domain errors (TaskNotFound, SessionAlreadyActive, NoActiveSession):
   reported per task id, the batch carries on.
 - environment errors (StoreError, PlaybackError): fatal for the invocation.
"""
import json
import logging
from functools import wraps

logger = logging.getLogger(__name__)


class PtError(Exception):
    """Base class for every error raised by pomotask."""
    pass


class InvalidInput(PtError):
    """Raised when a command-line value cannot be parsed."""
    pass


class ValidationError(PtError, ValueError):
    """Raised when task data fails validation."""
    pass


class DomainError(PtError):
    """An operation that does not apply to the task in its current state."""

    def __init__(self, task_id: int, message: str):
        super().__init__(message)
        self.task_id = task_id


class TaskNotFound(DomainError):
    def __init__(self, task_id: int):
        super().__init__(task_id, f"Task {task_id} not found.")


class SessionAlreadyActive(DomainError):
    def __init__(self, task_id: int):
        super().__init__(task_id, f"Pomodoro already active for task {task_id}.")


class NoActiveSession(DomainError):
    def __init__(self, task_id: int, never_started: bool = False):
        if never_started:
            message = f"No pomodoros found for task {task_id}."
        else:
            message = f"No pomodoro active for task {task_id}."
        super().__init__(task_id, message)
        self.never_started = never_started


class StoreError(PtError):
    """Raised when the task file cannot be opened, locked, read or written."""
    pass


class PlaybackError(PtError):
    """Raised when the alarm sound cannot be played."""
    pass


def handle_store_errors(operation_name: str):
    """
    Decorator for task file operations: anything the OS or the decoder
    throws comes out as StoreError, logged once here.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except StoreError:
                raise
            except json.JSONDecodeError as e:
                logger.error(f"{operation_name} - malformed task file: {e}")
                raise StoreError(f"Failed to parse task file: {e}") from e
            except (KeyError, TypeError, ValueError) as e:
                logger.error(f"{operation_name} - invalid task record: {e}")
                raise StoreError(f"Failed to parse task file: {e}") from e
            except OSError as e:
                logger.error(f"{operation_name} - I/O error: {e}", exc_info=True)
                raise StoreError(f"{operation_name} failed: {e}") from e
        return wrapper
    return decorator
