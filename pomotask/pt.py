#!/usr/bin/env python3
# pomotask - a terminal task list with pomodoro time tracking
# Copyright (C) 2024 Zach McKinnon
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
'''
pt CLI
Add tasks, check them off, and time pomodoros against them.

    pt                       list tasks
    pt Write the report      add a task
    pt -p 3                  start a pomodoro on task 3
    pt --notify              (from cron) close finished pomodoros and alert
'''
import logging
from datetime import datetime
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape

import pomotask.config.config_manager as cf
from pomotask.commands import display, operations as ops
from pomotask.utils import log_utils, notifications
from pomotask.utils.db.task_file import TaskFile
from pomotask.utils.db.task_store import TaskStore
from pomotask.utils.error_handler import (
    InvalidInput, PlaybackError, StoreError, ValidationError)
from pomotask.utils.time_utils import now_utc

app = typer.Typer(
    help="⏱  pt: a task list with pomodoro time tracking.",
    add_completion=False,
)

console = Console(highlight=False)
logger = logging.getLogger(__name__)

# commands that take one or more task ids, with the operation they run
ID_COMMANDS = {
    "pomodoro": ops.start_pomodoro,
    "finish_pomodoro": ops.finish_pomodoro,
    "check": ops.check_task,
    "uncheck": ops.uncheck_task,
    "archive": ops.archive_task,
    "unarchive": ops.unarchive_task,
}
TIMED_COMMANDS = ("pomodoro", "finish_pomodoro")


def _select_command(flags: dict) -> Optional[str]:
    chosen = [name for name, on in flags.items() if on]
    if len(chosen) > 1:
        options = ", ".join("--" + c.replace("_", "-") for c in chosen)
        raise InvalidInput(f"Only one command at a time ({options}).")
    return chosen[0] if chosen else None


def _run(command: Optional[str], args: List[str], store: TaskStore, now: datetime) -> tuple:
    """
    Execute one command against the store.
    Returns (messages, notifications, mutated).
    """
    if command in ("list", "list_archived") or (command is None and not args):
        return [], [], False

    if command in ID_COMMANDS:
        op = ID_COMMANDS[command]
        ids = ops.parse_task_ids(args)
        if command in TIMED_COMMANDS:
            return ops.apply_to_ids(
                store, ids, lambda s, task_id: op(s, task_id, now)), [], True
        return ops.apply_to_ids(store, ids, op), [], True

    if command == "track":
        if not args:
            raise InvalidInput("No task ID specified.")
        if len(args) < 2:
            raise InvalidInput("No time specified.")
        task_id = ops.parse_task_ids(args[:1])[0]
        minutes = ops.parse_minutes(args[1], now)
        return ops.apply_to_ids(
            store, [task_id],
            lambda s, i: ops.track_time(s, i, minutes, now)), [], True

    if command == "archive_checked":
        return ops.archive_all_checked(store), [], True

    if command == "notify":
        return [], ops.compute_due_notifications(store, now), True

    if command == "test_notification":
        return [], [ops.sample_notification()], False

    # anything else is the description of a new task
    return [ops.add_task(store, " ".join(args))], [], True


@app.command(context_settings={
    "help_option_names": ["-h", "--help"],
    "ignore_unknown_options": True,
    "allow_interspersed_args": False,
})
def main(
    args: Optional[List[str]] = typer.Argument(
        None, help="Task IDs for the flag given, or the description of a new task."),
    pomodoro: bool = typer.Option(
        False, "--pomodoro", "-p", help="Start a pomodoro for the given task IDs."),
    finish_pomodoro: bool = typer.Option(
        False, "--finish-pomodoro", "-f", help="Finish the pomodoro for the given task IDs."),
    track: bool = typer.Option(
        False, "--track", "-t", help="Track MINUTES for a task: pt -t ID MINUTES."),
    list_: bool = typer.Option(
        False, "--list", "-l", help="List active tasks."),
    list_archived: bool = typer.Option(
        False, "--list-archived", help="List archived tasks."),
    check: bool = typer.Option(
        False, "--check", "-c", help="Check the given task IDs."),
    uncheck: bool = typer.Option(
        False, "--uncheck", "-u", help="Uncheck the given task IDs."),
    archive: bool = typer.Option(
        False, "--archive", "-a", help="Archive the given task IDs."),
    unarchive: bool = typer.Option(
        False, "--unarchive", help="Move the given task IDs out of the archive."),
    archive_checked: bool = typer.Option(
        False, "--archive-checked", help="Archive all checked tasks."),
    notify: bool = typer.Option(
        False, "--notify", help="Close finished pomodoros and show notifications."),
    test_notification: bool = typer.Option(
        False, "--test-notification", help="Display a test notification."),
):
    """
    List tasks, add a task, or run one of the commands below on task IDs.
    """
    settings = cf.get_settings()
    log_utils.setup_logging(settings.log_level)
    args = list(args or [])

    try:
        command = _select_command({
            "pomodoro": pomodoro,
            "finish_pomodoro": finish_pomodoro,
            "track": track,
            "list": list_,
            "list_archived": list_archived,
            "check": check,
            "uncheck": uncheck,
            "archive": archive,
            "unarchive": unarchive,
            "archive_checked": archive_checked,
            "notify": notify,
            "test_notification": test_notification,
        })
        if command in ID_COMMANDS and not args:
            raise InvalidInput("No task ID specified.")
    except InvalidInput as e:
        console.print(escape(str(e)))
        return

    now = now_utc()
    try:
        with TaskFile(settings.task_file, settings.pomodoro_duration) as task_file:
            store = task_file.load()
            try:
                messages, pending, mutated = _run(command, args, store, now)
            except (InvalidInput, ValidationError) as e:
                console.print(escape(str(e)))
                return

            for message in messages:
                console.print(escape(message))
            if command != "notify" and command != "test_notification":
                display.list_tasks(store, now, archived=(command == "list_archived"))
            if mutated:
                task_file.save(store)
    except StoreError as e:
        logger.error(f"Task file error: {e}")
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    try:
        notifications.deliver(
            pending,
            settings.alarm_file,
            app_name=settings.app_name,
            timeout_ms=settings.notification_timeout_ms,
        )
    except PlaybackError as e:
        logger.error(f"Alarm playback failed: {e}")
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
