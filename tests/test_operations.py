# tests/test_operations.py

import pytest
from datetime import timedelta

from pomotask.commands import operations as ops
from pomotask.utils.db.models import Session, Task
from pomotask.utils.db.task_store import TaskStore
from pomotask.utils.error_handler import InvalidInput, TaskNotFound


@pytest.fixture
def store():
    return TaskStore([
        Task(id=1, description="Write report"),
        Task(id=2, description="Review PR", done=True),
    ])


def test_parse_task_ids():
    assert ops.parse_task_ids(["3", "1", "2"]) == [3, 1, 2]
    # 0 is well-formed, it just never matches a task
    assert ops.parse_task_ids(["0"]) == [0]


@pytest.mark.parametrize("args, message", [
    ([], "No task ID specified."),
    (["1", "abc", "2"], "Invalid task ID abc."),
    (["-4"], "Invalid task ID -4."),
])
def test_parse_task_ids_rejects_bad_input(args, message):
    with pytest.raises(InvalidInput) as exc:
        ops.parse_task_ids(args)
    assert str(exc.value) == message


def test_parse_minutes():
    assert ops.parse_minutes("45") == 45
    with pytest.raises(InvalidInput, match="Invalid time ten."):
        ops.parse_minutes("ten")


def test_parse_minutes_rejects_values_past_datetime_range(now):
    with pytest.raises(InvalidInput, match="Invalid time 2000000000."):
        ops.parse_minutes("2000000000", now)
    with pytest.raises(InvalidInput, match="Invalid time 99999999999999999999."):
        ops.parse_minutes("99999999999999999999", now)


def test_add_task_message(store):
    assert ops.add_task(store, "Plan sprint") == "Task 3 added."


def test_start_and_finish_pomodoro(store, now):
    assert ops.start_pomodoro(store, 1, now) == "Pomodoro started for task 1."
    assert store.find(1).has_open_session()
    assert ops.finish_pomodoro(store, 1, now + timedelta(minutes=20)) == "Pomodoro finished for task 1."
    assert store.find(1).time_spent(now + timedelta(hours=1)) == timedelta(minutes=20)


def test_operation_on_missing_task_raises(store, now):
    with pytest.raises(TaskNotFound):
        ops.start_pomodoro(store, 99, now)


def test_apply_to_ids_reports_domain_errors_and_continues(store, now):
    store.find(2).start_session(now)

    messages = ops.apply_to_ids(
        store, [1, 99, 2], lambda s, i: ops.start_pomodoro(s, i, now))

    assert messages == [
        "Pomodoro started for task 1.",
        "Task 99 not found.",
        "Pomodoro already active for task 2.",
    ]
    assert len(store.find(2).sessions) == 1


def test_finish_messages(store, now):
    store.find(2).sessions.append(Session(start=now - timedelta(hours=1), end=now))
    messages = ops.apply_to_ids(
        store, [1, 2], lambda s, i: ops.finish_pomodoro(s, i, now))
    assert messages == [
        "No pomodoros found for task 1.",
        "No pomodoro active for task 2.",
    ]


def test_track_time(store, now):
    assert ops.track_time(store, 1, 10, now) == "Tracked 10 minutes for task 1."
    assert store.find(1).time_spent(now) == timedelta(minutes=10)


def test_flag_operations(store):
    assert ops.apply_to_ids(store, [1], ops.check_task) == ["Task 1 checked."]
    assert ops.apply_to_ids(store, [2], ops.uncheck_task) == ["Task 2 unchecked."]
    assert ops.apply_to_ids(store, [1, 2], ops.archive_task) == [
        "Task 1 moved to archive.", "Task 2 moved to archive."]
    assert ops.apply_to_ids(store, [2], ops.unarchive_task) == ["Task 2 moved out of archive."]
    assert [(t.done, t.archived) for t in store] == [(True, True), (False, False)]


def test_archive_all_checked(store):
    assert ops.archive_all_checked(store) == ["Task 2 moved to archive."]
    assert store.find(2).archived
    assert not store.find(1).archived


def test_compute_due_notifications(store, now):
    store.find(1).start_session(now - timedelta(minutes=30))
    notes = ops.compute_due_notifications(store, now)
    assert len(notes) == 1
    assert notes[0].title == "Pomodoro finished for task 1."
    assert notes[0].body == "Write report"


def test_sample_notification():
    note = ops.sample_notification()
    assert note.title == "This is a test notification"
