# tests/conftest.py

from datetime import datetime, timezone

import pytest

# ────────────────────────────────────────────────────────────────────────────────
# Fixture: point the pt home directory and task file at tmp_path
# ────────────────────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def pt_home(tmp_path, monkeypatch):
    """
    Every test gets its own ~/.pt: config, logs, task file and alarm
    all live under tmp_path, and nothing reads the real home directory.
    """
    home = tmp_path / "pt_home"
    monkeypatch.setenv("PT_HOME", str(home))
    monkeypatch.delenv("PT_TASK_FILE", raising=False)

    import pomotask.config.config_manager as cfg
    monkeypatch.setattr(cfg, "BASE_DIR", home)
    monkeypatch.setattr(cfg, "USER_CONFIG", home / "config.toml")
    yield home


@pytest.fixture
def task_path(tmp_path, monkeypatch):
    """A task file location exported through PT_TASK_FILE."""
    path = tmp_path / "tasks.json"
    monkeypatch.setenv("PT_TASK_FILE", str(path))
    return path


@pytest.fixture
def now():
    return datetime(2024, 3, 1, 9, 0, 0, tzinfo=timezone.utc)


# ────────────────────────────────────────────────────────────────────────────────
# Fixture: record notifications and alarms instead of touching the desktop
# ────────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def desktop(monkeypatch, pt_home):
    """
    Replace notify-send and the sound player. Returns a namespace with the
    captured notifications and alarm paths.
    """
    from types import SimpleNamespace
    import pomotask.utils.notifications as notifications

    captured = SimpleNamespace(sent=[], alarms=[])

    def fake_send(title, body, app_name="pt", timeout_ms=0):
        captured.sent.append((title, body, app_name, timeout_ms))
        return True

    def fake_play(sound_file):
        captured.alarms.append(sound_file)

    monkeypatch.setattr(notifications, "send_desktop_notification", fake_send)
    monkeypatch.setattr(notifications, "play_alarm", fake_play)
    yield captured
