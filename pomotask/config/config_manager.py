# pomotask/config/config_manager.py
'''
config_manager.py - Configuration management for pomotask
'''
from dataclasses import dataclass
from datetime import timedelta
from importlib.resources import files
import logging
import os
from pathlib import Path
from typing import Any
import toml

from pomotask.utils.db.models import POMODORO_DURATION

logger = logging.getLogger(__name__)

if "BASE_DIR" not in globals():
    _home = os.getenv("PT_HOME", "").strip()
    BASE_DIR = Path(_home).expanduser() if _home else Path.home() / ".pt"

if "USER_CONFIG" not in globals():
    USER_CONFIG = BASE_DIR / "config.toml"

if "DEFAULT_CONFIG" not in globals():
    # the shipped defaults, read from package resources
    DEFAULT_CONFIG = files("pomotask.config") \
        .joinpath("config.toml") \
        .read_text(encoding="utf-8")


@dataclass(frozen=True)
class Settings:
    """
    Everything an invocation needs, resolved once and handed to the task
    file and store. The pomodoro length is fixed, not read from the config.
    """
    task_file: Path
    alarm_file: Path
    app_name: str = "pt"
    notification_timeout_ms: int = 0
    log_level: str = "INFO"
    pomodoro_duration: timedelta = POMODORO_DURATION


def load_config() -> dict:
    """
    Load the user configuration from USER_CONFIG file.
    - If the config directory or file does not exist, create them with defaults.
    - Returns a dict parsed from TOML; on error, logs and returns empty dict.
    """
    try:
        BASE_DIR.mkdir(parents=True, exist_ok=True)
        if not USER_CONFIG.exists():
            try:
                USER_CONFIG.write_text(DEFAULT_CONFIG, encoding="utf-8")
            except OSError as e:
                logger.error(
                    f"Failed to write default config to {USER_CONFIG}: {e}", exc_info=True)
        try:
            text = USER_CONFIG.read_text(encoding="utf-8")
        except OSError as e:
            logger.error(
                f"Failed to read config file {USER_CONFIG}: {e}", exc_info=True)
            return {}
        try:
            return toml.loads(text)
        except toml.TomlDecodeError as e:
            logger.error(
                f"Failed to parse TOML from {USER_CONFIG}: {e}", exc_info=True)
            return {}
    except OSError as e:
        logger.error(f"Unexpected error in load_config: {e}", exc_info=True)
        return {}


def save_config(doc: dict) -> bool:
    """
    Save the given config dict to USER_CONFIG in TOML format.
    - On error, logs and returns False; otherwise returns True.
    """
    try:
        BASE_DIR.mkdir(parents=True, exist_ok=True)
        USER_CONFIG.write_text(toml.dumps(doc), encoding="utf-8")
        return True
    except (OSError, TypeError) as e:
        logger.error(
            f"Failed to write config to {USER_CONFIG}: {e}", exc_info=True)
        return False


def get_config_value(section: str, key: str, default=None) -> Any:
    """
    Return value for [section][key] in config, or default if missing.
    """
    return load_config().get(section, {}).get(key, default)


def set_config_value(section: str, key: str, value: Any) -> bool:
    """
    Set config[section][key] = value and persist.
    Returns True if saved successfully, False otherwise.
    """
    config = load_config()
    sec = config.get(section, {}) or {}
    sec[key] = value
    config[section] = sec
    success = save_config(config)
    if not success:
        logger.error(f"Failed to save config after setting [{section}][{key}]")
    return success


def _resolve_path(value: str) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else BASE_DIR / path


def get_task_file() -> Path:
    """
    Path of the task file. PT_TASK_FILE wins over the config so tests and
    scripts can point at another file.
    """
    env_file = os.getenv("PT_TASK_FILE", "").strip()
    if env_file:
        return Path(env_file).expanduser().resolve()
    return _resolve_path(get_config_value("storage", "task_file", "tasks.json"))


def get_alarm_file() -> Path:
    return _resolve_path(get_config_value("alarm", "sound_file", "alarm.mp3"))


def get_log_dir() -> Path:
    return BASE_DIR / "logs"


def get_settings() -> Settings:
    config = load_config()
    notifications = config.get("notifications", {})

    timeout = notifications.get("timeout_ms", 0)
    try:
        timeout = int(timeout)
    except (TypeError, ValueError):
        logger.warning(f"Invalid notifications.timeout_ms '{timeout}', using 0")
        timeout = 0

    return Settings(
        task_file=get_task_file(),
        alarm_file=get_alarm_file(),
        app_name=str(notifications.get("app_name", "pt")),
        notification_timeout_ms=timeout,
        log_level=str(config.get("logging", {}).get("level", "INFO")),
    )
