# pomotask/utils/log_utils.py

import logging
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path
from typing import Optional, Union


def _to_level(level: Union[int, str]) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper(), logging.INFO)
    return level


def setup_logging(level: Union[int, str] = logging.INFO, log_dir: Optional[Path] = None):
    """
    Configure root logger with:
     - RotatingFileHandler writing to <log_dir>/pt.log (~/.pt/logs by default)
     - StreamHandler to stderr, warnings and up only, so task listings stay clean
    Idempotent: calling multiple times won't add duplicate handlers.
    """
    if log_dir is None:
        from pomotask.config.config_manager import get_log_dir
        log_dir = get_log_dir()
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        print(f"WARNING: Could not create log directory {log_dir}: {e}")
        _configure_console_logging()
        return

    level = _to_level(level)
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    existing_handlers = list(root_logger.handlers)

    file_log_path = log_dir / "pt.log"
    add_file = True
    for h in existing_handlers:
        if isinstance(h, RotatingFileHandler):
            base = getattr(h, 'baseFilename', None)
            if base and os.path.abspath(base) == os.path.abspath(file_log_path):
                add_file = False
                break
    if add_file:
        try:
            file_handler = RotatingFileHandler(
                file_log_path,
                maxBytes=5 * 1024 * 1024,
                backupCount=3
            )
            file_handler.setFormatter(logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            ))
            file_handler.setLevel(level)
            root_logger.addHandler(file_handler)
        except OSError as e:
            print(f"WARNING: Could not set up file logging: {e}")

    _configure_console_logging()


def _configure_console_logging():
    """
    Add a stderr handler at WARNING unless a plain stream handler is already
    installed. Also used alone when the log directory is unusable.
    """
    root_logger = logging.getLogger()
    for h in root_logger.handlers:
        if type(h) is logging.StreamHandler:
            return

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter('%(levelname)s - %(message)s'))
    console_handler.setLevel(logging.WARNING)
    root_logger.addHandler(console_handler)
