# tests/test_log_utils.py

import logging
from logging.handlers import RotatingFileHandler

import pytest

from pomotask.utils import log_utils


@pytest.fixture
def clean_root_logger():
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    root.handlers = []
    yield root
    for h in root.handlers:
        h.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)


def test_setup_logging_is_idempotent(tmp_path, clean_root_logger):
    log_dir = tmp_path / "logs"
    log_utils.setup_logging("DEBUG", log_dir=log_dir)
    log_utils.setup_logging("DEBUG", log_dir=log_dir)

    files = [h for h in clean_root_logger.handlers if isinstance(h, RotatingFileHandler)]
    streams = [h for h in clean_root_logger.handlers if type(h) is logging.StreamHandler]
    assert len(files) == 1
    assert len(streams) == 1
    assert streams[0].level == logging.WARNING
    assert clean_root_logger.level == logging.DEBUG
    assert (log_dir / "pt.log").exists()


def test_setup_logging_defaults_to_pt_home(pt_home, clean_root_logger):
    log_utils.setup_logging()
    assert (pt_home / "logs" / "pt.log").exists()
