"""Tests for habitflow.core.utils.logging."""

import pytest
from loguru import logger

from habitflow.core.config import Config
from habitflow.core.utils.logging import configure_logging, setup_logging


@pytest.fixture(autouse=True)
def _restore_logger():
    yield
    logger.remove()


def test_console_level(capsys):
    setup_logging(level="info")
    logger.debug("hidden")
    logger.info("shown")
    err = capsys.readouterr().err
    assert "shown" in err
    assert "hidden" not in err


def test_file_sink(tmp_path):
    log_file = tmp_path / "habitflow.log"
    setup_logging(level="DEBUG", log_file=str(log_file))
    logger.debug("to file")
    logger.remove()
    assert "to file" in log_file.read_text()


def test_configure_from_config(tmp_dir, tmp_path):
    log_file = tmp_path / "app.log"
    config = Config(data_dir=tmp_dir, env_prefix="", defaults={"logging": {"level": "error", "file": str(log_file)}})
    configure_logging(config)
    logger.warning("below threshold")
    logger.error("recorded")
    logger.remove()
    text = log_file.read_text()
    assert "recorded" in text
    assert "below threshold" not in text
