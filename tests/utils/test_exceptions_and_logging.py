"""
Tests for the exception hierarchy and logger helpers.
"""

from loguru import logger

from neurosync.config import LoggingConfig
from neurosync.utils.exceptions import (
    GatewayDegraded,
    NeuroSyncError,
    TransportFault,
    ValidationError,
)
from neurosync.utils.logger import get_logger, setup_logging


def test_error_carries_context():
    error = ValidationError("bad mime", context={"mime_type": "x"})

    assert isinstance(error, NeuroSyncError)
    assert error.message == "bad mime"
    assert error.context == {"mime_type": "x"}
    assert str(error) == "bad mime"


def test_context_defaults_to_empty():
    assert TransportFault("closed").context == {}
    assert GatewayDegraded("timeout").context == {}


def test_file_logging(tmp_path):
    setup_logging(
        LoggingConfig(level="DEBUG", log_dir=str(tmp_path), serialize=False, compression="zip")
    )

    get_logger("neurosync.test").info("hello from test")
    logger.complete()

    files = list(tmp_path.glob("neurosync_*.log"))
    assert len(files) == 1
    content = files[0].read_text()
    assert "hello from test" in content
    assert "neurosync.test" in content

    setup_logging(log_to_file=False)


def test_overrides_apply_on_top_of_config(tmp_path):
    setup_logging(LoggingConfig(log_to_file=False), log_dir=str(tmp_path))

    get_logger("neurosync.test").info("console only")
    logger.complete()

    assert list(tmp_path.iterdir()) == []
