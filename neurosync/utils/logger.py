"""
Logging for NeuroSync, built on Loguru.

Call ``setup_logging`` once at startup; modules then log through
``get_logger(__name__)``. Every record carries the emitting module in
``extra["module"]``, plus whatever keyword context the call site passes
(source ids, error types, model names).
"""

import logging
import sys
from pathlib import Path

from loguru import logger

from neurosync.config import LoggingConfig

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[module]}:{function}:{line} - {message}"

# SDK loggers that log every HTTP request or websocket frame at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "google_genai", "websockets")


def setup_logging(config: LoggingConfig | None = None, **overrides) -> None:
    """
    Configure Loguru from a LoggingConfig.

    Args:
        config: Logging section of the app config (defaults if omitted)
        **overrides: Individual LoggingConfig fields to override (e.g. level="DEBUG")
    """
    config = (config or LoggingConfig()).model_copy(update=overrides)
    logger.remove()

    logger.add(
        sys.stderr,
        level=config.level,
        format=CONSOLE_FORMAT,
        colorize=True,
        filter=_ensure_module,
    )

    if config.log_to_file:
        log_path = Path(config.log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        # JSON lines when serialize is on, plain text otherwise
        logger.add(
            log_path / "neurosync_{time:YYYY-MM-DD}.log",
            level=config.level,
            format=FILE_FORMAT,
            rotation=config.file_rotation,
            retention=config.file_retention,
            compression=config.compression,
            serialize=config.serialize,
            enqueue=True,
            filter=_ensure_module,
        )

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _ensure_module(record) -> bool:
    # Records logged through the bare loguru logger carry no bound module
    record["extra"].setdefault("module", record["name"])
    return True


def get_logger(name: str):
    """Logger bound to a module name."""
    return logger.bind(module=name)
