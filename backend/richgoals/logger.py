"""Loguru setup for the RICH Goal Tracker API."""

import sys
from pathlib import Path

from loguru import logger

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"


def setup_logger(
    level: str = "INFO",
    log_file: str | None = None,
    json_logs: bool = False,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Replace loguru's default sink with the API's console and file sinks.

    `diagnose` stays off on every sink: exception traces would otherwise dump
    local variables, and those hold usernames and goal drafts.

    Args:
        level: Minimum level name, case-insensitive.
        log_file: Optional rotating file sink.
        json_logs: Write one JSON record per line to the file sink instead of text.
        rotation: Size or interval that starts a new file.
        retention: How long rotated files are kept.
    """
    level = level.upper()
    logger.remove()

    logger.add(
        sys.stderr,
        format=CONSOLE_FORMAT,
        level=level,
        colorize=True,
        diagnose=False,
    )

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_path,
            format=FILE_FORMAT,
            level=level,
            rotation=rotation,
            retention=retention,
            compression="zip",
            serialize=json_logs,
            diagnose=False,
        )

    logger.info(f"Logger initialized (level={level}, file={log_file or '-'}, json={json_logs})")
