import logging
import sys
from typing import Optional, Union

PACKAGE_LOGGER = "pgxn_meta"

LevelLike = Union[int, str]


class _MaxLevelFilter(logging.Filter):
    def __init__(self, max_level: int) -> None:
        super().__init__()
        self._max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self._max_level


def to_level(value: LevelLike, default: int = logging.WARNING) -> int:
    """Turn a level name such as ``"debug"`` or a number into a logging level."""
    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value).strip().upper())
    return level if isinstance(level, int) else default


def configure_logging(
    *,
    level: LevelLike = logging.INFO,
    stderr_level: LevelLike = logging.WARNING,
    reserve_stdout: bool = False,
    formatter: Optional[logging.Formatter] = None,
) -> logging.Logger:
    """Configure the ``pgxn_meta`` logger for the command line tools.

    Records below ``stderr_level`` go to stdout and the rest to stderr. With
    ``reserve_stdout`` every record goes to stderr, leaving stdout to the
    validation report (``pgxn-meta --format json``).

    Only the package logger is touched and it stops propagating, so a host
    application's root handlers never see the records twice. Calling this
    again replaces the handlers instead of stacking them.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.handlers.clear()
    logger.setLevel(to_level(level, logging.INFO))
    logger.propagate = False

    if formatter is None:
        formatter = logging.Formatter("%(name)s - %(levelname)s - %(message)s")

    stderr_level = max(to_level(stderr_level), logging.DEBUG)
    if reserve_stdout:
        stderr_level = logging.DEBUG
    else:
        stdout_handler = logging.StreamHandler(stream=sys.stdout)
        stdout_handler.setLevel(logging.DEBUG)
        stdout_handler.addFilter(_MaxLevelFilter(stderr_level - 1))
        stdout_handler.setFormatter(formatter)
        logger.addHandler(stdout_handler)

    stderr_handler = logging.StreamHandler(stream=sys.stderr)
    stderr_handler.setLevel(stderr_level)
    stderr_handler.setFormatter(formatter)
    logger.addHandler(stderr_handler)
    return logger
