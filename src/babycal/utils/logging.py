"""Logging configuration utilities.

All babycal modules log through module-level ``logging.getLogger(__name__)``
loggers; this module wires them to a log file with a common format.
"""

import logging
import os
from collections.abc import Sequence
from pathlib import Path

# levelname width 7 to fit "WARNING"; %(relpath)s comes from RelativePathFormatter
LOG_FORMAT = "[%(levelname)7s] %(asctime)s (%(relpath)s:%(lineno)d) --- %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_LEVEL_ENV = "BABYCAL_LOG_LEVEL"

# Directory holding the babycal package, so records read "babycal/grid.py"
PACKAGE_ROOT = Path(__file__).resolve().parents[2]


class RelativePathFormatter(logging.Formatter):
    """Formatter that shows source files relative to a base directory.

    The base directory defaults to the one containing the babycal package,
    so paths look the same whatever the working directory is. Files outside
    the base directory keep their absolute path.
    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        base_path: Path | str | None = None,
    ) -> None:
        super().__init__(fmt, datefmt)
        self.base_path = Path(base_path) if base_path else PACKAGE_ROOT

    def _relative(self, pathname: str) -> str:
        path = Path(pathname)
        if path.is_relative_to(self.base_path):
            return path.relative_to(self.base_path).as_posix()
        return pathname

    def format(self, record: logging.LogRecord) -> str:
        """Format the record, adding a ``relpath`` attribute first."""
        if record.pathname:
            record.relpath = self._relative(record.pathname)
        else:
            record.relpath = record.filename or "unknown"
        return super().format(record)


def level_from_env(default: int = logging.DEBUG) -> int:
    """Resolve the log level from BABYCAL_LOG_LEVEL.

    Accepts level names ("INFO", "warning") or numbers ("20").

    Args:
        default: Level used when the variable is unset or unrecognized

    Returns:
        Logging level number
    """
    raw = os.environ.get(LOG_LEVEL_ENV, "").strip()
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    if isinstance(level, int):
        return level
    return default


def setup_logging(
    log_file: Path,
    level: int = logging.DEBUG,
    extra_handlers: Sequence[logging.Handler] | None = None,
) -> None:
    """Send all babycal records to ``log_file``.

    The file is truncated, so it only holds the latest run.

    Args:
        log_file: Path to log file
        level: Root log level (default: DEBUG)
        extra_handlers: Additional handlers sharing the same format
    """
    formatter = RelativePathFormatter(LOG_FORMAT, LOG_DATE_FORMAT)
    file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in (file_handler, *(extra_handlers or ())):
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
