"""
Append-only operation log.

Asset operations are recorded in a plain text file, one entry per line::

    [2024-01-31 12:00:00] [ERROR] Source file not found: vendor/.../bootstrap.min.css

Writing to the log is advisory. Every failure (directory creation, opening or
appending to the file) turns into a ``False`` return value so that copying
assets is never blocked by the log.

Entries travel through loguru, so any other handler (including loguru's default
stderr handler) sees them too unless it filters with ``is_asset_log_record``.
``assetsync.environment.configure_logging`` installs such a console handler.
"""

import contextlib
import os
import uuid

from loguru import logger

LEVEL_ERROR = "ERROR"
LEVEL_WARNING = "WARNING"
LEVEL_INFO = "INFO"
LEVEL_DEBUG = "DEBUG"

LOG_LEVELS = (LEVEL_ERROR, LEVEL_WARNING, LEVEL_INFO, LEVEL_DEBUG)

DEFAULT_LOG_FILE = os.path.join("logs", "assetsync.log")
LOG_FORMAT = "[{time:YYYY-MM-DD HH:mm:ss}] [{level}] {message}"

# Key in a loguru record's ``extra`` marking entries meant for an AssetLog file.
EXTRA_KEY = "asset_log"


class AssetLog:
    """Leveled log file backed by a loguru file handler."""

    def __init__(self, log_file: str | os.PathLike = DEFAULT_LOG_FILE):
        self._log_file = os.fspath(log_file)
        self._initialized = False
        self._handler_id: int | None = None
        self._token = uuid.uuid4().hex
        self._logger = logger.bind(**{EXTRA_KEY: self._token})

    @property
    def log_file(self) -> str:
        """Current log file path."""
        return self._log_file

    @property
    def initialized(self) -> bool:
        return self._initialized

    def set_log_file(self, log_file: str | os.PathLike) -> None:
        """
        Point the log at a different file.

        The directory of the new file is ensured again on the next write.

        Args:
            log_file: New log file path
        """
        self._detach()
        self._log_file = os.fspath(log_file)
        self._initialized = False

    def write(self, level: str, message: str) -> bool:
        """
        Append an entry to the log file.

        Args:
            level: One of ERROR, WARNING, INFO, DEBUG
            message: Entry text

        Returns:
            bool: True if the entry was written, False otherwise
        """
        if level not in LOG_LEVELS:
            return False
        try:
            self._initialize()
            self._logger.log(level, message)
        except Exception:
            return False
        return True

    def error(self, message: str) -> bool:
        return self.write(LEVEL_ERROR, message)

    def warning(self, message: str) -> bool:
        return self.write(LEVEL_WARNING, message)

    def info(self, message: str) -> bool:
        return self.write(LEVEL_INFO, message)

    def debug(self, message: str) -> bool:
        return self.write(LEVEL_DEBUG, message)

    def close(self) -> None:
        """Detach the file handler, releasing the open file."""
        self._detach()
        self._initialized = False

    def _initialize(self) -> None:
        if self._initialized:
            return

        log_dir = os.path.dirname(self._log_file)
        if log_dir and not os.path.isdir(log_dir):
            with contextlib.suppress(OSError):
                os.makedirs(log_dir, mode=0o755, exist_ok=True)

        self._detach()
        self._handler_id = logger.add(
            self._log_file,
            format=LOG_FORMAT,
            level=LEVEL_DEBUG,
            filter=self._owns,
            colorize=False,
            encoding="utf-8",
            mode="a",
            delay=True,
            catch=False,
        )
        self._initialized = True

    def _detach(self) -> None:
        if self._handler_id is None:
            return
        # The handler may already be gone if someone called logger.remove().
        with contextlib.suppress(ValueError):
            logger.remove(self._handler_id)
        self._handler_id = None

    def _owns(self, record) -> bool:
        return record["extra"].get(EXTRA_KEY) == self._token


def is_asset_log_record(record) -> bool:
    """Check whether a loguru record was emitted through an AssetLog."""
    return EXTRA_KEY in record["extra"]


# Process-wide log used by file operations and the sync engine
asset_log = AssetLog()
