"""Environment configuration management."""

import contextlib
import os
import sys
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from loguru import logger
from pydantic import BaseModel, Field, field_validator

from assetsync.catalog import AssetCatalog, default_catalog
from assetsync.errors import ConfigurationError
from assetsync.sync.engine import SyncEngine
from assetsync.sync.file_ops import DEFAULT_PERMISSIONS
from assetsync.utils.logging import DEFAULT_LOG_FILE, asset_log, is_asset_log_record
from assetsync.utils.paths import join_paths

ENV_PREFIX = "ASSETSYNC_"
LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]
CONSOLE_FORMAT = "<level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>"

_console_handler_id: Optional[int] = None


def parse_permissions(value: str | int) -> int:
    """
    Parse an octal permission mask.

    Args:
        value: Mask such as ``750``, ``0750`` or ``0o750``, or an int

    Returns:
        int: The permission bits

    Raises:
        ConfigurationError: If the value is not an octal mask within 0o777
    """
    if isinstance(value, int):
        mode = value
    else:
        text = str(value).strip().lower().removeprefix("0o")
        try:
            mode = int(text, 8)
        except ValueError:
            raise ConfigurationError(f"Invalid permissions '{value}': expected an octal mask like 750")
    if not 0 <= mode <= 0o777:
        raise ConfigurationError(f"Invalid permissions '{value}': must be between 000 and 777")
    return mode


def is_truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in ("true", "1", "yes")


class SyncSettings(BaseModel):
    """Settings for an asset synchronization run."""

    project_root: Path = Field(default_factory=Path.cwd, description="Base for relative catalog paths")
    webroot: Optional[str] = Field(None, description="Overrides the catalog webroot")
    catalog_file: Optional[Path] = Field(None, description="JSON catalog replacing the default one")
    log_file: str = Field(DEFAULT_LOG_FILE, description="Log file, relative to the project root")
    permissions: int = Field(DEFAULT_PERMISSIONS, description="Permission bits for copied files")
    log_level: str = Field("WARNING", description="Console log level")
    debug: bool = Field(False, description="Enable debug console logging")

    @field_validator("permissions", mode="before")
    @classmethod
    def _parse_permissions(cls, value):
        return parse_permissions(value)

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @property
    def resolved_log_file(self) -> str:
        """Log file path with relative paths anchored at the project root."""
        if os.path.isabs(self.log_file):
            return self.log_file
        return join_paths(str(self.project_root), self.log_file)

    @property
    def console_level(self) -> str:
        return "DEBUG" if self.debug else self.log_level

    def build_catalog(self) -> AssetCatalog:
        """Load the configured catalog and apply the webroot override."""
        catalog = AssetCatalog.from_file(self.catalog_file) if self.catalog_file else default_catalog()
        if self.webroot:
            catalog = catalog.with_webroot(self.webroot)
        return catalog

    def build_engine(self, reporter=None) -> SyncEngine:
        """Create a SyncEngine for these settings and point the asset log at the log file."""
        asset_log.set_log_file(self.resolved_log_file)
        return SyncEngine(
            self.build_catalog(),
            project_root=self.project_root,
            permissions=self.permissions,
            reporter=reporter,
        )

    @classmethod
    def load(cls, **overrides) -> "SyncSettings":
        """
        Load settings from the environment (and a ``.env`` file), then apply overrides.

        Overrides whose value is None are ignored.

        Raises:
            ConfigurationError: If a setting has an invalid value
        """
        load_dotenv(find_dotenv(usecwd=True))
        values = {}
        env_names = {
            "project_root": "PROJECT_ROOT",
            "webroot": "WEBROOT",
            "catalog_file": "CATALOG",
            "log_file": "LOG_FILE",
            "permissions": "PERMISSIONS",
            "log_level": "LOG_LEVEL",
        }
        for field, name in env_names.items():
            value = os.getenv(ENV_PREFIX + name)
            if value:
                values[field] = value
        values["debug"] = is_truthy(os.getenv(ENV_PREFIX + "DEBUG"))
        values.update({key: value for key, value in overrides.items() if value is not None})

        try:
            return cls(**values)
        except ConfigurationError:
            raise
        except ValueError as error:
            raise ConfigurationError(f"Invalid settings: {error}")


def configure_logging(level: str = "WARNING") -> None:
    """
    Replace loguru's default stderr handler with one at the given level.

    Records written to the asset log file are not echoed to the console.
    """
    global _console_handler_id
    # Handler 0 is loguru's default stderr handler.
    handler_id = _console_handler_id if _console_handler_id is not None else 0
    with contextlib.suppress(ValueError):
        logger.remove(handler_id)

    _console_handler_id = logger.add(
        sys.stderr,
        level=level,
        format=CONSOLE_FORMAT,
        filter=lambda record: not is_asset_log_record(record),
    )
