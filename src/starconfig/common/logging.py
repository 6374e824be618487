"""Loguru setup for starconfig.

Every record starconfig emits is bound to a scope (``config``, ``datastore``,
``cli``) through ``create_logger``. Records are dropped until someone opts in:
library users call ``starconfig.enable_logging()`` to get them on a stream,
and the CLI sends them to a rotating file under the data directory so that
``config show`` and ``config get`` output stays machine-readable.
"""

import sys
from pathlib import Path
from typing import Any, Literal, TextIO

import loguru
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from starconfig.constants import APP_NAME

from .models import AppDirectories, AppInfo
from .paths import get_data_directory_from_dirs

_LOG_DIR_NAME = "logs"
_TEXT_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} - {message} | {extra}\n{exception}"
)

type LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class LoggingConfig(BaseModel):
    """CLI log sink settings, read from ``STARCONFIG_LOGGING__*``."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = Field(default=True)
    log_level: LogLevel = Field(default="INFO")
    log_file: str | None = Field(default=None)
    rotation: str = Field(default="1 MB")
    retention: str = Field(default="7 days")
    format: Literal["json", "text"] = Field(default="text")

    def resolve_log_file(self, directories: AppDirectories) -> Path:
        """Explicit ``log_file`` if set, else ``<data dir>/logs/starconfig.log``."""
        if self.log_file:
            return Path(self.log_file).expanduser()
        return get_data_directory_from_dirs(directories) / _LOG_DIR_NAME / f"{APP_NAME}.log"


def setup_cli_logging(app_info: AppInfo, config: LoggingConfig, directories: AppDirectories) -> int:
    log_file = config.resolve_log_file(directories)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger.enable(APP_NAME)
    logger.remove()
    logger.configure(extra={"scope": "cli", "env": app_info.environment})

    # json lines keep the bound extras (path, store, entries) as fields
    sink_options: dict[str, Any] = {"serialize": True} if config.format == "json" else {"format": _TEXT_FORMAT}
    handler_id = logger.add(
        log_file,
        level=config.log_level,
        rotation=config.rotation,
        retention=config.retention,
        diagnose=(app_info.environment == "dev"),
        **sink_options,
    )

    logger.debug(
        "CLI logging initialized",
        log_file=str(log_file),
        level=config.log_level,
        format=config.format,
    )
    return handler_id


def disable_library_logging() -> None:
    logger.disable(APP_NAME)


def enable_library_logging(level: LogLevel = "INFO", sink: TextIO = sys.stderr) -> int:
    """Route starconfig records to ``sink`` and return the loguru handler id.

    Replaces any handlers installed so far; pass the returned id to
    ``loguru.logger.remove`` to detach the sink again.
    """
    logger.enable(APP_NAME)
    logger.remove()
    return logger.add(sink, level=level, format=_TEXT_FORMAT, colorize=False)


def create_logger(scope: str) -> "loguru.Logger":
    return logger.bind(scope=scope)
