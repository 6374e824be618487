"""Common models and types used across starconfig modules."""

from .fields import JsonDict, JsonValue, NonEmptyString
from .logging import LoggingConfig, create_logger, disable_library_logging, enable_library_logging, setup_cli_logging
from .models import AppDirectories, AppInfo, AppPaths
from .paths import get_data_directory_from_dirs

__all__ = [
    "AppDirectories",
    "AppInfo",
    "AppPaths",
    "JsonDict",
    "JsonValue",
    "LoggingConfig",
    "NonEmptyString",
    "create_logger",
    "disable_library_logging",
    "enable_library_logging",
    "get_data_directory_from_dirs",
    "setup_cli_logging",
]
