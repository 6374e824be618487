"""starconfig - typed application configuration loaded from JSON or XML files.

By default, starconfig's internal logging is disabled when used as a library.
Library users can enable logging by calling starconfig.enable_logging().
"""

from starconfig.common import disable_library_logging, enable_library_logging
from starconfig.config import Configuration, current_configuration, materialize
from starconfig.datastore import FileConfigurationStore, InMemoryConfigurationStore

disable_library_logging()

enable_logging = enable_library_logging

__all__ = [
    "Configuration",
    "FileConfigurationStore",
    "InMemoryConfigurationStore",
    "current_configuration",
    "enable_logging",
    "materialize",
]
