"""starconfig DataStore module."""

from .file import FileConfigurationStore
from .memory import InMemoryConfigurationStore
from .models import DataStoreError, DataStoreReadError, DataStoreWriteError, TransactionAborted
from .protocol import ConfigurationStore, StoreTransaction

__all__ = [
    "ConfigurationStore",
    "DataStoreError",
    "DataStoreReadError",
    "DataStoreWriteError",
    "FileConfigurationStore",
    "InMemoryConfigurationStore",
    "StoreTransaction",
    "TransactionAborted",
]
