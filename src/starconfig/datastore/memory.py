"""In-process ConfigurationStore implementation."""

from __future__ import annotations

import threading
from collections.abc import Callable

from pydantic import ValidationError
from result import Err, Ok, Result

from starconfig.common import create_logger
from starconfig.config.models import Configuration

from .models import DataStoreError, DataStoreWriteError, TransactionAborted
from .protocol import StoreTransaction
from .transaction import SnapshotTransaction, StoreSnapshot

logger = create_logger("datastore")


class InMemoryConfigurationStore:
    """Keeps configurations in process memory.

    Writers are serialized by a lock. Readers never take it: they read the
    last published snapshot, which a commit replaces in a single assignment.
    """

    def __init__(self, namespace: str = "memory") -> None:
        self._namespace = namespace
        self._lock = threading.Lock()
        self._snapshot = StoreSnapshot()

    @property
    def name(self) -> str:
        return self._namespace

    def configurations(self) -> Result[list[Configuration], DataStoreError]:
        return Ok(self._snapshot.copy_configurations())

    def transact[T](self, work: Callable[[StoreTransaction], T]) -> Result[T, DataStoreError]:
        with self._lock:
            transaction = SnapshotTransaction(self._snapshot)
            try:
                value = work(transaction)
                self._commit(transaction.to_snapshot())
            except (TransactionAborted, ValidationError) as e:
                logger.warning("Transaction rolled back", namespace=self._namespace, error=str(e))
                return Err(
                    DataStoreWriteError(
                        namespace=self._namespace,
                        message=f"Transaction rolled back: {e}",
                    )
                )

        return Ok(value)

    def _commit(self, snapshot: StoreSnapshot) -> None:
        self._snapshot = snapshot
