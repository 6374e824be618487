"""File-based ConfigurationStore implementation."""

from __future__ import annotations

import json
import os
import tempfile
import threading
from collections.abc import Callable
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError
from result import Err, Ok, Result, is_err

from starconfig.common import AppDirectories, create_logger, get_data_directory_from_dirs
from starconfig.config.models import CanonicalValue, Configuration, ValueKind, kind_of, to_json_value

from .models import DataStoreError, DataStoreReadError, DataStoreWriteError, TransactionAborted
from .protocol import StoreTransaction
from .transaction import SnapshotTransaction, StoreSnapshot

logger = create_logger("datastore")

STORE_FORMAT_VERSION = 1


class _StoredValue(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: ValueKind
    value: str | int | bool | None


class _StoredConfiguration(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: str
    sequence: int
    created_at: datetime
    source: str | None = None
    entries: dict[str, _StoredValue]


class _StoredDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: int = STORE_FORMAT_VERSION
    next_sequence: int = 0
    configurations: list[_StoredConfiguration] = []


class FileConfigurationStore:
    """Persists configurations as one JSON document under the data directory.

    A commit writes the whole document to a temporary file next to the data
    file and renames it into place, so readers see either the previous or the
    new document.
    """

    def __init__(
        self,
        directories: AppDirectories,
        namespace: str = "configurations",
        filename: str = "store.json",
    ) -> None:
        self._namespace = namespace
        self._directories = directories
        self._filename = filename
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._namespace

    @property
    def path(self) -> Path:
        return get_data_directory_from_dirs(self._directories) / self._namespace / self._filename

    def configurations(self) -> Result[list[Configuration], DataStoreError]:
        return self._read_snapshot().map(lambda snapshot: snapshot.copy_configurations())

    def transact[T](self, work: Callable[[StoreTransaction], T]) -> Result[T, DataStoreError]:
        with self._lock:
            snapshot_result = self._read_snapshot()
            if is_err(snapshot_result):
                return snapshot_result

            transaction = SnapshotTransaction(snapshot_result.ok_value)
            try:
                value = work(transaction)
            except (TransactionAborted, ValidationError) as e:
                logger.warning("Transaction rolled back", namespace=self._namespace, error=str(e))
                return Err(
                    DataStoreWriteError(
                        namespace=self._namespace,
                        message=f"Transaction rolled back: {e}",
                    )
                )

            return self._write_snapshot(transaction.to_snapshot()).map(lambda _: value)

    def _read_snapshot(self) -> Result[StoreSnapshot, DataStoreError]:
        data_file = self.path

        if not data_file.exists():
            return Ok(StoreSnapshot())

        try:
            document = _StoredDocument.model_validate_json(data_file.read_bytes())
            snapshot = StoreSnapshot(
                configurations=tuple(_decode_configuration(stored) for stored in document.configurations),
                next_sequence=document.next_sequence,
            )
        except (OSError, ValidationError, TypeError, ValueError, InvalidOperation) as e:
            logger.error("Store read failed", namespace=self._namespace, path=str(data_file), error=str(e))
            return Err(
                DataStoreReadError(
                    namespace=self._namespace,
                    message=f"Failed to read configuration store: {e}",
                )
            )

        return Ok(snapshot)

    def _write_snapshot(self, snapshot: StoreSnapshot) -> Result[None, DataStoreError]:
        data_file = self.path
        document = _StoredDocument(
            next_sequence=snapshot.next_sequence,
            configurations=[_encode_configuration(configuration) for configuration in snapshot.configurations],
        )

        temp_name: str | None = None
        try:
            data_file.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=data_file.parent,
                prefix=f".{data_file.name}.",
                delete=False,
            ) as handle:
                temp_name = handle.name
                handle.write(json.dumps(document.model_dump(mode="json"), indent=2))
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp_name, data_file)
        except OSError as e:
            if temp_name is not None:
                Path(temp_name).unlink(missing_ok=True)
            logger.error("Store write failed", namespace=self._namespace, path=str(data_file), error=str(e))
            return Err(
                DataStoreWriteError(
                    namespace=self._namespace,
                    message=f"Failed to write configuration store: {e}",
                )
            )

        logger.debug("Store committed", namespace=self._namespace, configurations=len(snapshot.configurations))
        return Ok(None)


def _encode_configuration(configuration: Configuration) -> _StoredConfiguration:
    return _StoredConfiguration(
        id=configuration.id,
        sequence=configuration.sequence,
        created_at=configuration.created_at,
        source=configuration.source,
        entries={
            key: _StoredValue(kind=kind_of(value), value=to_json_value(value))
            for key, value in configuration.entries.items()
        },
    )


def _decode_configuration(stored: _StoredConfiguration) -> Configuration:
    return Configuration(
        id=stored.id,
        sequence=stored.sequence,
        created_at=stored.created_at,
        source=stored.source,
        entries={key: _decode_value(item) for key, item in stored.entries.items()},
    )


def _decode_value(stored: _StoredValue) -> CanonicalValue:
    raw = stored.value
    match stored.kind:
        case ValueKind.NULL:
            return None
        case ValueKind.BOOLEAN if isinstance(raw, bool):
            return raw
        case ValueKind.INTEGER if isinstance(raw, int) and not isinstance(raw, bool):
            return raw
        case ValueKind.DECIMAL if isinstance(raw, str):
            return Decimal(raw)
        case ValueKind.TIMESTAMP if isinstance(raw, str):
            return datetime.fromisoformat(raw)
        case ValueKind.STRING if isinstance(raw, str):
            return raw
        case _:
            raise TypeError(f"Stored value {raw!r} does not match kind '{stored.kind.value}'")
