"""Copy-on-write snapshots shared by the configuration stores."""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime

from starconfig.config.models import CanonicalValue, ConfigEntry, Configuration

from .models import TransactionAborted


@dataclass(frozen=True, slots=True)
class StoreSnapshot:
    """Committed store state. Never mutated once published."""

    configurations: tuple[Configuration, ...] = ()
    next_sequence: int = 0

    def copy_configurations(self) -> list[Configuration]:
        return [configuration.model_copy(deep=True) for configuration in self.configurations]


@dataclass(slots=True)
class SnapshotTransaction:
    """Stages changes against a private copy of a snapshot."""

    base: StoreSnapshot
    _configurations: dict[str, Configuration] = field(init=False)
    _next_sequence: int = field(init=False)

    def __post_init__(self) -> None:
        self._configurations = {c.id: c.model_copy(deep=True) for c in self.base.configurations}
        self._next_sequence = self.base.next_sequence

    def configurations(self) -> list[Configuration]:
        ordered = sorted(self._configurations.values(), key=lambda c: c.sequence)
        return [configuration.model_copy(deep=True) for configuration in ordered]

    def create(self, entries: Iterable[ConfigEntry], source: str | None = None) -> Configuration:
        values: dict[str, CanonicalValue] = {}
        for entry in entries:
            if entry.key in values:
                raise TransactionAborted(f"Duplicate configuration key '{entry.key}'")
            values[entry.key] = entry.value

        configuration = Configuration(
            id=uuid.uuid4().hex,
            sequence=self._next_sequence,
            created_at=datetime.now(UTC),
            source=source,
            entries=values,
        )
        self._next_sequence += 1
        self._configurations[configuration.id] = configuration
        return configuration.model_copy(deep=True)

    def delete(self, configuration: Configuration) -> None:
        if self._configurations.pop(configuration.id, None) is None:
            raise TransactionAborted(f"Configuration '{configuration.id}' does not exist")

    def update_entries(self, configuration: Configuration, values: Mapping[str, CanonicalValue]) -> Configuration:
        stored = self._configurations.get(configuration.id)
        if stored is None:
            raise TransactionAborted(f"Configuration '{configuration.id}' does not exist")

        updated = Configuration(
            id=stored.id,
            sequence=stored.sequence,
            created_at=stored.created_at,
            source=stored.source,
            entries={**stored.entries, **values},
        )
        self._configurations[updated.id] = updated
        return updated.model_copy(deep=True)

    def abort(self, reason: str) -> None:
        raise TransactionAborted(reason)

    def to_snapshot(self) -> StoreSnapshot:
        ordered = sorted(self._configurations.values(), key=lambda c: c.sequence)
        return StoreSnapshot(configurations=tuple(ordered), next_sequence=self._next_sequence)
