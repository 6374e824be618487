"""Configuration store protocol."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Protocol

from result import Result

from starconfig.config.models import CanonicalValue, ConfigEntry, Configuration

from .models import DataStoreError


class StoreTransaction(Protocol):
    """Changes staged inside ``ConfigurationStore.transact``.

    Nothing is visible to readers of the store until the transaction commits.
    """

    def configurations(self) -> list[Configuration]: ...

    def create(self, entries: Iterable[ConfigEntry], source: str | None = None) -> Configuration: ...

    def delete(self, configuration: Configuration) -> None: ...

    def update_entries(self, configuration: Configuration, values: Mapping[str, CanonicalValue]) -> Configuration: ...

    def abort(self, reason: str) -> None: ...


class ConfigurationStore(Protocol):
    """Protocol for persisting configurations with atomic commits."""

    @property
    def name(self) -> str: ...

    def configurations(self) -> Result[list[Configuration], DataStoreError]:
        """Return the committed configurations in creation order."""
        ...

    def transact[T](self, work: Callable[[StoreTransaction], T]) -> Result[T, DataStoreError]:
        """Run ``work`` and commit everything it staged, or nothing at all."""
        ...
