from __future__ import annotations

from pathlib import Path

from result import is_err, is_ok

from starconfig.common import AppDirectories
from starconfig.config import current_configuration
from starconfig.config.models import ConfigEntry
from starconfig.datastore import DataStoreReadError, FileConfigurationStore, InMemoryConfigurationStore


def test_returns_none_before_anything_is_materialized() -> None:
    result = current_configuration(InMemoryConfigurationStore())

    assert is_ok(result)
    assert result.ok_value is None


def test_returns_the_stored_configuration() -> None:
    store = InMemoryConfigurationStore()
    created = store.transact(lambda tx: tx.create([ConfigEntry(key="a", value=1)])).unwrap()

    result = current_configuration(store)

    assert is_ok(result)
    assert result.ok_value == created


def test_picks_the_oldest_when_several_exist() -> None:
    store = InMemoryConfigurationStore()
    first, _second = store.transact(
        lambda tx: (tx.create([ConfigEntry(key="n", value=1)]), tx.create([ConfigEntry(key="n", value=2)])),
    ).unwrap()

    result = current_configuration(store)

    assert is_ok(result)
    assert result.ok_value.id == first.id
    assert result.ok_value.entries == {"n": 1}


def test_returned_configuration_is_a_copy() -> None:
    store = InMemoryConfigurationStore()
    store.transact(lambda tx: tx.create([ConfigEntry(key="a", value=1)])).unwrap()

    current_configuration(store).unwrap().entries["a"] = 2

    assert current_configuration(store).unwrap().entries == {"a": 1}


def test_unreadable_store_is_an_error(tmp_path: Path) -> None:
    store = FileConfigurationStore(AppDirectories(data_dir=str(tmp_path)))
    store.path.parent.mkdir(parents=True)
    store.path.write_text("not json", encoding="utf-8")

    result = current_configuration(store)

    assert is_err(result)
    assert isinstance(result.err_value, DataStoreReadError)
