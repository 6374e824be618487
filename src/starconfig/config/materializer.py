"""Loading a configuration file and installing it as the current configuration."""

from __future__ import annotations

from result import Err, Ok, Result, is_err

from starconfig.common import create_logger
from starconfig.constants import DEFAULT_SPECIFIER
from starconfig.datastore.protocol import ConfigurationStore, StoreTransaction

from .models import ConfigError, Configuration, StoreTransactionError
from .normalizer import load_entries
from .resolver import resolve_specifier

logger = create_logger("config")


def materialize(
    store: ConfigurationStore,
    specifier: str = DEFAULT_SPECIFIER,
    missing_env_message: str | None = None,
) -> Result[Configuration, ConfigError]:
    """Load the file named by ``specifier`` and make it the current configuration.

    Every configuration already in ``store`` is deleted and the new one is
    created in the same transaction, so readers of the store observe either
    the previous configuration or the new one, never both and never neither.
    Any failure leaves the store untouched.
    """
    logger.info("Materializing config", specifier=specifier, store=store.name)

    path_result = resolve_specifier(specifier, missing_env_message)
    if is_err(path_result):
        return path_result
    path = path_result.ok_value

    entries_result = load_entries(path)
    if is_err(entries_result):
        return entries_result
    entries = entries_result.ok_value

    def replace(transaction: StoreTransaction) -> Configuration:
        existing = transaction.configurations()
        if len(existing) > 1:
            logger.warning("Found more than one stored config", count=len(existing), store=store.name)
        for configuration in existing:
            transaction.delete(configuration)
        return transaction.create(entries, source=str(path))

    result = store.transact(replace)
    if is_err(result):
        error = result.err_value
        logger.error("Config replacement failed", store=store.name, error=error.message)
        return Err(StoreTransactionError(store=store.name, message=error.message))

    configuration = result.ok_value
    logger.info(
        "Config materialized",
        path=str(path),
        entries=len(configuration),
        configuration_id=configuration.id,
    )
    return Ok(configuration)

