"""Read access to the current configuration."""

from __future__ import annotations

from result import Result

from starconfig.datastore.models import DataStoreError
from starconfig.datastore.protocol import ConfigurationStore

from .models import Configuration


def current_configuration(store: ConfigurationStore) -> Result[Configuration | None, DataStoreError]:
    """Return the configuration installed by the last successful materialize.

    Returns:
        Ok(Configuration) when one is stored. If the store was changed behind
            the materializer's back and holds several, the oldest one wins.
        Ok(None) when nothing has been materialized yet.
        Err(DataStoreError) when the store cannot be read.
    """
    return store.configurations().map(
        lambda configurations: min(configurations, key=lambda c: c.sequence) if configurations else None,
    )
