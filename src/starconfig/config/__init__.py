"""Public configuration API for starconfig.

``materialize`` loads a JSON or XML file into a store and
``current_configuration`` reads it back.
"""

from __future__ import annotations

from .models import (
    CanonicalValue,
    ConfigAccessDeniedError,
    ConfigEntry,
    ConfigError,
    ConfigFileNotFoundError,
    ConfigFormat,
    ConfigIOError,
    ConfigKeyNotFoundError,
    Configuration,
    ConfigValueKindError,
    InvalidSpecifierError,
    MalformedConfigError,
    MissingEnvironmentVariableError,
    StoreTransactionError,
    UnsupportedFormatError,
    ValueKind,
    kind_of,
)
from .accessor import current_configuration
from .coercion import coerce_text
from .materializer import materialize
from .normalizer import detect_format, load_entries, normalize
from .resolver import resolve_specifier

__all__ = [
    "CanonicalValue",
    "ConfigAccessDeniedError",
    "ConfigEntry",
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigFormat",
    "ConfigIOError",
    "ConfigKeyNotFoundError",
    "ConfigValueKindError",
    "Configuration",
    "InvalidSpecifierError",
    "MalformedConfigError",
    "MissingEnvironmentVariableError",
    "StoreTransactionError",
    "UnsupportedFormatError",
    "ValueKind",
    "coerce_text",
    "current_configuration",
    "detect_format",
    "kind_of",
    "load_entries",
    "materialize",
    "normalize",
    "resolve_specifier",
]
