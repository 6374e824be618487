"""Pydantic models for configuration values, entries and load errors."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator
from result import Err, Ok, Result, is_err

from starconfig.common import NonEmptyString

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

type CanonicalValue = bool | int | Decimal | datetime | str | None


class ValueKind(str, Enum):
    """Tag for each scalar kind a configuration value can take."""

    INTEGER = "integer"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    NULL = "null"
    STRING = "string"


class ConfigFormat(str, Enum):
    """Supported configuration file formats, keyed by file extension."""

    JSON = ".json"
    XML = ".xml"


def kind_of(value: CanonicalValue) -> ValueKind:
    # bool is a subclass of int and must be checked first
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOLEAN
    if isinstance(value, int):
        if not INT64_MIN <= value <= INT64_MAX:
            raise ValueError(f"Integer {value} does not fit in 64 bits")
        return ValueKind.INTEGER
    if isinstance(value, Decimal):
        return ValueKind.DECIMAL
    if isinstance(value, datetime):
        return ValueKind.TIMESTAMP
    if isinstance(value, str):
        return ValueKind.STRING
    raise TypeError(f"Unsupported configuration value type: {type(value).__name__}")


def to_json_value(value: CanonicalValue) -> str | int | bool | None:
    """Render a canonical value with JSON-native types only."""
    match kind_of(value):
        case ValueKind.DECIMAL:
            return str(value)
        case ValueKind.TIMESTAMP:
            assert isinstance(value, datetime)
            return value.isoformat()
        case _:
            assert not isinstance(value, (Decimal, datetime))
            return value


class ConfigEntry(BaseModel):
    """A single normalized key/value pair read from a configuration file."""

    model_config = ConfigDict(extra="forbid", frozen=True, strict=True)

    key: NonEmptyString
    value: CanonicalValue

    @field_validator("value")
    @classmethod
    def _validate_value(cls, value: CanonicalValue) -> CanonicalValue:
        kind_of(value)
        return value

    @property
    def kind(self) -> ValueKind:
        return kind_of(self.value)


class ConfigKeyNotFoundError(BaseModel):
    """Requested key is not part of the configuration."""

    model_config = ConfigDict(extra="forbid")

    key: str
    message: str


class ConfigValueKindError(BaseModel):
    """Configuration value exists but has a different kind than requested."""

    model_config = ConfigDict(extra="forbid")

    key: str
    expected: ValueKind
    actual: ValueKind
    message: str


type ConfigLookupError = ConfigKeyNotFoundError | ConfigValueKindError


class Configuration(BaseModel):
    """The active application configuration.

    A store holds at most one of these at a time; the materializer replaces it
    wholesale instead of editing it in place. ``sequence`` records creation
    order within the store.
    """

    model_config = ConfigDict(extra="forbid", strict=True)

    id: NonEmptyString
    sequence: int = Field(ge=0)
    created_at: datetime
    source: str | None = None
    entries: dict[str, CanonicalValue] = Field(default_factory=dict)

    @field_validator("entries")
    @classmethod
    def _validate_entries(cls, entries: dict[str, CanonicalValue]) -> dict[str, CanonicalValue]:
        for key, value in entries.items():
            if not key:
                raise ValueError("Configuration keys must not be empty")
            kind_of(value)
        return entries

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def keys(self) -> list[str]:
        return list(self.entries)

    def get(self, key: str) -> Result[CanonicalValue, ConfigKeyNotFoundError]:
        if key not in self.entries:
            return Err(ConfigKeyNotFoundError(key=key, message=f"Configuration key '{key}' not found"))
        return Ok(self.entries[key])

    def get_as(self, key: str, kind: ValueKind) -> Result[CanonicalValue, ConfigLookupError]:
        """Look up ``key`` and require its value to be of ``kind``."""
        found = self.get(key)
        if is_err(found):
            return found

        actual = kind_of(found.ok_value)
        if actual is not kind:
            return Err(
                ConfigValueKindError(
                    key=key,
                    expected=kind,
                    actual=actual,
                    message=f"Configuration key '{key}' is {actual.value}, not {kind.value}",
                )
            )
        return found

    def to_entries(self) -> list[ConfigEntry]:
        return [ConfigEntry(key=key, value=value) for key, value in self.entries.items()]

    def to_json_dict(self) -> dict[str, str | int | bool | None]:
        return {key: to_json_value(value) for key, value in self.entries.items()}


class InvalidSpecifierError(BaseModel):
    """Specifier is neither an absolute path nor a %VARIABLE% indirection."""

    model_config = ConfigDict(extra="forbid")

    specifier: str
    message: str


class MissingEnvironmentVariableError(BaseModel):
    """Specifier points to an environment variable that is not set."""

    model_config = ConfigDict(extra="forbid")

    variable: str
    message: str


class ConfigFileNotFoundError(BaseModel):
    """Configuration file does not exist."""

    model_config = ConfigDict(extra="forbid")

    path: Path
    message: str


class ConfigAccessDeniedError(BaseModel):
    """Configuration file exists but cannot be opened for reading."""

    model_config = ConfigDict(extra="forbid")

    path: Path
    message: str


class ConfigIOError(BaseModel):
    """Any other I/O failure while reading the configuration file."""

    model_config = ConfigDict(extra="forbid")

    path: Path
    message: str


class UnsupportedFormatError(BaseModel):
    """File extension is neither .json nor .xml."""

    model_config = ConfigDict(extra="forbid")

    path: Path
    extension: str
    message: str


class MalformedConfigError(BaseModel):
    """File content violates the syntax or the top-level shape of its format."""

    model_config = ConfigDict(extra="forbid")

    format: ConfigFormat
    path: Path | None = None
    line: int | None = None
    column: int | None = None
    message: str


class StoreTransactionError(BaseModel):
    """The store could not commit the configuration replacement."""

    model_config = ConfigDict(extra="forbid")

    store: str
    message: str


type SpecifierError = InvalidSpecifierError | MissingEnvironmentVariableError
type SourceError = ConfigFileNotFoundError | ConfigAccessDeniedError | ConfigIOError
type ConfigError = (
    SpecifierError | SourceError | UnsupportedFormatError | MalformedConfigError | StoreTransactionError
)
