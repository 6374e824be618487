"""Parsing of JSON and XML configuration files into typed entries.

Both formats end up as an ordered list of ``ConfigEntry``. JSON values keep
the type JSON gives them (floats are read as ``Decimal``). XML is first turned
into a JSON-like structure, one member per child of the root ``config``
element, and the text of each member is typed by ``coerce_text``.

Nested objects, arrays and XML elements with children or attributes are not
scalar values; they are stored as their compact JSON text.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from decimal import Decimal
from pathlib import Path
from typing import IO
from xml.etree import ElementTree as ET

from result import Err, Ok, Result, is_err

from starconfig.common import JsonValue, create_logger
from starconfig.constants import XML_ATTRIBUTE_PREFIX, XML_ROOT_NODE, XML_TEXT_KEY

from .coercion import coerce_text
from .models import (
    INT64_MAX,
    INT64_MIN,
    CanonicalValue,
    ConfigAccessDeniedError,
    ConfigEntry,
    ConfigFileNotFoundError,
    ConfigFormat,
    ConfigIOError,
    MalformedConfigError,
    SourceError,
    UnsupportedFormatError,
)

logger = create_logger("config")

type NormalizeError = SourceError | UnsupportedFormatError | MalformedConfigError


def detect_format(path: Path) -> Result[ConfigFormat, UnsupportedFormatError]:
    """Pick the file format from the extension, ignoring case."""
    extension = path.suffix.lower()
    for fmt in ConfigFormat:
        if fmt.value == extension:
            return Ok(fmt)
    return Err(
        UnsupportedFormatError(
            path=path,
            extension=path.suffix,
            message=f"Unknown or unsupported file extension '{path.suffix}'",
        )
    )


def load_entries(path: Path) -> Result[list[ConfigEntry], NormalizeError]:
    """Read the configuration file at ``path`` and normalize its content."""
    logger.debug("Reading config file", path=str(path))

    try:
        with path.open("rb") as stream:
            format_result = detect_format(path)
            if is_err(format_result):
                return format_result
            return normalize(stream, format_result.ok_value, path)
    except FileNotFoundError as exc:
        logger.error("Config file not found", path=str(path))
        return Err(ConfigFileNotFoundError(path=path, message=f"Configuration file not found: {exc.strerror}"))
    except PermissionError as exc:
        logger.error("Config file access denied", path=str(path))
        return Err(ConfigAccessDeniedError(path=path, message=f"Access to configuration file denied: {exc.strerror}"))
    except OSError as exc:
        logger.error("Config file read error", path=str(path), error=str(exc))
        return Err(ConfigIOError(path=path, message=str(exc)))


def normalize(
    stream: IO[bytes],
    fmt: ConfigFormat,
    path: Path | None = None,
) -> Result[list[ConfigEntry], MalformedConfigError]:
    match fmt:
        case ConfigFormat.JSON:
            result = _normalize_json(stream, path)
        case ConfigFormat.XML:
            result = _normalize_xml(stream, path)
        case _:
            raise ValueError(f"Unexpected format: {fmt}")

    return result.inspect(
        lambda entries: logger.debug("Config normalized", format=fmt.value, entries=len(entries))
    ).inspect_err(lambda error: logger.error("Malformed config", format=fmt.value, error=error.message))


def _normalize_json(stream: IO[bytes], path: Path | None) -> Result[list[ConfigEntry], MalformedConfigError]:
    try:
        data = json.load(
            stream,
            parse_float=_parse_json_float,
            parse_constant=_reject_json_constant,
            object_pairs_hook=_unique_pairs,
        )
    except json.JSONDecodeError as exc:
        return Err(
            MalformedConfigError(
                format=ConfigFormat.JSON,
                path=path,
                line=exc.lineno,
                column=exc.colno,
                message=f"Invalid JSON file syntax: {exc.msg}",
            )
        )
    except ValueError as exc:
        # Duplicate keys, NaN/Infinity constants and undecodable bytes.
        return Err(MalformedConfigError(format=ConfigFormat.JSON, path=path, message=str(exc)))

    if not isinstance(data, dict):
        return Err(
            MalformedConfigError(
                format=ConfigFormat.JSON,
                path=path,
                message="Invalid JSON file syntax. JSON configuration files must contain a single JSON object.",
            )
        )

    return _build_entries(ConfigFormat.JSON, path, ((key, _json_member(value)) for key, value in data.items()))


def _normalize_xml(stream: IO[bytes], path: Path | None) -> Result[list[ConfigEntry], MalformedConfigError]:
    try:
        root = ET.parse(stream).getroot()
    except ET.ParseError as exc:
        line, column = exc.position
        return Err(
            MalformedConfigError(
                format=ConfigFormat.XML,
                path=path,
                line=line,
                column=column,
                message=f"Invalid XML file syntax: {exc}",
            )
        )

    if _local_name(root.tag) != XML_ROOT_NODE:
        return Err(
            MalformedConfigError(
                format=ConfigFormat.XML,
                path=path,
                message=f"XML configuration files must contain a root '{XML_ROOT_NODE}' node.",
            )
        )

    members: list[tuple[str, JsonValue]] = [
        (f"{XML_ATTRIBUTE_PREFIX}{_local_name(name)}", value) for name, value in root.attrib.items()
    ]
    members.extend((_local_name(child.tag), element_to_json(child)) for child in root)

    return _build_entries(ConfigFormat.XML, path, ((key, _xml_member(value)) for key, value in members))


def element_to_json(element: ET.Element) -> JsonValue:
    """Map an XML element onto JSON structure.

    Attributes become ``@name`` members and repeated child names collect into
    a list. Text next to child elements becomes ``#text``: a string for a
    single run, a list when text appears in several places. A leaf element
    maps to its text, or to None when it is empty. Namespaces are dropped from
    names.
    """
    children = list(element)
    if not children and not element.attrib:
        if element.text is None or not element.text.strip():
            return None
        return element.text

    node: dict[str, object] = {
        f"{XML_ATTRIBUTE_PREFIX}{_local_name(name)}": value for name, value in element.attrib.items()
    }
    for child in children:
        tag = _local_name(child.tag)
        value = element_to_json(child)
        if tag not in node:
            node[tag] = value
            continue
        existing = node[tag]
        if isinstance(existing, list):
            existing.append(value)
        else:
            node[tag] = [existing, value]

    runs = [run.strip() for run in (element.text, *(child.tail for child in children)) if run and run.strip()]
    if len(runs) == 1:
        node[XML_TEXT_KEY] = runs[0]
    elif runs:
        node[XML_TEXT_KEY] = runs
    return node


def _local_name(tag: str) -> str:
    return tag.rpartition("}")[2]


def _build_entries(
    fmt: ConfigFormat,
    path: Path | None,
    members: Iterable[tuple[str, CanonicalValue]],
) -> Result[list[ConfigEntry], MalformedConfigError]:
    entries: list[ConfigEntry] = []
    seen: set[str] = set()
    for key, value in members:
        if not key:
            return Err(MalformedConfigError(format=fmt, path=path, message="Configuration keys must not be empty."))
        if key in seen:
            return Err(MalformedConfigError(format=fmt, path=path, message=f"Duplicate configuration key '{key}'."))
        seen.add(key)
        entries.append(ConfigEntry(key=key, value=value))
    return Ok(entries)


def _json_member(value: object) -> CanonicalValue:
    if isinstance(value, int) and not isinstance(value, bool) and not INT64_MIN <= value <= INT64_MAX:
        return _parse_json_float(str(value))
    if isinstance(value, (dict, list)):
        return _flatten(value)
    return value  # type: ignore[return-value]


def _xml_member(value: JsonValue) -> CanonicalValue:
    if value is None:
        return None
    if isinstance(value, str):
        return coerce_text(value)
    return _flatten(value)


def _flatten(value: object) -> str:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def _parse_json_float(text: str) -> Decimal:
    return Decimal(text)


def _reject_json_constant(name: str) -> None:
    raise ValueError(f"Invalid JSON number '{name}'")


def _unique_pairs(pairs: list[tuple[str, object]]) -> dict[str, object]:
    result: dict[str, object] = {}
    for key, value in pairs:
        if key in result:
            raise ValueError(f"Duplicate configuration key '{key}'.")
        result[key] = value
    return result
