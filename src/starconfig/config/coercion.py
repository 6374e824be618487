"""Type inference for untyped configuration text."""

from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal

from .models import INT64_MAX, INT64_MIN, CanonicalValue

_TRUE_LITERAL = "true"
_FALSE_LITERAL = "false"

# Round-trip ISO-8601: date, time, up to 7 fractional digits, optional offset.
_TIMESTAMP_PATTERN = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(?:\.\d{1,7})?(?:Z|[+-]\d{2}:\d{2})?",
    re.ASCII,
)
# datetime keeps microseconds only
_EXCESS_FRACTION_PATTERN = re.compile(r"(\.\d{6})\d+", re.ASCII)
_INTEGER_PATTERN = re.compile(r"[+-]?\d+", re.ASCII)
_DECIMAL_PATTERN = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)", re.ASCII)
# Numbers may be padded with ASCII whitespace, e.g. by pretty-printed XML.
_NUMBER_PADDING = " \t\n\v\f\r"


def coerce_text(text: str) -> CanonicalValue:
    """Return the most specific canonical value ``text`` represents.

    Candidates are tried in order: boolean, timestamp, 64-bit integer,
    decimal. The numeric candidates ignore surrounding whitespace. When
    none matches the text is returned unchanged.
    """
    for parse in (_parse_boolean, _parse_timestamp, _parse_integer, _parse_decimal):
        value = parse(text)
        if value is not None:
            return value
    return text


def _parse_boolean(text: str) -> bool | None:
    lowered = text.lower()
    if lowered == _TRUE_LITERAL:
        return True
    if lowered == _FALSE_LITERAL:
        return False
    return None


def _parse_timestamp(text: str) -> datetime | None:
    if not _TIMESTAMP_PATTERN.fullmatch(text):
        return None
    try:
        parsed = datetime.fromisoformat(_EXCESS_FRACTION_PATTERN.sub(r"\1", text))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        # No offset in the text: treat it as local wall-clock time.
        return parsed.astimezone()
    return parsed


def _parse_integer(text: str) -> int | None:
    digits = text.strip(_NUMBER_PADDING)
    if not _INTEGER_PATTERN.fullmatch(digits):
        return None
    number = int(digits)
    if not INT64_MIN <= number <= INT64_MAX:
        return None
    return number


def _parse_decimal(text: str) -> Decimal | None:
    digits = text.strip(_NUMBER_PADDING)
    if not _DECIMAL_PATTERN.fullmatch(digits):
        return None
    return Decimal(digits)
