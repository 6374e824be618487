from __future__ import annotations

import io
import json
from decimal import Decimal
from pathlib import Path

import pytest
from result import is_err, is_ok

from starconfig.config.models import (
    ConfigAccessDeniedError,
    ConfigFileNotFoundError,
    ConfigFormat,
    MalformedConfigError,
    UnsupportedFormatError,
    ValueKind,
)
from starconfig.config.normalizer import detect_format, load_entries, normalize


def _entries(text: str, fmt: ConfigFormat) -> dict[str, object]:
    result = normalize(io.BytesIO(text.encode("utf-8")), fmt)
    assert is_ok(result), result
    return {entry.key: entry.value for entry in result.ok_value}


def _error(text: str, fmt: ConfigFormat) -> MalformedConfigError:
    result = normalize(io.BytesIO(text.encode("utf-8")), fmt)
    assert is_err(result)
    return result.err_value


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("app.json", ConfigFormat.JSON),
        ("app.JSON", ConfigFormat.JSON),
        ("Config.xml", ConfigFormat.XML),
        ("Config.Xml", ConfigFormat.XML),
    ],
)
def test_detect_format(name: str, expected: ConfigFormat) -> None:
    result = detect_format(Path("/etc") / name)

    assert is_ok(result)
    assert result.ok_value is expected


@pytest.mark.parametrize("name", ["app.yaml", "app", "json", "app.json.bak", "xml"])
def test_detect_format_rejects_other_extensions(name: str) -> None:
    result = detect_format(Path("/etc") / name)

    assert is_err(result)
    assert isinstance(result.err_value, UnsupportedFormatError)


class TestJson:
    def test_scalar_members_keep_json_types(self) -> None:
        source = {"name": "api", "port": 8080, "ratio": 0.75, "debug": True, "proxy": None}

        entries = _entries(json.dumps(source), ConfigFormat.JSON)

        assert entries == {
            "name": "api",
            "port": 8080,
            "ratio": Decimal("0.75"),
            "debug": True,
            "proxy": None,
        }

    def test_member_order_is_preserved(self) -> None:
        result = normalize(io.BytesIO(b'{"b": 1, "a": 2, "c": 3}'), ConfigFormat.JSON)

        assert is_ok(result)
        assert [entry.key for entry in result.ok_value] == ["b", "a", "c"]

    def test_floats_are_read_as_exact_decimals(self) -> None:
        entries = _entries('{"price": 0.1}', ConfigFormat.JSON)

        assert entries["price"] == Decimal("0.1")

    def test_strings_are_not_coerced(self) -> None:
        entries = _entries('{"flag": "true", "count": "5"}', ConfigFormat.JSON)

        assert entries == {"flag": "true", "count": "5"}

    def test_integer_outside_64_bits_becomes_decimal(self) -> None:
        entries = _entries('{"big": 18446744073709551616}', ConfigFormat.JSON)

        assert entries["big"] == Decimal("18446744073709551616")

    def test_nested_values_are_flattened_to_json_text(self) -> None:
        entries = _entries('{"hosts": ["a", "b"], "db": {"port": 5432}}', ConfigFormat.JSON)

        assert entries == {"hosts": '["a","b"]', "db": '{"port":5432}'}

    @pytest.mark.parametrize("text", ["[1, 2]", '"text"', "42", "null"])
    def test_top_level_must_be_an_object(self, text: str) -> None:
        error = _error(text, ConfigFormat.JSON)

        assert "single JSON object" in error.message

    def test_syntax_error_reports_position(self) -> None:
        error = _error('{\n  "a": 1,\n  "b": }', ConfigFormat.JSON)

        assert error.format is ConfigFormat.JSON
        assert error.line == 3
        assert error.column is not None

    def test_duplicate_keys_are_rejected(self) -> None:
        error = _error('{"a": 1, "a": 2}', ConfigFormat.JSON)

        assert "Duplicate" in error.message

    def test_nan_is_rejected(self) -> None:
        error = _error('{"a": NaN}', ConfigFormat.JSON)

        assert "NaN" in error.message

    def test_empty_key_is_rejected(self) -> None:
        error = _error('{"": 1}', ConfigFormat.JSON)

        assert "empty" in error.message


class TestXml:
    def test_example_config(self) -> None:
        entries = _entries("<config><HttpPort>8080</HttpPort><Debug>true</Debug></config>", ConfigFormat.XML)

        assert entries == {"HttpPort": 8080, "Debug": True}
        assert isinstance(entries["HttpPort"], int)

    def test_text_values_are_coerced(self) -> None:
        entries = _entries(
            """<?xml version="1.0" encoding="utf-8"?>
            <config>
              <Name>Inventory</Name>
              <Ratio>0.25</Ratio>
              <Enabled>FALSE</Enabled>
              <Started>2024-01-02T03:04:05Z</Started>
            </config>
            """,
            ConfigFormat.XML,
        )

        assert entries["Name"] == "Inventory"
        assert entries["Ratio"] == Decimal("0.25")
        assert entries["Enabled"] is False
        assert entries["Started"].isoformat() == "2024-01-02T03:04:05+00:00"

    def test_empty_element_is_null(self) -> None:
        entries = _entries("<config><Proxy/><Blank>   </Blank></config>", ConfigFormat.XML)

        assert entries == {"Proxy": None, "Blank": None}

    def test_root_attributes_become_prefixed_entries(self) -> None:
        entries = _entries('<config version="3"><Mode>fast</Mode></config>', ConfigFormat.XML)

        assert entries == {"@version": 3, "Mode": "fast"}

    def test_structured_element_is_flattened_to_json_text(self) -> None:
        entries = _entries(
            '<config><Database driver="pg"><Host>db</Host><Port>5432</Port></Database></config>',
            ConfigFormat.XML,
        )

        assert json.loads(entries["Database"]) == {"@driver": "pg", "Host": "db", "Port": "5432"}

    def test_text_around_child_elements_is_kept(self) -> None:
        entries = _entries(
            "<config><Msg>Hello <b>x</b> world</Msg><Note><i>a</i> tail</Note></config>",
            ConfigFormat.XML,
        )

        assert json.loads(entries["Msg"]) == {"b": "x", "#text": ["Hello", "world"]}
        assert json.loads(entries["Note"]) == {"i": "a", "#text": "tail"}

    def test_pretty_printed_numbers_are_coerced(self) -> None:
        entries = _entries(
            """<config>
              <HttpPort>
                8080
              </HttpPort>
              <Ratio> 0.5 </Ratio>
              <Label> padded </Label>
            </config>
            """,
            ConfigFormat.XML,
        )

        assert entries["HttpPort"] == 8080
        assert isinstance(entries["HttpPort"], int)
        assert entries["Ratio"] == Decimal("0.5")
        assert entries["Label"] == " padded "

    def test_namespaced_config_root_is_accepted(self) -> None:
        entries = _entries(
            '<config xmlns="urn:example:app" xmlns:x="urn:example:x" x:rev="2"><HttpPort>8080</HttpPort></config>',
            ConfigFormat.XML,
        )

        assert entries == {"@rev": 2, "HttpPort": 8080}

    def test_empty_config_has_no_entries(self) -> None:
        assert _entries("<config/>", ConfigFormat.XML) == {}

    def test_missing_config_root_is_rejected(self) -> None:
        error = _error("<settings><HttpPort>8080</HttpPort></settings>", ConfigFormat.XML)

        assert error.message == "XML configuration files must contain a root 'config' node."

    def test_repeated_elements_are_rejected(self) -> None:
        error = _error("<config><Host>a</Host><Host>b</Host></config>", ConfigFormat.XML)

        assert "Duplicate configuration key 'Host'" in error.message

    def test_syntax_error_reports_position(self) -> None:
        error = _error("<config><HttpPort>8080</config>", ConfigFormat.XML)

        assert error.format is ConfigFormat.XML
        assert error.line == 1
        assert error.column is not None

    def test_kinds_of_example_entries(self) -> None:
        result = normalize(io.BytesIO(b"<config><A>1</A><B>x</B></config>"), ConfigFormat.XML)

        assert is_ok(result)
        assert [entry.kind for entry in result.ok_value] == [ValueKind.INTEGER, ValueKind.STRING]


class TestLoadEntries:
    def test_reads_json_file(self, tmp_path: Path) -> None:
        path = tmp_path / "app.json"
        path.write_text('{"port": 1}', encoding="utf-8")

        result = load_entries(path)

        assert is_ok(result)
        assert [(entry.key, entry.value) for entry in result.ok_value] == [("port", 1)]

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_entries(tmp_path / "missing.json")

        assert is_err(result)
        assert isinstance(result.err_value, ConfigFileNotFoundError)

    def test_missing_file_is_reported_before_the_extension(self, tmp_path: Path) -> None:
        result = load_entries(tmp_path / "missing.yaml")

        assert is_err(result)
        assert isinstance(result.err_value, ConfigFileNotFoundError)

    def test_unsupported_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "app.yaml"
        path.write_text("port: 1", encoding="utf-8")

        result = load_entries(path)

        assert is_err(result)
        error = result.err_value
        assert isinstance(error, UnsupportedFormatError)
        assert error.extension == ".yaml"

    def test_access_denied(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "app.json"
        path.write_text("{}", encoding="utf-8")

        def fake_open(self: Path, *args, **kwargs):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(Path, "open", fake_open)

        result = load_entries(path)

        assert is_err(result)
        assert isinstance(result.err_value, ConfigAccessDeniedError)
