from __future__ import annotations

import json
from typing import Annotated, Literal

import typer
import yaml
from result import is_err

from starconfig.config import (
    ConfigError,
    Configuration,
    current_configuration,
    kind_of,
    materialize,
)
from starconfig.config.models import to_json_value
from starconfig.datastore import ConfigurationStore, DataStoreError, StoreTransaction
from starconfig.settings import settings

FormatOption = Annotated[
    Literal["yaml", "json"],
    typer.Option("--format", "-f", show_default=True, case_sensitive=False, help="Output format (yaml or json)."),
]
DataDirOption = Annotated[
    str | None,
    typer.Option(
        "--data-dir",
        help="Directory holding the configuration store. Defaults to the XDG data directory.",
    ),
]

app = typer.Typer(help="Load and inspect the current configuration.")


@app.callback(invoke_without_command=True)
def _config_root(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("load")
def load(
    specifier: Annotated[
        str | None,
        typer.Argument(help="Absolute path to a .json or .xml file, or %VARIABLE% naming one."),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    store = _store(data_dir)
    result = materialize(
        store,
        specifier or settings.loader.default_specifier,
        settings.loader.missing_env_message,
    )
    if is_err(result):
        _handle_error(result.err_value)
        raise typer.Exit(code=1)

    configuration = result.ok_value
    typer.echo(f"Loaded {len(configuration)} entries from {configuration.source}")


@app.command("show")
def show(
    format: FormatOption = "yaml",
    data_dir: DataDirOption = None,
) -> None:
    configuration = _require_current(_store(data_dir))
    typer.echo(_format_payload(configuration.to_json_dict(), format.lower()))


@app.command("get")
def get(
    key: Annotated[str, typer.Argument(help="Configuration key to print.")],
    data_dir: DataDirOption = None,
) -> None:
    configuration = _require_current(_store(data_dir))
    found = configuration.get(key)
    if is_err(found):
        typer.secho(found.err_value.message, err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1)

    value = found.ok_value
    rendered = to_json_value(value)
    text = rendered if isinstance(rendered, str) else json.dumps(rendered)
    typer.echo(f"{text} ({kind_of(value).value})")


@app.command("clear")
def clear(data_dir: DataDirOption = None) -> None:
    result = _store(data_dir).transact(_delete_all)
    if is_err(result):
        _handle_store_error(result.err_value)
        raise typer.Exit(code=1)

    typer.echo(f"Removed {len(result.ok_value)} configuration(s)")


def _delete_all(transaction: StoreTransaction) -> list[Configuration]:
    removed = transaction.configurations()
    for configuration in removed:
        transaction.delete(configuration)
    return removed


def _store(data_dir: str | None) -> ConfigurationStore:
    return settings.to_file_store(data_dir)


def _require_current(store: ConfigurationStore) -> Configuration:
    result = current_configuration(store)
    if is_err(result):
        _handle_store_error(result.err_value)
        raise typer.Exit(code=1)

    configuration = result.ok_value
    if configuration is None:
        typer.secho(
            "No configuration has been loaded. Run 'starconfig config load' first.",
            err=True,
            fg=typer.colors.RED,
        )
        raise typer.Exit(code=1)
    return configuration


def _format_payload(payload: dict[str, object], format: str) -> str:
    if format == "json":
        return json.dumps(payload, indent=2, sort_keys=True)
    return yaml.safe_dump(payload, sort_keys=True)


def _handle_error(error: ConfigError) -> None:
    message = error.message
    error_path = getattr(error, "path", None)
    if error_path is not None:
        message = f"{message} ({error_path})"

    typer.secho(message, err=True, fg=typer.colors.RED)


def _handle_store_error(error: DataStoreError) -> None:
    typer.secho(f"[store] {error.message}", err=True, fg=typer.colors.RED)
