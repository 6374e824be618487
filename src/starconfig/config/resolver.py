"""Resolution of configuration specifiers to concrete file paths."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from result import Err, Ok, Result

from starconfig.common import create_logger
from starconfig.constants import DEFAULT_SPECIFIER, ENV_SENTINEL

from .models import InvalidSpecifierError, MissingEnvironmentVariableError, SpecifierError

logger = create_logger("config")


def resolve_specifier(
    specifier: str = DEFAULT_SPECIFIER,
    missing_env_message: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Result[Path, SpecifierError]:
    """Turn a specifier into the path of the configuration file.

    Args:
        specifier: Absolute file path, or an environment variable name wrapped
            in ``%`` characters whose value is the path.
        missing_env_message: Replaces the default message reported when the
            environment variable is not set.
        environ: Environment to read from; defaults to ``os.environ``.

    Returns:
        Ok(Path) with the path as given or as read from the environment.
        Err(InvalidSpecifierError) when the specifier is neither form.
        Err(MissingEnvironmentVariableError) when the variable is unset.
    """
    if Path(specifier).is_absolute():
        return Ok(Path(specifier))

    if not specifier.startswith(ENV_SENTINEL) or not specifier.strip(ENV_SENTINEL):
        logger.warning("Invalid config specifier", specifier=specifier)
        return Err(
            InvalidSpecifierError(
                specifier=specifier,
                message=(
                    f"Invalid configuration path '{specifier}'. The path must refer to an environment variable "
                    f"using the syntax {ENV_SENTINEL}<variable name>{ENV_SENTINEL}, or be an absolute path to a "
                    "JSON or XML configuration file."
                ),
            )
        )

    variable = specifier.strip(ENV_SENTINEL)
    env = os.environ if environ is None else environ
    value = env.get(variable)
    if value is None:
        logger.warning("Config environment variable not set", variable=variable)
        return Err(
            MissingEnvironmentVariableError(
                variable=variable,
                message=missing_env_message
                or (
                    f"Could not find the environment variable '{variable}'. Set it to the path of a "
                    "JSON or XML configuration file."
                ),
            )
        )

    logger.debug("Config specifier resolved from environment", variable=variable, path=value)
    return Ok(Path(value))
