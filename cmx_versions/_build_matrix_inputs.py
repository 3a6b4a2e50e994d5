"""Resolve CLI and environment inputs for the matrix builder.

GitHub Actions exposes every declared action input as an ``INPUT_*``
environment variable and sets inputs the workflow omitted to an empty string,
so blank environment values are treated as unset here.
"""

from __future__ import annotations

import logging
import os
from collections import abc as cabc
from dataclasses import dataclass
from pathlib import Path

from cmx_versions._cmx_catalog import DEFAULT_CATALOG_URL
from cmx_versions._cmx_github import parse_bool

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True, slots=True)
class InputResolution:
    """Configuration for resolving an input from multiple sources."""

    env_key: str
    default: str | Path | None = None
    required: bool = False
    as_path: bool = False


def resolve_input(
    param_value: str | Path | None,
    resolution: InputResolution,
    env: cabc.Mapping[str, str] | None = None,
) -> str | Path | None:
    """Resolve input from parameter, environment variable, or default.

    Raises
    ------
    SystemExit
        If the input is required and no source provides it.
    """
    if param_value is not None:
        return param_value

    env_value = (os.environ if env is None else env).get(resolution.env_key, "")
    if env_value.strip():
        return Path(env_value) if resolution.as_path else env_value

    if resolution.required:
        msg = f"{resolution.env_key} is required"
        raise SystemExit(msg)

    return resolution.default


@dataclass(frozen=True, slots=True)
class RawMatrixInputs:
    """Raw matrix builder inputs from CLI or defaults."""

    api_token: str | None = None
    catalog_url: str | None = None
    catalog_file: Path | None = None
    policies: str | None = None
    policies_file: Path | None = None
    github_output: Path | None = None
    strict: str | None = None
    log_level: str | None = None


@dataclass(frozen=True, slots=True)
class MatrixInputs:
    """Matrix builder inputs resolved to their final values.

    Attributes
    ----------
    api_token : str | None
        Vendor API token; only needed when the catalog is fetched.
    catalog_url : str
        Catalog endpoint.
    catalog_file : Path | None
        Saved catalog payload to read instead of fetching.
    policies : str | None
        Inline JSON policy configuration.
    policies_file : Path | None
        Path to a JSON policy configuration file.
    github_output : Path | None
        ``GITHUB_OUTPUT`` file to publish the matrix to.
    strict : bool
        Fail the run when any distribution cannot be evaluated.
    log_level : str
        Logging level name.
    """

    api_token: str | None
    catalog_url: str
    catalog_file: Path | None
    policies: str | None
    policies_file: Path | None
    github_output: Path | None
    strict: bool
    log_level: str


def _as_path(value: str | Path | None) -> Path | None:
    if value is None:
        return None
    return value if isinstance(value, Path) else Path(value)


def _resolve_log_level(value: str | Path | None) -> str:
    level = str(value or "INFO").strip().upper()
    if level not in LOG_LEVELS:
        msg = f"log level must be one of {', '.join(LOG_LEVELS)}, got {value!r}"
        raise SystemExit(msg)
    return level


def resolve_matrix_inputs(
    raw: RawMatrixInputs,
    env: cabc.Mapping[str, str] | None = None,
) -> MatrixInputs:
    """Resolve matrix builder inputs from CLI values and the environment.

    Parameters
    ----------
    raw : RawMatrixInputs
        Values passed on the command line; ``None`` falls back to the
        environment.
    env : Mapping[str, str] | None, optional
        Environment to read instead of ``os.environ``.

    Returns
    -------
    MatrixInputs
        Normalized inputs.

    Raises
    ------
    SystemExit
        If neither a catalog file nor an API token is available, or the log
        level is unknown.
    """
    catalog_file = _as_path(
        resolve_input(
            raw.catalog_file,
            InputResolution(env_key="INPUT_CATALOG_FILE", as_path=True),
            env,
        )
    )
    api_token = resolve_input(
        raw.api_token,
        InputResolution(env_key="INPUT_API_TOKEN", required=catalog_file is None),
        env,
    )
    catalog_url = resolve_input(
        raw.catalog_url,
        InputResolution(env_key="INPUT_CATALOG_URL", default=DEFAULT_CATALOG_URL),
        env,
    )
    policies = resolve_input(
        raw.policies, InputResolution(env_key="INPUT_POLICIES"), env
    )
    policies_file = resolve_input(
        raw.policies_file,
        InputResolution(env_key="INPUT_POLICIES_FILE", as_path=True),
        env,
    )
    github_output = resolve_input(
        raw.github_output,
        InputResolution(env_key="GITHUB_OUTPUT", as_path=True),
        env,
    )
    strict = resolve_input(raw.strict, InputResolution(env_key="INPUT_STRICT"), env)
    log_level = resolve_input(
        raw.log_level, InputResolution(env_key="INPUT_LOG_LEVEL"), env
    )

    return MatrixInputs(
        api_token=str(api_token) if api_token else None,
        catalog_url=str(catalog_url),
        catalog_file=catalog_file,
        policies=str(policies) if policies else None,
        policies_file=_as_path(policies_file),
        github_output=_as_path(github_output),
        strict=parse_bool(str(strict) if strict is not None else None),
        log_level=_resolve_log_level(log_level),
    )


def configure_logging(level: str) -> None:
    """Configure root logging for a CLI run."""
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(levelname)s %(name)s: %(message)s",
    )
