"""GitHub Actions helpers for publishing the cluster test matrix."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import TextIO

from cmx_versions._cmx_models import MatrixEntry

MATRIX_OUTPUT_KEY = "versions-to-test"


def mask_secret(value: str, stream: Callable[[str], object] = print) -> None:
    """Emit the GitHub Actions secret masking command.

    Parameters
    ----------
    value
        Secret value to mask, such as the vendor API token.
    stream
        Output stream for the masking command (defaults to ``print``).

    Examples
    --------
    >>> mask_secret("token")
    ::add-mask::token
    """
    if not value:
        return
    for line in value.splitlines():
        if line:
            stream(f"::add-mask::{line}")


def parse_bool(value: str | None, *, default: bool = False) -> bool:
    """Parse a boolean-like action input.

    Examples
    --------
    >>> parse_bool("yes")
    True
    >>> parse_bool(None)
    False
    """
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("true", "1", "yes")


def _heredoc_delimiter(value: str, base: str = "CMX_EOF") -> str:
    """Pick a heredoc delimiter that does not occur in ``value``."""
    delimiter = base
    suffix = 0
    while delimiter in value:
        suffix += 1
        delimiter = f"{base}_{suffix}"
    return delimiter


def _write_output(handle: TextIO, key: str, value: str) -> None:
    if "\n" in value or "\r" in value:
        delimiter = _heredoc_delimiter(value)
        handle.write(f"{key}<<{delimiter}\n{value}\n{delimiter}\n")
    else:
        handle.write(f"{key}={value}\n")


def append_github_output(output_file: Path, outputs: Mapping[str, str]) -> None:
    """Append step outputs to the ``GITHUB_OUTPUT`` file.

    Multiline values are written with heredoc syntax.

    Parameters
    ----------
    output_file
        Path to the ``GITHUB_OUTPUT`` file.
    outputs
        Output names and values to append.

    Examples
    --------
    >>> append_github_output(Path("/tmp/out"), {"versions-to-test": "[]"})
    """
    output_file.parent.mkdir(parents=True, exist_ok=True)
    with output_file.open("a", encoding="utf-8") as handle:
        for key, value in outputs.items():
            _write_output(handle, key, value)


def matrix_to_json(entries: Iterable[MatrixEntry], *, indent: int | None = None) -> str:
    """Serialise matrix entries to the JSON list the CI workflow consumes.

    Examples
    --------
    >>> matrix_to_json([MatrixEntry("eks", "1.32")])
    '[{"distribution":"eks","version":"1.32","instance_type":"","stage":"stable"}]'
    """
    separators = None if indent is not None else (",", ":")
    return json.dumps(
        [entry.as_dict() for entry in entries],
        indent=indent,
        separators=separators,
    )


def publish_matrix(entries: Iterable[MatrixEntry], github_output: Path) -> str:
    """Write the matrix to ``GITHUB_OUTPUT`` as ``versions-to-test``.

    Returns
    -------
    str
        The JSON document that was published.
    """
    document = matrix_to_json(entries)
    append_github_output(github_output, {MATRIX_OUTPUT_KEY: document})
    return document
