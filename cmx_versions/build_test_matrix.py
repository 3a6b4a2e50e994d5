#!/usr/bin/env -S uv run python
# /// script
# requires-python = ">=3.13"
# dependencies = ["cyclopts>=2.9", "requests>=2.31"]
# ///
"""Build the cluster version test matrix for the cmx-versions GitHub Action.

This script:
- resolves action inputs from flags or ``INPUT_*`` environment variables;
- masks the vendor API token in logs;
- fetches the cluster-versions catalog (or reads a saved copy);
- applies the per-distribution version policies; and
- publishes the matrix to ``$GITHUB_OUTPUT`` as ``versions-to-test``.

Examples
--------
>>> python cmx_versions/build_test_matrix.py --catalog-file catalog.json
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from cmx_versions._build_matrix_flow import run_matrix_build
from cmx_versions._build_matrix_inputs import (
    RawMatrixInputs,
    configure_logging,
    resolve_matrix_inputs,
)

app = App(help="Build the cluster version test matrix.")

API_TOKEN_PARAM = Parameter(help="Vendor API token used to fetch the catalog.")
CATALOG_URL_PARAM = Parameter(help="Cluster-versions catalog endpoint override.")
CATALOG_FILE_PARAM = Parameter(help="Read the catalog from a saved JSON file.")
POLICIES_PARAM = Parameter(help="Inline JSON policy configuration.")
POLICIES_FILE_PARAM = Parameter(help="Path to a JSON policy configuration file.")
GITHUB_OUTPUT_PARAM = Parameter(help="GITHUB_OUTPUT path override.")
STRICT_PARAM = Parameter(help="Fail when any distribution cannot be evaluated.")
LOG_LEVEL_PARAM = Parameter(help="Logging level (DEBUG, INFO, WARNING, ERROR).")


@app.default
def main(
    api_token: Annotated[str | None, API_TOKEN_PARAM] = None,
    catalog_url: Annotated[str | None, CATALOG_URL_PARAM] = None,
    catalog_file: Annotated[Path | None, CATALOG_FILE_PARAM] = None,
    policies: Annotated[str | None, POLICIES_PARAM] = None,
    policies_file: Annotated[Path | None, POLICIES_FILE_PARAM] = None,
    github_output: Annotated[Path | None, GITHUB_OUTPUT_PARAM] = None,
    strict: Annotated[str | None, STRICT_PARAM] = None,
    log_level: Annotated[str | None, LOG_LEVEL_PARAM] = None,
) -> int:
    """Build and publish the cluster version test matrix.

    Parameters
    ----------
    api_token : str | None
        Override for ``INPUT_API_TOKEN``.
    catalog_url : str | None
        Override for ``INPUT_CATALOG_URL``.
    catalog_file : Path | None
        Override for ``INPUT_CATALOG_FILE``.
    policies : str | None
        Override for ``INPUT_POLICIES``.
    policies_file : Path | None
        Override for ``INPUT_POLICIES_FILE``.
    github_output : Path | None
        Override for ``GITHUB_OUTPUT``.
    strict : str | None
        Override for ``INPUT_STRICT``.
    log_level : str | None
        Override for ``INPUT_LOG_LEVEL``.

    Returns
    -------
    int
        Exit code (0 for success).
    """
    inputs = resolve_matrix_inputs(
        RawMatrixInputs(
            api_token=api_token,
            catalog_url=catalog_url,
            catalog_file=catalog_file,
            policies=policies,
            policies_file=policies_file,
            github_output=github_output,
            strict=strict,
            log_level=log_level,
        )
    )
    configure_logging(inputs.log_level)
    return run_matrix_build(inputs)


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    raise SystemExit(app())
