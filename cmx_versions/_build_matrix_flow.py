"""Load the catalog and policies, build the matrix, and publish it.

This module is the glue between resolved action inputs and the pure matrix
engine. Use it after inputs have been resolved (typically via
``cmx_versions/build_test_matrix.py``).

Outputs
-------
The matrix is printed to stdout as indented JSON and, when a
``GITHUB_OUTPUT`` path is known, appended to it as ``versions-to-test``.

Examples
--------
>>> inputs = resolve_matrix_inputs(RawMatrixInputs(catalog_file=Path("catalog.json")))
>>> run_matrix_build(inputs)
0
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Mapping

import requests

from cmx_versions._build_matrix_inputs import MatrixInputs
from cmx_versions._cmx_catalog import (
    fetch_cluster_versions,
    load_catalog_file,
    parse_catalog,
)
from cmx_versions._cmx_errors import CmxVersionsError, PolicyConfigError
from cmx_versions._cmx_github import (
    MATRIX_OUTPUT_KEY,
    mask_secret,
    matrix_to_json,
    publish_matrix,
)
from cmx_versions._cmx_matrix import assemble_matrix
from cmx_versions._cmx_models import (
    DistributionCatalogEntry,
    DistributionPolicy,
    MatrixBuild,
)
from cmx_versions._cmx_policies import DEFAULT_POLICIES, load_policies

type Mask = Callable[[str], None]

logger = logging.getLogger(__name__)


def load_policy_mapping(inputs: MatrixInputs) -> Mapping[str, DistributionPolicy]:
    """Return the policy mapping selected by the inputs.

    A policies file takes precedence over inline policies; with neither, the
    built-in defaults apply.
    """
    if inputs.policies_file is not None:
        logger.info("Loading policies from %s", inputs.policies_file)
        try:
            text = inputs.policies_file.read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"cannot read policies file {inputs.policies_file}: {exc}"
            raise CmxVersionsError(msg) from exc
        except UnicodeDecodeError as exc:
            msg = f"policies file {inputs.policies_file} is not valid UTF-8: {exc}"
            raise PolicyConfigError(msg) from exc
        return load_policies(text)
    if inputs.policies is not None:
        logger.info("Using inline policy configuration")
        return load_policies(inputs.policies)
    return DEFAULT_POLICIES


def load_catalog(
    inputs: MatrixInputs,
    session: requests.Session | None = None,
) -> list[DistributionCatalogEntry]:
    """Read the catalog from disk or fetch it from the vendor API."""
    if inputs.catalog_file is not None:
        logger.info("Reading cluster versions from %s", inputs.catalog_file)
        try:
            return load_catalog_file(inputs.catalog_file)
        except OSError as exc:
            msg = f"cannot read catalog file {inputs.catalog_file}: {exc}"
            raise CmxVersionsError(msg) from exc
    payload = fetch_cluster_versions(
        inputs.api_token or "",
        url=inputs.catalog_url,
        session=session,
    )
    return parse_catalog(payload)


def _report(build: MatrixBuild) -> None:
    print(f"Selected {len(build.entries)} cluster(s) to test")
    for entry in build.entries:
        suffix = f" ({entry.instance_type})" if entry.instance_type else ""
        print(f"  {entry.distribution} {entry.version} [{entry.stage}]{suffix}")
    for failure in build.failures:
        print(f"error: {failure}", file=sys.stderr)


def run_matrix_build(
    inputs: MatrixInputs,
    *,
    session: requests.Session | None = None,
    mask: Mask = mask_secret,
) -> int:
    """Build and publish the test matrix.

    Parameters
    ----------
    inputs : MatrixInputs
        Resolved inputs.
    session : requests.Session | None, optional
        HTTP session for the catalog fetch.
    mask : Callable[[str], None], optional
        Secret masking hook (defaults to ``mask_secret``).

    Returns
    -------
    int
        ``0`` on success; ``1`` when loading fails or, in strict mode, when
        any distribution could not be evaluated.
    """
    if inputs.api_token:
        mask(inputs.api_token)

    try:
        policies = load_policy_mapping(inputs)
        catalog = load_catalog(inputs, session=session)
    except CmxVersionsError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    build = assemble_matrix(catalog, policies)
    _report(build)

    if inputs.strict and not build.ok:
        print(
            "error: strict mode enabled; not publishing a partial matrix",
            file=sys.stderr,
        )
        return 1

    print(matrix_to_json(build.entries, indent=2))
    if inputs.github_output is not None:
        publish_matrix(build.entries, inputs.github_output)
        print(f"Published {MATRIX_OUTPUT_KEY} to {inputs.github_output}")
    return 0
