"""Fetch and parse the vendor cluster-versions catalog.

The catalog endpoint returns one entry per supported Kubernetes
distribution::

    {"cluster-versions": [{"short_name": "k3s", "versions": ["1.32.2"]}]}

Examples
--------
>>> parse_catalog({"cluster-versions": [{"short_name": "eks", "versions": ["1.32"]}]})
[DistributionCatalogEntry(short_name='eks', versions=('1.32',))]
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import requests

from cmx_versions._cmx_errors import CatalogFetchError, CatalogFormatError
from cmx_versions._cmx_models import DistributionCatalogEntry

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_URL = "https://api.replicated.com/vendor/v3/cluster/versions"
DEFAULT_TIMEOUT = 30.0
CATALOG_KEY = "cluster-versions"


def fetch_cluster_versions(
    api_token: str,
    *,
    url: str = DEFAULT_CATALOG_URL,
    session: requests.Session | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> object:
    """Fetch the raw catalog payload.

    Parameters
    ----------
    api_token : str
        Vendor API token sent as the ``Authorization`` header.
    url : str, optional
        Catalog endpoint.
    session : requests.Session | None, optional
        Session to issue the request with; a new one is used when omitted.
    timeout : float, optional
        Request timeout in seconds.

    Returns
    -------
    object
        Decoded JSON payload.

    Raises
    ------
    CatalogFetchError
        If the token is blank, the request fails, the endpoint answers with a
        non-success status, or the body is not JSON.
    """
    if not api_token or not api_token.strip():
        msg = "an API token is required to fetch cluster versions"
        raise CatalogFetchError(msg)

    http = session or requests.Session()
    logger.info("Fetching cluster versions from %s", url)
    try:
        response = http.get(
            url,
            headers={"Authorization": api_token, "Accept": "application/json"},
            timeout=timeout,
        )
        response.raise_for_status()
    except requests.RequestException as exc:
        msg = f"failed to fetch cluster versions: {exc}"
        raise CatalogFetchError(msg) from exc
    finally:
        if session is None:
            http.close()

    try:
        return response.json()
    except ValueError as exc:
        msg = f"cluster versions response is not valid JSON: {exc}"
        raise CatalogFetchError(msg) from exc


def _parse_entry(index: int, item: object) -> DistributionCatalogEntry:
    if not isinstance(item, dict):
        msg = f"{CATALOG_KEY}[{index}] must be an object"
        raise CatalogFormatError(msg)
    short_name = item.get("short_name")
    if not isinstance(short_name, str) or not short_name:
        msg = f"{CATALOG_KEY}[{index}].short_name must be a non-empty string"
        raise CatalogFormatError(msg)
    versions = item.get("versions")
    if versions is None:
        return DistributionCatalogEntry(short_name)
    if not isinstance(versions, list):
        msg = f"{short_name}: versions must be a list"
        raise CatalogFormatError(msg)
    return DistributionCatalogEntry(short_name, tuple(versions))


def parse_catalog(payload: object) -> list[DistributionCatalogEntry]:
    """Convert a decoded catalog payload into catalog entries.

    Version strings are passed through untouched; malformed versions surface
    later, per distribution, when the matrix is built.

    Raises
    ------
    CatalogFormatError
        If the payload does not have the expected shape.
    """
    if not isinstance(payload, dict) or CATALOG_KEY not in payload:
        msg = f"catalog payload must be an object with a {CATALOG_KEY!r} key"
        raise CatalogFormatError(msg)
    items = payload[CATALOG_KEY]
    if not isinstance(items, list):
        msg = f"{CATALOG_KEY} must be a list"
        raise CatalogFormatError(msg)
    return [_parse_entry(index, item) for index, item in enumerate(items)]


def load_catalog_file(path: Path) -> list[DistributionCatalogEntry]:
    """Read a saved catalog payload from disk and parse it."""
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as exc:
        msg = f"catalog file {path} is not valid UTF-8: {exc}"
        raise CatalogFormatError(msg) from exc
    except json.JSONDecodeError as exc:
        msg = f"Invalid JSON in catalog file {path}: {exc}"
        raise CatalogFormatError(msg) from exc
    return parse_catalog(payload)
