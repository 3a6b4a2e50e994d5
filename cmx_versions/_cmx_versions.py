"""Version parsing, bucketing, and latest-version selection.

Raw version strings published by the cluster-versions catalog are not strict
semver: EKS publishes ``1.32`` and OpenShift publishes ``4.17.0-okd``. This
module compares them by their leading numeric triple and always hands back the
raw string the catalog published.

Examples
--------
>>> normalize("4.15.0-okd")
NormalizedVersion(major=4, minor=15, patch=0)
>>> top_n_major_minors(["1.9.3", "1.10.0", "1.10.2"], 1)
['1.10']
"""

from __future__ import annotations

import re
from collections.abc import Collection, Iterable

from cmx_versions._cmx_errors import EmptyCatalogEntryError, UnparsableVersionError
from cmx_versions._cmx_models import NormalizedVersion

_LEADING_VERSION_RE = re.compile(r"(\d+)(?:\.(\d+))?(?:\.(\d+))?")


def normalize(raw: str) -> NormalizedVersion:
    """Parse the leading dotted integers of a raw version.

    Parameters
    ----------
    raw : str
        Version string as published by the catalog.

    Returns
    -------
    NormalizedVersion
        Numeric triple; missing components are ``0``.

    Raises
    ------
    UnparsableVersionError
        If ``raw`` is not a string or does not start with a digit.

    Examples
    --------
    >>> normalize("1.29")
    NormalizedVersion(major=1, minor=29, patch=0)
    >>> normalize("1.30.1.7")
    NormalizedVersion(major=1, minor=30, patch=1)
    """
    if not isinstance(raw, str):
        raise UnparsableVersionError(raw)
    match = _LEADING_VERSION_RE.match(raw)
    if match is None:
        raise UnparsableVersionError(raw)
    major, minor, patch = (int(part) if part else 0 for part in match.groups())
    return NormalizedVersion(major, minor, patch)


def major_minor_key(raw: str) -> str:
    """Return the ``"<major>.<minor>"`` bucket for a raw version.

    Examples
    --------
    >>> major_minor_key("1.31.6")
    '1.31'
    """
    return normalize(raw).major_minor


def major_minor_buckets(versions: Iterable[str]) -> list[str]:
    """Return the distinct major.minor keys, newest first.

    Parameters
    ----------
    versions : Iterable[str]
        Raw version strings.

    Returns
    -------
    list[str]
        Unique bucket keys sorted numerically in descending order.

    Examples
    --------
    >>> major_minor_buckets(["1.9.1", "1.10.0", "1.9.4"])
    ['1.10', '1.9']
    """
    buckets: dict[str, NormalizedVersion] = {}
    for raw in versions:
        parsed = normalize(raw)
        buckets.setdefault(
            parsed.major_minor, NormalizedVersion(parsed.major, parsed.minor)
        )
    return sorted(buckets, key=buckets.__getitem__, reverse=True)


def top_n_major_minors(versions: Iterable[str], n: int | None = None) -> list[str]:
    """Return the ``n`` newest major.minor keys.

    Parameters
    ----------
    versions : Iterable[str]
        Raw version strings.
    n : int | None, optional
        Number of buckets to keep. ``None`` keeps every bucket, and a value
        larger than the bucket count returns them all.

    Returns
    -------
    list[str]
        At most ``n`` bucket keys, newest first.

    Raises
    ------
    ValueError
        If ``n`` is negative.

    Examples
    --------
    >>> top_n_major_minors(["1.30.2", "1.31.0", "1.32.1"], 2)
    ['1.32', '1.31']
    >>> top_n_major_minors(["1.30.2"], 0)
    []
    """
    if n is not None and n < 0:
        msg = f"n must be zero or positive, got {n}"
        raise ValueError(msg)
    buckets = major_minor_buckets(versions)
    return buckets if n is None else buckets[:n]


def latest_overall(versions: Iterable[str]) -> str:
    """Return the raw version with the greatest numeric triple.

    When two versions normalise to the same triple the first one seen wins.

    Raises
    ------
    EmptyCatalogEntryError
        If ``versions`` is empty.

    Examples
    --------
    >>> latest_overall(["4.16.0-okd", "4.17.0-okd", "4.9.0-okd"])
    '4.17.0-okd'
    """
    best: str | None = None
    best_parsed: NormalizedVersion | None = None
    for raw in versions:
        parsed = normalize(raw)
        if best_parsed is None or parsed > best_parsed:
            best, best_parsed = raw, parsed
    if best is None:
        msg = "cannot select the latest version from an empty version list"
        raise EmptyCatalogEntryError(msg)
    return best


def latest_per_bucket(
    versions: Iterable[str],
    allowed_buckets: Collection[str] | None = None,
) -> dict[str, str]:
    """Return the newest raw version in each major.minor bucket.

    Parameters
    ----------
    versions : Iterable[str]
        Raw version strings.
    allowed_buckets : Collection[str] | None, optional
        Bucket keys to keep. ``None`` or an empty collection keeps all of
        them.

    Returns
    -------
    dict[str, str]
        Mapping of bucket key to raw version, in first-seen bucket order.

    Examples
    --------
    >>> latest_per_bucket(["1.31.0", "1.31.6", "1.32.2"], {"1.31"})
    {'1.31': '1.31.6'}
    """
    allowed = set(allowed_buckets) if allowed_buckets else None
    latest: dict[str, tuple[NormalizedVersion, str]] = {}
    for raw in versions:
        parsed = normalize(raw)
        key = parsed.major_minor
        if allowed is not None and key not in allowed:
            continue
        current = latest.get(key)
        if current is None or parsed > current[0]:
            latest[key] = (parsed, raw)
    return {key: raw for key, (_, raw) in latest.items()}
