"""Evaluate per-distribution policies and assemble the CI test matrix.

Building the matrix is a pure function of the catalog and the policy mapping.
A distribution with no policy is skipped; a distribution whose catalog entry
holds an unparsable version is reported and skipped so the remaining
distributions still make it into the matrix.

Examples
--------
>>> catalog = [DistributionCatalogEntry("eks", ("1.31", "1.32"))]
>>> [entry.version for entry in build_matrix(catalog, {"eks": LatestOnly()})]
['1.32']
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import assert_never

from cmx_versions._cmx_errors import (
    DistributionEvaluationError,
    UnparsableVersionError,
)
from cmx_versions._cmx_models import (
    DistributionCatalogEntry,
    DistributionPolicy,
    LatestNMinors,
    LatestOnly,
    MatrixBuild,
    MatrixEntry,
    Pinned,
)
from cmx_versions._cmx_policies import ALPHA_DISTRIBUTIONS, stage_for
from cmx_versions._cmx_versions import (
    latest_overall,
    latest_per_bucket,
    top_n_major_minors,
)

logger = logging.getLogger(__name__)


def _select_pinned(versions: tuple[str, ...], pinned: frozenset[str]) -> list[str]:
    selected: list[str] = []
    for version in versions:
        if not isinstance(version, str):
            raise UnparsableVersionError(version)
        if version in pinned and version not in selected:
            selected.append(version)
    return selected


def _select_latest_minors(versions: tuple[str, ...], n: int | None) -> list[str]:
    buckets = top_n_major_minors(versions, n)
    if not buckets:
        return []
    latest = latest_per_bucket(versions, buckets)
    return [latest[bucket] for bucket in buckets if bucket in latest]


def select_versions(
    entry: DistributionCatalogEntry, policy: DistributionPolicy
) -> list[str]:
    """Return the raw versions a policy selects from one catalog entry.

    Parameters
    ----------
    entry : DistributionCatalogEntry
        Catalog entry to select from.
    policy : DistributionPolicy
        Policy configured for the distribution.

    Returns
    -------
    list[str]
        Selected raw versions; empty when nothing matches.

    Raises
    ------
    UnparsableVersionError
        If a catalog version cannot be normalised.
    """
    match policy:
        case Pinned(versions=pinned):
            return _select_pinned(entry.versions, pinned)
        case LatestOnly():
            if not entry.versions:
                return []
            return [latest_overall(entry.versions)]
        case LatestNMinors(n=n):
            return _select_latest_minors(entry.versions, n)
        case _:
            assert_never(policy)


def evaluate_policy(
    entry: DistributionCatalogEntry,
    policy: DistributionPolicy,
    *,
    alpha_distributions: frozenset[str] | set[str] = ALPHA_DISTRIBUTIONS,
) -> list[MatrixEntry]:
    """Apply one distribution's policy and return its matrix entries.

    Parameters
    ----------
    entry : DistributionCatalogEntry
        Catalog entry for the distribution.
    policy : DistributionPolicy
        Policy configured for the distribution.
    alpha_distributions : frozenset[str] | set[str], optional
        Distributions whose entries are labelled ``alpha``.

    Returns
    -------
    list[MatrixEntry]
        Entries in policy order: catalog order for pinned versions, newest
        bucket first for latest-minor selection.

    Raises
    ------
    UnparsableVersionError
        If a catalog version cannot be normalised.

    Examples
    --------
    >>> entry = DistributionCatalogEntry("k3s", ("1.31.5", "1.31.6", "1.32.2"))
    >>> [e.version for e in evaluate_policy(entry, LatestNMinors(2))]
    ['1.32.2', '1.31.6']
    """
    stage = stage_for(entry.short_name, alpha_distributions)
    selected = select_versions(entry, policy)
    logger.debug(
        "Selected %d version(s) for %s: %s",
        len(selected),
        entry.short_name,
        ", ".join(selected),
    )
    return [
        MatrixEntry(
            distribution=entry.short_name,
            version=version,
            instance_type=policy.instance_type,
            stage=stage,
        )
        for version in selected
    ]


def assemble_matrix(
    catalog: Iterable[DistributionCatalogEntry],
    policies: Mapping[str, DistributionPolicy],
    *,
    alpha_distributions: frozenset[str] | set[str] = ALPHA_DISTRIBUTIONS,
) -> MatrixBuild:
    """Build the matrix and collect per-distribution failures.

    Parameters
    ----------
    catalog : Iterable[DistributionCatalogEntry]
        Catalog entries in the order they should appear in the matrix.
    policies : Mapping[str, DistributionPolicy]
        Policy per distribution short name. Distributions missing from the
        mapping are skipped.
    alpha_distributions : frozenset[str] | set[str], optional
        Distributions whose entries are labelled ``alpha``.

    Returns
    -------
    MatrixBuild
        Entries from every distribution that evaluated cleanly and one
        ``DistributionEvaluationError`` per distribution that did not.
    """
    entries: list[MatrixEntry] = []
    failures: list[DistributionEvaluationError] = []
    for entry in catalog:
        policy = policies.get(entry.short_name)
        if policy is None:
            logger.debug("No policy for %s; skipping", entry.short_name)
            continue
        try:
            entries.extend(
                evaluate_policy(
                    entry, policy, alpha_distributions=alpha_distributions
                )
            )
        except UnparsableVersionError as exc:
            error = DistributionEvaluationError(entry.short_name, exc.version)
            error.__cause__ = exc
            logger.error("%s", error)
            failures.append(error)
    return MatrixBuild(entries=tuple(entries), failures=tuple(failures))


def build_matrix(
    catalog: Iterable[DistributionCatalogEntry],
    policies: Mapping[str, DistributionPolicy],
    *,
    strict: bool = False,
    alpha_distributions: frozenset[str] | set[str] = ALPHA_DISTRIBUTIONS,
) -> list[MatrixEntry]:
    """Return the flat test matrix for a catalog.

    Parameters
    ----------
    catalog : Iterable[DistributionCatalogEntry]
        Catalog entries in the order they should appear in the matrix.
    policies : Mapping[str, DistributionPolicy]
        Policy per distribution short name.
    strict : bool, optional
        Raise the first distribution failure instead of skipping it.
    alpha_distributions : frozenset[str] | set[str], optional
        Distributions whose entries are labelled ``alpha``.

    Returns
    -------
    list[MatrixEntry]
        Matrix entries in catalog order.

    Raises
    ------
    DistributionEvaluationError
        If ``strict`` is set and a distribution cannot be evaluated.
    """
    result = assemble_matrix(
        catalog, policies, alpha_distributions=alpha_distributions
    )
    if strict and result.failures:
        raise result.failures[0]
    return list(result.entries)
