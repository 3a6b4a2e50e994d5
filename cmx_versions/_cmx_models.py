"""Data models for the cmx-versions matrix builder.

These models provide a small, typed contract shared by the version engine,
the catalog client, and the action helpers, keeping data flow explicit across
module boundaries.

Examples
--------
>>> entry = MatrixEntry("k3s", "1.32.2", instance_type="", stage="stable")
>>> entry.as_dict()["version"]
'1.32.2'
"""

from __future__ import annotations

from dataclasses import dataclass, field

from cmx_versions._cmx_errors import DistributionEvaluationError


@dataclass(frozen=True, slots=True, order=True)
class NormalizedVersion:
    """Numeric ``(major, minor, patch)`` view of a raw version string.

    Attributes
    ----------
    major
        Leading integer component.
    minor
        Second integer component, ``0`` when absent.
    patch
        Third integer component, ``0`` when absent.

    Examples
    --------
    >>> NormalizedVersion(1, 9, 0) < NormalizedVersion(1, 10, 0)
    True
    """

    major: int
    minor: int = 0
    patch: int = 0

    @property
    def major_minor(self) -> str:
        """Return the ``"<major>.<minor>"`` bucket key."""
        return f"{self.major}.{self.minor}"


@dataclass(frozen=True, slots=True)
class DistributionCatalogEntry:
    """Versions published for one Kubernetes distribution.

    Attributes
    ----------
    short_name
        Distribution identifier (e.g., ``k3s``, ``eks``).
    versions
        Raw version strings in catalog order.

    Examples
    --------
    >>> DistributionCatalogEntry("eks", ("1.31", "1.32")).versions[-1]
    '1.32'
    """

    short_name: str
    versions: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Pinned:
    """Select only the listed versions that the catalog offers."""

    versions: frozenset[str]
    instance_type: str = ""


@dataclass(frozen=True, slots=True)
class LatestOnly:
    """Select the single highest version of a distribution."""

    instance_type: str = ""


@dataclass(frozen=True, slots=True)
class LatestNMinors:
    """Select the newest patch of each of the ``n`` newest minor lines.

    ``n`` of ``None`` selects every minor line in the catalog.
    """

    n: int | None = None
    instance_type: str = ""


type DistributionPolicy = Pinned | LatestOnly | LatestNMinors


@dataclass(frozen=True, slots=True)
class MatrixEntry:
    """One cluster to exercise in CI.

    Attributes
    ----------
    distribution
        Distribution short name.
    version
        Raw version string exactly as published by the catalog.
    instance_type
        Instance type requested for the cluster (empty for the default).
    stage
        Release-maturity label, ``stable`` or ``alpha``.
    """

    distribution: str
    version: str
    instance_type: str = ""
    stage: str = "stable"

    def as_dict(self) -> dict[str, str]:
        """Return the serialised form consumed by the CI workflow."""
        return {
            "distribution": self.distribution,
            "version": self.version,
            "instance_type": self.instance_type,
            "stage": self.stage,
        }


@dataclass(frozen=True, slots=True)
class MatrixBuild:
    """Matrix entries together with the distributions that failed.

    Attributes
    ----------
    entries
        Flat, ordered matrix entries.
    failures
        One error per distribution that could not be evaluated.
    """

    entries: tuple[MatrixEntry, ...]
    failures: tuple[DistributionEvaluationError, ...] = field(default=())

    @property
    def ok(self) -> bool:
        """Return ``True`` when every distribution evaluated cleanly."""
        return not self.failures
