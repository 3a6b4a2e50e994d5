"""Exception hierarchy for the cmx-versions matrix builder.

These exceptions provide a domain-specific error surface for the version
engine and the action helpers so callers can catch a single base error when
appropriate.

Examples
--------
>>> raise UnparsableVersionError("latest")
"""

from __future__ import annotations


class CmxVersionsError(Exception):
    """Base error for cmx-versions helpers.

    Parameters
    ----------
    message
        Human-readable error message describing the failure.

    Examples
    --------
    >>> raise CmxVersionsError("unexpected matrix failure")
    """


class UnparsableVersionError(CmxVersionsError, ValueError):
    """Raised when a version string does not start with a dotted integer.

    Parameters
    ----------
    version
        The raw version value that could not be parsed.

    Examples
    --------
    >>> raise UnparsableVersionError("v-next")
    """

    def __init__(self, version: object) -> None:
        self.version = version
        super().__init__(f"unparsable version: {version!r}")


class EmptyCatalogEntryError(CmxVersionsError, ValueError):
    """Raised when the latest version is requested from no versions."""


class DistributionEvaluationError(CmxVersionsError):
    """Raised when one distribution's policy cannot be evaluated.

    Parameters
    ----------
    distribution
        Short name of the distribution that failed.
    version
        Offending raw version, when known.
    reason
        Short description of what went wrong.

    Examples
    --------
    >>> raise DistributionEvaluationError("k3s", "latest")
    """

    def __init__(
        self,
        distribution: str,
        version: object = None,
        *,
        reason: str = "unparsable version",
    ) -> None:
        self.distribution = distribution
        self.version = version
        self.reason = reason
        detail = reason if version is None else f"{reason} {version!r}"
        super().__init__(f"cannot evaluate distribution {distribution!r}: {detail}")


class CatalogFetchError(CmxVersionsError):
    """Raised when the cluster-versions catalog cannot be fetched."""


class CatalogFormatError(CmxVersionsError):
    """Raised when a catalog payload does not have the expected shape."""


class PolicyConfigError(CmxVersionsError):
    """Raised when policy configuration is malformed."""
