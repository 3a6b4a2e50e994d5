"""Policy configuration for the cluster test matrix.

The default table below is hand-maintained: adding a distribution here opts it
into CI, and removing it (or setting it to ``null`` in a JSON override) opts it
out. Overrides use the same shape as the action's ``policies`` input::

    {
      "k3s": {"latest_minor_versions": 3},
      "eks": {"latest_version": true, "instance_type": "m6i.large"},
      "openshift": {"versions": ["4.14.0-okd"]},
      "oke": null
    }
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from types import MappingProxyType

from cmx_versions._cmx_errors import PolicyConfigError
from cmx_versions._cmx_models import (
    DistributionPolicy,
    LatestNMinors,
    LatestOnly,
    Pinned,
)

logger = logging.getLogger(__name__)

STAGE_STABLE = "stable"
STAGE_ALPHA = "alpha"

ALPHA_DISTRIBUTIONS: frozenset[str] = frozenset({"openshift"})

DEFAULT_POLICIES: Mapping[str, DistributionPolicy] = MappingProxyType(
    {
        "kind": LatestNMinors(3),
        "k3s": LatestNMinors(3),
        "rke2": LatestNMinors(2),
        "eks": LatestNMinors(2, instance_type="c5.xlarge"),
        "gke": LatestOnly(instance_type="n2-standard-4"),
        "aks": LatestOnly(instance_type="Standard_D4s_v5"),
        "openshift": Pinned(frozenset({"4.14.0-okd"}), instance_type="r1.large"),
        # oke is opted out until its clusters provision reliably.
    }
)

_SELECTOR_KEYS = ("versions", "latest_version", "latest_minor_versions")
_ALLOWED_KEYS = frozenset({*_SELECTOR_KEYS, "instance_type"})


def stage_for(
    distribution: str,
    alpha_distributions: frozenset[str] | set[str] = ALPHA_DISTRIBUTIONS,
) -> str:
    """Return the release-maturity label for a distribution.

    Examples
    --------
    >>> stage_for("openshift")
    'alpha'
    >>> stage_for("k3s")
    'stable'
    """
    return STAGE_ALPHA if distribution in alpha_distributions else STAGE_STABLE


def _parse_instance_type(name: str, spec: Mapping[str, object]) -> str:
    instance_type = spec.get("instance_type", "")
    if instance_type is None:
        return ""
    if not isinstance(instance_type, str):
        msg = f"{name}: instance_type must be a string"
        raise PolicyConfigError(msg)
    return instance_type


def _parse_pinned(name: str, value: object, instance_type: str) -> Pinned:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        msg = f"{name}: versions must be a list of strings"
        raise PolicyConfigError(msg)
    return Pinned(frozenset(value), instance_type=instance_type)


def _parse_latest_only(name: str, value: object, instance_type: str) -> LatestOnly:
    if value is not True:
        msg = f"{name}: latest_version must be true"
        raise PolicyConfigError(msg)
    return LatestOnly(instance_type=instance_type)


def _parse_latest_minors(
    name: str, value: object, instance_type: str
) -> LatestNMinors:
    # bool is an int subclass, so check it first
    if value is True:
        return LatestNMinors(None, instance_type=instance_type)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        msg = f"{name}: latest_minor_versions must be true or a non-negative integer"
        raise PolicyConfigError(msg)
    return LatestNMinors(value, instance_type=instance_type)


def parse_policy(name: str, spec: object) -> DistributionPolicy:
    """Build one policy from its configuration object.

    Parameters
    ----------
    name : str
        Distribution short name, used in error messages.
    spec : object
        Decoded JSON object with exactly one selector key.

    Returns
    -------
    DistributionPolicy
        The configured policy.

    Raises
    ------
    PolicyConfigError
        If ``spec`` is not an object, has unknown keys, or does not name
        exactly one selector.

    Examples
    --------
    >>> parse_policy("k3s", {"latest_minor_versions": 3})
    LatestNMinors(n=3, instance_type='')
    """
    if not isinstance(spec, Mapping):
        msg = f"{name}: policy must be a JSON object or null"
        raise PolicyConfigError(msg)
    unknown = sorted(set(spec) - _ALLOWED_KEYS)
    if unknown:
        msg = f"{name}: unknown policy keys: {', '.join(unknown)}"
        raise PolicyConfigError(msg)
    selectors = [key for key in _SELECTOR_KEYS if key in spec]
    if len(selectors) != 1:
        msg = f"{name}: expected exactly one of {', '.join(_SELECTOR_KEYS)}"
        raise PolicyConfigError(msg)

    instance_type = _parse_instance_type(name, spec)
    selector = selectors[0]
    value = spec[selector]
    match selector:
        case "versions":
            return _parse_pinned(name, value, instance_type)
        case "latest_version":
            return _parse_latest_only(name, value, instance_type)
        case _:
            return _parse_latest_minors(name, value, instance_type)


def parse_policies(data: object) -> dict[str, DistributionPolicy]:
    """Build the policy mapping from decoded JSON configuration.

    Distributions mapped to ``null`` are left out of the result, which is how
    a configuration opts a distribution out of testing.

    Raises
    ------
    PolicyConfigError
        If ``data`` is not an object or any policy is malformed.
    """
    if not isinstance(data, Mapping):
        msg = "policy configuration must be a JSON object"
        raise PolicyConfigError(msg)
    policies: dict[str, DistributionPolicy] = {}
    for name, spec in data.items():
        if spec is None:
            logger.debug("Distribution %s disabled by configuration", name)
            continue
        policies[str(name)] = parse_policy(str(name), spec)
    return policies


def load_policies(text: str) -> dict[str, DistributionPolicy]:
    """Parse JSON policy configuration text.

    Examples
    --------
    >>> load_policies('{"eks": {"latest_version": true}}')
    {'eks': LatestOnly(instance_type='')}
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"Invalid JSON in policy configuration: {exc}"
        raise PolicyConfigError(msg) from exc
    return parse_policies(data)
