"""Unit tests for policy configuration loading."""

from __future__ import annotations

import json

import pytest

from cmx_versions._cmx_errors import PolicyConfigError
from cmx_versions._cmx_models import LatestNMinors, LatestOnly, Pinned
from cmx_versions._cmx_policies import (
    DEFAULT_POLICIES,
    load_policies,
    parse_policies,
    parse_policy,
    stage_for,
)


def test_load_policies_builds_each_variant() -> None:
    policies = load_policies(
        json.dumps(
            {
                "k3s": {"latest_minor_versions": 3, "instance_type": "r1.small"},
                "kind": {"latest_minor_versions": True},
                "eks": {"latest_version": True},
                "openshift": {"versions": ["4.14.0-okd", "4.15.0-okd"]},
            }
        )
    )
    assert policies == {
        "k3s": LatestNMinors(3, instance_type="r1.small"),
        "kind": LatestNMinors(None),
        "eks": LatestOnly(),
        "openshift": Pinned(frozenset({"4.14.0-okd", "4.15.0-okd"})),
    }, "Each selector key should map to its policy"


def test_null_policy_opts_distribution_out() -> None:
    policies = parse_policies({"oke": None, "eks": {"latest_version": True}})
    assert "oke" not in policies, "null should disable the distribution"
    assert list(policies) == ["eks"], "Other policies should be kept"


def test_instance_type_null_means_default() -> None:
    policy = parse_policy("gke", {"latest_version": True, "instance_type": None})
    assert policy == LatestOnly(instance_type=""), "null instance type is empty"


@pytest.mark.parametrize(
    ("spec", "message"),
    [
        ("latest", "JSON object or null"),
        ({}, "exactly one of"),
        ({"latest_version": True, "versions": []}, "exactly one of"),
        ({"latest_version": True, "stage": "alpha"}, "unknown policy keys: stage"),
        ({"latest_version": False}, "latest_version must be true"),
        ({"latest_minor_versions": -1}, "non-negative integer"),
        ({"latest_minor_versions": False}, "non-negative integer"),
        ({"latest_minor_versions": "3"}, "non-negative integer"),
        ({"versions": "4.14.0-okd"}, "list of strings"),
        ({"versions": [4.14]}, "list of strings"),
        ({"latest_version": True, "instance_type": 3}, "instance_type"),
    ],
)
def test_parse_policy_rejects_malformed_config(spec: object, message: str) -> None:
    with pytest.raises(PolicyConfigError, match=message) as excinfo:
        parse_policy("eks", spec)
    assert str(excinfo.value).startswith("eks:"), "Error should name distribution"


def test_load_policies_rejects_invalid_json() -> None:
    with pytest.raises(PolicyConfigError, match="Invalid JSON"):
        load_policies("{eks")


def test_parse_policies_rejects_non_object() -> None:
    with pytest.raises(PolicyConfigError, match="must be a JSON object"):
        parse_policies(["eks"])


def test_default_policies_are_read_only() -> None:
    assert isinstance(DEFAULT_POLICIES["k3s"], LatestNMinors), "k3s tracks minors"
    assert "oke" not in DEFAULT_POLICIES, "oke is opted out by default"
    with pytest.raises(TypeError):
        DEFAULT_POLICIES["oke"] = LatestOnly()  # type: ignore[index]


def test_stage_for() -> None:
    assert stage_for("openshift") == "alpha", "openshift is alpha by default"
    assert stage_for("eks") == "stable", "Other distributions are stable"
    assert stage_for("eks", {"eks"}) == "alpha", "Alpha list is configurable"
