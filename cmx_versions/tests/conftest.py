from __future__ import annotations

import sys
from pathlib import Path

import pytest

K3S_VERSIONS: tuple[str, ...] = (
    "1.24.1", "1.24.2", "1.24.3", "1.24.4", "1.24.6", "1.24.7", "1.24.8",
    "1.24.9", "1.24.10", "1.24.11", "1.24.12", "1.24.13", "1.24.14",
    "1.24.15", "1.24.16", "1.24.17",
    "1.25.0", "1.25.2", "1.25.3", "1.25.4", "1.25.5", "1.25.6", "1.25.7",
    "1.25.8", "1.25.9", "1.25.10", "1.25.11", "1.25.12", "1.25.13",
    "1.25.14", "1.25.15", "1.25.16",
    "1.26.0", "1.26.1", "1.26.2", "1.26.3", "1.26.4", "1.26.5", "1.26.6",
    "1.26.7", "1.26.8", "1.26.9", "1.26.10", "1.26.11", "1.26.12",
    "1.26.13", "1.26.14", "1.26.15",
    "1.27.1", "1.27.2", "1.27.3", "1.27.4", "1.27.5", "1.27.6", "1.27.7",
    "1.27.8", "1.27.9", "1.27.10", "1.27.11", "1.27.12", "1.27.13",
    "1.27.14", "1.27.15", "1.27.16",
    "1.28.1", "1.28.2", "1.28.3", "1.28.4", "1.28.5", "1.28.6", "1.28.7",
    "1.28.8", "1.28.9", "1.28.10", "1.28.11", "1.28.12", "1.28.13",
    "1.28.14", "1.28.15",
    "1.29.0", "1.29.1", "1.29.2", "1.29.3", "1.29.4", "1.29.5", "1.29.6",
    "1.29.7", "1.29.8", "1.29.9", "1.29.10", "1.29.11", "1.29.12",
    "1.29.13", "1.29.14",
    "1.30.0", "1.30.1", "1.30.2", "1.30.3", "1.30.4", "1.30.5", "1.30.6",
    "1.30.7", "1.30.8", "1.30.9", "1.30.10",
    "1.31.0", "1.31.1", "1.31.2", "1.31.3", "1.31.4", "1.31.5", "1.31.6",
    "1.32.0", "1.32.1", "1.32.2",
)  # fmt: skip

EKS_VERSIONS: tuple[str, ...] = (
    "1.25", "1.26", "1.27", "1.28", "1.29", "1.30", "1.31", "1.32",
)  # fmt: skip

OPENSHIFT_VERSIONS: tuple[str, ...] = (
    "4.10.0-okd", "4.11.0-okd", "4.12.0-okd", "4.13.0-okd",
    "4.14.0-okd", "4.15.0-okd", "4.16.0-okd", "4.17.0-okd",
)  # fmt: skip


def pytest_configure() -> None:
    project_root = Path(__file__).resolve().parents[2]
    if str(project_root) not in sys.path:
        sys.path.insert(0, str(project_root))


@pytest.fixture
def k3s_versions() -> tuple[str, ...]:
    """Return the k3s versions published by the catalog, oldest first."""
    return K3S_VERSIONS


@pytest.fixture
def catalog_payload() -> dict[str, object]:
    """Return a catalog payload shaped like the vendor API response."""
    return {
        "cluster-versions": [
            {"short_name": "k3s", "versions": list(K3S_VERSIONS)},
            {"short_name": "eks", "versions": list(EKS_VERSIONS)},
            {"short_name": "openshift", "versions": list(OPENSHIFT_VERSIONS)},
        ]
    }
