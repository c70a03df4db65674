"""Shared fixtures for Kubernetes adapter tests."""

from __future__ import annotations

import pytest

from sgmanager.config import KubernetesConfig
from tests.helpers.kubernetes import API_URL, KubernetesPayload, load_kubernetes_fixture


@pytest.fixture
def kubernetes_config() -> KubernetesConfig:
    return KubernetesConfig(
        api_url=API_URL,
        token="token-value",  # noqa: S106
        page_size=2,
    )


@pytest.fixture
def node_pages() -> list[KubernetesPayload]:
    return [
        load_kubernetes_fixture("nodes_page_1.json"),
        load_kubernetes_fixture("nodes_page_2.json"),
    ]
