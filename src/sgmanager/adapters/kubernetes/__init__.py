"""Public interface for the Kubernetes node discovery adapter."""

from __future__ import annotations

from .client import BearerTokenAuth, KubernetesNodeSource, NodeDiscoveryError
from .schema import NodeList, NodePayload
from .translator import translate_node_addresses

__all__ = [
    "BearerTokenAuth",
    "KubernetesNodeSource",
    "NodeDiscoveryError",
    "NodeList",
    "NodePayload",
    "translate_node_addresses",
]
