"""Domain port definitions for adapters."""

from __future__ import annotations

from .discovery import NodeAddress, NodeAddressSource
from .firewall import FirewallClient

__all__ = [
    "FirewallClient",
    "NodeAddress",
    "NodeAddressSource",
]
