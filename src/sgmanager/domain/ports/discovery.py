"""Port for discovering the cluster nodes that need firewall access."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class NodeAddress:
    """A cluster node name paired with one of its addresses."""

    name: str
    address: str


@runtime_checkable
class NodeAddressSource(Protocol):
    """Callable port returning the current node name/address pairs."""

    def __call__(self) -> list[NodeAddress]:
        ...


__all__ = ["NodeAddress", "NodeAddressSource"]
