"""Translate Kubernetes node payloads into node address pairs."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from sgmanager.domain.ports.discovery import NodeAddress

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .schema import NodePayload

log = getLogger(__name__)


def translate_node_addresses(
    nodes: Iterable[NodePayload],
    *,
    address_type: str,
) -> list[NodeAddress]:
    """Return one pair per node address of ``address_type`` (e.g. ``ExternalIP``)."""

    results: list[NodeAddress] = []
    for node in nodes:
        matching = [addr for addr in node.status.addresses if addr.type == address_type]
        if not matching:
            log.debug("Node %s has no %s address", node.metadata.name, address_type)
        results.extend(
            NodeAddress(name=node.metadata.name, address=addr.address) for addr in matching
        )
    return results
