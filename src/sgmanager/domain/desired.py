"""Build the desired rule entries from discovered node addresses."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .ownership import ANNOTATION_DELIMITER, contains_delimiter
from .rules import RuleEntry

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sgmanager.config.firewall import EntryDefaults
    from sgmanager.domain.ports.discovery import NodeAddress

HOST_PREFIX = "/32"
IPV6_HOST_PREFIX = "/128"

log = getLogger(__name__)


def _host_cidr(address: str) -> str:
    prefix = IPV6_HOST_PREFIX if ":" in address else HOST_PREFIX
    return f"{address}{prefix}"


def build_desired_entries(
    addresses: Iterable[NodeAddress],
    *,
    owner_id: str,
    defaults: EntryDefaults,
) -> list[RuleEntry]:
    """Turn each node address into a single-host entry using the default ports.

    Addresses are trusted as given and not deduplicated.
    """

    entries: list[RuleEntry] = []
    for node in addresses:
        if contains_delimiter(node.name):
            log.warning(
                "Node name %r contains the unsupported description delimiter %r",
                node.name,
                ANNOTATION_DELIMITER,
            )
        entries.append(
            RuleEntry(
                node_name=node.name,
                owner_id=owner_id,
                from_port=defaults.from_port,
                to_port=defaults.to_port,
                protocol=defaults.protocol,
                address=_host_cidr(node.address),
            )
        )
    return entries
