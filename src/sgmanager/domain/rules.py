"""Inbound rule values exchanged between the reconciler and the firewall provider.

The provider groups rules: one :class:`GroupedRule` per protocol/port range,
carrying every source that shares it. Ownership, however, lives on each
source's description, so reconciliation works on :class:`AtomicRule` values
(exactly one source each). :class:`RuleEntry` is the node-centric view of an
atomic rule this system creates.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import StrEnum

from .ownership import decode_annotation, encode_annotation


class SourceKind(StrEnum):
    CIDR_IPV4 = "cidr-ipv4"
    CIDR_IPV6 = "cidr-ipv6"
    PREFIX_LIST = "prefix-list"
    SECURITY_GROUP = "security-group"


@dataclass(frozen=True, slots=True)
class RuleSource:
    """One allowed source of traffic plus its free-text description.

    ``value`` is a CIDR for the two CIDR kinds, a prefix list id or a security
    group id otherwise. ``owner_account`` only applies to security group
    references that point into another account.
    """

    kind: SourceKind
    value: str
    description: str | None = None
    owner_account: str | None = None

    @property
    def is_cidr(self) -> bool:
        return self.kind in (SourceKind.CIDR_IPV4, SourceKind.CIDR_IPV6)


@dataclass(frozen=True, slots=True)
class GroupedRule:
    """A provider rule: protocol and port range shared by many sources.

    Ports are ``None`` for rules that are not port-scoped (protocol ``"-1"``).
    """

    protocol: str
    from_port: int | None
    to_port: int | None
    sources: tuple[RuleSource, ...] = ()


@dataclass(frozen=True, slots=True)
class AtomicRule:
    protocol: str
    from_port: int | None
    to_port: int | None
    source: RuleSource

    @property
    def description(self) -> str | None:
        return self.source.description

    def as_grouped(self) -> GroupedRule:
        return GroupedRule(
            protocol=self.protocol,
            from_port=self.from_port,
            to_port=self.to_port,
            sources=(self.source,),
        )


@dataclass(frozen=True, slots=True)
class RuleEntry:
    """A single inbound allow rule for one cluster node."""

    node_name: str
    owner_id: str
    from_port: int
    to_port: int
    protocol: str
    address: str

    @property
    def description(self) -> str:
        return encode_annotation(self.owner_id, self.node_name)

    def with_owner(self, owner_id: str) -> RuleEntry:
        if owner_id == self.owner_id:
            return self
        return replace(self, owner_id=owner_id)

    def to_atomic_rule(self) -> AtomicRule:
        kind = SourceKind.CIDR_IPV6 if ":" in self.address else SourceKind.CIDR_IPV4
        return AtomicRule(
            protocol=self.protocol,
            from_port=self.from_port,
            to_port=self.to_port,
            source=RuleSource(kind=kind, value=self.address, description=self.description),
        )

    @classmethod
    def from_atomic_rule(cls, rule: AtomicRule) -> RuleEntry | None:
        """Rebuild the entry behind a tagged CIDR rule, or ``None`` if it carries no tag."""

        if not rule.source.is_cidr or rule.from_port is None or rule.to_port is None:
            return None
        tag = decode_annotation(rule.description)
        if tag is None:
            return None
        return cls(
            node_name=tag.node_name,
            owner_id=tag.owner_id,
            from_port=rule.from_port,
            to_port=rule.to_port,
            protocol=rule.protocol,
            address=rule.source.value,
        )

    def __str__(self) -> str:
        return (
            f"RuleEntry(node_name={self.node_name}, owner_id={self.owner_id}, "
            f"address={self.address}, protocol={self.protocol}, "
            f"ports={self.from_port}-{self.to_port})"
        )
