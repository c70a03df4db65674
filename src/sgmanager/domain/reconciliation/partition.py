"""Split atomic rules into the ones owned by an instance and everything else."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sgmanager.domain.ownership import is_owned_by

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sgmanager.domain.rules import AtomicRule


@dataclass(slots=True)
class OwnershipPartition:
    owned: list[AtomicRule] = field(default_factory=list)
    foreign: list[AtomicRule] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.owned) + len(self.foreign)


def partition_rules(rules: Iterable[AtomicRule], owner_id: str) -> OwnershipPartition:
    """Classify ``rules`` by their description tag.

    A rule is owned only when its description decodes and the owner matches
    ``owner_id`` exactly. Untagged, malformed and other owners' rules are foreign.
    """

    partition = OwnershipPartition()
    for rule in rules:
        if is_owned_by(rule.description, owner_id):
            partition.owned.append(rule)
        else:
            partition.foreign.append(rule)
    return partition
