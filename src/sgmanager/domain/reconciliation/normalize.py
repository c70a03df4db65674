"""Expand provider-grouped rules into one rule per source."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sgmanager.domain.rules import AtomicRule

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sgmanager.domain.rules import GroupedRule


def expand_rules(rules: Iterable[GroupedRule]) -> list[AtomicRule]:
    """Split each grouped rule into atomic rules sharing its protocol and ports.

    The provider coalesces every source with the same protocol/port range into one
    rule, but ownership is recorded per source. The result holds exactly one entry
    per source, in provider order.
    """

    return [
        AtomicRule(
            protocol=rule.protocol,
            from_port=rule.from_port,
            to_port=rule.to_port,
            source=source,
        )
        for rule in rules
        for source in rule.sources
    ]
