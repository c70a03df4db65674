from __future__ import annotations

from sgmanager.domain.reconciliation import expand_rules, partition_rules
from tests.helpers.firewall import cidr, grouped, tagged


def test_partition_splits_grouped_rule_by_owner() -> None:
    owned_source = tagged("192.0.2.1/32", "team-a", "n1")
    foreign_source = tagged("192.0.2.2/32", "team-b", "n2")

    partition = partition_rules(expand_rules([grouped(owned_source, foreign_source)]), "team-a")

    assert [rule.source for rule in partition.owned] == [owned_source]
    assert [rule.source for rule in partition.foreign] == [foreign_source]


def test_partition_treats_untagged_and_malformed_descriptions_as_foreign() -> None:
    rules = expand_rules(
        [
            grouped(
                cidr("192.0.2.1/32"),
                cidr("192.0.2.2/32", "Testing rule"),
                cidr("192.0.2.3/32", "ownerid=team-a;nodename=n3"),
                tagged("192.0.2.4/32", "Team-A", "n4"),
            )
        ]
    )

    partition = partition_rules(rules, "team-a")

    assert partition.owned == []
    assert partition.foreign == rules


def test_partition_is_complete_disjoint_and_order_preserving() -> None:
    rules = expand_rules(
        [
            grouped(
                tagged("192.0.2.1/32", "team-a", "n1"),
                cidr("203.0.113.0/24", "office"),
                tagged("192.0.2.2/32", "team-a", "n2"),
            ),
            grouped(
                tagged("192.0.2.3/32", "team-b", "n3"),
                tagged("192.0.2.4/32", "team-a", "n4"),
                from_port=22,
                to_port=22,
            ),
        ]
    )

    partition = partition_rules(rules, "team-a")

    assert len(partition.owned) + len(partition.foreign) == len(rules) == len(partition)
    assert not set(partition.owned) & set(partition.foreign)
    assert [rule.source.value for rule in partition.owned] == [
        "192.0.2.1/32",
        "192.0.2.2/32",
        "192.0.2.4/32",
    ]
    assert [rule.source.value for rule in partition.foreign] == [
        "203.0.113.0/24",
        "192.0.2.3/32",
    ]
