from __future__ import annotations

from sgmanager.domain.reconciliation import expand_rules
from sgmanager.domain.rules import AtomicRule, RuleSource, SourceKind
from tests.helpers.firewall import cidr, grouped, tagged


def test_expand_rules_emits_one_rule_per_source() -> None:
    first = tagged("192.0.2.1/32", "team-a", "n1")
    second = tagged("192.0.2.2/32", "team-b", "n2")
    rules = [grouped(first, second)]

    expanded = expand_rules(rules)

    assert expanded == [
        AtomicRule(protocol="tcp", from_port=5432, to_port=5432, source=first),
        AtomicRule(protocol="tcp", from_port=5432, to_port=5432, source=second),
    ]


def test_expand_rules_cardinality_matches_source_count() -> None:
    rules = [
        grouped(cidr("192.0.2.1/32"), cidr("192.0.2.2/32"), cidr("192.0.2.3/32")),
        grouped(cidr("10.0.0.0/8", "vpn"), from_port=22, to_port=22),
        grouped(protocol="udp", from_port=53, to_port=53),
        grouped(
            RuleSource(kind=SourceKind.SECURITY_GROUP, value="sg-1", owner_account="123"),
            RuleSource(kind=SourceKind.PREFIX_LIST, value="pl-1"),
            cidr("2001:db8::/32"),
            protocol="-1",
            from_port=None,
            to_port=None,
        ),
    ]

    expanded = expand_rules(rules)

    assert len(expanded) == sum(len(rule.sources) for rule in rules) == 7


def test_expand_rules_preserves_ports_protocol_and_order() -> None:
    rules = [
        grouped(cidr("192.0.2.1/32"), from_port=80, to_port=81),
        grouped(cidr("192.0.2.2/32"), protocol="-1", from_port=None, to_port=None),
    ]

    expanded = expand_rules(rules)

    assert [(rule.protocol, rule.from_port, rule.to_port) for rule in expanded] == [
        ("tcp", 80, 81),
        ("-1", None, None),
    ]
    assert [rule.source.value for rule in expanded] == ["192.0.2.1/32", "192.0.2.2/32"]


def test_expand_rules_handles_empty_input() -> None:
    assert expand_rules([]) == []
