from __future__ import annotations

import pytest

from sgmanager.config import EntryDefaults, FirewallConfig
from sgmanager.domain.reconciliation import OwnedRuleReconciler
from tests.helpers.firewall import FakeFirewall


@pytest.fixture
def entry_defaults() -> EntryDefaults:
    return EntryDefaults(from_port=5432, to_port=5432, protocol="tcp")


@pytest.fixture
def firewall_config(entry_defaults: EntryDefaults) -> FirewallConfig:
    return FirewallConfig(
        owner_id="team-a",
        security_group_id="sg-0123456789abcdef0",
        defaults=entry_defaults,
        region="eu-west-1",
    )


@pytest.fixture
def fake_firewall() -> FakeFirewall:
    return FakeFirewall()


@pytest.fixture
def reconciler(fake_firewall: FakeFirewall, firewall_config: FirewallConfig) -> OwnedRuleReconciler:
    return OwnedRuleReconciler(firewall=fake_firewall, config=firewall_config)
