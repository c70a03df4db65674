"""Shared fixtures for EC2 adapter tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from sgmanager.adapters.ec2 import Ec2SecurityGroupClient
from tests.helpers.ec2 import Ec2Payload, FakeEc2Api, load_ec2_fixture

if TYPE_CHECKING:
    from sgmanager.config import FirewallConfig


@pytest.fixture
def describe_payload() -> Ec2Payload:
    return load_ec2_fixture("describe_security_groups.json")


@pytest.fixture
def fake_ec2(describe_payload: Ec2Payload) -> FakeEc2Api:
    return FakeEc2Api(describe_payload)


@pytest.fixture
def ec2_client(firewall_config: FirewallConfig, fake_ec2: FakeEc2Api) -> Ec2SecurityGroupClient:
    return Ec2SecurityGroupClient(config=firewall_config, client=fake_ec2)
