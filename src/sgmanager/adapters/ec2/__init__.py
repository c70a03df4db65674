"""EC2 security group adapter package."""

from __future__ import annotations

from .client import Ec2SecurityGroupClient, FirewallProviderError
from .schema import DescribeSecurityGroupsResponse, IpPermissionPayload, SecurityGroupPayload
from .translator import permission_request, permissions_request, translate_permission

__all__ = [
    "DescribeSecurityGroupsResponse",
    "Ec2SecurityGroupClient",
    "FirewallProviderError",
    "IpPermissionPayload",
    "SecurityGroupPayload",
    "permission_request",
    "permissions_request",
    "translate_permission",
]
