"""Pydantic models describing the EC2 security group payloads returned by boto3."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Ec2BaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class IpRangePayload(Ec2BaseModel):
    cidr_ip: str = Field(alias="CidrIp")
    description: str | None = Field(default=None, alias="Description")


class Ipv6RangePayload(Ec2BaseModel):
    cidr_ipv6: str = Field(alias="CidrIpv6")
    description: str | None = Field(default=None, alias="Description")


class PrefixListIdPayload(Ec2BaseModel):
    prefix_list_id: str = Field(alias="PrefixListId")
    description: str | None = Field(default=None, alias="Description")


class UserIdGroupPairPayload(Ec2BaseModel):
    group_id: str = Field(alias="GroupId")
    user_id: str | None = Field(default=None, alias="UserId")
    description: str | None = Field(default=None, alias="Description")


class IpPermissionPayload(Ec2BaseModel):
    ip_protocol: str = Field(alias="IpProtocol")
    from_port: int | None = Field(default=None, alias="FromPort")
    to_port: int | None = Field(default=None, alias="ToPort")
    ip_ranges: list[IpRangePayload] = Field(default_factory=list, alias="IpRanges")
    ipv6_ranges: list[Ipv6RangePayload] = Field(default_factory=list, alias="Ipv6Ranges")
    prefix_list_ids: list[PrefixListIdPayload] = Field(default_factory=list, alias="PrefixListIds")
    user_id_group_pairs: list[UserIdGroupPairPayload] = Field(
        default_factory=list, alias="UserIdGroupPairs"
    )


class SecurityGroupPayload(Ec2BaseModel):
    group_id: str = Field(alias="GroupId")
    group_name: str | None = Field(default=None, alias="GroupName")
    ip_permissions: list[IpPermissionPayload] = Field(default_factory=list, alias="IpPermissions")


class DescribeSecurityGroupsResponse(Ec2BaseModel):
    security_groups: list[SecurityGroupPayload] = Field(
        default_factory=list, alias="SecurityGroups"
    )


class RevokeIngressResponse(Ec2BaseModel):
    returned: bool | None = Field(default=None, alias="Return")
    unknown_ip_permissions: list[IpPermissionPayload] = Field(
        default_factory=list, alias="UnknownIpPermissions"
    )
