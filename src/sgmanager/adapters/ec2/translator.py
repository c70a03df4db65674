"""Translate between EC2 ``IpPermission`` payloads and grouped rules."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sgmanager.domain.rules import GroupedRule, RuleSource, SourceKind

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .schema import IpPermissionPayload

IpPermissionRequest = dict[str, object]


def translate_permission(payload: IpPermissionPayload) -> GroupedRule:
    """Build a grouped rule keeping every source kind and description verbatim."""

    sources: list[RuleSource] = []
    sources.extend(
        RuleSource(kind=SourceKind.CIDR_IPV4, value=item.cidr_ip, description=item.description)
        for item in payload.ip_ranges
    )
    sources.extend(
        RuleSource(kind=SourceKind.CIDR_IPV6, value=item.cidr_ipv6, description=item.description)
        for item in payload.ipv6_ranges
    )
    sources.extend(
        RuleSource(
            kind=SourceKind.PREFIX_LIST,
            value=item.prefix_list_id,
            description=item.description,
        )
        for item in payload.prefix_list_ids
    )
    sources.extend(
        RuleSource(
            kind=SourceKind.SECURITY_GROUP,
            value=item.group_id,
            description=item.description,
            owner_account=item.user_id,
        )
        for item in payload.user_id_group_pairs
    )
    return GroupedRule(
        protocol=payload.ip_protocol,
        from_port=payload.from_port,
        to_port=payload.to_port,
        sources=tuple(sources),
    )


def _with_description(item: dict[str, str], description: str | None) -> dict[str, str]:
    if description is not None:
        item["Description"] = description
    return item


def permission_request(rule: GroupedRule) -> IpPermissionRequest:
    """Return the boto3 ``IpPermissions`` item for ``rule``."""

    ip_ranges: list[dict[str, str]] = []
    ipv6_ranges: list[dict[str, str]] = []
    prefix_lists: list[dict[str, str]] = []
    group_pairs: list[dict[str, str]] = []

    for source in rule.sources:
        match source.kind:
            case SourceKind.CIDR_IPV4:
                ip_ranges.append(_with_description({"CidrIp": source.value}, source.description))
            case SourceKind.CIDR_IPV6:
                ipv6_ranges.append(
                    _with_description({"CidrIpv6": source.value}, source.description)
                )
            case SourceKind.PREFIX_LIST:
                prefix_lists.append(
                    _with_description({"PrefixListId": source.value}, source.description)
                )
            case SourceKind.SECURITY_GROUP:
                pair = {"GroupId": source.value}
                if source.owner_account is not None:
                    pair["UserId"] = source.owner_account
                group_pairs.append(_with_description(pair, source.description))

    request: IpPermissionRequest = {"IpProtocol": rule.protocol}
    if rule.from_port is not None:
        request["FromPort"] = rule.from_port
    if rule.to_port is not None:
        request["ToPort"] = rule.to_port
    if ip_ranges:
        request["IpRanges"] = ip_ranges
    if ipv6_ranges:
        request["Ipv6Ranges"] = ipv6_ranges
    if prefix_lists:
        request["PrefixListIds"] = prefix_lists
    if group_pairs:
        request["UserIdGroupPairs"] = group_pairs
    return request


def permissions_request(rules: Iterable[GroupedRule]) -> list[IpPermissionRequest]:
    return [permission_request(rule) for rule in rules]
