"""boto3-based client for the inbound rules of one EC2 security group."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any, Protocol

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import ValidationError

from sgmanager.domain.ports.firewall import FirewallClient

from .schema import DescribeSecurityGroupsResponse, RevokeIngressResponse
from .translator import permissions_request, translate_permission

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from sgmanager.config.firewall import FirewallConfig
    from sgmanager.domain.rules import GroupedRule

log = getLogger(__name__)

Ec2Payload = dict[str, Any]


class FirewallProviderError(RuntimeError):
    """Raised when an EC2 call fails or returns something unusable."""

    def __init__(self, message: str, *, operation: str, code: str | None = None) -> None:
        super().__init__(message)
        self.operation = operation
        self.code = code


class Ec2Api(Protocol):
    """The subset of the boto3 EC2 client used here."""

    def describe_security_groups(self, **kwargs: Any) -> Ec2Payload: ...

    def revoke_security_group_ingress(self, **kwargs: Any) -> Ec2Payload: ...

    def authorize_security_group_ingress(self, **kwargs: Any) -> Ec2Payload: ...


class Ec2SecurityGroupClient:
    """Small wrapper around the boto3 EC2 client bound to one security group."""

    def __init__(self, *, config: FirewallConfig, client: Ec2Api | None = None) -> None:
        if client is None:
            client = boto3.client("ec2", region_name=config.region)  # pyright: ignore[reportUnknownMemberType]
        self._client = client
        self._group_id = config.security_group_id

    @property
    def group_id(self) -> str:
        return self._group_id

    def describe_inbound_rules(self) -> list[GroupedRule]:
        operation = "DescribeSecurityGroups"
        payload = self._call(
            operation,
            self._client.describe_security_groups,
            GroupIds=[self._group_id],
        )
        try:
            response = DescribeSecurityGroupsResponse.model_validate(payload)
        except ValidationError as exc:
            raise FirewallProviderError(
                f"Unexpected {operation} payload for {self._group_id}: {exc}",
                operation=operation,
            ) from exc

        group = next(
            (item for item in response.security_groups if item.group_id == self._group_id),
            None,
        )
        if group is None:
            raise FirewallProviderError(
                f"Security group {self._group_id} not found",
                operation=operation,
                code="InvalidGroup.NotFound",
            )
        return [translate_permission(permission) for permission in group.ip_permissions]

    def revoke_inbound_rules(self, rules: Sequence[GroupedRule]) -> None:
        operation = "RevokeSecurityGroupIngress"
        payload = self._call(
            operation,
            self._client.revoke_security_group_ingress,
            GroupId=self._group_id,
            IpPermissions=permissions_request(rules),
        )
        try:
            response = RevokeIngressResponse.model_validate(payload)
        except ValidationError as exc:
            raise FirewallProviderError(
                f"Unexpected {operation} payload for {self._group_id}: {exc}",
                operation=operation,
            ) from exc
        if response.unknown_ip_permissions:
            log.warning(
                "%s of the revoked permissions were not present in %s",
                len(response.unknown_ip_permissions),
                self._group_id,
            )

    def authorize_inbound_rules(self, rules: Sequence[GroupedRule]) -> None:
        self._call(
            "AuthorizeSecurityGroupIngress",
            self._client.authorize_security_group_ingress,
            GroupId=self._group_id,
            IpPermissions=permissions_request(rules),
        )

    def _call(
        self,
        operation: str,
        method: Callable[..., Ec2Payload],
        **kwargs: object,
    ) -> Ec2Payload:
        try:
            return method(**kwargs)
        except ClientError as exc:
            error = exc.response.get("Error", {})
            code = error.get("Code")
            message = error.get("Message") or str(exc)
            log.error(f"EC2 {operation} failed for {self._group_id}: {code}: {message}")
            raise FirewallProviderError(
                f"{operation} failed for {self._group_id}: {message}",
                operation=operation,
                code=code,
            ) from exc
        except BotoCoreError as exc:
            log.error(f"EC2 {operation} failed for {self._group_id}: {exc}")
            raise FirewallProviderError(
                f"{operation} failed for {self._group_id}: {exc}",
                operation=operation,
            ) from exc


if TYPE_CHECKING:

    def _port_check(client: Ec2SecurityGroupClient) -> FirewallClient:
        return client
