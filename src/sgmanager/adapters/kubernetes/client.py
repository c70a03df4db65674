"""HTTP client listing cluster nodes from the Kubernetes API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from sgmanager.adapters.http_resilience import ResilientClient
from sgmanager.config.errors import ConfigurationError
from sgmanager.config.kubernetes import KubernetesConfig, get_kubernetes_config
from sgmanager.domain.ports.discovery import NodeAddressSource

from .schema import NodeList, StatusResponse
from .translator import translate_node_addresses

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

    from sgmanager.config.http_resilience import ResilienceConfig
    from sgmanager.domain.ports.discovery import NodeAddress

log = getLogger(__name__)

NODES_PATH = "/api/v1/nodes"


class NodeDiscoveryError(RuntimeError):
    """Raised when the Kubernetes API rejects or garbles a node list request."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BearerTokenAuth(httpx.Auth):
    """Sets ``Authorization: Bearer`` from a token looked up for every request."""

    def __init__(self, token_provider: Callable[[], str | None]) -> None:
        self._token_provider = token_provider

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        try:
            token = self._token_provider()
        except ConfigurationError as exc:
            raise NodeDiscoveryError(f"Kubernetes credentials unavailable: {exc}") from exc
        if token is not None:
            request.headers["Authorization"] = f"Bearer {token}"
        yield request


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class KubernetesNodeSource:
    config: KubernetesConfig = field(default_factory=get_kubernetes_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def __call__(self) -> list[NodeAddress]:
        return asyncio.run(self._list_node_addresses_async())

    async def _list_node_addresses_async(self) -> list[NodeAddress]:
        addresses: list[NodeAddress] = []
        continue_token: str | None = None
        pages = 0

        resilience = self.config.resilience_config(auth=BearerTokenAuth(self.config.current_token))
        async with self.client_factory(resilience) as client:
            while True:
                node_list = await self._request_nodes(client=client, continue_token=continue_token)
                pages += 1
                addresses.extend(
                    translate_node_addresses(node_list.items, address_type=self.config.address_type)
                )
                continue_token = node_list.metadata.continue_token
                if continue_token is None:
                    break

        log.debug("Discovered %s node addresses over %s pages", len(addresses), pages)
        return addresses

    async def _request_nodes(
        self,
        *,
        client: ResilientClient,
        continue_token: str | None,
    ) -> NodeList:
        params: dict[str, str | int] = {"limit": self.config.page_size}
        if continue_token is not None:
            params["continue"] = continue_token

        response = await client.get(NODES_PATH, params=params)
        if response.is_error:
            raise _status_error(response)

        try:
            payload = response.json()
        except ValueError as exc:
            raise NodeDiscoveryError("Kubernetes API returned a non-JSON body") from exc
        if not isinstance(payload, dict) or payload.get("kind") != "NodeList":
            raise NodeDiscoveryError("Unexpected Kubernetes node list payload")
        try:
            return NodeList.model_validate(payload)
        except ValidationError as exc:
            raise NodeDiscoveryError(f"Invalid Kubernetes node list payload: {exc}") from exc


def _status_error(response: httpx.Response) -> NodeDiscoveryError:
    message = response.reason_phrase
    try:
        status = StatusResponse.model_validate(response.json())
    except (ValueError, ValidationError):
        status = None
    if status is not None and status.message:
        message = status.message
    log.error(f"Kubernetes API error {response.status_code}: {message}")
    return NodeDiscoveryError(
        f"Kubernetes API error {response.status_code}: {message}",
        status_code=response.status_code,
    )


if TYPE_CHECKING:

    def _port_check(source: KubernetesNodeSource) -> NodeAddressSource:
        return source
