"""Pydantic models describing the Kubernetes node list payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class KubernetesBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ObjectMeta(KubernetesBaseModel):
    name: str


class NodeAddressPayload(KubernetesBaseModel):
    type: str
    address: str


class NodeStatus(KubernetesBaseModel):
    addresses: list[NodeAddressPayload] = Field(default_factory=list)


class NodePayload(KubernetesBaseModel):
    metadata: ObjectMeta
    status: NodeStatus = Field(default_factory=NodeStatus)


class ListMeta(KubernetesBaseModel):
    continue_token: str | None = Field(default=None, alias="continue")
    resource_version: str | None = Field(default=None, alias="resourceVersion")

    _normalize_continue = field_validator("continue_token", mode="before")(_blank_to_none)


class NodeList(KubernetesBaseModel):
    kind: str = "NodeList"
    items: list[NodePayload] = Field(default_factory=list)
    metadata: ListMeta = Field(default_factory=ListMeta)


class StatusResponse(KubernetesBaseModel):
    """The ``Status`` object the API server returns for failed requests."""

    message: str = ""
    reason: str | None = None
    code: int | None = None
