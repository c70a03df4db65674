"""Pydantic models and loader for kubeconfig files."""

from __future__ import annotations

from typing import TYPE_CHECKING

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigurationError

if TYPE_CHECKING:
    from pathlib import Path


def _none_to_list(value: object) -> object:
    return [] if value is None else value


class KubeconfigModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ClusterEntry(KubeconfigModel):
    server: str
    certificate_authority: str | None = Field(default=None, alias="certificate-authority")
    certificate_authority_data: str | None = Field(
        default=None, alias="certificate-authority-data"
    )
    insecure_skip_tls_verify: bool = Field(default=False, alias="insecure-skip-tls-verify")


class NamedCluster(KubeconfigModel):
    name: str
    cluster: ClusterEntry


class UserEntry(KubeconfigModel):
    token: str | None = None
    token_file: str | None = Field(default=None, alias="tokenFile")
    client_certificate: str | None = Field(default=None, alias="client-certificate")
    client_certificate_data: str | None = Field(default=None, alias="client-certificate-data")
    client_key: str | None = Field(default=None, alias="client-key")
    client_key_data: str | None = Field(default=None, alias="client-key-data")
    exec_plugin: dict[str, object] | None = Field(default=None, alias="exec")
    auth_provider: dict[str, object] | None = Field(default=None, alias="auth-provider")


class NamedUser(KubeconfigModel):
    name: str
    user: UserEntry = Field(default_factory=UserEntry)


class ContextEntry(KubeconfigModel):
    cluster: str
    user: str | None = None


class NamedContext(KubeconfigModel):
    name: str
    context: ContextEntry


class Kubeconfig(KubeconfigModel):
    clusters: list[NamedCluster] = Field(default_factory=list)
    users: list[NamedUser] = Field(default_factory=list)
    contexts: list[NamedContext] = Field(default_factory=list)
    current_context: str | None = Field(default=None, alias="current-context")

    _normalize_clusters = field_validator("clusters", mode="before")(_none_to_list)
    _normalize_users = field_validator("users", mode="before")(_none_to_list)
    _normalize_contexts = field_validator("contexts", mode="before")(_none_to_list)

    def resolve(self, context_name: str | None = None) -> tuple[str, ClusterEntry, UserEntry]:
        """Return the context name, cluster and user selected by ``context_name``.

        Defaults to ``current-context``. A context without a user resolves to an
        empty (anonymous) user entry.
        """

        name = context_name or self.current_context
        if not name:
            raise ConfigurationError("kubeconfig has no current-context")

        context = next((item.context for item in self.contexts if item.name == name), None)
        if context is None:
            raise ConfigurationError(f"kubeconfig context {name!r} not found")

        cluster = next(
            (item.cluster for item in self.clusters if item.name == context.cluster), None
        )
        if cluster is None:
            raise ConfigurationError(
                f"kubeconfig cluster {context.cluster!r} (context {name!r}) not found"
            )

        if context.user is None:
            return name, cluster, UserEntry()
        user = next((item.user for item in self.users if item.name == context.user), None)
        if user is None:
            raise ConfigurationError(
                f"kubeconfig user {context.user!r} (context {name!r}) not found"
            )
        return name, cluster, user


def read_kubeconfig(path: Path) -> Kubeconfig:
    try:
        raw = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Unable to read kubeconfig {path}: {exc}") from exc
    try:
        return Kubeconfig.model_validate(raw or {})
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid kubeconfig {path}: {exc}") from exc
