"""Kubernetes API connection values for node discovery.

Connection settings are resolved in this order: an explicit ``KUBE_API_URL``,
then a kubeconfig file, then the in-cluster service account.
"""

from __future__ import annotations

import base64
import binascii
import os
import ssl
import tempfile
from dataclasses import dataclass, field
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from .env import optional_env_var, parse_int, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig
from .kubeconfig import read_kubeconfig

if TYPE_CHECKING:
    import httpx

    from .kubeconfig import ClusterEntry, UserEntry

log = getLogger(__name__)

KUBE_API_URL_ENV = "KUBE_API_URL"
KUBE_TOKEN_ENV = "KUBE_TOKEN"
KUBE_CA_CERT_ENV = "KUBE_CA_CERT"
KUBE_CONTEXT_ENV = "KUBE_CONTEXT"
KUBECONFIG_ENV = "KUBECONFIG"
KUBE_NODE_ADDRESS_TYPE_ENV = "KUBE_NODE_ADDRESS_TYPE"
KUBE_PAGE_SIZE_ENV = "KUBE_PAGE_SIZE"
SERVICE_HOST_ENV = "KUBERNETES_SERVICE_HOST"
SERVICE_PORT_ENV = "KUBERNETES_SERVICE_PORT"

SERVICE_ACCOUNT_DIR = Path("/var/run/secrets/kubernetes.io/serviceaccount")
DEFAULT_NODE_ADDRESS_TYPE = "ExternalIP"
DEFAULT_PAGE_SIZE = 500
KUBERNETES_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True, slots=True)
class KubernetesTls:
    """CA and client certificate material for the API server connection."""

    ca_file: str | None = None
    ca_data: str | None = None
    cert_file: str | None = None
    key_file: str | None = None
    insecure: bool = False

    def verify(self) -> ssl.SSLContext | bool:
        if self.insecure:
            return False
        if self.ca_file is None and self.ca_data is None and self.cert_file is None:
            return True
        try:
            context = ssl.create_default_context(cafile=self.ca_file, cadata=self.ca_data)
            if self.cert_file is not None:
                context.load_cert_chain(self.cert_file, self.key_file)
        except OSError as exc:
            raise ConfigurationError(f"Invalid Kubernetes TLS material: {exc}") from exc
        return context


@dataclass(frozen=True, slots=True)
class KubernetesConfig:
    """Where and how to reach the Kubernetes API.

    With ``token_file`` set the token is read again on every call to
    :meth:`current_token`, so rotated service account tokens are picked up.
    """

    api_url: str
    token: str | None = None
    token_file: Path | None = None
    tls: KubernetesTls = field(default_factory=KubernetesTls)
    address_type: str = DEFAULT_NODE_ADDRESS_TYPE
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.page_size <= 0:
            raise ConfigurationError("Kubernetes page size must be positive")

    def current_token(self) -> str | None:
        if self.token_file is not None:
            return _read_token(self.token_file)
        return self.token

    def resilience_config(self, *, auth: httpx.Auth | None = None) -> ResilienceConfig:
        return ResilienceConfig(
            base_url=self.api_url,
            timeout_seconds=KUBERNETES_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            default_headers={"Accept": "application/json"},
            auth=auth,
            verify=self.tls.verify(),
        )


def _read_token(path: Path) -> str:
    try:
        token = path.read_text().strip()
    except OSError as exc:
        raise MissingConfigurationError(
            f"Missing configuration for: {KUBE_TOKEN_ENV} (no token file at {path})"
        ) from exc
    if not token:
        raise MissingConfigurationError(f"Token file {path} is empty")
    return token


def _in_cluster_api_url() -> str:
    values = require_env_vars((SERVICE_HOST_ENV, SERVICE_PORT_ENV))
    host = values[SERVICE_HOST_ENV]
    if ":" in host:
        host = f"[{host}]"
    return f"https://{host}:{values[SERVICE_PORT_ENV]}"


def _kubeconfig_path(explicit: Path | None) -> Path | None:
    if explicit is not None:
        candidate = explicit.expanduser()
    else:
        from_env = optional_env_var(KUBECONFIG_ENV)
        entries = [entry for entry in (from_env or "").split(os.pathsep) if entry]
        if entries:
            candidate = Path(entries[0]).expanduser()
        else:
            try:
                candidate = Path.home() / ".kube" / "config"
            except RuntimeError:
                return None
    if not candidate.is_file():
        log.debug("No kubeconfig at %s", candidate)
        return None
    return candidate


def _resolve_path(value: str, base_dir: Path) -> str:
    path = Path(value).expanduser()
    return str(path if path.is_absolute() else base_dir / path)


def _decode(value: str, what: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ConfigurationError(f"kubeconfig {what} is not valid base64") from exc


def _write_pem(value: str, what: str) -> str:
    fd, name = tempfile.mkstemp(prefix="sgmanager-", suffix=".pem")
    with os.fdopen(fd, "wb") as handle:
        handle.write(_decode(value, what))
    return name


def _kubeconfig_tls(cluster: ClusterEntry, user: UserEntry, base_dir: Path) -> KubernetesTls:
    ca_file = (
        _resolve_path(cluster.certificate_authority, base_dir)
        if cluster.certificate_authority
        else None
    )
    ca_data = (
        _decode(cluster.certificate_authority_data, "certificate-authority-data").decode("ascii")
        if cluster.certificate_authority_data
        else None
    )

    cert_file: str | None = None
    key_file: str | None = None
    if user.client_certificate_data:
        cert_file = _write_pem(user.client_certificate_data, "client-certificate-data")
    elif user.client_certificate:
        cert_file = _resolve_path(user.client_certificate, base_dir)
    if user.client_key_data:
        key_file = _write_pem(user.client_key_data, "client-key-data")
    elif user.client_key:
        key_file = _resolve_path(user.client_key, base_dir)
    if (cert_file is None) != (key_file is None):
        raise ConfigurationError("kubeconfig user needs both a client certificate and a key")

    return KubernetesTls(
        ca_file=ca_file,
        ca_data=ca_data,
        cert_file=cert_file,
        key_file=key_file,
        insecure=cluster.insecure_skip_tls_verify,
    )


def _from_kubeconfig(path: Path, *, address_type: str, page_size: int) -> KubernetesConfig:
    kubeconfig = read_kubeconfig(path)
    context_name, cluster, user = kubeconfig.resolve(optional_env_var(KUBE_CONTEXT_ENV))
    if user.exec_plugin is not None or user.auth_provider is not None:
        raise ConfigurationError(
            f"kubeconfig context {context_name!r} uses an exec or auth-provider plugin, "
            "which is not supported"
        )

    base_dir = path.parent
    log.info("Using kubeconfig %s (context %s)", path, context_name)
    return KubernetesConfig(
        api_url=cluster.server.rstrip("/"),
        token=user.token,
        token_file=Path(_resolve_path(user.token_file, base_dir)) if user.token_file else None,
        tls=_kubeconfig_tls(cluster, user, base_dir),
        address_type=address_type,
        page_size=page_size,
    )


def _from_service_account(
    service_account_dir: Path,
    *,
    address_type: str,
    page_size: int,
) -> KubernetesConfig:
    api_url = _in_cluster_api_url()
    token_file = service_account_dir / "token"
    _read_token(token_file)
    ca_path = service_account_dir / "ca.crt"
    log.info("Using in-cluster service account for %s", api_url)
    return KubernetesConfig(
        api_url=api_url,
        token_file=token_file,
        tls=KubernetesTls(ca_file=str(ca_path) if ca_path.exists() else None),
        address_type=address_type,
        page_size=page_size,
    )


def get_kubernetes_config(
    *,
    kubeconfig: Path | None = None,
    service_account_dir: Path = SERVICE_ACCOUNT_DIR,
) -> KubernetesConfig:
    """Resolve API settings from ``KUBE_*`` variables, a kubeconfig file or the service account.

    ``kubeconfig`` defaults to ``$KUBECONFIG`` and then ``~/.kube/config``; a
    missing file falls through to the in-cluster settings.
    """

    raw_page_size = optional_env_var(KUBE_PAGE_SIZE_ENV)
    page_size = (
        parse_int(KUBE_PAGE_SIZE_ENV, raw_page_size)
        if raw_page_size is not None
        else DEFAULT_PAGE_SIZE
    )
    address_type = optional_env_var(KUBE_NODE_ADDRESS_TYPE_ENV) or DEFAULT_NODE_ADDRESS_TYPE

    api_url = optional_env_var(KUBE_API_URL_ENV)
    if api_url is not None:
        return KubernetesConfig(
            api_url=api_url.rstrip("/"),
            token=optional_env_var(KUBE_TOKEN_ENV),
            tls=KubernetesTls(ca_file=optional_env_var(KUBE_CA_CERT_ENV)),
            address_type=address_type,
            page_size=page_size,
        )

    path = _kubeconfig_path(kubeconfig)
    if path is not None:
        return _from_kubeconfig(path, address_type=address_type, page_size=page_size)

    return _from_service_account(
        service_account_dir,
        address_type=address_type,
        page_size=page_size,
    )
