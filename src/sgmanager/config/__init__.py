"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .firewall import EntryDefaults, FirewallConfig, get_entry_defaults, get_firewall_config
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .kubernetes import KubernetesConfig, KubernetesTls, get_kubernetes_config
from .logging import configure_logging
from .sync import SyncConfig, get_sync_config

__all__ = [
    "ConfigurationError",
    "EntryDefaults",
    "FirewallConfig",
    "KubernetesConfig",
    "KubernetesTls",
    "MissingConfigurationError",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SyncConfig",
    "configure_logging",
    "get_entry_defaults",
    "get_firewall_config",
    "get_kubernetes_config",
    "get_sync_config",
    "optional_env_var",
    "require_env_var",
    "require_env_vars",
]
