"""Security group and rule-entry configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from sgmanager.domain.ownership import ANNOTATION_DELIMITER, contains_delimiter

from .env import optional_env_var, parse_int, require_env_vars
from .errors import ConfigurationError

OWNER_ID_ENV = "AWS_SGMANAGER_OWNER_ID"
SECURITY_GROUP_ID_ENV = "AWS_SECURITY_GROUP_ID"
FROM_PORT_ENV = "FROM_PORT"
TO_PORT_ENV = "TO_PORT"
PROTOCOL_ENV = "PROTOCOL"
REGION_ENV = "AWS_DEFAULT_REGION"

MIN_PORT = 0
MAX_PORT = 65535


@dataclass(frozen=True, slots=True)
class EntryDefaults:
    """Port range and protocol applied to every synthesized node entry."""

    from_port: int
    to_port: int
    protocol: str

    def __post_init__(self) -> None:
        for name, port in (("from_port", self.from_port), ("to_port", self.to_port)):
            if not MIN_PORT <= port <= MAX_PORT:
                raise ConfigurationError(
                    f"{name} must be between {MIN_PORT} and {MAX_PORT}, got {port}"
                )
        if self.from_port > self.to_port:
            raise ConfigurationError(
                f"from_port ({self.from_port}) must not exceed to_port ({self.to_port})"
            )
        if not self.protocol.strip():
            raise ConfigurationError("protocol must not be blank")


@dataclass(frozen=True, slots=True)
class FirewallConfig:
    """Identity and target of the managed security group.

    ``owner_id`` is written verbatim into every entry description this instance
    creates, so it must not contain the annotation delimiter.
    """

    owner_id: str
    security_group_id: str
    defaults: EntryDefaults
    region: str | None = None

    def __post_init__(self) -> None:
        if not self.owner_id.strip():
            raise ConfigurationError("owner_id must not be blank")
        if contains_delimiter(self.owner_id):
            raise ConfigurationError(
                f"owner_id {self.owner_id!r} must not contain {ANNOTATION_DELIMITER!r}"
            )
        if not self.security_group_id.strip():
            raise ConfigurationError("security_group_id must not be blank")


def get_entry_defaults() -> EntryDefaults:
    values = require_env_vars((FROM_PORT_ENV, TO_PORT_ENV, PROTOCOL_ENV))
    return EntryDefaults(
        from_port=parse_int(FROM_PORT_ENV, values[FROM_PORT_ENV]),
        to_port=parse_int(TO_PORT_ENV, values[TO_PORT_ENV]),
        protocol=values[PROTOCOL_ENV],
    )


def get_firewall_config() -> FirewallConfig:
    values = require_env_vars((OWNER_ID_ENV, SECURITY_GROUP_ID_ENV))
    return FirewallConfig(
        owner_id=values[OWNER_ID_ENV],
        security_group_id=values[SECURITY_GROUP_ID_ENV],
        defaults=get_entry_defaults(),
        region=optional_env_var(REGION_ENV),
    )
