"""Port for the remote firewall holding the managed inbound rules."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sgmanager.domain.rules import GroupedRule


@runtime_checkable
class FirewallClient(Protocol):
    """Inbound rule operations against one firewall object.

    Implementations are bound to a single security group at construction and
    raise on any remote failure. Neither mutating call is transactional with the
    other.
    """

    def describe_inbound_rules(self) -> list[GroupedRule]:
        ...

    def revoke_inbound_rules(self, rules: Sequence[GroupedRule]) -> None:
        ...

    def authorize_inbound_rules(self, rules: Sequence[GroupedRule]) -> None:
        ...


__all__ = ["FirewallClient"]
