"""Replace the rules owned by one instance without touching anyone else's.

A cycle is two independent remote calls: revoke everything that was fetched,
then authorize foreign rules plus the desired set. The provider has no
multi-rule transaction, so a failure between the two leaves the security group
with fewer rules than either the old or the new state. Nothing is rolled back
here; the caller is expected to run the next cycle.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from sgmanager.domain.rules import RuleEntry

from .normalize import expand_rules
from .partition import OwnershipPartition, partition_rules

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from sgmanager.config.firewall import FirewallConfig
    from sgmanager.domain.ports.firewall import FirewallClient
    from sgmanager.domain.rules import AtomicRule, GroupedRule

log = getLogger(__name__)


@dataclass(slots=True)
class ReconciliationResult:
    """Outcome of one successful reconciliation cycle.

    ``revoked`` counts grouped rules submitted for revocation; the other fields
    count atomic (single-source) rules.
    """

    fetched: int
    owned: int
    foreign: int
    revoked: int
    authorized: int


@dataclass(slots=True)
class OwnedRuleReconciler:
    firewall: FirewallClient
    config: FirewallConfig

    @property
    def owner_id(self) -> str:
        return self.config.owner_id

    def reconcile(self, desired: Sequence[RuleEntry]) -> ReconciliationResult:
        """Make the owned rules equal ``desired`` while keeping every foreign rule.

        Owned rules are replaced wholesale: an unchanged entry is still revoked
        and authorized again. Provider errors propagate unchanged. An empty
        security group combined with an empty ``desired`` still reaches the
        authorize call, which the provider rejects.
        """

        current = self.firewall.describe_inbound_rules()
        partition = self._partition(current)
        log.info(
            "Security group %s: %s rules, %s owned by %s, %s foreign",
            self.config.security_group_id,
            len(partition),
            len(partition.owned),
            self.owner_id,
            len(partition.foreign),
        )

        if current:
            log.debug("Revoking %s grouped rules", len(current))
            self.firewall.revoke_inbound_rules(current)
        else:
            log.debug("Security group has no inbound rules, skipping revoke")

        replacement = self._replacement_rules(partition.foreign, desired)
        try:
            self.firewall.authorize_inbound_rules(replacement)
        except Exception:
            if current:
                log.error(  # noqa: TRY400
                    "Authorize failed after revoking %s rules; security group %s is missing "
                    "%s foreign and %s desired rules until the next cycle",
                    len(current),
                    self.config.security_group_id,
                    len(partition.foreign),
                    len(desired),
                )
            raise

        result = ReconciliationResult(
            fetched=len(partition),
            owned=len(partition.owned),
            foreign=len(partition.foreign),
            revoked=len(current),
            authorized=len(replacement),
        )
        log.info(
            "Replaced %s owned rules with %s desired rules",
            result.owned,
            len(desired),
        )
        return result

    def owned_entries(self) -> list[RuleEntry]:
        """Return the entries currently tagged with this instance's owner id."""

        partition = self._partition(self.firewall.describe_inbound_rules())
        return _entries_from_rules(partition.owned)

    def release(self, entries: Iterable[RuleEntry] | None = None) -> int:
        """Revoke owned rules, all of them by default, and return how many were revoked.

        The provider matches revocations on address, protocol and ports only, so
        requested entries are first checked against the currently owned rules.
        Entries tagged with another owner id, or with no matching owned rule, are
        left alone.
        """

        partition = self._partition(self.firewall.describe_inbound_rules())
        if entries is None:
            targets = list(partition.owned)
        else:
            wanted = set(entries)
            foreign_requests = [entry for entry in wanted if entry.owner_id != self.owner_id]
            if foreign_requests:
                log.warning(
                    "Ignoring %s release requests for entries not owned by %s",
                    len(foreign_requests),
                    self.owner_id,
                )
            targets = [
                rule
                for rule in partition.owned
                if RuleEntry.from_atomic_rule(rule) in wanted
            ]

        if not targets:
            log.info("No owned rules to release for %s", self.owner_id)
            return 0

        self.firewall.revoke_inbound_rules([rule.as_grouped() for rule in targets])
        log.info("Released %s rules owned by %s", len(targets), self.owner_id)
        return len(targets)

    def _partition(self, rules: Sequence[GroupedRule]) -> OwnershipPartition:
        return partition_rules(expand_rules(rules), self.owner_id)

    def _replacement_rules(
        self,
        foreign: Sequence[AtomicRule],
        desired: Sequence[RuleEntry],
    ) -> list[GroupedRule]:
        rules = [rule.as_grouped() for rule in foreign]
        for entry in desired:
            if entry.owner_id != self.owner_id:
                log.debug("Re-tagging %s with owner %s", entry, self.owner_id)
            rules.append(entry.with_owner(self.owner_id).to_atomic_rule().as_grouped())
        return rules


def _entries_from_rules(rules: Iterable[AtomicRule]) -> list[RuleEntry]:
    entries: list[RuleEntry] = []
    for rule in rules:
        entry = RuleEntry.from_atomic_rule(rule)
        if entry is None:
            log.warning("Skipping owned rule without a CIDR source: %s", rule)
            continue
        entries.append(entry)
    return entries
