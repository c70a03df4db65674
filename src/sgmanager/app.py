"""Application orchestration entry points."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from sgmanager.adapters.ec2 import Ec2SecurityGroupClient
from sgmanager.adapters.kubernetes import KubernetesNodeSource
from sgmanager.config import get_firewall_config, get_kubernetes_config
from sgmanager.domain.desired import build_desired_entries
from sgmanager.domain.reconciliation import OwnedRuleReconciler, ReconciliationResult

if TYPE_CHECKING:
    from pathlib import Path

    from sgmanager.config import FirewallConfig
    from sgmanager.domain.ports import FirewallClient, NodeAddressSource
    from sgmanager.domain.rules import RuleEntry

Sleeper = Callable[[float], None]

log = getLogger(__name__)


@dataclass(slots=True)
class SyncLoopSummary:
    """Counts reported when a bounded sync loop stops."""

    cycles: int
    failures: int


def build_reconciler(
    *,
    config: FirewallConfig | None = None,
    firewall: FirewallClient | None = None,
) -> OwnedRuleReconciler:
    """Create a reconciler for the configured security group.

    Raises ``ConfigurationError`` when required settings are missing.
    """

    effective_config = config or get_firewall_config()
    effective_firewall = firewall or Ec2SecurityGroupClient(config=effective_config)
    return OwnedRuleReconciler(firewall=effective_firewall, config=effective_config)


def build_node_source(*, kubeconfig: Path | None = None) -> KubernetesNodeSource:
    """Create the node discovery adapter; connection settings are resolved once here."""

    return KubernetesNodeSource(config=get_kubernetes_config(kubeconfig=kubeconfig))


def sync_security_group(
    *,
    reconciler: OwnedRuleReconciler,
    node_source: NodeAddressSource | None = None,
) -> ReconciliationResult:
    """Run a single discovery and reconciliation cycle."""

    source = node_source or build_node_source()
    log.info("Getting list of node names and addresses")
    addresses = source()

    desired = build_desired_entries(
        addresses,
        owner_id=reconciler.owner_id,
        defaults=reconciler.config.defaults,
    )
    log.info(
        "Replacing rules owned by %s in %s with %s node entries",
        reconciler.owner_id,
        reconciler.config.security_group_id,
        len(desired),
    )
    return reconciler.reconcile(desired)


def run_sync_loop(
    *,
    reconciler: OwnedRuleReconciler,
    node_source: NodeAddressSource | None = None,
    interval_seconds: float,
    max_cycles: int | None = None,
    sleep: Sleeper = time.sleep,
) -> SyncLoopSummary:
    """Reconcile every ``interval_seconds`` until ``max_cycles`` is reached (or forever).

    A failed cycle is logged and the loop waits for the next interval; there is
    no backoff beyond the fixed interval.
    """

    source = node_source or build_node_source()
    cycles = 0
    failures = 0
    while max_cycles is None or cycles < max_cycles:
        cycles += 1
        try:
            result = sync_security_group(reconciler=reconciler, node_source=source)
        except Exception:
            failures += 1
            log.exception("Sync cycle %s failed, retrying in %ss", cycles, interval_seconds)
        else:
            log.info(
                "Sync cycle %s done: preserved=%s, replaced=%s, authorized=%s",
                cycles,
                result.foreign,
                result.owned,
                result.authorized,
            )

        if max_cycles is not None and cycles >= max_cycles:
            break
        log.debug("Going to sleep for %ss", interval_seconds)
        sleep(interval_seconds)

    return SyncLoopSummary(cycles=cycles, failures=failures)


def list_owned_entries(*, reconciler: OwnedRuleReconciler | None = None) -> list[RuleEntry]:
    """Return the rule entries currently owned by this instance."""

    return (reconciler or build_reconciler()).owned_entries()


def release_owned_entries(*, reconciler: OwnedRuleReconciler | None = None) -> int:
    """Revoke every rule owned by this instance, leaving foreign rules in place."""

    return (reconciler or build_reconciler()).release()
