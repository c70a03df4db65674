"""Rule-ownership reconciliation for a shared security group.

Layered flow:
1) fetch the grouped rules of the security group
2) expand them into one rule per source
3) partition into owned and foreign by description tag
4) revoke the fetched rules
5) authorize the foreign rules plus the freshly tagged desired entries
"""

from __future__ import annotations

from .engine import OwnedRuleReconciler, ReconciliationResult
from .normalize import expand_rules
from .partition import OwnershipPartition, partition_rules

__all__ = [
    "OwnedRuleReconciler",
    "OwnershipPartition",
    "ReconciliationResult",
    "expand_rules",
    "partition_rules",
]
