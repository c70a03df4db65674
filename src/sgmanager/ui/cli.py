from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from sgmanager.app import (
    build_node_source,
    build_reconciler,
    list_owned_entries,
    release_owned_entries,
    run_sync_loop,
    sync_security_group,
)
from sgmanager.config import ConfigurationError, configure_logging, get_sync_config

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from sgmanager.domain.ports import NodeAddressSource

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Keep a security group's inbound rules in sync with cluster node addresses"
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--kubeconfig",
        type=Path,
        default=None,
        help="Kubeconfig file (defaults to $KUBECONFIG, then ~/.kube/config, then in-cluster)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run = subparsers.add_parser("run", help="Reconcile on a fixed interval")
    run.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between cycles (defaults to config)",
    )
    run.add_argument(
        "--max-cycles",
        type=int,
        help="Stop after this many cycles instead of running forever",
    )

    subparsers.add_parser("sync", help="Run a single reconciliation cycle")
    subparsers.add_parser("owned", help="List the entries owned by this instance")
    subparsers.add_parser("release", help="Revoke every entry owned by this instance")

    return parser.parse_args(list(argv))


def _resolve_interval(args: argparse.Namespace) -> float:
    if args.interval is None:
        return get_sync_config().interval_seconds
    if args.interval < 0:
        raise ValueError("Interval must be non-negative")
    return args.interval


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    node_source: NodeAddressSource | None = None
    interval = 0.0
    try:
        reconciler = build_reconciler()
        if parsed_args.command in {"run", "sync"}:
            node_source = build_node_source(kubeconfig=parsed_args.kubeconfig)
        if parsed_args.command == "run":
            interval = _resolve_interval(parsed_args)
            if parsed_args.max_cycles is not None and parsed_args.max_cycles <= 0:
                raise ValueError("--max-cycles must be positive")  # noqa: TRY301
    except (ConfigurationError, ValueError):
        log.exception("Configuration error")
        sys.exit(2)

    try:
        if parsed_args.command == "run":
            summary = run_sync_loop(
                reconciler=reconciler,
                node_source=node_source,
                interval_seconds=interval,
                max_cycles=parsed_args.max_cycles,
            )
            log.info("Stopped after %s cycles (%s failed)", summary.cycles, summary.failures)
            if summary.failures == summary.cycles:
                sys.exit(1)
        elif parsed_args.command == "sync":
            result = sync_security_group(reconciler=reconciler, node_source=node_source)
            log.info(
                "Sync finished: fetched=%s, owned=%s, foreign=%s, authorized=%s",
                result.fetched,
                result.owned,
                result.foreign,
                result.authorized,
            )
        elif parsed_args.command == "owned":
            for entry in list_owned_entries(reconciler=reconciler):
                print(entry)  # noqa: T201
        elif parsed_args.command == "release":
            released = release_owned_entries(reconciler=reconciler)
            log.info("Released %s entries", released)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def entrypoint() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    entrypoint()
