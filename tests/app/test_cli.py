from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from sgmanager.app import SyncLoopSummary
from sgmanager.config import MissingConfigurationError
from sgmanager.domain.ports.discovery import NodeAddress
from sgmanager.domain.reconciliation import OwnedRuleReconciler
from sgmanager.ui import cli as cli_module
from tests.helpers.firewall import FakeFirewall, FakeNodeSource, grouped, tagged

if TYPE_CHECKING:
    from pathlib import Path

    from sgmanager.config import FirewallConfig

NODES = [NodeAddress(name="worker-1", address="192.0.2.1")]


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli_module, "configure_logging", lambda **_: None)


@pytest.fixture
def firewall() -> FakeFirewall:
    return FakeFirewall([grouped(tagged("192.0.2.50/32", "team-a", "old-node"))])


@pytest.fixture
def node_source() -> FakeNodeSource:
    return FakeNodeSource([NODES])


@pytest.fixture
def wired(
    monkeypatch: pytest.MonkeyPatch,
    firewall: FakeFirewall,
    firewall_config: FirewallConfig,
    node_source: FakeNodeSource,
) -> None:
    def fake_build_reconciler() -> OwnedRuleReconciler:
        return OwnedRuleReconciler(firewall=firewall, config=firewall_config)

    monkeypatch.setattr(cli_module, "build_reconciler", fake_build_reconciler)
    monkeypatch.setattr(cli_module, "build_node_source", lambda **_: node_source)


@pytest.mark.usefixtures("wired")
def test_sync_command_runs_one_cycle(firewall: FakeFirewall, node_source: FakeNodeSource) -> None:
    cli_module.main(["sync"])

    assert node_source.calls == 1
    assert {key[4] for key in firewall.sources} == {"192.0.2.1/32"}


@pytest.mark.usefixtures("wired")
def test_run_command_honours_interval_and_max_cycles(
    monkeypatch: pytest.MonkeyPatch,
    node_source: FakeNodeSource,
) -> None:
    captured: dict[str, object] = {}
    real_loop = cli_module.run_sync_loop

    def fake_loop(**kwargs: object) -> object:
        captured.update(kwargs)
        return real_loop(**kwargs, sleep=lambda _: None)  # type: ignore[arg-type]

    monkeypatch.setattr(cli_module, "run_sync_loop", fake_loop)

    cli_module.main(["run", "--interval", "5", "--max-cycles", "2"])

    assert captured["interval_seconds"] == 5.0
    assert captured["max_cycles"] == 2
    assert node_source.calls == 2


@pytest.mark.usefixtures("wired")
def test_run_command_reads_interval_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: dict[str, object] = {}

    def fake_loop(**kwargs: object) -> SyncLoopSummary:
        captured.update(kwargs)
        return SyncLoopSummary(cycles=1, failures=0)

    monkeypatch.setattr(cli_module, "run_sync_loop", fake_loop)
    monkeypatch.setenv("SGMANAGER_SYNC_INTERVAL_SECONDS", "30")

    cli_module.main(["run", "--max-cycles", "1"])

    assert captured["interval_seconds"] == 30.0


@pytest.mark.usefixtures("wired")
def test_run_command_fails_when_every_cycle_fails(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        cli_module,
        "build_node_source",
        lambda **_: FakeNodeSource([RuntimeError("api unavailable")]),
    )
    monkeypatch.setenv("SGMANAGER_SYNC_INTERVAL_SECONDS", "0")

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["run", "--max-cycles", "2"])

    assert excinfo.value.code == 1


@pytest.mark.usefixtures("wired")
def test_owned_command_prints_entries(capsys: pytest.CaptureFixture[str]) -> None:
    cli_module.main(["owned"])

    output = capsys.readouterr().out
    assert "node_name=old-node" in output
    assert "address=192.0.2.50/32" in output


@pytest.mark.usefixtures("wired")
def test_release_command_revokes_owned_entries(firewall: FakeFirewall) -> None:
    cli_module.main(["release"])

    assert firewall.rules == []


@pytest.mark.usefixtures("wired")
def test_sync_command_exits_with_one_on_provider_failure(firewall: FakeFirewall) -> None:
    firewall.failures["describe"] = RuntimeError("boom")

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["sync"])

    assert excinfo.value.code == 1


def test_missing_configuration_exits_with_two(monkeypatch: pytest.MonkeyPatch) -> None:
    def fail() -> None:
        raise MissingConfigurationError("Missing configuration for: AWS_SGMANAGER_OWNER_ID")

    monkeypatch.setattr(cli_module, "build_reconciler", fail)

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["sync"])

    assert excinfo.value.code == 2


@pytest.mark.usefixtures("wired")
def test_invalid_max_cycles_exits_with_two() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["run", "--max-cycles", "0"])

    assert excinfo.value.code == 2


def test_unknown_command_is_rejected_by_argparse() -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["migrate"])

    assert excinfo.value.code == 2


@pytest.mark.usefixtures("wired")
def test_kubeconfig_option_reaches_node_source(
    monkeypatch: pytest.MonkeyPatch,
    node_source: FakeNodeSource,
    tmp_path: Path,
) -> None:
    captured: dict[str, object] = {}

    def fake_build_node_source(**kwargs: object) -> FakeNodeSource:
        captured.update(kwargs)
        return node_source

    monkeypatch.setattr(cli_module, "build_node_source", fake_build_node_source)

    cli_module.main(["--kubeconfig", str(tmp_path / "config"), "sync"])

    assert captured["kubeconfig"] == tmp_path / "config"
