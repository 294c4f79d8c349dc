from __future__ import annotations

from dataclasses import replace

import click
import pytest
from typer.testing import CliRunner

from devpods.cli import main as cli_main
from devpods.system import RunContext
from tests.fakes import FakeRuntime


runner = CliRunner()


@pytest.fixture
def wired(monkeypatch: pytest.MonkeyPatch, run_context: RunContext) -> list[RunContext]:
    """Replace host preparation with the in-memory context and record each build."""
    built: list[RunContext] = []

    def fake_build() -> RunContext:
        built.append(run_context)
        return run_context

    monkeypatch.setattr(cli_main, "_build_context", fake_build)
    return built


def test_help_lists_aliases() -> None:
    result = runner.invoke(cli_main.app, ["help"])

    assert result.exit_code == 0
    assert "Pod aliases" in result.output
    assert "dev-nats-pod" in result.output


def test_status_exits_zero(wired: list[RunContext]) -> None:
    result = runner.invoke(cli_main.app, ["status"])

    assert result.exit_code == 0
    assert len(wired) == 1


def test_unknown_alias_exits_before_touching_runtime(
    wired: list[RunContext], runtime: FakeRuntime
) -> None:
    result = runner.invoke(cli_main.app, ["up", "notapod"])

    assert result.exit_code == 1
    assert wired == []
    assert runtime.calls == []


def test_unknown_command_is_usage_error() -> None:
    result = runner.invoke(cli_main.app, ["launch"])
    assert result.exit_code != 0


def test_up_single_pod(wired: list[RunContext], runtime: FakeRuntime) -> None:
    result = runner.invoke(cli_main.app, ["up", "redis"])

    assert result.exit_code == 0
    assert set(runtime.pods) == {"dev-redis-pod"}


def test_bare_invocation_brings_everything_up(wired: list[RunContext], runtime: FakeRuntime) -> None:
    result = runner.invoke(cli_main.app, [])

    assert result.exit_code == 0
    assert len(runtime.pods) == 7


def test_image_failure_exits_one(wired: list[RunContext], runtime: FakeRuntime) -> None:
    runtime.pull_errors["mirror.gcr.io/library/redis:7-alpine"] = "toomanyrequests"
    runtime.pull_errors["docker.io/library/redis:7-alpine"] = "toomanyrequests"

    result = runner.invoke(cli_main.app, ["up", "redis"])

    assert result.exit_code == 1
    assert runtime.pods == {}


def test_down_and_reset(wired: list[RunContext], runtime: FakeRuntime) -> None:
    assert runner.invoke(cli_main.app, ["up", "seq"]).exit_code == 0
    assert runner.invoke(cli_main.app, ["down", "seq"]).exit_code == 0
    assert runtime.pods == {}

    assert runner.invoke(cli_main.app, ["up", "seq"]).exit_code == 0
    assert runner.invoke(cli_main.app, ["reset", "seq", "--grace", "0"]).exit_code == 0
    assert not wired[0].settings.pod_dir("dev-seq-pod").exists()


def test_main_returns_exit_codes(wired: list[RunContext]) -> None:
    assert cli_main.main(["help"]) == 0
    assert cli_main.main(["down", "nope"]) == 1


def test_rate_limit_help_uses_configured_mirror(
    wired: list[RunContext],
    runtime: FakeRuntime,
    run_context: RunContext,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    custom = replace(run_context.settings, mirror_registry="registry.local:5000")
    monkeypatch.setattr(cli_main, "get_settings", lambda: custom)
    runtime.pull_errors["mirror.gcr.io/library/redis:7-alpine"] = "toomanyrequests"
    runtime.pull_errors["docker.io/library/redis:7-alpine"] = "toomanyrequests"

    result = runner.invoke(cli_main.app, ["up", "redis"])

    assert result.exit_code == 1
    assert 'location = "registry.local:5000"' in result.output


def test_main_maps_abort_to_interrupt_code(monkeypatch: pytest.MonkeyPatch) -> None:
    def interrupted(*args: object, **kwargs: object) -> None:
        raise click.exceptions.Abort()

    monkeypatch.setattr(cli_main, "app", interrupted)

    assert cli_main.main(["status"]) == 130
