"""Shared fixtures: an in-memory runtime and a ready-made run context."""

from __future__ import annotations

from pathlib import Path

import pytest

from devpods.config import Credentials, DevpodsSettings
from devpods.system import RegistryAuth, RunContext
from tests.fakes import FakeRuntime


@pytest.fixture
def runtime() -> FakeRuntime:
    return FakeRuntime()


@pytest.fixture
def settings(tmp_path: Path) -> DevpodsSettings:
    return DevpodsSettings(
        data_root=tmp_path / "devpods",
        podman_binary="podman",
        mirror_registry="mirror.gcr.io",
    )


@pytest.fixture
def run_context(settings: DevpodsSettings, runtime: FakeRuntime) -> RunContext:
    return RunContext(
        settings=settings,
        credentials=Credentials(),
        auth=RegistryAuth(authenticated=False),
        runtime=runtime,
    )


@pytest.fixture
def sleeps() -> list[float]:
    """Pass ``sleeps.append`` as ``sleep=`` to record delays instead of waiting."""
    return []
