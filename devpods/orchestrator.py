"""Pod orchestration: the ``up`` / ``down`` / ``reset`` / ``status`` verbs.

Every verb takes the ``RunContext`` built by ``devpods.system.prepare_run``
and talks to the runtime only through ``ctx.runtime``. ``up`` is ordered so
that everything that can fail hard (image preflight) happens before the pod
or any of its containers is created.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
import time

from devpods.bootstrap import ensure_replica_set
from devpods.cheatsheet import render_card, write_cheatsheet
from devpods.pods import Pod
from devpods.status import PodState, collect_status, render_status
from devpods.system import RunContext
from devpods.utils.log_utils import console, dim, escape, ok, section, warn
from devpods.utils.podman import (
    ensure_container,
    ensure_pod,
    preflight_images,
    reset_pod,
    stop_pod,
    wait_healthy,
)


Sleeper = Callable[[float], None]


def _prepare_data_dir(pod: Pod, data_dir: Path) -> None:
    data_dir.mkdir(parents=True, exist_ok=True)
    for sub in pod.definition.data_subdirs:
        (data_dir / sub).mkdir(parents=True, exist_ok=True)
    for relative, contents in pod.definition.config_files:
        target = data_dir / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(contents, encoding="utf-8")


def up_pod(ctx: RunContext, pod: Pod, *, sleep: Sleeper = time.sleep) -> None:
    """Bring one pod up; safe to call on a pod that is already running."""
    definition = pod.definition
    runtime = ctx.runtime
    section(f"{definition.name}  ({definition.title})")

    data_dir = ctx.settings.pod_dir(definition.name)

    preflight_images(
        runtime,
        definition.name,
        definition.images,
        authenticated=ctx.auth.authenticated,
        mirror=ctx.settings.mirror_registry,
    )

    ensure_pod(runtime, definition.name, definition.ports)
    _prepare_data_dir(pod, data_dir)

    for service in pod.services(ctx.credentials, data_dir):
        ensure_container(
            runtime,
            definition.name,
            service.spec,
            label=service.label,
            started_note=service.note,
        )
        if service.waits_for_health:
            wait_healthy(runtime, service.spec.name, sleep=sleep)
        if service.replica_set:
            ensure_replica_set(runtime, service.spec.name, ctx.credentials.mongo_rs, sleep=sleep)


def run_up(ctx: RunContext, pods: Sequence[Pod], *, sleep: Sleeper = time.sleep) -> Path:
    """Bring ``pods`` up in order, then write and print the cheatsheet."""
    for pod in pods:
        up_pod(ctx, pod, sleep=sleep)
    path = write_cheatsheet(
        ctx.settings.cheatsheet_file,
        ctx.credentials,
        credentials_file=ctx.settings.credentials_file,
    )
    console.print()
    console.print(render_card(ctx.credentials))
    dim(f"Saved: {escape(str(path))}")
    dim("Tear down: devpods down all")
    return path


def run_down(ctx: RunContext, pods: Sequence[Pod]) -> None:
    section("Stopping pods")
    for pod in pods:
        stop_pod(ctx.runtime, pod.pod_name)
    ok("Done.")


def run_reset(
    ctx: RunContext,
    pods: Sequence[Pod],
    *,
    grace: float = 3.0,
    sleep: Sleeper = time.sleep,
) -> None:
    """Stop ``pods`` and delete their data directories after a short grace period."""
    section("Resetting pods (stop + wipe data)")
    warn("This will DELETE all data for the selected pod(s). Ctrl-C to abort …")
    if grace > 0:
        sleep(grace)
    for pod in pods:
        reset_pod(ctx.runtime, pod.pod_name, ctx.settings.pod_dir(pod.pod_name))
    ok("Reset complete. Re-run 'up' to recreate.")


def run_status(ctx: RunContext) -> list[tuple[Pod, PodState]]:
    rows = collect_status(ctx.runtime)
    console.print()
    console.print(render_status(rows, ctx.credentials))
    console.print()
    return rows


__all__ = ["up_pod", "run_up", "run_down", "run_reset", "run_status"]
