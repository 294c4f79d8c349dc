"""Core pod lifecycle operations: ensure, stop, reset, launch, wait."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
import shutil
import time

from devpods.utils.log_utils import dim, escape, info, logger, ok, warn

from .container import ContainerSpec
from .errors import PodmanCommandError
from .runtime import RuntimeClient


__all__ = [
    "ensure_pod",
    "stop_pod",
    "reset_pod",
    "ensure_container",
    "wait_healthy",
]


def ensure_pod(runtime: RuntimeClient, pod: str, ports: Sequence[str]) -> bool:
    """Make sure ``pod`` exists and is running.

    A running pod is left alone. A pod that exists but is not running is
    treated as stale: it is force-removed and created again.

    Returns:
        True when the pod was created by this call, False when it was reused.
    """
    if runtime.pod_exists(pod):
        if runtime.pod_running(pod):
            warn(f"Pod [bold]{pod}[/bold] already running — skipping creation.")
            return False
        info(f"Pod {pod} exists but is not running — removing stale pod …")
        runtime.remove_pod(pod, force=True)
    runtime.create_pod(pod, ports)
    return True


def _tolerate_missing(action: Callable[[], None], pod: str, verb: str) -> None:
    try:
        action()
    except PodmanCommandError as e:
        if not e.is_missing_object:
            raise
        logger.debug(f"{verb} {pod}: already gone ({e.output.strip()})")


def stop_pod(runtime: RuntimeClient, pod: str) -> bool:
    """Stop and remove ``pod`` if it exists.

    Failures caused by the pod vanishing mid-teardown are ignored; anything
    else propagates as ``PodmanCommandError``.

    Returns:
        True if a pod was torn down, False if there was nothing to do.
    """
    if not runtime.pod_exists(pod):
        dim(f"Pod {pod} not found — nothing to do.")
        return False
    info(f"Stopping pod [bold]{pod}[/bold] …")
    _tolerate_missing(lambda: runtime.stop_pod(pod), pod, "stop")
    _tolerate_missing(lambda: runtime.remove_pod(pod), pod, "rm")
    ok(f"Removed {pod}")
    return True


def reset_pod(runtime: RuntimeClient, pod: str, data_dir: Path) -> None:
    """Tear ``pod`` down and wipe its data directory."""
    stop_pod(runtime, pod)
    if data_dir.is_dir():
        warn(f"Deleting data at {escape(str(data_dir))} …")
        shutil.rmtree(data_dir)
        ok(f"Data cleared for {pod}")


def ensure_container(
    runtime: RuntimeClient,
    pod: str,
    spec: ContainerSpec,
    *,
    label: str,
    started_note: str = "",
) -> bool:
    """Create and start ``spec`` inside ``pod`` unless it already exists.

    Returns:
        True when the container was started by this call.
    """
    if runtime.container_exists(spec.name):
        dim(f"{label} container already exists.")
        return False
    info(f"Starting {label} …")
    runtime.run_container(pod, spec)
    ok(f"{label} started{' → ' + started_note if started_note else '.'}")
    return True


def wait_healthy(
    runtime: RuntimeClient,
    container: str,
    *,
    retries: int = 30,
    delay: float = 2.0,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Poll ``container`` until ready, up to ``retries`` times.

    A container with a health check is ready once it reports ``healthy``;
    ``starting`` and ``unhealthy`` keep the poll going even while the
    container is running. Only a container without a health check is ready
    as soon as it is running.

    Running the budget out is not an error: a warning is logged and the
    caller carries on.

    Returns:
        True if the container reported ready within the budget.
    """
    for _ in range(retries):
        health = runtime.health_status(container)
        if health == "healthy":
            return True
        if health is None and runtime.container_state(container) == "running":
            return True
        sleep(delay)
    warn(f"Container {container} did not become healthy in time — continuing anyway.")
    return False
