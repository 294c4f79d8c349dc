"""Pod state derivation and the ``status`` table."""

from __future__ import annotations

from enum import Enum

from rich.table import Table

from devpods.config import Credentials
from devpods.pods import ALL_PODS, Pod
from devpods.utils.podman import RuntimeClient


class PodState(str, Enum):
    STOPPED = "stopped"
    DEGRADED = "degraded"
    RUNNING = "running"


_STATE_STYLES = {
    PodState.STOPPED: "red",
    PodState.DEGRADED: "yellow",
    PodState.RUNNING: "green",
}


def pod_state(runtime: RuntimeClient, name: str) -> PodState:
    """Derive a pod's state from the runtime alone."""
    if not runtime.pod_exists(name):
        return PodState.STOPPED
    if runtime.pod_running(name):
        return PodState.RUNNING
    return PodState.DEGRADED


def collect_status(runtime: RuntimeClient) -> list[tuple[Pod, PodState]]:
    return [(pod, pod_state(runtime, pod.pod_name)) for pod in ALL_PODS]


def render_status(rows: list[tuple[Pod, PodState]], credentials: Credentials) -> Table:
    table = Table(title="devpods status", title_justify="left", box=None, pad_edge=False)
    table.add_column("POD", style="bold", min_width=20)
    table.add_column("STATE", min_width=12)
    table.add_column("ENDPOINTS", style="bright_black")
    for pod, state in rows:
        table.add_row(
            pod.pod_name,
            f"[{_STATE_STYLES[state]}]{state.value}[/]",
            pod.endpoint_summary(credentials),
        )
    return table


__all__ = ["PodState", "pod_state", "collect_status", "render_status"]
