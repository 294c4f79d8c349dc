"""Dataclasses describing a container to launch inside a pod."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class HealthCheck:
    """Runtime-evaluated readiness probe.

    Attributes:
        command: Shell command run inside the container.
        interval: Probe interval as a Podman duration string (``"5s"``).
        retries: Consecutive failures before the container is unhealthy.
    """

    command: str
    interval: str = "5s"
    retries: int | None = None

    def to_args(self) -> list[str]:
        args = ["--health-cmd", self.command, "--health-interval", self.interval]
        if self.retries is not None:
            args += ["--health-retries", str(self.retries)]
        return args


@dataclass(frozen=True, slots=True)
class ContainerSpec:
    """A single service container bound to a pod.

    Attributes:
        name: Container name, unique on the host (``<pod>-<service>``).
        image: Canonical image reference.
        env: Environment variables to inject.
        volumes: Host path -> container path bind mounts (SELinux relabelled).
        args: Arguments appended after the image (command override).
        health: Optional health check; containers without one are
            considered ready once running.
    """

    name: str
    image: str
    env: Mapping[str, str] = field(default_factory=dict)
    volumes: Mapping[Path, str] = field(default_factory=dict)
    args: Sequence[str] = ()
    health: HealthCheck | None = None

    def run_args(self, pod: str) -> list[str]:
        """Return the ``podman run`` arguments that create this container."""
        argv: list[str] = ["run", "-d", "--pod", pod, "--name", self.name]
        if self.health is not None:
            argv += self.health.to_args()
        for key, value in self.env.items():
            argv += ["-e", f"{key}={value}"]
        for host, container in self.volumes.items():
            argv += ["-v", f"{host}:{container}:Z"]
        argv.append(self.image)
        argv += list(self.args)
        return argv


__all__ = ["HealthCheck", "ContainerSpec"]
