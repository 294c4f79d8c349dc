"""Runtime client interface and its Podman CLI implementation."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from devpods.utils.log_utils import logger

from .cli import CommandResult, run_command
from .container import ContainerSpec
from .errors import RuntimeMissingError


class RuntimeClient(ABC):
    """Every call the orchestrator makes against the container runtime.

    Query methods return plain values and never raise for "not found".
    Mutating methods raise ``PodmanCommandError`` when the runtime rejects
    the request.
    """

    # host / registry

    @abstractmethod
    def version(self) -> str:
        """Return the runtime version string (e.g. ``"4.9.3"``)."""

    @abstractmethod
    def info_ok(self) -> bool:
        """Return True when the runtime service answers ``info``."""

    @abstractmethod
    def activate_socket(self) -> bool:
        """Try to start the user-level runtime socket; return success."""

    @abstractmethod
    def machine_list(self) -> str:
        """Return the raw machine listing (macOS VM hosts)."""

    @abstractmethod
    def machine_start(self) -> None:
        pass

    @abstractmethod
    def machine_init(self, *, cpus: int, memory_mb: int, disk_gb: int) -> None:
        pass

    @abstractmethod
    def login_user(self, registry: str) -> str | None:
        """Return the logged-in username for ``registry`` or None."""

    # images

    @abstractmethod
    def image_exists(self, ref: str) -> bool:
        pass

    @abstractmethod
    def pull(self, ref: str) -> None:
        """Pull ``ref``; raise ``PodmanCommandError`` with diagnostics on failure."""

    @abstractmethod
    def tag(self, source: str, target: str) -> None:
        pass

    # pods

    @abstractmethod
    def pod_exists(self, name: str) -> bool:
        pass

    @abstractmethod
    def pod_running(self, name: str) -> bool:
        pass

    @abstractmethod
    def create_pod(self, name: str, ports: Sequence[str]) -> None:
        pass

    @abstractmethod
    def stop_pod(self, name: str) -> None:
        pass

    @abstractmethod
    def remove_pod(self, name: str, *, force: bool = False) -> None:
        pass

    # containers

    @abstractmethod
    def container_exists(self, name: str) -> bool:
        pass

    @abstractmethod
    def run_container(self, pod: str, spec: ContainerSpec) -> None:
        pass

    @abstractmethod
    def health_status(self, container: str) -> str | None:
        """Return the health-check status (``"healthy"``...) or None."""

    @abstractmethod
    def container_state(self, container: str) -> str | None:
        """Return the container state (``"running"``...) or None."""

    @abstractmethod
    def exec(self, container: str, command: Sequence[str]) -> CommandResult:
        """Run ``command`` inside ``container``; never raises on non-zero exit."""


class PodmanRuntime(RuntimeClient):
    """``RuntimeClient`` that shells out to the ``podman`` executable."""

    def __init__(self, binary: str = "podman") -> None:
        self.binary = binary

    def _run(self, *args: str, check: bool = True) -> CommandResult:
        logger.debug(f"$ {self.binary} {' '.join(args)}")
        return run_command([self.binary, *args], check=check)

    def _inspect(self, *args: str) -> str | None:
        result = self._run(*args, check=False)
        if not result.ok:
            return None
        value = result.output.strip()
        return value or None

    def version(self) -> str:
        # "podman version 4.9.3"
        output = self._run("--version").output.strip()
        return output.split()[-1] if output else ""

    def info_ok(self) -> bool:
        return self._run("info", check=False).ok

    def activate_socket(self) -> bool:
        try:
            return run_command(
                ["systemctl", "--user", "start", "podman.socket"], check=False
            ).ok
        except RuntimeMissingError:
            return False

    def machine_list(self) -> str:
        result = self._run("machine", "list", check=False)
        return result.output if result.ok else ""

    def machine_start(self) -> None:
        self._run("machine", "start")

    def machine_init(self, *, cpus: int, memory_mb: int, disk_gb: int) -> None:
        self._run(
            "machine",
            "init",
            "--cpus",
            str(cpus),
            "--memory",
            str(memory_mb),
            "--disk-size",
            str(disk_gb),
        )

    def login_user(self, registry: str) -> str | None:
        return self._inspect("login", "--get-login", registry)

    def image_exists(self, ref: str) -> bool:
        return self._run("image", "exists", ref, check=False).ok

    def pull(self, ref: str) -> None:
        self._run("pull", ref)

    def tag(self, source: str, target: str) -> None:
        self._run("tag", source, target)

    def pod_exists(self, name: str) -> bool:
        return self._run("pod", "exists", name, check=False).ok

    def pod_running(self, name: str) -> bool:
        return self._inspect("pod", "inspect", name, "--format", "{{.State}}") == "Running"

    def create_pod(self, name: str, ports: Sequence[str]) -> None:
        publish: list[str] = []
        for mapping in ports:
            publish += ["--publish", mapping]
        self._run("pod", "create", "--name", name, *publish)

    def stop_pod(self, name: str) -> None:
        self._run("pod", "stop", name)

    def remove_pod(self, name: str, *, force: bool = False) -> None:
        if force:
            self._run("pod", "rm", "-f", name)
        else:
            self._run("pod", "rm", name)

    def container_exists(self, name: str) -> bool:
        return self._run("container", "exists", name, check=False).ok

    def run_container(self, pod: str, spec: ContainerSpec) -> None:
        self._run(*spec.run_args(pod))

    def health_status(self, container: str) -> str | None:
        status = self._inspect("inspect", "--format", "{{.State.Health.Status}}", container)
        # no health check configured renders as an empty or placeholder value
        if status in ("<nil>", "<no value>"):
            return None
        return status

    def container_state(self, container: str) -> str | None:
        return self._inspect("inspect", "--format", "{{.State.Status}}", container)

    def exec(self, container: str, command: Sequence[str]) -> CommandResult:
        return self._run("exec", container, *command, check=False)


__all__ = ["RuntimeClient", "PodmanRuntime"]
