"""Host readiness checks run before every command.

Validates the platform and the Podman installation, prepares the data root
and credentials file, and probes Docker Hub authentication once so image
pulls can pick their registry order.
"""

from __future__ import annotations

from dataclasses import dataclass
import platform

from devpods.config import (
    Credentials,
    DevpodsSettings,
    ensure_credentials_file,
    load_credentials,
)
from devpods.utils.log_utils import escape, ok, section, warn
from devpods.utils.podman import (
    PodmanCommandError,
    RuntimeClient,
    RuntimeMissingError,
    ensure_podman_cli,
)
from devpods.utils.podman.images import DEFAULT_MIRROR, PRIMARY_REGISTRY


MIN_PODMAN_MAJOR = 4
SUPPORTED_SYSTEMS = {"Linux": "Linux", "Darwin": "macOS"}

MACHINE_CPUS = 4
MACHINE_MEMORY_MB = 4096
MACHINE_DISK_GB = 60


@dataclass(frozen=True)
class RegistryAuth:
    """Outcome of the once-per-run hub login probe."""

    authenticated: bool
    username: str | None = None


@dataclass(frozen=True)
class RunContext:
    """Everything a command needs, built once at process start."""

    settings: DevpodsSettings
    credentials: Credentials
    auth: RegistryAuth
    runtime: RuntimeClient


def check_platform(system: str | None = None) -> str:
    """Return the OS name or raise for unsupported hosts."""
    system = system or platform.system()
    if system not in SUPPORTED_SYSTEMS:
        raise RuntimeMissingError(f"Unsupported OS: {system}")
    ok(f"OS: {SUPPORTED_SYSTEMS[system]}")
    return system


def parse_major(version: str) -> int:
    head = version.strip().split(".", 1)[0]
    try:
        return int(head)
    except ValueError:
        return 0


def check_version(runtime: RuntimeClient) -> str:
    version = runtime.version()
    if parse_major(version) < MIN_PODMAN_MAJOR:
        raise RuntimeMissingError(
            f"Podman >= {MIN_PODMAN_MAJOR}.0 required (found {version or 'unknown'}). "
            "Please upgrade."
        )
    ok(f"Podman {version}")
    return version


def ensure_machine(runtime: RuntimeClient) -> None:
    """Make sure a Podman VM is running (macOS hosts only)."""
    listing = runtime.machine_list()
    if "Currently running" in listing:
        ok("Podman machine: running")
        return

    warn("No running Podman machine found — attempting to start …")
    try:
        if "podman-machine-default" in listing or "dev" in listing:
            runtime.machine_start()
            ok("Podman machine started.")
        else:
            warn("No Podman machine exists. Initialising a default one …")
            runtime.machine_init(
                cpus=MACHINE_CPUS, memory_mb=MACHINE_MEMORY_MB, disk_gb=MACHINE_DISK_GB
            )
            runtime.machine_start()
            ok("Podman machine initialised and started.")
    except PodmanCommandError as e:
        raise RuntimeMissingError(
            "Could not init/start Podman machine. Run: podman machine init && podman machine start"
        ) from e


def ensure_service(runtime: RuntimeClient) -> None:
    """Best-effort activation of the rootless user socket (Linux)."""
    if not runtime.info_ok():
        warn("Podman socket not responding — trying to start user service …")
        if not runtime.activate_socket():
            warn("Could not start podman.socket (may not be needed on this distro).")
    ok("Podman daemon: responding")


def detect_registry_auth(runtime: RuntimeClient, mirror: str = DEFAULT_MIRROR) -> RegistryAuth:
    user = runtime.login_user(PRIMARY_REGISTRY)
    if user:
        ok(f"Docker Hub: authenticated as [bold]{escape(user)}[/bold]")
        return RegistryAuth(authenticated=True, username=user)
    warn(f"Docker Hub: not authenticated — will use [bold]{mirror}[/bold] as primary")
    warn("  (run [white]podman login docker.io[/white] to get higher pull limits)")
    return RegistryAuth(authenticated=False)


def prepare_run(
    settings: DevpodsSettings,
    runtime: RuntimeClient,
    *,
    system: str | None = None,
    require_binary: bool = True,
) -> RunContext:
    """Run every readiness check and return the context for this invocation.

    Raises:
        RuntimeMissingError: On unsupported platforms, a missing binary, a
            runtime older than 4.0 or a macOS VM that cannot be started.
    """
    section("System readiness")
    system = check_platform(system)

    if require_binary:
        ensure_podman_cli(settings.podman_binary)
    if system == "Darwin":
        ensure_machine(runtime)
    check_version(runtime)
    if system == "Linux":
        ensure_service(runtime)

    settings.data_root.mkdir(parents=True, exist_ok=True)
    ok(f"Data root: {escape(str(settings.data_root))}")
    if ensure_credentials_file(settings.credentials_file):
        ok(f"Created {escape(str(settings.credentials_file))} (defaults)")

    auth = detect_registry_auth(runtime, settings.mirror_registry)
    credentials = load_credentials(settings.credentials_file)
    return RunContext(settings=settings, credentials=credentials, auth=auth, runtime=runtime)


__all__ = [
    "RegistryAuth",
    "RunContext",
    "check_platform",
    "check_version",
    "detect_registry_auth",
    "ensure_machine",
    "ensure_service",
    "prepare_run",
]
