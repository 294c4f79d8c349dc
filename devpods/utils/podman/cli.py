"""Low-level access to the ``podman`` executable (internal)."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import shutil
import subprocess

from .errors import PodmanCommandError, RuntimeMissingError


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Exit status and combined stdout/stderr of one command."""

    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def ensure_podman_cli(binary: str = "podman") -> str:
    """Return the absolute path of the Podman CLI or raise with guidance."""
    resolved = shutil.which(binary)
    if resolved is None:
        raise RuntimeMissingError(
            "Podman not found. Install it: https://podman.io/docs/installation"
        )
    return resolved


def run_command(
    argv: Sequence[str],
    *,
    check: bool = True,
    timeout: float | None = None,
) -> CommandResult:
    """Run ``argv`` to completion and capture its output as text.

    Args:
        argv: Full command line, executable first.
        check: Raise ``PodmanCommandError`` on a non-zero exit status.
        timeout: Optional wall-clock limit in seconds.

    Raises:
        RuntimeMissingError: If the executable cannot be found.
        PodmanCommandError: If ``check`` is set and the command fails.
    """
    try:
        completed = subprocess.run(
            list(argv),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as e:
        raise RuntimeMissingError(f"Executable not found: {argv[0]}") from e
    except subprocess.TimeoutExpired as e:
        output = e.output if isinstance(e.output, str) else ""
        raise PodmanCommandError(argv[1:], -1, output or f"timed out after {timeout}s") from e

    result = CommandResult(returncode=completed.returncode, output=completed.stdout or "")
    if check and not result.ok:
        raise PodmanCommandError(argv[1:], result.returncode, result.output)
    return result


__all__ = ["CommandResult", "ensure_podman_cli", "run_command"]
