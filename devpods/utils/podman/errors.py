"""Custom exception types for Podman helpers."""

from __future__ import annotations

from collections.abc import Sequence


class PodmanError(RuntimeError):
    """Raised when Podman-related operations fail.

    This includes a missing or outdated CLI, failed commands, images that
    cannot be pulled from any registry, and services that never come up.
    """

    pass


class RuntimeMissingError(PodmanError):
    """The host cannot run Podman (platform, binary, version or machine)."""

    pass


class PodmanCommandError(PodmanError):
    """A ``podman`` invocation exited with a non-zero status."""

    def __init__(self, args: Sequence[str], returncode: int, output: str) -> None:
        self.args_list = list(args)
        self.returncode = returncode
        self.output = output
        super().__init__(
            f"'podman {' '.join(self.args_list)}' failed with exit code {returncode}"
        )

    @property
    def is_missing_object(self) -> bool:
        """True when the command failed because the target no longer exists."""
        lowered = self.output.lower()
        return "no such" in lowered or "does not exist" in lowered or "not found" in lowered


class ImageUnavailableError(PodmanError):
    """Every pull candidate for an image failed.

    Attributes:
        image: Canonical image reference that was requested.
        failure: ``"rate-limit"`` or ``"network"``, taken from the last candidate.
    """

    def __init__(self, image: str, failure: str) -> None:
        self.image = image
        self.failure = failure
        super().__init__(f"Could not pull {image} from any source.")

    @property
    def rate_limited(self) -> bool:
        return self.failure == "rate-limit"


class LivenessTimeoutError(PodmanError):
    """A service did not answer its liveness probe within the attempt ceiling."""

    pass


__all__ = [
    "PodmanError",
    "RuntimeMissingError",
    "PodmanCommandError",
    "ImageUnavailableError",
    "LivenessTimeoutError",
]
