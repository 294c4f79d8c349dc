"""High-level Podman utilities package.

This package provides structured helpers for:
    * Talking to the container runtime through a narrow client interface
        (``RuntimeClient``, implemented over the CLI by ``PodmanRuntime``)
    * Pulling images with a registry-mirror fallback (``pull_image`` /
        ``preflight_images``)
    * Idempotent pod and container lifecycle steps (``ensure_pod``,
        ``stop_pod``, ``reset_pod``, ``ensure_container``, ``wait_healthy``)

Principles:
    * Keep subprocess usage encapsulated (see ``cli.py``) so higher-level
        code can be exercised against a fake runtime in tests.
    * Avoid side effects at import time.

Public API (re-exported):
        - PodmanError and subclasses
        - CommandResult
        - ContainerSpec, HealthCheck
        - RuntimeClient, PodmanRuntime
        - pull_candidates, pull_image, preflight_images, rate_limit_help
        - ensure_pod, stop_pod, reset_pod, ensure_container, wait_healthy
"""

from .cli import CommandResult, ensure_podman_cli
from .container import ContainerSpec, HealthCheck
from .errors import (
    ImageUnavailableError,
    LivenessTimeoutError,
    PodmanCommandError,
    PodmanError,
    RuntimeMissingError,
)
from .images import preflight_images, pull_candidates, pull_image, rate_limit_help
from .operations import ensure_container, ensure_pod, reset_pod, stop_pod, wait_healthy
from .runtime import PodmanRuntime, RuntimeClient


__all__ = [
    "PodmanError",
    "RuntimeMissingError",
    "PodmanCommandError",
    "ImageUnavailableError",
    "LivenessTimeoutError",
    "CommandResult",
    "ensure_podman_cli",
    "ContainerSpec",
    "HealthCheck",
    "RuntimeClient",
    "PodmanRuntime",
    "pull_candidates",
    "pull_image",
    "preflight_images",
    "rate_limit_help",
    "ensure_pod",
    "stop_pod",
    "reset_pod",
    "ensure_container",
    "wait_healthy",
]
