"""Image acquisition with registry-mirror fallback.

Anonymous Docker Hub pulls are rate limited, so unauthenticated runs try a
mirror first and keep the hub as a last resort. Whatever source satisfies
the pull, the image ends up tagged under its canonical ``docker.io/...``
reference so container creation never depends on where it came from.
"""

from __future__ import annotations

from collections.abc import Iterable
import re

from devpods.utils.log_utils import dim, escape, info, ok, section, warn

from .errors import ImageUnavailableError, PodmanCommandError
from .logging_utils import log_multiline
from .runtime import RuntimeClient


PRIMARY_REGISTRY = "docker.io"
DEFAULT_MIRROR = "mirror.gcr.io"

RATE_LIMIT_RE = re.compile(r"unauthorized|invalid username|rate limit|toomanyrequests", re.I)

FAILURE_RATE_LIMIT = "rate-limit"
FAILURE_NETWORK = "network"


def pull_candidates(image: str, *, authenticated: bool, mirror: str = DEFAULT_MIRROR) -> list[str]:
    """Return the ordered references to try for ``image``.

    Only references under the primary hub namespace are mirrorable. When the
    hub login probe succeeded the mirror is skipped entirely.
    """
    prefix = f"{PRIMARY_REGISTRY}/"
    if not image.startswith(prefix) or authenticated:
        return [image]
    suffix = image[len(prefix) :]
    return [f"{mirror}/{suffix}", image]


def classify_failure(output: str) -> str:
    """Return ``"rate-limit"`` for auth/quota errors, ``"network"`` otherwise."""
    return FAILURE_RATE_LIMIT if RATE_LIMIT_RE.search(output or "") else FAILURE_NETWORK


def pull_image(
    runtime: RuntimeClient,
    image: str,
    *,
    authenticated: bool,
    mirror: str = DEFAULT_MIRROR,
) -> str:
    """Make sure ``image`` is present locally.

    Returns:
        The reference that satisfied the request (``image`` itself when it
        was already cached).

    Raises:
        ImageUnavailableError: If every candidate failed.
    """
    if runtime.image_exists(image):
        dim(f"Image cached: {escape(image)}")
        return image

    failure = FAILURE_NETWORK
    for ref in pull_candidates(image, authenticated=authenticated, mirror=mirror):
        label = f"{ref} (mirror)" if ref.startswith(f"{mirror}/") else ref
        info(f"Pulling {escape(label)} …")
        try:
            runtime.pull(ref)
        except PodmanCommandError as e:
            failure = classify_failure(e.output)
            if failure == FAILURE_RATE_LIMIT:
                warn(f"Rate-limited/auth error on {escape(ref)}")
            else:
                warn(f"Pull failed for {escape(ref)}")
                log_multiline(e.output, "   ", level="debug")
            continue

        if ref != image:
            try:
                runtime.tag(ref, image)
                dim(f"Tagged mirror pull as {escape(image)}")
            except PodmanCommandError as e:
                warn(f"Could not tag {escape(ref)} as {escape(image)}: {escape(e.output.strip())}")
        ok(f"Ready: {escape(image)}")
        return ref

    raise ImageUnavailableError(image, failure)


def preflight_images(
    runtime: RuntimeClient,
    pod: str,
    images: Iterable[str],
    *,
    authenticated: bool,
    mirror: str = DEFAULT_MIRROR,
) -> None:
    """Resolve every image a pod needs before any of its containers exist."""
    section(f"Preflight images for {pod}")
    for image in images:
        pull_image(runtime, image, authenticated=authenticated, mirror=mirror)
    ok(f"All images ready for {pod}.")


def rate_limit_help(mirror: str = DEFAULT_MIRROR) -> list[str]:
    """Remediation lines shown when the hub refused an anonymous pull."""
    return [
        "[yellow]You've hit Docker Hub's anonymous pull limit.[/yellow]",
        "[bold]Fix (pick one):[/bold]",
        "  A) Log in:  [white]podman login docker.io[/white]  (free account, 100 pulls/6h)",
        "  B) Wait ~6 hours for the anonymous limit to reset, then re-run.",
        "  C) Add a permanent mirror to ~/.config/containers/registries.conf:",
        "",
        '     unqualified-search-registries = \\["docker.io"]',
        "     \\[\\[registry]]",
        '     prefix   = "docker.io"',
        f'     location = "{mirror}"',
        "",
        "Already-running containers are untouched; just re-run devpods.",
    ]


__all__ = [
    "PRIMARY_REGISTRY",
    "DEFAULT_MIRROR",
    "pull_candidates",
    "classify_failure",
    "pull_image",
    "preflight_images",
    "rate_limit_help",
]
