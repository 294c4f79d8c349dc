"""devpods: local development services as idempotent Podman pods."""

__version__ = "1.2.0"
