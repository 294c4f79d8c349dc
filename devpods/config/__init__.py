"""Configuration helpers for devpods.

Expose `get_settings` as the canonical accessor for environment-driven
configuration and `load_credentials` for the per-service credential file.
Modules should avoid reading `.env` directly and instead import from this
package to retrieve typed snapshots.
"""

from .settings import (
    Credentials,
    DevpodsSettings,
    ensure_credentials_file,
    get_settings,
    load_credentials,
)


__all__ = [
    "Credentials",
    "DevpodsSettings",
    "ensure_credentials_file",
    "get_settings",
    "load_credentials",
]
