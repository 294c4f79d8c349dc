"""Centralised environment configuration for devpods.

Two layers live here:

* ``DevpodsSettings``: where things live (data root, credentials file) and
  which runtime binary / registry mirror to use, read from the process
  environment.
* ``Credentials``: the per-service usernames and passwords, read from the
  ``.env`` file under the data root with python-dotenv. The file is created
  with defaults on first run and never rewritten afterwards.

Downstream modules receive both explicitly (through ``RunContext``) instead
of touching ``os.environ`` directly.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields
from functools import lru_cache
import os
from pathlib import Path

from dotenv import dotenv_values


DEFAULT_DATA_ROOT = Path("~/.devpods")
CREDENTIALS_FILENAME = ".env"
CHEATSHEET_FILENAME = "cheatsheet.txt"


@dataclass(frozen=True)
class Credentials:
    """Service credentials; field names map to upper-case ``.env`` keys."""

    pg_user: str = "devuser"
    pg_pass: str = "devpass"
    pg_db: str = "devdb"
    redis_pass: str = "devredis"
    rmq_user: str = "devuser"
    rmq_pass: str = "devpass"
    mongo_rs: str = "rs0"
    me_user: str = "admin"
    me_pass: str = "admin"

    @classmethod
    def keys(cls) -> list[str]:
        return [f.name.upper() for f in fields(cls)]

    @classmethod
    def from_mapping(cls, values: Mapping[str, str | None]) -> Credentials:
        """Build from ``KEY=value`` pairs; empty or missing keys keep defaults."""
        kwargs = {}
        for f in fields(cls):
            value = values.get(f.name.upper())
            if value:
                kwargs[f.name] = value
        return cls(**kwargs)


def default_credentials_text() -> str:
    defaults = Credentials()
    lines = ["# devpods credentials: edit freely"]
    for f in fields(Credentials):
        lines.append(f"{f.name.upper()}={getattr(defaults, f.name)}")
    return "\n".join(lines) + "\n"


@dataclass(frozen=True)
class DevpodsSettings:
    """Top-level snapshot of configuration values."""

    data_root: Path
    podman_binary: str
    mirror_registry: str

    @property
    def credentials_file(self) -> Path:
        return self.data_root / CREDENTIALS_FILENAME

    @property
    def cheatsheet_file(self) -> Path:
        return self.data_root / CHEATSHEET_FILENAME

    def pod_dir(self, pod: str) -> Path:
        return self.data_root / pod


def _resolve_data_root(data_root: os.PathLike[str] | str | None) -> Path:
    if data_root is None:
        data_root = os.getenv("DEVPODS_DATA_ROOT") or DEFAULT_DATA_ROOT
    return Path(data_root).expanduser().resolve()


@lru_cache(maxsize=4)
def _load_settings(data_root: Path) -> DevpodsSettings:
    return DevpodsSettings(
        data_root=data_root,
        podman_binary=os.getenv("DEVPODS_PODMAN", "podman"),
        mirror_registry=os.getenv("DEVPODS_MIRROR", "mirror.gcr.io"),
    )


def get_settings(
    data_root: os.PathLike[str] | str | None = None,
    *,
    reload: bool = False,
) -> DevpodsSettings:
    """Return the cached settings snapshot.

    Args:
        data_root: Optional explicit data root. When omitted
            ``$DEVPODS_DATA_ROOT`` or ``~/.devpods`` is used.
        reload: When True the cached snapshot is cleared before loading.
    """
    root = _resolve_data_root(data_root)
    if reload:
        _load_settings.cache_clear()
    return _load_settings(root)


def ensure_credentials_file(path: Path) -> bool:
    """Write the default credentials file if absent. Returns True if created."""
    if path.exists():
        return False
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(default_credentials_text(), encoding="utf-8")
    return True


def load_credentials(path: Path) -> Credentials:
    """Load credentials from ``path``.

    Keys assigned in the file win over the same variables exported in the
    process environment; keys the file leaves unset fall back to the
    environment. Anything still empty gets the built-in default.
    """
    values: dict[str, str | None] = {key: os.getenv(key) for key in Credentials.keys()}
    if path.is_file():
        values.update(dotenv_values(path))
    return Credentials.from_mapping(values)
