"""
Where the allow-list file lives.

The kernel manager writes its allow-list to a fixed location on device; the
environment variable `KSU_ALLOWLIST_PATH` overrides it (tests, offline copies
pulled with `adb`).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_ALLOWLIST_PATH = Path("/data/adb/ksu/.allowlist")
ALLOWLIST_PATH_ENV = "KSU_ALLOWLIST_PATH"


@dataclass(frozen=True)
class AllowListConfig:
    allowlist_path: Path = DEFAULT_ALLOWLIST_PATH

    @classmethod
    def from_env(cls) -> "AllowListConfig":
        raw = os.environ.get(ALLOWLIST_PATH_ENV, "").strip()
        return cls(allowlist_path=Path(raw) if raw else DEFAULT_ALLOWLIST_PATH)


def default_allowlist_path() -> Path:
    """Resolve the allow-list path from the environment at call time."""
    return AllowListConfig.from_env().allowlist_path
