"""
Data model for decoded allow-list profiles.

This file contains only data shapes: the decoding logic lives in
`allowlist.api.profile.decoder`. Every shape has a `to_dict()` that returns a
JSON-safe structure (used by the CLI and `decode_allowlist_dict`).

The shapes mirror a packed native struct, so a few fields keep their on-disk
form rather than a "nicer" one:
- `RootProfile.groups` is always `MAX_GROUPS` slots long; `groups_count` is the
  raw on-disk value, which may exceed the slot capacity or even be negative.
- Exactly one of `AppProfile.rp_config` / `AppProfile.nrp_config` is set,
  selected by `allow_su`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Union

MAX_GROUPS = 32

DecodeStatus = Literal["ok", "missing", "bad_header", "version_mismatch", "truncated", "io_error"]


@dataclass
class Capabilities:
    """Three 64-bit capability bitmasks."""

    effective: int = 0
    permitted: int = 0
    inheritable: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "effective": int(self.effective),
            "permitted": int(self.permitted),
            "inheritable": int(self.inheritable),
        }


@dataclass
class RootProfile:
    """Identity and privilege set applied when an app is granted root."""

    uid: int = 0
    gid: int = 0
    groups_count: int = 0
    groups: List[int] = field(default_factory=lambda: [0] * MAX_GROUPS)
    capabilities: Capabilities = field(default_factory=Capabilities)
    selinux_domain: str = ""
    namespaces: int = 0

    @property
    def populated_groups_count(self) -> int:
        """Number of meaningful `groups` slots (raw count clamped to capacity)."""
        return max(0, min(self.groups_count, MAX_GROUPS))

    @property
    def active_groups(self) -> List[int]:
        return self.groups[: self.populated_groups_count]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "uid": self.uid,
            "gid": self.gid,
            "groups_count": self.groups_count,
            "groups": self.active_groups,
            "capabilities": self.capabilities.to_dict(),
            "selinux_domain": self.selinux_domain,
            "namespaces": self.namespaces,
        }


@dataclass
class RootProfileConfig:
    use_default: bool = False
    template_name: str = ""
    profile: RootProfile = field(default_factory=RootProfile)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "use_default": self.use_default,
            "template_name": self.template_name,
            "profile": self.profile.to_dict(),
        }


@dataclass
class NonRootProfileConfig:
    use_default: bool = False
    umount_modules: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"use_default": self.use_default, "umount_modules": self.umount_modules}


@dataclass
class AppProfile:
    """One allow-list record: a single application's privilege grant."""

    version: int = 0
    key: str = ""
    current_uid: int = 0
    allow_su: bool = False
    rp_config: Optional[RootProfileConfig] = None
    nrp_config: Optional[NonRootProfileConfig] = None

    @property
    def config(self) -> Union[RootProfileConfig, NonRootProfileConfig, None]:
        """The branch selected by `allow_su`."""
        return self.rp_config if self.allow_su else self.nrp_config

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "version": self.version,
            "key": self.key,
            "current_uid": self.current_uid,
            "allow_su": self.allow_su,
        }
        if self.rp_config is not None:
            out["rp_config"] = self.rp_config.to_dict()
        if self.nrp_config is not None:
            out["nrp_config"] = self.nrp_config.to_dict()
        return out

    def summary(self) -> Dict[str, Any]:
        """Compact row used by `decode dump --summary`."""
        return {"key": self.key, "current_uid": self.current_uid, "allow_su": self.allow_su}


@dataclass
class DecodeReport:
    """
    Decoded profiles plus an explanation of why decoding stopped.

    `status` never changes which profiles are returned; `dropped_record` is
    true when a partially read record was discarded.
    """

    source: str
    status: DecodeStatus
    profiles: List[AppProfile] = field(default_factory=list)
    bytes_read: int = 0
    dropped_record: bool = False
    detail: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.source,
            "status": self.status,
            "bytes_read": self.bytes_read,
            "dropped_record": self.dropped_record,
            "detail": self.detail,
            "profile_count": len(self.profiles),
            "profiles": [p.to_dict() for p in self.profiles],
        }
