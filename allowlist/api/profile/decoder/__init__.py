"""
Decoder for the kernel manager's binary allow-list file.

Public API:
- `AllowListDecoder`, `decode_allowlist`, `decode_allowlist_report`,
  `decode_allowlist_dict`
- `HeaderError`
- format constants (magic, versions, field widths).
"""

from __future__ import annotations

from .api import (  # noqa: F401
    ALLOWLIST_VERSION,
    APP_PROFILE_VERSION,
    FILE_MAGIC,
    MAX_PACKAGE_NAME,
    NON_ROOT_RESERVED,
    SELINUX_DOMAIN_LEN,
    AllowListDecoder,
    HeaderError,
    decode_allowlist,
    decode_allowlist_dict,
    decode_allowlist_report,
    read_non_root_profile_config,
    read_root_profile_config,
)

__all__ = [
    "AllowListDecoder",
    "HeaderError",
    "decode_allowlist",
    "decode_allowlist_dict",
    "decode_allowlist_report",
    "read_root_profile_config",
    "read_non_root_profile_config",
    "FILE_MAGIC",
    "ALLOWLIST_VERSION",
    "APP_PROFILE_VERSION",
    "MAX_PACKAGE_NAME",
    "SELINUX_DOMAIN_LEN",
    "NON_ROOT_RESERVED",
]
