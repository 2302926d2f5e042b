"""
Test-only packer for allow-list files.

The library never writes allow-lists; these helpers build byte-exact fixtures
with `struct` so tests can check decoded fields against what was written.
"""

from __future__ import annotations

import struct
from typing import Iterable, Optional, Union

MAGIC = 0x7F4B5355
FILE_VERSION = 3
RECORD_VERSION = 2

HEADER_SIZE = 8
RECORD_HEAD_SIZE = 4 + 256 + 4 + 1 + 7
BRANCH_SIZE = 504
RECORD_SIZE = RECORD_HEAD_SIZE + BRANCH_SIZE


def pack_string(value: Union[str, bytes], width: int) -> bytes:
    raw = value.encode("utf-8") if isinstance(value, str) else value
    return raw[:width].ljust(width, b"\x00")


def pack_header(magic: int = MAGIC, version: int = FILE_VERSION) -> bytes:
    return struct.pack("<II", magic, version)


def _record_head(key: Union[str, bytes], current_uid: int, allow_su_byte: int, version: int) -> bytes:
    return (
        struct.pack("<i", version)
        + pack_string(key, 256)
        + struct.pack("<iB", current_uid, allow_su_byte)
        + b"\x00" * 7
    )


def pack_root_record(
    key: Union[str, bytes],
    current_uid: int,
    *,
    use_default: bool = False,
    template_name: Union[str, bytes] = "",
    uid: int = 0,
    gid: int = 0,
    groups: Iterable[int] = (),
    groups_count: Optional[int] = None,
    effective: int = 0,
    permitted: int = 0,
    inheritable: int = 0,
    selinux_domain: Union[str, bytes] = "u:r:su:s0",
    namespaces: int = 0,
    version: int = RECORD_VERSION,
) -> bytes:
    group_list = list(groups)
    count = len(group_list) if groups_count is None else groups_count
    slots = (group_list + [0] * 32)[:32]
    body = (
        struct.pack("<B", 1 if use_default else 0)
        + pack_string(template_name, 256)
        + b"\x00" * 7
        + struct.pack("<iii", uid, gid, count)
        + struct.pack("<32i", *slots)
        + b"\x00" * 4
        + struct.pack("<QQQ", effective, permitted, inheritable)
        + pack_string(selinux_domain, 64)
        + struct.pack("<i", namespaces)
        + b"\x00" * 4
    )
    assert len(body) == BRANCH_SIZE
    return _record_head(key, current_uid, 1, version) + body


def pack_non_root_record(
    key: Union[str, bytes],
    current_uid: int,
    *,
    use_default: bool = False,
    umount_modules: bool = False,
    allow_su_byte: int = 0,
    version: int = RECORD_VERSION,
) -> bytes:
    body = struct.pack("<BB", 1 if use_default else 0, 1 if umount_modules else 0) + b"\x00" * 502
    assert len(body) == BRANCH_SIZE
    return _record_head(key, current_uid, allow_su_byte, version) + body


def pack_allowlist(*records: bytes, magic: int = MAGIC, version: int = FILE_VERSION) -> bytes:
    return pack_header(magic, version) + b"".join(records)


def sample_allowlist() -> bytes:
    """Three records: root, non-root, root (with groups)."""
    return pack_allowlist(
        pack_root_record(
            "com.termux",
            10123,
            uid=0,
            gid=0,
            groups=[3003, 1015],
            effective=0x1FFFFFFFFF,
            permitted=0x1FFFFFFFFF,
            selinux_domain="u:r:su:s0",
            namespaces=1,
        ),
        pack_non_root_record("com.example.app", 10200, use_default=True, umount_modules=True),
        pack_root_record("com.topjohnwu.magisk", 10301, use_default=True, template_name="default", uid=2000, gid=2000),
    )
