"""
Decoder for the kernel manager's binary allow-list file.

The file is a packed mirror of a fixed-size native struct: a header
(magic `0x7F4B5355`, i.e. `\\x7fKSU`, then a u32 file version) followed by
back-to-back app-profile records. Every record has the same on-disk size
whichever branch (root / non-root) it takes, and every string is a
fixed-capacity NUL-padded field.

How to read this module:
- `read_root_profile_config` / `read_non_root_profile_config` decode the two
  sub-record layouts. They raise `IncompleteRead` and know nothing about
  logging or recovery.
- `AllowListDecoder` owns the header check, the record loop, resource
  handling and the "never raise" boundary. Logging goes to an injected
  logger and is never used for control flow.

Failure policy (the file is written by a component we do not control):
- missing file / bad header: empty result.
- stream ends cleanly at a record boundary: normal end.
- stream ends inside a record: that record is dropped, earlier ones returned.
- I/O or unexpected errors mid-read: logged, earlier records returned.

Record-version mismatch: a record whose leading version word is not
`APP_PROFILE_VERSION` is treated exactly like end of data, and the profiles
decoded before it are returned without an error. This mirrors how the writer's
own loader behaves; it is not clear whether that is deliberate version
tolerance or a latent truncation bug (a file mixing record versions would be
silently cut short). `DecodeReport.status == "version_mismatch"` makes the
case visible to callers that care.
"""

from __future__ import annotations

import io
import logging
import os
from pathlib import Path
from typing import Any, BinaryIO, Dict, List, Optional, Union

from allowlist.api.config import default_allowlist_path

from .._shared.bytes_util import AllowListError, ByteReader, IncompleteRead, i32le
from ..model import (
    MAX_GROUPS,
    AppProfile,
    Capabilities,
    DecodeReport,
    NonRootProfileConfig,
    RootProfile,
    RootProfileConfig,
)

LOG = logging.getLogger(__name__)

FILE_MAGIC = 0x7F4B5355
ALLOWLIST_VERSION = 3
APP_PROFILE_VERSION = 2

MAX_PACKAGE_NAME = 256
SELINUX_DOMAIN_LEN = 64

# Padding widths come from the native struct's alignment.
APP_PROFILE_PADDING = 7
ROOT_CONFIG_PADDING = 7
GROUPS_PADDING = 4
ROOT_TRAILING_PADDING = 4
# Non-root branch size after its two bool bytes. Re-derive from the native
# struct definition if the upstream layout changes.
NON_ROOT_RESERVED = 502

Source = Union[str, os.PathLike, bytes, bytearray, memoryview, BinaryIO, None]


class HeaderError(AllowListError):
    """The file header is short, or its magic/version do not match."""


def read_root_profile_config(reader: ByteReader) -> RootProfileConfig:
    """Decode the root branch of an app-profile record."""
    use_default = reader.boolean()
    template_name = reader.fixed_string(MAX_PACKAGE_NAME)
    reader.skip(ROOT_CONFIG_PADDING)

    profile = RootProfile()
    profile.uid = reader.i32le()
    profile.gid = reader.i32le()
    profile.groups_count = reader.i32le()

    # The on-disk array always holds MAX_GROUPS slots; only the first
    # `populated` are meaningful, the rest are consumed and dropped.
    populated = profile.populated_groups_count
    for idx in range(populated):
        profile.groups[idx] = reader.i32le()
    reader.skip((MAX_GROUPS - populated) * 4)
    reader.skip(GROUPS_PADDING)

    profile.capabilities = Capabilities(
        effective=reader.u64le(),
        permitted=reader.u64le(),
        inheritable=reader.u64le(),
    )
    profile.selinux_domain = reader.fixed_string(SELINUX_DOMAIN_LEN)
    profile.namespaces = reader.i32le()
    reader.skip(ROOT_TRAILING_PADDING)

    return RootProfileConfig(use_default=use_default, template_name=template_name, profile=profile)


def read_non_root_profile_config(reader: ByteReader) -> NonRootProfileConfig:
    """Decode the non-root branch of an app-profile record."""
    use_default = reader.boolean()
    umount_modules = reader.boolean()
    reader.skip(NON_ROOT_RESERVED)
    return NonRootProfileConfig(use_default=use_default, umount_modules=umount_modules)


def read_app_profile_body(reader: ByteReader, version: int) -> AppProfile:
    """
    Decode everything after the record's leading version word.

    Raises `IncompleteRead` if the stream ends anywhere inside the record; the
    caller must then discard the record as a whole.
    """
    profile = AppProfile(version=version)
    profile.key = reader.fixed_string(MAX_PACKAGE_NAME)
    profile.current_uid = reader.i32le()
    profile.allow_su = reader.boolean()
    reader.skip(APP_PROFILE_PADDING)
    if profile.allow_su:
        profile.rp_config = read_root_profile_config(reader)
    else:
        profile.nrp_config = read_non_root_profile_config(reader)
    return profile


def _source_label(source: Source) -> str:
    if isinstance(source, (bytes, bytearray, memoryview)):
        return "<bytes>"
    if source is not None and hasattr(source, "read"):
        return str(getattr(source, "name", "<stream>"))
    return str(source)


class AllowListDecoder:
    """
    Decode an allow-list file into a list of `AppProfile`.

    Instances hold no per-decode state beyond the injected logger, so one
    decoder may be shared across threads as long as each call gets its own
    source.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.log = logger if logger is not None else LOG

    def decode(self, source: Source = None) -> List[AppProfile]:
        """Return the profiles decoded from `source`; never raises."""
        return self.decode_report(source).profiles

    def decode_report(self, source: Source = None) -> DecodeReport:
        """
        Decode `source` and explain where decoding stopped.

        `source` may be a path, raw bytes, or an open binary stream. Paths are
        opened and closed here; streams belong to the caller and are left
        open. `None` means the configured default path.
        """
        if isinstance(source, (bytes, bytearray, memoryview)):
            return self._decode_stream(io.BytesIO(bytes(source)), _source_label(source))
        if source is not None and hasattr(source, "read"):
            return self._decode_stream(source, _source_label(source))

        try:
            path = Path(source) if source is not None else default_allowlist_path()
        except TypeError as exc:
            self.log.error("Unsupported allow list source %r: %s", source, exc)
            return DecodeReport(source=_source_label(source), status="io_error", detail=str(exc))
        try:
            with path.open("rb") as fh:
                return self._decode_stream(fh, str(path))
        except FileNotFoundError:
            self.log.error("Allow list file not found: %s", path.absolute())
            return DecodeReport(source=str(path), status="missing", detail="file not found")
        except OSError as exc:
            self.log.error("IO error reading allow list: %s", exc)
            return DecodeReport(source=str(path), status="io_error", detail=str(exc))
        except ValueError as exc:
            self.log.error("Cannot open allow list %r: %s", str(path), exc)
            return DecodeReport(source=str(path), status="io_error", detail=str(exc))

    def _validate_header(self, reader: ByteReader) -> None:
        try:
            magic = reader.u32le()
        except IncompleteRead as exc:
            raise HeaderError(f"short header: {exc}") from exc
        if magic != FILE_MAGIC:
            self.log.error("Invalid magic number. Expected: 0x%08X, Got: 0x%08X", FILE_MAGIC, magic)
            raise HeaderError(f"bad magic 0x{magic:08X}")

        try:
            version = reader.u32le()
        except IncompleteRead as exc:
            raise HeaderError(f"short header: {exc}") from exc
        if version != ALLOWLIST_VERSION:
            self.log.error("Unsupported version. Expected: %d, Got: %d", ALLOWLIST_VERSION, version)
            raise HeaderError(f"unsupported file version {version}")

    def _read_records(self, reader: ByteReader, report: DecodeReport) -> None:
        """Append records to `report.profiles` until the data runs out."""
        while True:
            head = reader.read_upto(4)
            if not head:
                return
            if len(head) < 4:
                self.log.warning("Allow list ends inside a record header at offset %d", reader.offset)
                report.status = "truncated"
                report.dropped_record = True
                report.detail = f"{len(head)} trailing bytes after last record"
                return

            version = i32le(head)
            if version != APP_PROFILE_VERSION:
                self.log.debug(
                    "Record version %d != %d at offset %d; treating as end of data",
                    version,
                    APP_PROFILE_VERSION,
                    reader.offset - 4,
                )
                report.status = "version_mismatch"
                report.detail = f"record version {version}"
                return

            try:
                profile = read_app_profile_body(reader, version)
            except IncompleteRead as exc:
                self.log.warning("Discarding incomplete profile %d: %s", len(report.profiles) + 1, exc)
                report.status = "truncated"
                report.dropped_record = True
                report.detail = str(exc)
                return

            report.profiles.append(profile)
            self.log.info(
                "Profile %d: name=%s, uid=%d, allow_su=%d",
                len(report.profiles),
                profile.key,
                profile.current_uid,
                1 if profile.allow_su else 0,
            )

    def _decode_stream(self, stream: BinaryIO, label: str) -> DecodeReport:
        reader = ByteReader(stream)
        report = DecodeReport(source=label, status="ok")
        try:
            self._validate_header(reader)
            self._read_records(reader, report)
            self.log.info("Total profiles loaded: %d", len(report.profiles))
        except HeaderError as exc:
            self.log.error("Invalid file header or version")
            report.status = "bad_header"
            report.detail = str(exc)
        except OSError as exc:
            self.log.error("IO error reading allow list: %s", exc)
            report.status = "io_error"
            report.detail = str(exc)
        except Exception as exc:
            self.log.exception("Error reading allow list: %s", exc)
            report.status = "io_error"
            report.detail = repr(exc)
        report.bytes_read = reader.offset
        return report


def decode_allowlist(source: Source = None, *, logger: Optional[logging.Logger] = None) -> List[AppProfile]:
    """Module-level convenience for `AllowListDecoder(logger).decode(source)`."""
    return AllowListDecoder(logger).decode(source)


def decode_allowlist_report(source: Source = None, *, logger: Optional[logging.Logger] = None) -> DecodeReport:
    return AllowListDecoder(logger).decode_report(source)


def decode_allowlist_dict(source: Source = None, *, logger: Optional[logging.Logger] = None) -> Dict[str, Any]:
    """
    JSON-safe wrapper around `decode_allowlist_report`.

    If you are building new code and do not need JSON, prefer
    `decode_allowlist` and the dataclasses in `allowlist.api.profile.model`.
    """
    return decode_allowlist_report(source, logger=logger).to_dict()
