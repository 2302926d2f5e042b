"""
Shared low-level helpers for `allowlist.api.profile`.

This package is internal: it exists so the decoder and the CLI can share the
byte primitives without importing each other.
"""

from __future__ import annotations

from . import bytes_util as bytes_util  # noqa: F401

__all__ = ["bytes_util"]
