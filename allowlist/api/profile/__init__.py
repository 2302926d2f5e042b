"""
Allow-list profile tooling.

Scope / non-goals:
- Reads the binary allow-list written by the kernel manager into
  `AppProfile` records. It does not write the file, judge whether profile
  contents make sense, or make any policy decision; callers own that.

Subpackages (functional groups):
- `decoder`: header check + record loop (never raises to the caller).
- `model`: dataclasses for decoded records.
- `_shared.bytes_util`: little-endian / fixed-string primitives.

Preferred imports:
- `from allowlist.api.profile import decoder, model`
"""

from __future__ import annotations

from . import decoder as decoder  # noqa: F401
from . import model as model  # noqa: F401

from .decoder import AllowListDecoder, decode_allowlist, decode_allowlist_dict, decode_allowlist_report  # noqa: F401
from .model import (  # noqa: F401
    AppProfile,
    Capabilities,
    DecodeReport,
    NonRootProfileConfig,
    RootProfile,
    RootProfileConfig,
)
