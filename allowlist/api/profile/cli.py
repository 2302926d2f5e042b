#!/usr/bin/env python3
"""
`allowlist.api.profile` command-line interface.

This CLI is a debugging aid for humans: it decodes allow-list files and dumps
what the decoder saw as JSON. The canonical programmatic surface is
`allowlist.api.profile.decoder`.

Non-goals:
- Writing or editing allow-lists.
- Deciding anything from the decoded profiles.

This is the entrypoint for `python -m allowlist.api.profile ...` (via `__main__.py`).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from allowlist.api.config import default_allowlist_path

from . import decoder as decoder_mod


def decode_dump_command(args: argparse.Namespace) -> int:
    """
    `profile decode dump`: decode one or more allow-lists and emit JSON.

    Decoding never fails, so the exit status is always 0; look at each entry's
    `status` to see why decoding stopped.
    """
    paths = [Path(p) for p in args.paths] or [default_allowlist_path()]
    allowlist_decoder = decoder_mod.AllowListDecoder()
    out: list[dict] = []
    for path in paths:
        report = allowlist_decoder.decode_report(path)
        if args.summary:
            entry = {
                "path": report.source,
                "status": report.status,
                "profiles": [p.summary() for p in report.profiles],
            }
        else:
            entry = report.to_dict()
        out.append(entry)

    serialized = json.dumps(out, indent=None if args.summary else 2)
    if args.out:
        args.out.write_text(serialized)
        print(f"[+] wrote {args.out}")
    else:
        sys.stdout.write(serialized + ("\n" if not serialized.endswith("\n") else ""))
    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Entrypoint for the `python -m allowlist.api.profile` CLI.

    Accepts an optional `argv` for unit tests and embedding.
    """
    ap = argparse.ArgumentParser(description="Decode and inspect kernel manager allow-list files.")
    ap.add_argument("-v", "--verbose", action="store_true", help="Log decoder progress at DEBUG level")
    sub = ap.add_subparsers(dest="command", required=True)

    ap_decode = sub.add_parser("decode", help="Decode allow-list files.")
    decode_sub = ap_decode.add_subparsers(dest="decode_cmd", required=True)

    dump_p = decode_sub.add_parser("dump", help="Dump decoded profiles for one or more allow-lists")
    dump_p.add_argument(
        "paths",
        nargs="*",
        help="Allow-list files (default: $KSU_ALLOWLIST_PATH or /data/adb/ksu/.allowlist)",
    )
    dump_p.add_argument("--summary", action="store_true", help="Emit key/uid/allow_su rows instead of full profiles")
    dump_p.add_argument("--out", type=Path, help="Write JSON to this path instead of stdout")
    dump_p.set_defaults(func=decode_dump_command)

    args = ap.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
