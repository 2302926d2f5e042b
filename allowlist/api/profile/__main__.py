"""
Run the allow-list CLI: `python -m allowlist.api.profile decode dump ...`.

Argument parsing and commands live in `cli.py`; this shim only forwards to
`cli.main` and turns its return value into the process exit status.
"""

from __future__ import annotations

from . import cli


def main() -> int:
    return cli.main()


if __name__ == "__main__":
    raise SystemExit(main())
