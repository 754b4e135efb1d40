"""Pageflow CLI entry point.

Allows running via `python -m pageflow` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import sys
from typing import Optional

from .version import get_version_string

USAGE = "usage: pageflow [--right-first | --facing] [FILE]"


def main(argv: Optional[list[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if args and args[0] in ("--version", "-V"):
        print(get_version_string())
        return 0
    if args and args[0] in ("--help", "-h"):
        print(USAGE)
        return 0

    right_first: Optional[bool] = None
    filename: Optional[str] = None
    for arg in args:
        if arg == "--right-first":
            right_first = True
        elif arg == "--facing":
            right_first = False
        elif arg.startswith("-") or filename is not None:
            print(USAGE, file=sys.stderr)
            return 2
        else:
            filename = arg

    # Lazy import to avoid importing UI deps for --version
    from .textual_app import PageflowApp
    PageflowApp(filename=filename, right_first=right_first).run()
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
