from __future__ import annotations

import importlib.metadata


def get_version() -> str:
    try:
        return importlib.metadata.version("pageflow")
    except importlib.metadata.PackageNotFoundError:
        return "0+unknown"


def get_version_string() -> str:
    return f"pageflow {get_version()}"
