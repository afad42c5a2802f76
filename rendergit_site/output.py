"""Filesystem writes for the destination tree; OSError becomes SiteIOError."""

from __future__ import annotations

import pathlib

from .errors import SiteIOError


def make_dirs(path: pathlib.Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SiteIOError(f"cannot create directory {path}: {e}") from e


def write_file(path: pathlib.Path, data: bytes) -> None:
    try:
        path.write_bytes(data)
    except OSError as e:
        raise SiteIOError(f"cannot write {path}: {e}") from e


def create_if_absent(path: pathlib.Path, data: bytes) -> bool:
    """Write `data` only when nothing exists at `path`. Returns True if written."""
    try:
        with path.open("xb") as f:
            f.write(data)
    except FileExistsError:
        return False
    except OSError as e:
        raise SiteIOError(f"cannot create {path}: {e}") from e
    return True
