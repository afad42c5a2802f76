"""Error hierarchy for site generation.

    SiteError
    ├── RepositoryOpenError   source path is not a repository root
    ├── ObjectReadError       git could not read a commit, tree or blob
    ├── InvalidTextError      bytes expected to be text failed to decode
    ├── SiteIOError           creating or writing an output file failed
    └── PathCollisionError    two tree entries map to the same output file

Only the CLI catches these; everything else lets them propagate.
"""

from __future__ import annotations


class SiteError(Exception):
    """Base class for all site generation errors."""


class RepositoryOpenError(SiteError):
    pass


class ObjectReadError(SiteError):
    pass


class InvalidTextError(SiteError):
    pass


class SiteIOError(SiteError):
    pass


class PathCollisionError(SiteError):
    pass


def decode_text(data: bytes, what: str) -> str:
    """Strict UTF-8 decode that names the offending field on failure."""
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidTextError(f"{what} is not valid UTF-8") from e
