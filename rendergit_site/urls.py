"""
Destination-relative output paths and the links between them.

Every generated page knows where it will be written as a SitePath. Links to
shared root-level pages are built by prefixing the target's root-relative path
with one "../" per directory the page is nested in, so the same link renders
correctly from `log.html`, `commit/<id>.html` and `tree/a/b/c.html` alike.
"""

from __future__ import annotations

import dataclasses
import pathlib
from typing import Tuple

PAGE_SUFFIX = ".html"
INDEX_NAME = "index" + PAGE_SUFFIX
STYLESHEET_NAME = "rendergit.css"
COMMIT_DIR = "commit"
TREE_DIR = "tree"


def _split(tree_path: str) -> Tuple[str, ...]:
    return tuple(p for p in tree_path.split("/") if p)


@dataclasses.dataclass(frozen=True)
class SitePath:
    parts: Tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.parts:
            raise ValueError("SitePath needs at least a file name")
        for p in self.parts:
            if not p or p in (".", "..") or "/" in p:
                raise ValueError(f"invalid path segment: {p!r}")

    # ---- well-known destinations --------------------------------------------

    @classmethod
    def commit_log(cls) -> "SitePath":
        return cls(("log" + PAGE_SUFFIX,))

    @classmethod
    def commit(cls, commit_id: str) -> "SitePath":
        return cls((COMMIT_DIR, commit_id + PAGE_SUFFIX))

    @classmethod
    def tree_index(cls) -> "SitePath":
        return cls((TREE_DIR, INDEX_NAME))

    @classmethod
    def tree_dir(cls, tree_path: str) -> "SitePath":
        """Index page of the directory at `tree_path` (slash separated)."""
        return cls((TREE_DIR,) + _split(tree_path) + (INDEX_NAME,))

    @classmethod
    def tree_file(cls, tree_path: str) -> "SitePath":
        """Page of the file at `tree_path`; sits beside, never inside, a same-named directory."""
        segments = _split(tree_path)
        if not segments:
            raise ValueError("tree file path must not be empty")
        return cls((TREE_DIR,) + segments[:-1] + (segments[-1] + PAGE_SUFFIX,))

    @classmethod
    def refs(cls) -> "SitePath":
        # Linked from navigation, never generated.
        return cls(("refs" + PAGE_SUFFIX,))

    @classmethod
    def stylesheet(cls) -> "SitePath":
        return cls((STYLESHEET_NAME,))

    # ---- link algebra -------------------------------------------------------

    @property
    def depth(self) -> int:
        return len(self.parts) - 1

    @property
    def name(self) -> str:
        return self.parts[-1]

    def root_escape(self) -> str:
        return "../" * self.depth

    def href(self, target: "SitePath") -> str:
        """Relative link from this page to `target`."""
        return self.root_escape() + target.as_posix()

    def raw_sibling(self) -> "SitePath":
        if not self.name.endswith(PAGE_SUFFIX) or self.name == PAGE_SUFFIX:
            raise ValueError(f"{self.as_posix()} has no page suffix to strip")
        return SitePath(self.parts[:-1] + (self.name[: -len(PAGE_SUFFIX)],))

    def as_posix(self) -> str:
        return "/".join(self.parts)

    def resolve(self, destination: pathlib.Path) -> pathlib.Path:
        return pathlib.Path(destination).joinpath(*self.parts)

    def __str__(self) -> str:
        return self.as_posix()
