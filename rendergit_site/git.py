"""
Read-only view of a local git repository, built on the `git` command line.

Everything here shells out to git plumbing and keeps the output as bytes;
text fields are decoded on access so that a commit with a broken author name
fails where it is rendered, naming the commit, instead of being silently
mangled while the history is read.
"""

from __future__ import annotations

import dataclasses
import datetime
import pathlib
import re
import subprocess
from typing import List, Optional, Tuple, Union

from .errors import ObjectReadError, RepositoryOpenError, SiteIOError, decode_text

# ---- constants & utilities ---------------------------------------------------

EMPTY_TREE_SHA = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"
DEFAULT_CONTEXT = 3
DIFFSTAT_WIDTH = 72

TREE = "tree"
BLOB = "blob"
SUBMODULE = "commit"  # gitlink: a commit of another repository

# field sep 0x1f, records NUL separated by -z; the message goes last so it may contain anything
LOG_FORMAT = "%H%x1f%P%x1f%an%x1f%ae%x1f%cn%x1f%ce%x1f%cI%x1f%s%x1f%B"
LOG_FIELDS = 9

_PATCH_START = re.compile(rb"^(?=diff --git )", re.MULTILINE)
_HUNK = re.compile(rb"^@@ ", re.MULTILINE)

_UNSET = object()


def run(cmd: List[str], cwd: Union[str, pathlib.Path, None] = None, check: bool = True) -> subprocess.CompletedProcess:
    return subprocess.run(cmd, cwd=cwd, check=check, capture_output=True)


def _stderr(e: subprocess.CalledProcessError) -> str:
    return (e.stderr or b"").decode("utf-8", errors="replace").strip()


# ---- data model --------------------------------------------------------------

@dataclasses.dataclass(frozen=True)
class Signature:
    raw_name: bytes
    raw_email: bytes

    def name(self) -> str:
        return decode_text(self.raw_name, "name")

    def email(self) -> str:
        return decode_text(self.raw_email, "email")


@dataclasses.dataclass(frozen=True)
class Delta:
    """One file's entry in a change set."""
    raw_patch: bytes

    def patch_text(self) -> Optional[str]:
        """Unified patch, or None for binary, mode-only and empty changes."""
        if not _HUNK.search(self.raw_patch):
            return None
        try:
            return self.raw_patch.decode("utf-8")
        except UnicodeDecodeError:
            # same heuristic as blobs: undecodable content counts as binary
            return None


@dataclasses.dataclass(frozen=True)
class ChangeSet:
    files_changed: int
    insertions: int
    deletions: int
    raw_stat: bytes
    deltas: Tuple[Delta, ...]

    def stat_text(self) -> str:
        return decode_text(self.raw_stat, "diffstat")


@dataclasses.dataclass(frozen=True)
class CommitRecord:
    id: str
    parents: Tuple[str, ...]
    author: Signature
    committer: Signature
    time: datetime.datetime
    raw_summary: bytes
    raw_message: bytes
    changes: ChangeSet

    @property
    def first_parent(self) -> Optional[str]:
        return self.parents[0] if self.parents else None

    def summary(self) -> str:
        return decode_text(self.raw_summary, f"summary of commit {self.id}")

    def message(self) -> str:
        return decode_text(self.raw_message, f"message of commit {self.id}")


@dataclasses.dataclass(frozen=True)
class TreeEntry:
    name: str
    kind: str  # TREE, BLOB or SUBMODULE
    oid: str
    path: str  # slash separated, relative to the tree root

    @property
    def is_dir(self) -> bool:
        return self.kind == TREE

    @property
    def is_submodule(self) -> bool:
        return self.kind == SUBMODULE


@dataclasses.dataclass(frozen=True)
class Directory:
    path: str  # "" for the root
    entries: Tuple[TreeEntry, ...]


@dataclasses.dataclass(frozen=True)
class File:
    path: str
    content: bytes

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]


TreeNode = Union[Directory, File]


def split_patches(raw: bytes) -> List[bytes]:
    return [chunk for chunk in _PATCH_START.split(raw) if chunk]


def parse_numstat(raw: bytes) -> Tuple[int, int, int]:
    """
    Return (files_changed, insertions, deletions) from --numstat output.
    Binary files count as changed with no line counts ("-\t-\tpath").
    """
    files_changed = insertions = deletions = 0
    for line in raw.splitlines():
        parts = line.split(b"\t")
        if len(parts) < 3:
            continue
        a, d = parts[0], parts[1]
        if a.isdigit():
            insertions += int(a)
        if d.isdigit():
            deletions += int(d)
        files_changed += 1
    return files_changed, insertions, deletions


def parse_ls_tree(raw: bytes, parent_path: str) -> Tuple[TreeEntry, ...]:
    entries: List[TreeEntry] = []
    for rec in raw.split(b"\x00"):
        if not rec:
            continue
        meta, _, raw_name = rec.partition(b"\t")
        fields = meta.split()
        if len(fields) != 3 or not raw_name:
            raise ObjectReadError(f"malformed tree entry: {rec!r}")
        _mode, kind, oid = (f.decode("ascii") for f in fields)
        if kind not in (TREE, BLOB, SUBMODULE):
            raise ObjectReadError(f"unknown tree entry type {kind!r}: {rec!r}")
        where = f"{parent_path}/" if parent_path else ""
        name = decode_text(raw_name, f"name of an entry in /{where}")
        entries.append(TreeEntry(name=name, kind=kind, oid=oid, path=where + name))
    return tuple(entries)


# ---- repository --------------------------------------------------------------

class Repository:
    def __init__(self, path: pathlib.Path, git_dir: pathlib.Path) -> None:
        self.path = path
        self.git_dir = git_dir
        self._name = _UNSET
        self._description = _UNSET
        self._url = _UNSET

    @classmethod
    def open(cls, path: Union[str, pathlib.Path]) -> "Repository":
        path = pathlib.Path(path)
        if not path.is_dir():
            raise RepositoryOpenError(f"{path}: not a directory")
        root = path.resolve()
        try:
            cp = run(["git", "rev-parse", "--is-bare-repository", "--absolute-git-dir"], cwd=root)
            bare, git_dir = cp.stdout.decode("utf-8").split("\n")[:2]
            if bare == "true" or pathlib.Path(git_dir).resolve() == root:
                # bare repository, or the .git directory of a work tree
                top = git_dir
            else:
                top = run(["git", "rev-parse", "--show-toplevel"], cwd=root).stdout.decode("utf-8").strip()
        except subprocess.CalledProcessError as e:
            raise RepositoryOpenError(f"{path}: not a git repository ({_stderr(e)})") from e
        except (OSError, UnicodeDecodeError, ValueError) as e:
            raise RepositoryOpenError(f"{path}: cannot inspect repository: {e}") from e
        if pathlib.Path(top).resolve() != root:
            raise RepositoryOpenError(f"{path}: not a repository root (the root is {top})")
        return cls(root, pathlib.Path(git_dir))

    # ---- lazily read metadata ------------------------------------------------

    def name(self) -> str:
        if self._name is _UNSET:
            self._name = self.path.name
        return self._name

    def description(self) -> str:
        if self._description is _UNSET:
            self._description = self._read_sidecar("description")
        return self._description

    def url(self) -> str:
        if self._url is _UNSET:
            self._url = self._read_sidecar("url")
        return self._url

    def _read_sidecar(self, name: str) -> str:
        p = self.git_dir / name
        try:
            data = p.read_bytes()
        except FileNotFoundError:
            return ""
        except OSError as e:
            raise SiteIOError(f"cannot read {p}: {e}") from e
        return decode_text(data, str(p)).strip()

    # ---- object access -------------------------------------------------------

    def _git(self, *args: str) -> bytes:
        cmd = ["git", *args]
        try:
            return run(cmd, cwd=self.path).stdout
        except subprocess.CalledProcessError as e:
            raise ObjectReadError(f"`{' '.join(cmd)}` failed in {self.path}: {_stderr(e)}") from e

    def commit_log(self, context: int = DEFAULT_CONTEXT) -> List[CommitRecord]:
        """Commits reachable from HEAD, newest first, in topological order."""
        out = self._git("log", "--topo-order", "-z", "--no-color", "--no-show-signature",
                        "--pretty=format:" + LOG_FORMAT, "HEAD", "--")
        commits: List[CommitRecord] = []
        for rec in out.split(b"\x00"):
            if not rec:
                continue
            fields = rec.split(b"\x1f", LOG_FIELDS - 1)
            if len(fields) != LOG_FIELDS:
                raise ObjectReadError(f"unexpected git log record: {rec[:80]!r}")
            h, p, an, ae, cn, ce, cd, s, b = fields
            sha = h.decode("ascii")
            parents = tuple(x.decode("ascii") for x in p.split())
            try:
                when = datetime.datetime.fromisoformat(cd.decode("ascii"))
            except ValueError as e:
                raise ObjectReadError(f"commit {sha}: bad timestamp {cd!r}") from e
            commits.append(
                CommitRecord(
                    id=sha,
                    parents=parents,
                    author=Signature(an, ae),
                    committer=Signature(cn, ce),
                    time=when,
                    raw_summary=s,
                    raw_message=b,
                    changes=self.change_set(sha, parents[0] if parents else None, context=context),
                )
            )
        return commits

    def change_set(self, sha: str, parent: Optional[str], context: int = DEFAULT_CONTEXT) -> ChangeSet:
        base = parent if parent else EMPTY_TREE_SHA
        diff = ["diff-tree", "-r", "--no-renames", "--no-color", "--no-ext-diff", "--no-textconv"]
        numstat = self._git(*diff, "--numstat", base, sha)
        stat = self._git(*diff, f"--stat={DIFFSTAT_WIDTH}", base, sha)
        patch = self._git(*diff, "-p", f"-U{context}", base, sha)
        files_changed, ins, dels = parse_numstat(numstat)
        return ChangeSet(
            files_changed=files_changed,
            insertions=ins,
            deletions=dels,
            raw_stat=stat,
            deltas=tuple(Delta(chunk) for chunk in split_patches(patch)),
        )

    def root_tree(self) -> Directory:
        return self.read_tree("HEAD^{tree}", "")

    def read_tree(self, treeish: str, path: str) -> Directory:
        return Directory(path=path, entries=parse_ls_tree(self._git("ls-tree", "-z", treeish), path))

    def read_blob(self, oid: str) -> bytes:
        return self._git("cat-file", "blob", oid)

    def open_entry(self, entry: TreeEntry) -> TreeNode:
        if entry.is_submodule:
            raise ObjectReadError(f"{entry.path} is a submodule; its commit {entry.oid} lives in another repository")
        if entry.is_dir:
            return self.read_tree(entry.oid, entry.path)
        return File(path=entry.path, content=self.read_blob(entry.oid))
