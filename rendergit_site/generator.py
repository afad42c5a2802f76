"""
Writes the whole site for one repository into a destination directory.

Steps run in a fixed order and the first exception ends the run; pages that
were already written stay on disk.
"""

from __future__ import annotations

import dataclasses
import pathlib
from typing import Callable, Dict, List

from markupsafe import Markup

from .blobs import decode_blob, render_blob
from .diffs import render_commit, render_log
from .errors import PathCollisionError
from .git import DEFAULT_CONTEXT, CommitRecord, Directory, File, Repository
from .output import create_if_absent, make_dirs, write_file
from .templates import DEFAULT_STYLE, Navigation, Page, link, render_page, stylesheet
from .urls import COMMIT_DIR, SitePath


def _silent(message: str) -> None:
    pass


@dataclasses.dataclass
class SiteOptions:
    style: str = DEFAULT_STYLE
    context: int = DEFAULT_CONTEXT
    progress: Callable[[str], None] = _silent


@dataclasses.dataclass
class GenerationSummary:
    commits: int = 0
    directories: int = 0
    files: int = 0
    stylesheet_created: bool = False


def render_directory(directory: Directory) -> Page:
    here = SitePath.tree_dir(directory.path) if directory.path else SitePath.tree_index()
    items: List[Markup] = []
    for entry in directory.entries:
        if entry.is_submodule:
            # submodule: listed, not linked
            items.append(Markup("<li>{}</li>\n").format(entry.name))
            continue
        if entry.is_dir:
            target, label = SitePath.tree_dir(entry.path), entry.name + "/"
        else:
            target, label = SitePath.tree_file(entry.path), entry.name
        items.append(Markup("<li>{}</li>\n").format(link(here.href(target), label)))
    content = Markup("<ul>\n{}</ul>").format(Markup("").join(items))
    return Page(title="/" + directory.path, content=content, path=here)


class SiteGenerator:
    def __init__(self, repository: Repository, destination: pathlib.Path, options: SiteOptions | None = None) -> None:
        self.repository = repository
        self.destination = pathlib.Path(destination)
        self.options = options or SiteOptions()
        self.summary = GenerationSummary()
        self._nav: Navigation | None = None
        self._claimed: Dict[SitePath, str] = {}

    @property
    def nav(self) -> Navigation:
        if self._nav is None:
            self._nav = Navigation(
                name=self.repository.name(),
                description=self.repository.description(),
                url=self.repository.url(),
            )
        return self._nav

    def claim(self, path: SitePath, owner: str) -> None:
        """Reserve `path` for `owner`; every output file is written at most once per run."""
        if path in self._claimed:
            raise PathCollisionError(f"{path} would hold both {self._claimed[path]} and {owner}")
        self._claimed[path] = owner

    def write_page(self, page: Page) -> None:
        self.claim(page.path, page.title)
        path = page.path.resolve(self.destination)
        make_dirs(path.parent)
        write_file(path, render_page(page, self.nav).encode("utf-8"))

    # ---- steps ---------------------------------------------------------------

    def precreate_dirs(self) -> None:
        make_dirs(self.destination)
        make_dirs(self.destination / COMMIT_DIR)

    def write_stylesheet(self) -> None:
        path = SitePath.stylesheet().resolve(self.destination)
        created = create_if_absent(path, stylesheet(self.options.style).encode("utf-8"))
        self.summary.stylesheet_created = created
        if not created:
            self.options.progress(f"🎨 Keeping existing stylesheet {path}")

    def write_commit_log(self, commits: List[CommitRecord]) -> None:
        self.write_page(render_log(commits))

    def write_all_commits(self, commits: List[CommitRecord]) -> None:
        for commit in commits:
            self.write_page(render_commit(commit))
            self.summary.commits += 1

    def write_tree(self) -> None:
        self.write_directory(self.repository.root_tree())

    def write_directory(self, directory: Directory) -> None:
        self.write_page(render_directory(directory))
        self.summary.directories += 1
        for entry in directory.entries:
            if entry.is_submodule:
                continue
            node = self.repository.open_entry(entry)
            if isinstance(node, Directory):
                self.write_directory(node)
            else:
                self.write_blob(node)

    def write_blob(self, file: File) -> None:
        if decode_blob(file.content) is None:
            self.claim(SitePath.tree_file(file.path).raw_sibling(), f"raw /{file.path}")
        self.write_page(render_blob(file, self.destination))
        self.summary.files += 1

    def generate(self) -> GenerationSummary:
        progress = self.options.progress
        self.precreate_dirs()
        self.write_stylesheet()

        progress(f"📜 Reading history of {self.repository.name()}...")
        commits = self.repository.commit_log(context=self.options.context)

        progress(f"🧮 Rendering log and {len(commits)} commit pages (-U {self.options.context})...")
        self.write_commit_log(commits)
        self.write_all_commits(commits)

        progress("🌳 Rendering file tree...")
        self.write_tree()
        return self.summary
