"""Tests for SitePath link computation."""

from __future__ import annotations

import posixpath

import pytest

from rendergit_site.urls import SitePath


def _follow(page: SitePath, href: str) -> str:
    """Where a browser lands when following `href` from `page`."""
    return posixpath.normpath(posixpath.join(posixpath.dirname(page.as_posix()), href))


PAGES = [
    (SitePath.commit_log(), 0),
    (SitePath.stylesheet(), 0),
    (SitePath.refs(), 0),
    (SitePath.commit("abc123"), 1),
    (SitePath.tree_index(), 1),
    (SitePath.tree_file("README"), 1),
    (SitePath.tree_dir("src"), 2),
    (SitePath.tree_file("src/main.py"), 2),
    (SitePath.tree_dir("a/b/c"), 4),
]


class TestWellKnownPaths:
    def test_root_relative_paths(self):
        assert SitePath.commit_log().as_posix() == "log.html"
        assert SitePath.commit("abc").as_posix() == "commit/abc.html"
        assert SitePath.tree_index().as_posix() == "tree/index.html"
        assert SitePath.tree_dir("a/b").as_posix() == "tree/a/b/index.html"
        assert SitePath.tree_file("a/b.py").as_posix() == "tree/a/b.py.html"
        assert SitePath.refs().as_posix() == "refs.html"
        assert SitePath.stylesheet().as_posix() == "rendergit.css"

    def test_tree_paths_ignore_stray_slashes(self):
        assert SitePath.tree_dir("/a//b/") == SitePath.tree_dir("a/b")

    def test_resolve_joins_destination(self, tmp_path):
        assert SitePath.tree_file("a/b.py").resolve(tmp_path) == tmp_path / "tree" / "a" / "b.py.html"

    @pytest.mark.parametrize("parts", [(), ("",), ("..", "x.html"), ("a/b.html",)])
    def test_rejects_bad_segments(self, parts):
        with pytest.raises(ValueError):
            SitePath(parts)

    def test_empty_tree_file_rejected(self):
        with pytest.raises(ValueError):
            SitePath.tree_file("")


class TestRootEscape:
    @pytest.mark.parametrize("page,depth", PAGES)
    def test_escape_has_one_segment_per_level(self, page, depth):
        assert page.depth == depth
        assert page.root_escape() == "../" * depth
        assert page.root_escape().count("../") == depth

    def test_root_page_has_no_escape(self):
        assert SitePath.commit_log().root_escape() == ""
        assert SitePath.commit_log().href(SitePath.stylesheet()) == "rendergit.css"

    @pytest.mark.parametrize("page,_depth", PAGES)
    @pytest.mark.parametrize(
        "target",
        [SitePath.stylesheet(), SitePath.commit_log(), SitePath.tree_index(), SitePath.refs()],
    )
    def test_links_land_on_the_target(self, page, _depth, target):
        assert _follow(page, page.href(target)) == target.as_posix()

    def test_nested_stylesheet_link(self):
        page = SitePath.tree_dir("a/b")
        assert page.href(SitePath.stylesheet()) == "../../../rendergit.css"


class TestTreeMapping:
    def test_file_and_directory_with_same_name_do_not_collide(self, tmp_path):
        as_file = SitePath.tree_file("foo")
        as_dir = SitePath.tree_dir("foo")
        assert as_file != as_dir
        assert as_file.resolve(tmp_path) != as_dir.resolve(tmp_path)
        assert as_file.as_posix() == "tree/foo.html"
        assert as_dir.as_posix() == "tree/foo/index.html"

    def test_raw_sibling_drops_page_suffix(self):
        page = SitePath.tree_file("data/blob.bin")
        assert page.raw_sibling().as_posix() == "tree/data/blob.bin"
        assert page.raw_sibling().depth == page.depth

    def test_raw_sibling_needs_page_suffix(self):
        with pytest.raises(ValueError):
            SitePath.stylesheet().raw_sibling()
