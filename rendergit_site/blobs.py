"""
File pages: pygments-highlighted source, or a notice plus a raw copy.

Text versus binary is a heuristic, not a content type: a blob counts as text
exactly when its bytes decode as UTF-8. File extensions play no part in it.
"""

from __future__ import annotations

import functools
import pathlib
import posixpath
from typing import Dict, Optional

from markupsafe import Markup
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_all_lexers, get_lexer_by_name, get_lexer_for_filename, guess_lexer
from pygments.lexers.special import TextLexer
from pygments.util import ClassNotFound

from .git import File
from .output import make_dirs, write_file
from .templates import HIGHLIGHT_CLASS, Page, link
from .urls import SitePath

BINARY_NOTICE = "This file is not valid UTF-8 text and is not shown here."
RAW_LINK_TEXT = "see raw"
FIRST_LINE_PREFIXES = ("#!", "<?")
# pygments strips leading and trailing blank lines unless told not to
LEXER_OPTIONS = {"stripnl": False}


def decode_blob(content: bytes) -> Optional[str]:
    """Return the text of `content`, or None when it does not decode as UTF-8."""
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError:
        return None


@functools.lru_cache(maxsize=1)
def _exact_filenames() -> Dict[str, str]:
    # literal (wildcard-free) filename patterns, e.g. "Makefile", "CMakeLists.txt"
    names: Dict[str, str] = {}
    for _name, aliases, patterns, _mimetypes in get_all_lexers():
        if not aliases:
            continue
        for pattern in patterns:
            if not any(ch in pattern for ch in "*?["):
                names.setdefault(pattern, aliases[0])
    return names


def select_lexer(filename: str, extension: str, first_line: str) -> Lexer:
    """Pick a lexer by exact filename, then extension, then first line, then plain text."""
    alias = _exact_filenames().get(filename)
    if alias is not None:
        return get_lexer_by_name(alias, **LEXER_OPTIONS)
    if extension:
        try:
            return get_lexer_for_filename("file" + extension, **LEXER_OPTIONS)
        except ClassNotFound:
            pass
    if first_line.startswith(FIRST_LINE_PREFIXES):
        try:
            return guess_lexer(first_line, **LEXER_OPTIONS)
        except ClassNotFound:
            pass
    return TextLexer(**LEXER_OPTIONS)


def highlight_source(filename: str, text: str) -> Markup:
    """Highlighted HTML for `text`; pygments escapes the source itself."""
    extension = posixpath.splitext(filename)[1]
    first_line = text.split("\n", 1)[0]
    lexer = select_lexer(filename, extension, first_line)
    return Markup(highlight(text, lexer, HtmlFormatter(cssclass=HIGHLIGHT_CLASS)))


def render_blob(file: File, destination: pathlib.Path) -> Page:
    """
    Page for one file. For binary content this also writes the raw bytes next
    to the page, at the same path minus the page suffix.
    """
    here = SitePath.tree_file(file.path)
    text = decode_blob(file.content)
    if text is not None:
        content = highlight_source(file.name, text)
    else:
        raw = here.raw_sibling()
        raw_path = raw.resolve(destination)
        make_dirs(raw_path.parent)
        write_file(raw_path, file.content)
        content = Markup("<p>{}</p>\n<p>{}</p>").format(BINARY_NOTICE, link(here.href(raw), RAW_LINK_TEXT))
    return Page(title="/" + file.path, content=content, path=here)
