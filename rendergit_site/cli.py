"""
Command line entry point: rendergit-site SOURCE DESTINATION.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from pygments.styles import get_all_styles

from .errors import SiteError
from .generator import SiteGenerator, SiteOptions
from .git import DEFAULT_CONTEXT, Repository
from .templates import DEFAULT_STYLE


def log(message: str) -> None:
    print(message, file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="rendergit-site",
        description="Generate a static website presenting the contents and history of a git repository",
    )
    ap.add_argument("source", help="Directory with the git repository to process")
    ap.add_argument("destination", help="Directory to write HTML files into")
    ap.add_argument("--style", default=DEFAULT_STYLE, choices=sorted(get_all_styles()),
                    help="Pygments style for a newly created stylesheet (default: %(default)s)")
    ap.add_argument("-U", "--context", type=int, default=DEFAULT_CONTEXT, help="Diff context lines")
    ap.add_argument("-q", "--quiet", action="store_true", help="Don't print progress to stderr")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.context < 0:
        log("error: --context must not be negative")
        return 2

    options = SiteOptions(
        style=args.style,
        context=args.context,
        progress=(lambda message: None) if args.quiet else log,
    )
    try:
        repository = Repository.open(args.source)
        options.progress(f"📁 Opened {repository.path}")
        summary = SiteGenerator(repository, args.destination, options).generate()
    except SiteError as e:
        log(f"error: {e}")
        return 1

    options.progress(
        f"💾 Wrote {summary.commits} commits, {summary.directories} directories "
        f"and {summary.files} files to {args.destination}"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
