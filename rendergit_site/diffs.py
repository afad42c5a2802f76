"""
Commit pages and the commit log table.

Both render straight from CommitRecord; any human-readable field that fails
to decode raises InvalidTextError rather than showing a placeholder.
"""

from __future__ import annotations

from typing import List, Sequence

from markupsafe import Markup

from .errors import InvalidTextError
from .git import CommitRecord, Signature
from .templates import Page, link
from .urls import SitePath

NO_PATCH = "unchanged or binary"
DATE_FORMAT = "%Y-%m-%d"


def _signature(sig: Signature, role: str, sha: str) -> Markup:
    try:
        name, email = sig.name(), sig.email()
    except InvalidTextError as e:
        raise InvalidTextError(f"commit {sha}: {role} {e}") from e
    return Markup("{} &lt;{}&gt;").format(name, link("mailto:" + email, email))


def _field(term: str, value: Markup) -> Markup:
    return Markup("<dt>{}</dt><dd>{}</dd>\n").format(term, value)


def render_commit(commit: CommitRecord) -> Page:
    """Metadata, diffstat and one patch block per changed file."""
    here = SitePath.commit(commit.id)
    c = commit.changes
    parts: List[Markup] = [_field("commit", Markup("{}").format(commit.id))]
    for parent in commit.parents:
        parts.append(_field("parent", link(here.href(SitePath.commit(parent)), parent)))
    parts.append(_field("author", _signature(commit.author, "author", commit.id)))
    parts.append(_field("committer", _signature(commit.committer, "committer", commit.id)))
    parts.append(_field("message", Markup("<pre>{}</pre>").format(commit.message())))
    try:
        stat = c.stat_text()
    except InvalidTextError as e:
        raise InvalidTextError(f"commit {commit.id}: {e}") from e
    parts.append(_field("diffstat", Markup("<pre>{}</pre>").format(stat)))

    patches: List[Markup] = []
    for delta in c.deltas:
        text = delta.patch_text()
        if text is None:
            patches.append(Markup("<p>{}</p>").format(NO_PATCH))
        else:
            patches.append(Markup('<pre class="patch">{}</pre>').format(text))

    content = Markup("<dl>\n{}</dl>\n{}").format(Markup("").join(parts), Markup("\n").join(patches))
    return Page(title=f"Commit {commit.id}", content=content, path=here)


def render_log(commits: Sequence[CommitRecord]) -> Page:
    here = SitePath.commit_log()
    rows: List[Markup] = []
    for commit in commits:
        c = commit.changes
        try:
            author = commit.author.name()
        except InvalidTextError as e:
            raise InvalidTextError(f"commit {commit.id}: author {e}") from e
        rows.append(
            Markup(
                "<tr>"
                '<td><abbr title="{ts}">{date}</abbr></td>'
                "<td>{summary}</td>"
                "<td>{author}</td>"
                '<td class="numeric">{files}</td>'
                '<td class="numeric plus">{ins}</td>'
                '<td class="numeric minus">{dels}</td>'
                "</tr>\n"
            ).format(
                ts=commit.time.isoformat(),
                date=commit.time.strftime(DATE_FORMAT),
                summary=link(here.href(SitePath.commit(commit.id)), commit.summary()),
                author=author,
                files=c.files_changed,
                ins=c.insertions,
                dels=c.deletions,
            )
        )
    content = Markup(
        "<table>\n<thead><tr>"
        "<th>Date</th><th>Commit message</th><th>Author</th>"
        '<th class="numeric">Files</th><th class="numeric">+</th><th class="numeric">-</th>'
        "</tr></thead>\n<tbody>\n{}</tbody>\n</table>"
    ).format(Markup("").join(rows))
    return Page(title="Commit log", content=content, path=here)
