"""
Page shell shared by every generated document, and the default stylesheet.

Content fragments are markupsafe.Markup; anything that is not already Markup
is escaped when it is interpolated, so callers only wrap output they trust
(pygments HTML, fragments built here) in Markup.
"""

from __future__ import annotations

import dataclasses

from markupsafe import Markup
from pygments.formatters import HtmlFormatter

from .urls import SitePath

DEFAULT_STYLE = "default"
HIGHLIGHT_CLASS = "highlight"

LAYOUT_CSS = """
:root {
  --muted:#666; --line:#eee; --brand:#0366d6; --plus:#0a7b34; --minus:#a01515;
}
* { box-sizing: border-box; }
body { margin: 0 auto; max-width: 72rem; padding: 1rem; line-height: 1.45;
       font-family: -apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,Helvetica,Arial; }
code, pre { font-family: ui-monospace,SFMono-Regular,Menlo,Monaco,Consolas,'Liberation Mono','Courier New', monospace; }
a { color: var(--brand); text-decoration: none; }
a:hover { text-decoration: underline; }
nav { border-bottom: 1px solid var(--line); margin-bottom: 1rem; }
nav h1 { margin: 0 0 .25rem; font-size: 1.4rem; }
nav p { color: var(--muted); margin: 0 0 .5rem; }
ul.inline { list-style: none; padding: 0; }
ul.inline li { display: inline; margin-right: 1rem; }
table { border-collapse: collapse; width: 100%; }
th, td { text-align: left; padding: .2rem .5rem; border-bottom: 1px solid var(--line); }
.numeric { text-align: right; }
td.numeric { font-family: monospace; }
td.plus { color: var(--plus); }
td.minus { color: var(--minus); }
dl { display: grid; grid-template-columns: max-content auto; gap: .2rem 1rem; }
dt { font-weight: bold; }
dd { margin: 0; }
pre { background:#f6f8fa; padding:.75rem; overflow:auto; border-radius:6px; }
footer { border-top: 1px solid var(--line); margin-top: 2rem; color: var(--muted); font-size: .85rem; }
"""


@dataclasses.dataclass(frozen=True)
class Navigation:
    name: str
    description: str = ""
    url: str = ""


@dataclasses.dataclass(frozen=True)
class Page:
    title: str
    content: Markup
    path: SitePath


def stylesheet(style: str = DEFAULT_STYLE) -> str:
    formatter = HtmlFormatter(style=style)
    return LAYOUT_CSS.lstrip() + "\n/* Pygments */\n" + formatter.get_style_defs("." + HIGHLIGHT_CLASS) + "\n"


def link(href: str, text: object) -> Markup:
    return Markup('<a href="{}">{}</a>').format(href, text)


def render_page(page: Page, nav: Navigation) -> str:
    here = page.path
    clone = Markup("")
    if nav.url:
        clone = Markup("<pre>git clone {}</pre>").format(link(nav.url, nav.url))
    description = Markup("<p>{}</p>").format(nav.description) if nav.description else Markup("")
    menu = Markup("").join(
        Markup("<li>{}</li>").format(link(here.href(target), label))
        for target, label in (
            (SitePath.commit_log(), "Commits"),
            (SitePath.tree_index(), "Files"),
            (SitePath.refs(), "Branches and tags"),
        )
    )
    doc = Markup(
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="utf-8" />\n'
        '<meta name="viewport" content="width=device-width" />\n'
        "<title>{title} – {name}</title>\n"
        '<link rel="stylesheet" href="{css}" />\n'
        "</head>\n"
        "<body>\n"
        "<nav>\n<h1>{name}</h1>\n{description}{clone}"
        '<ul class="inline">{menu}</ul>\n</nav>\n'
        "<main>\n{content}\n</main>\n"
        "<footer>Powered by {powered}</footer>\n"
        "</body>\n"
        "</html>\n"
    ).format(
        title=page.title,
        name=nav.name,
        css=here.href(SitePath.stylesheet()),
        description=description,
        clone=clone,
        menu=menu,
        content=page.content,
        powered="rendergit-site, static git browser generator",
    )
    return str(doc)

