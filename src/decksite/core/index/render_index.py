"""
render_index.py - Static HTML listing of built decks.

One <li> per group, nested <ul> of decks; each deck links to its HTML build
with sibling PDF / PPTX links. Output carries no timestamps so rebuilds are
byte-identical.
"""
from __future__ import annotations

import html
from pathlib import Path
from typing import Sequence

from decksite.core.index.discover import Deck, DeckGroup

EMPTY_MESSAGE = "No decks found yet. Run <code>decksite build</code> to generate slides."

_CSS = """
body{font-family:system-ui,sans-serif;max-width:48rem;margin:2rem auto;padding:0 1rem;color:#2c3e50}
h1{font-size:1.6em;margin:0 0 .5em}
.lead{color:#7f8c8d;margin-bottom:1.5em}
ul.groups{list-style:none;padding:0}
ul.groups>li{margin-bottom:1.2em}
ul.groups>li>h2{font-size:1.1em;margin:0 0 .3em}
ul.decks li{margin:.2em 0}
.formats{font-size:.85em;color:#7f8c8d}
.formats a{color:#7f8c8d}
"""


def _e(s: str) -> str:
    return html.escape(s, quote=True)


def _deck_item(deck: Deck) -> str:
    return (
        f'<li><a href="{_e(deck.base)}">{_e(deck.title)}</a> '
        f'<span class="formats">'
        f'(<a href="{_e(deck.artifact("pdf"))}">PDF</a> · '
        f'<a href="{_e(deck.artifact("pptx"))}">PPTX</a>)'
        f"</span></li>"
    )


def render_index_html(groups: Sequence[DeckGroup], *, title: str = "Slide decks") -> str:
    if groups:
        items: list[str] = []
        for g in groups:
            decks = "\n".join(_deck_item(d) for d in g.decks)
            items.append(
                f'<li id="{_e(g.id)}"><h2>{_e(g.label)}</h2>\n'
                f'<ul class="decks">\n{decks}\n</ul></li>'
            )
        body = '<ul class="groups">\n' + "\n".join(items) + "\n</ul>"
    else:
        body = f'<p class="empty">{EMPTY_MESSAGE}</p>'

    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n<head>\n<meta charset="utf-8">\n'
        '<meta name="viewport" content="width=device-width, initial-scale=1">\n'
        f"<title>{_e(title)}</title>\n<style>{_CSS}</style>\n</head>\n<body>\n"
        f"<h1>{_e(title)}</h1>\n"
        '<p class="lead">Each deck is available as HTML slides, with PDF and PPTX exports alongside.</p>\n'
        f"{body}\n</body>\n</html>\n"
    )


def write_index(groups: Sequence[DeckGroup], out_path: Path, *, title: str = "Slide decks") -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(render_index_html(groups, title=title), encoding="utf-8")
    return out_path
