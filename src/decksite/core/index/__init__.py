"""
decksite.core.index - deck discovery and the generated listing page.

    discover_decks(input_dir, source_file) -> list[DeckGroup]
    render_index_html(groups, *, title) -> str
    write_index(groups, out_path, *, title) -> Path
    write_manifest(groups, out_path) -> dict
"""
from decksite.core.index.discover import Deck, DeckGroup, discover_decks
from decksite.core.index.manifest import build_manifest, write_manifest
from decksite.core.index.render_index import render_index_html, write_index

__all__ = [
    "Deck",
    "DeckGroup",
    "build_manifest",
    "discover_decks",
    "render_index_html",
    "write_index",
    "write_manifest",
]
