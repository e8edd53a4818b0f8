"""
discover.py - Find slide decks under the input tree.

Layout: <input>/<group>/<slug>/<source_file>. A deck's title is the first
markdown heading of its source (after any front matter), else the slug.
"""
from __future__ import annotations

import os
import re
import unicodedata
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import quote

FRONT_MATTER_MARKER = "---"
_HEADING_RE = re.compile(r"^#+\s*")
_SLUG_SPLIT_RE = re.compile(r"[-_\s]+")


@dataclass(frozen=True)
class Deck:
    group: str
    slug: str
    title: str

    @property
    def base(self) -> str:
        return f"{quote(self.group)}/{quote(self.slug)}/"

    def artifact(self, ext: str) -> str:
        return f"{self.base}index.{ext}"


@dataclass(frozen=True)
class DeckGroup:
    id: str
    label: str
    decks: tuple[Deck, ...]


def collation_key(s: str) -> tuple[str, str]:
    # accents sort with their base letter: "Écrire" before "Zeta"
    base = "".join(c for c in unicodedata.normalize("NFKD", s) if not unicodedata.combining(c))
    return (base.casefold(), s)


def title_from_slug(slug: str) -> str:
    """hello-world -> Hello World"""
    words = [w for w in _SLUG_SPLIT_RE.split(slug) if w]
    if not words:
        return slug
    return " ".join(w[:1].upper() + w[1:] for w in words)


def extract_title(text: str) -> Optional[str]:
    lines = text.splitlines()
    start = 0
    if lines and lines[0].strip() == FRONT_MATTER_MARKER:
        for i in range(1, len(lines)):
            if lines[i].strip() == FRONT_MATTER_MARKER:
                start = i + 1
                break

    for line in lines[start:]:
        s = line.strip()
        if not s.startswith("#"):
            continue
        title = _HEADING_RE.sub("", s).strip()
        if title:
            return title
    return None


def read_deck_title(deck_dir: Path, source_file: str = "index.md") -> str:
    try:
        text = (deck_dir / source_file).read_text(encoding="utf-8", errors="replace")
    except (FileNotFoundError, NotADirectoryError):
        text = ""
    return extract_title(text) or title_from_slug(deck_dir.name)


def _subdirs(path: Path) -> list[Path]:
    try:
        with os.scandir(path) as it:
            return [Path(e.path) for e in it if e.is_dir() and not e.name.startswith(".")]
    except (FileNotFoundError, NotADirectoryError):
        return []


def discover_decks(input_dir: Path, source_file: str = "index.md") -> list[DeckGroup]:
    """Scan <input>/<group>/<slug>/ and return non-empty groups, sorted by label."""
    groups: list[DeckGroup] = []
    for group_dir in _subdirs(input_dir):
        decks = [
            Deck(group_dir.name, deck_dir.name, read_deck_title(deck_dir, source_file))
            for deck_dir in _subdirs(group_dir)
        ]
        if not decks:
            continue
        decks.sort(key=lambda d: collation_key(d.title))
        groups.append(DeckGroup(group_dir.name, title_from_slug(group_dir.name), tuple(decks)))

    groups.sort(key=lambda g: collation_key(g.label))
    return groups
