"""
inspect_outputs.py - Sanity checks for rendered deck artifacts.

Per deck:
  index.html  must exist
  index.pdf   must open with PyMuPDF and have >= 1 page
  index.pptx  must open with python-pptx and have >= 1 slide
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

import fitz  # PyMuPDF
import orjson
from pptx import Presentation

from decksite.core.index.discover import Deck, DeckGroup


def _suppress_mupdf_noise() -> None:
    tools = getattr(fitz, "TOOLS", None)
    if tools is None:
        return
    for name in ("mupdf_display_errors", "mupdf_display_warnings"):
        fn = getattr(tools, name, None)
        if callable(fn):
            fn(False)


def pdf_page_count(path: Path) -> int:
    with fitz.open(str(path)) as doc:
        return int(doc.page_count)


def pptx_slide_count(path: Path) -> int:
    return len(Presentation(str(path)).slides)


def inspect_deck(output_dir: Path, deck: Deck) -> dict[str, Any]:
    base = output_dir / deck.group / deck.slug
    problems: list[str] = []
    record: dict[str, Any] = {"group": deck.group, "slug": deck.slug, "title": deck.title}

    if not (base / "index.html").exists():
        problems.append("missing index.html")

    pdf = base / "index.pdf"
    if not pdf.exists():
        problems.append("missing index.pdf")
    else:
        try:
            record["pdf_pages"] = pdf_page_count(pdf)
        except Exception as e:
            problems.append(f"unreadable index.pdf: {e}")
        else:
            if record["pdf_pages"] < 1:
                problems.append("index.pdf has no pages")

    pptx = base / "index.pptx"
    if not pptx.exists():
        problems.append("missing index.pptx")
    else:
        try:
            record["pptx_slides"] = pptx_slide_count(pptx)
        except Exception as e:
            problems.append(f"unreadable index.pptx: {e}")
        else:
            if record["pptx_slides"] < 1:
                problems.append("index.pptx has no slides")

    record["problems"] = problems
    record["ok"] = not problems
    return record


def verify_outputs(output_dir: Path, groups: Sequence[DeckGroup]) -> list[dict[str, Any]]:
    _suppress_mupdf_noise()
    return [inspect_deck(output_dir, d) for g in groups for d in g.decks]


def write_report(records: list[dict[str, Any]], out_path: Path) -> Path:
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(orjson.dumps({"decks": records}, option=orjson.OPT_INDENT_2))
    return out_path
