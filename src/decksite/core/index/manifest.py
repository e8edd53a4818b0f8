from __future__ import annotations

from pathlib import Path
from typing import Any, Sequence

import orjson

from decksite.core.index.discover import DeckGroup

MANIFEST_VERSION = "0.1"
ARTIFACT_EXTS = ("pdf", "pptx", "png")


def build_manifest(groups: Sequence[DeckGroup]) -> dict[str, Any]:
    return {
        "schema_version": MANIFEST_VERSION,
        "groups": [
            {
                "id": g.id,
                "label": g.label,
                "decks": [
                    {
                        "slug": d.slug,
                        "title": d.title,
                        "html": d.base,
                        **{ext: d.artifact(ext) for ext in ARTIFACT_EXTS},
                    }
                    for d in g.decks
                ],
            }
            for g in groups
        ],
    }


def write_manifest(groups: Sequence[DeckGroup], out_path: Path) -> dict[str, Any]:
    manifest = build_manifest(groups)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(orjson.dumps(manifest, option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS))
    return manifest
