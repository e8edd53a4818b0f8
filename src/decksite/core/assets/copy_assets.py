from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Collection, Iterator

DEFAULT_MARKUP_EXTENSIONS = frozenset({".md"})


def iter_assets(from_dir: Path, markup_extensions: Collection[str] = DEFAULT_MARKUP_EXTENSIONS) -> Iterator[Path]:
    """Yield paths (relative to `from_dir`) of every non-markup file, depth-first."""

    def _walk(rel: Path) -> Iterator[Path]:
        with os.scandir(from_dir / rel) as it:
            entries = sorted(it, key=lambda e: e.name)
        for entry in entries:
            child = rel / entry.name
            if entry.is_dir():
                yield from _walk(child)
            elif Path(entry.name).suffix.lower() not in markup_extensions:
                yield child

    return _walk(Path())


def copy_assets(
    from_dir: Path,
    to_dir: Path,
    markup_extensions: Collection[str] = DEFAULT_MARKUP_EXTENSIONS,
) -> list[Path]:
    """Mirror `from_dir` into `to_dir`, leaving out slide markup. Returns written paths."""
    written: list[Path] = []
    for rel in iter_assets(from_dir, markup_extensions):
        dest = to_dir / rel
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(from_dir / rel, dest)
        written.append(dest)
    return written
