from pathlib import Path

import pytest

from decksite.core.assets.copy_assets import copy_assets, iter_assets


def _tree(root: Path) -> None:
    (root / "alice" / "hello-world" / "_theme").mkdir(parents=True)
    (root / "alice" / "hello-world" / "index.md").write_text("# Hi", encoding="utf-8")
    (root / "alice" / "hello-world" / "NOTES.MD").write_text("notes", encoding="utf-8")
    (root / "alice" / "hello-world" / "logo.png").write_bytes(bytes(range(256)))
    (root / "alice" / "hello-world" / "_theme" / "hello-world.css").write_text("section{}", encoding="utf-8")
    (root / "README.txt").write_text("top", encoding="utf-8")


def test_iter_assets_skips_markup(tmp_path: Path):
    _tree(tmp_path)
    rels = [p.as_posix() for p in iter_assets(tmp_path)]
    assert rels == [
        "README.txt",
        "alice/hello-world/_theme/hello-world.css",
        "alice/hello-world/logo.png",
    ]


def test_copy_assets_mirrors_bytes(tmp_path: Path):
    src, dst = tmp_path / "slides", tmp_path / "docs"
    _tree(src)

    written = copy_assets(src, dst)

    assert len(written) == 3
    assert (dst / "alice" / "hello-world" / "logo.png").read_bytes() == bytes(range(256))
    assert not list(dst.rglob("*.md"))
    assert not list(dst.rglob("*.MD"))


def test_copy_assets_is_idempotent(tmp_path: Path):
    src, dst = tmp_path / "slides", tmp_path / "docs"
    _tree(src)
    copy_assets(src, dst)
    first = {p: p.read_bytes() for p in dst.rglob("*") if p.is_file()}
    copy_assets(src, dst)
    second = {p: p.read_bytes() for p in dst.rglob("*") if p.is_file()}
    assert first == second


def test_copy_assets_custom_markup(tmp_path: Path):
    src, dst = tmp_path / "slides", tmp_path / "docs"
    src.mkdir()
    (src / "a.markdown").write_text("x", encoding="utf-8")
    (src / "b.md").write_text("x", encoding="utf-8")
    copy_assets(src, dst, {".markdown"})
    assert sorted(p.name for p in dst.iterdir()) == ["b.md"]


def test_copy_assets_missing_source_raises(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        copy_assets(tmp_path / "nope", tmp_path / "docs")
