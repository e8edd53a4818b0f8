import json
from pathlib import Path

import pytest

from conftest import FakeRun, write_deck
from decksite.apps.cli.main import main
from decksite.core.browser.resolve import BrowserResolver
from decksite.core.config.build_config import load_build_config
from decksite.core.errors import RenderStageError
from decksite.core.pipeline import build_index, run_build
from decksite.core.render import marp_runner


@pytest.fixture
def project(tmp_path: Path, monkeypatch) -> Path:
    monkeypatch.setenv("DECKSITE_SKIP_BROWSER_DEPS", "1")
    monkeypatch.setenv("CHROME_PATH", "/usr/bin/chromium")
    slides = tmp_path / "slides"
    deck = write_deck(slides, "alice", "hello-world", "---\nmarp: true\n---\n# Hello World Deck\n")
    (deck / "diagram.svg").write_text("<svg/>", encoding="utf-8")
    write_deck(slides, "bob", "roadmap", None)
    (slides / "empty").mkdir()
    (tmp_path / "decksite.json").write_text(json.dumps({"renderer": {"command": ["marp"]}}), encoding="utf-8")
    return tmp_path


def _snapshot(root: Path) -> dict[str, bytes]:
    return {p.relative_to(root).as_posix(): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()}


def test_full_build(project: Path, fake_run: FakeRun):
    cfg = load_build_config(project / "decksite.json")
    report = run_build(cfg, resolver=BrowserResolver({}, sources=()))

    assert [s.label for s in report.stages] == ["html", "pdf", "pptx", "png"]
    assert report.browser_source == "none"
    assert report.deck_count == 2

    docs = project / "docs"
    files = _snapshot(docs)
    assert "alice/hello-world/diagram.svg" in files
    assert not [f for f in files if f.endswith(".md")]
    assert ".nojekyll" in files

    index = files["index.html"].decode("utf-8")
    assert '<a href="alice/hello-world/">Hello World Deck</a>' in index
    assert '<a href="bob/roadmap/">Roadmap</a>' in index
    assert "Empty" not in index

    manifest = json.loads(files["manifest.json"])
    assert [g["id"] for g in manifest["groups"]] == ["alice", "bob"]
    assert manifest["groups"][0]["decks"][0]["pdf"] == "alice/hello-world/index.pdf"


def test_rebuild_is_byte_identical(project: Path, fake_run: FakeRun):
    cfg = load_build_config(project / "decksite.json")
    run_build(cfg)
    first = _snapshot(project / "docs")
    run_build(cfg)
    assert _snapshot(project / "docs") == first


def test_pdf_failure_stops_before_assets_and_index(project: Path, monkeypatch):
    fr = FakeRun(codes={"--pdf": 2})
    monkeypatch.setattr(marp_runner.subprocess, "run", fr)
    cfg = load_build_config(project / "decksite.json")

    with pytest.raises(RenderStageError):
        run_build(cfg)

    assert len(fr.calls) == 2
    assert not (project / "docs").exists()


def test_cli_build_exits_1_on_render_failure(project: Path, monkeypatch, capsys):
    monkeypatch.setattr(marp_runner.subprocess, "run", FakeRun(codes={"--pdf": 2}))

    with pytest.raises(SystemExit) as e:
        main(["--config", str(project / "decksite.json"), "build"])

    assert e.value.code == 1
    err = capsys.readouterr().err
    assert "build failed" in err and "pdf" in err
    assert not (project / "docs" / "index.html").exists()


def test_cli_build_success(project: Path, fake_run: FakeRun, capsys):
    with pytest.raises(SystemExit) as e:
        main(["--config", str(project / "decksite.json"), "build"])
    assert e.value.code == 0
    assert "[OK] index" in capsys.readouterr().out
    # browser override from CHROME_PATH: renderer env left to the caller's value
    assert all(kw["env"]["CHROME_PATH"] == "/usr/bin/chromium" for _, kw in fake_run.calls)


def test_skip_render_only_copies_and_indexes(project: Path, fake_run: FakeRun):
    cfg = load_build_config(project / "decksite.json")
    report = run_build(cfg, skip_render=True)
    assert fake_run.calls == []
    assert report.stages == []
    assert (project / "docs" / "index.html").exists()


def test_build_index_with_no_decks(tmp_path: Path):
    cfg = load_build_config(project_root=tmp_path)
    report = build_index(cfg)
    assert report.groups == []
    assert "No decks found" in report.index_path.read_text(encoding="utf-8")


def test_cli_rejects_unknown_log_level(project: Path, capsys):
    with pytest.raises(SystemExit) as e:
        main(["--config", str(project / "decksite.json"), "--log-level", "bogus", "index"])
    assert e.value.code == 2
    assert "invalid choice" in capsys.readouterr().err
    assert not (project / "docs").exists()


def test_cli_log_level_is_case_insensitive(project: Path, capsys):
    with pytest.raises(SystemExit) as e:
        main(["--config", str(project / "decksite.json"), "--log-level", "debug", "index"])
    assert e.value.code == 0
    assert "[OK] index" in capsys.readouterr().out
