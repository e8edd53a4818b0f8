# tests/conftest.py
import pathlib
import subprocess
import sys

import pytest

# Add <repo>/src to sys.path so `import decksite...` works under pytest
ROOT = pathlib.Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def write_deck(root: pathlib.Path, group: str, slug: str, text: str | None) -> pathlib.Path:
    deck = root / group / slug
    deck.mkdir(parents=True, exist_ok=True)
    if text is not None:
        (deck / "index.md").write_text(text, encoding="utf-8")
    return deck


class FakeRun:
    """Stand-in for subprocess.run that records argv and returns canned exit codes."""

    def __init__(self, codes=None, raises=None):
        self.calls = []
        self.codes = codes or {}
        self.raises = raises

    def __call__(self, argv, **kwargs):
        self.calls.append((list(argv), kwargs))
        if self.raises is not None:
            raise self.raises
        rc = 0
        for flag, code in self.codes.items():
            if flag in argv:
                rc = code
        return subprocess.CompletedProcess(argv, rc)


@pytest.fixture
def fake_run(monkeypatch):
    fr = FakeRun()
    monkeypatch.setattr(subprocess, "run", fr)
    return fr
