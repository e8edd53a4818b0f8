from __future__ import annotations

import json
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from jsonschema import Draft202012Validator

from decksite.core.errors import ConfigError

CONFIG_FILENAME = "decksite.json"


def _default_renderer_command() -> tuple[str, ...]:
    npx = "npx.cmd" if sys.platform == "win32" else "npx"
    return (npx, "marp")


def schema_path() -> Path:
    # .../src/decksite/core/config/build_config.py -> .../src/decksite/core/schemas
    return Path(__file__).resolve().parents[1] / "schemas" / "build.schema.json"


@dataclass(frozen=True)
class Conversion:
    label: str
    flags: tuple[str, ...] = ()


DEFAULT_CONVERSIONS: tuple[Conversion, ...] = (
    Conversion("html"),
    Conversion("pdf", ("--pdf",)),
    Conversion("pptx", ("--pptx",)),
    Conversion("png", ("--image", "png")),
)


@dataclass(frozen=True)
class BuildConfig:
    """Resolved build settings. Paths are absolute once loaded."""

    project_root: Path
    input_dir: Path
    output_dir: Path
    renderer_command: tuple[str, ...] = field(default_factory=_default_renderer_command)
    renderer_config: Path | None = None
    conversions: tuple[Conversion, ...] = DEFAULT_CONVERSIONS
    markup_extensions: frozenset[str] = frozenset({".md"})
    source_file: str = "index.md"
    index_title: str = "Slide decks"
    nojekyll: bool = True
    manifest: bool = True
    require_browser: bool = False
    sentinel_path: Path | None = None

    @property
    def index_path(self) -> Path:
        return self.output_dir / "index.html"

    @property
    def manifest_path(self) -> Path:
        return self.output_dir / "manifest.json"


def validate_config_data(data: Any) -> list[str]:
    """Return `$path: message` strings for every schema violation (empty if valid)."""
    schema = json.loads(schema_path().read_text(encoding="utf-8"))
    v = Draft202012Validator(schema)
    errors = sorted(v.iter_errors(data), key=lambda e: list(e.path))
    msgs: list[str] = []
    for e in errors:
        path = "$"
        for p in e.path:
            path += f"[{p!r}]" if isinstance(p, str) else f"[{p}]"
        msgs.append(f"{path}: {e.message}")
    return msgs


def config_from_dict(data: dict[str, Any], project_root: Path) -> BuildConfig:
    root = project_root.resolve()

    def _path(key: str, default: str) -> Path:
        return (root / data.get(key, default)).resolve()

    renderer = data.get("renderer", {})
    command = tuple(renderer.get("command") or _default_renderer_command())
    config_file = renderer.get("config_file", "marp.config.js")

    if "conversions" in data:
        conversions = tuple(Conversion(c["label"], tuple(c["flags"])) for c in data["conversions"])
    else:
        conversions = DEFAULT_CONVERSIONS

    exts = data.get("markup_extensions", [".md"])

    return BuildConfig(
        project_root=root,
        input_dir=_path("input_dir", "slides"),
        output_dir=_path("output_dir", "docs"),
        renderer_command=command,
        renderer_config=(root / config_file).resolve(),
        conversions=conversions,
        markup_extensions=frozenset(e.lower() for e in exts),
        source_file=data.get("source_file", "index.md"),
        index_title=data.get("index_title", "Slide decks"),
        nojekyll=bool(data.get("nojekyll", True)),
        manifest=bool(data.get("manifest", True)),
        require_browser=bool(data.get("require_browser", False)),
        sentinel_path=_path("sentinel_path", ".cache/decksite/browser-deps.installed"),
    )


def load_build_config(config_path: Path | None = None, *, project_root: Path | None = None) -> BuildConfig:
    """Load and validate the build config.

    Without an explicit path, `decksite.json` in the project root is used when
    present; otherwise every setting takes its default. Relative paths in the
    file resolve against the directory holding it.
    """
    if config_path is None:
        root = (project_root or Path.cwd()).resolve()
        candidate = root / CONFIG_FILENAME
        if not candidate.exists():
            return config_from_dict({}, root)
        config_path = candidate

    config_path = config_path.resolve()
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ConfigError(config_path, ["file not found"]) from e
    except json.JSONDecodeError as e:
        raise ConfigError(config_path, [f"not valid JSON: {e}"]) from e

    problems = validate_config_data(data)
    if problems:
        raise ConfigError(config_path, problems)

    return config_from_dict(data, project_root or config_path.parent)
