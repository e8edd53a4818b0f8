from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping, Optional

from decksite.core.errors import BrowserNotFoundError

log = logging.getLogger(__name__)

OVERRIDE_ENV_VARS: tuple[str, ...] = ("CHROME_PATH", "PUPPETEER_EXECUTABLE_PATH")

# Relative executable locations inside one Puppeteer cache build directory.
_PUPPETEER_EXECUTABLES: dict[str, tuple[str, ...]] = {
    "linux": ("chrome-linux64/chrome", "chrome-linux/chrome"),
    "darwin": (
        "chrome-mac-arm64/Google Chrome for Testing.app/Contents/MacOS/Google Chrome for Testing",
        "chrome-mac-x64/Google Chrome for Testing.app/Contents/MacOS/Google Chrome for Testing",
    ),
    "win32": ("chrome-win64/chrome.exe", "chrome-win32/chrome.exe"),
}


@dataclass(frozen=True)
class BrowserEnvironment:
    variables: dict[str, str] = field(default_factory=dict)
    source: str = "none"

    @property
    def executable(self) -> Optional[str]:
        return self.variables.get(OVERRIDE_ENV_VARS[0])

    @classmethod
    def for_executable(cls, path: str, source: str) -> "BrowserEnvironment":
        return cls({name: path for name in OVERRIDE_ENV_VARS}, source)


def _env_path(env: Mapping[str, str], key: str) -> Optional[str]:
    val = env.get(key)
    if val and val.strip():
        return val.strip()
    return None


def playwright_chromium() -> Optional[str]:
    """Executable of the Chromium build bundled with Playwright, if installed."""
    from playwright.sync_api import sync_playwright

    try:
        with sync_playwright() as p:
            path = p.chromium.executable_path
    except Exception as e:
        log.debug("playwright chromium unavailable: %s", e)
        return None
    if path and Path(path).exists():
        return path
    return None


def puppeteer_cache_chrome(env: Mapping[str, str] | None = None, platform: str | None = None) -> Optional[str]:
    """Newest Chrome build in the Puppeteer browser cache, if any."""
    env = os.environ if env is None else env
    platform = platform or sys.platform
    cache = _env_path(env, "PUPPETEER_CACHE_DIR")
    root = Path(cache) if cache else Path.home() / ".cache" / "puppeteer"
    builds_dir = root / "chrome"
    if not builds_dir.is_dir():
        return None

    # build dirs look like "linux-121.0.6167.85"; newest version last
    def _version_key(p: Path) -> tuple[int, ...]:
        ver = p.name.rsplit("-", 1)[-1]
        return tuple(int(x) if x.isdigit() else 0 for x in ver.split("."))

    rels = _PUPPETEER_EXECUTABLES.get(platform, _PUPPETEER_EXECUTABLES["linux"])
    for build in sorted((d for d in builds_dir.iterdir() if d.is_dir()), key=_version_key, reverse=True):
        for rel in rels:
            exe = build / rel
            if exe.exists():
                return str(exe)
    return None


class BrowserResolver:
    """Resolves the headless browser for the renderer once and remembers it.

    Resolution order:
      1) CHROME_PATH / PUPPETEER_EXECUTABLE_PATH already set -> empty override
      2) Chromium bundled with Playwright
      3) Puppeteer browser cache
    A miss degrades to an empty environment (system browser) unless
    `require_browser` is set.
    """

    def __init__(
        self,
        env: Mapping[str, str] | None = None,
        *,
        require_browser: bool = False,
        sources: tuple[tuple[str, Callable[[], Optional[str]]], ...] | None = None,
    ) -> None:
        self._env = os.environ if env is None else env
        self._require = require_browser
        self._sources = sources if sources is not None else (
            ("playwright", playwright_chromium),
            ("puppeteer", lambda: puppeteer_cache_chrome(self._env)),
        )
        self._cached: Optional[BrowserEnvironment] = None

    def resolve(self) -> BrowserEnvironment:
        if self._cached is None:
            self._cached = self._compute()
        return self._cached

    def _compute(self) -> BrowserEnvironment:
        for key in OVERRIDE_ENV_VARS:
            if _env_path(self._env, key):
                log.info("using browser from %s", key)
                return BrowserEnvironment(source="environment")

        for name, finder in self._sources:
            path = finder()
            if path:
                log.info("resolved %s browser: %s", name, path)
                return BrowserEnvironment.for_executable(path, name)

        msg = (
            "no bundled headless browser found (tried: "
            + ", ".join(name for name, _ in self._sources)
            + "); falling back to the system browser. "
            "Set CHROME_PATH or run `python -m playwright install chromium`."
        )
        if self._require:
            raise BrowserNotFoundError(msg)
        log.warning(msg)
        return BrowserEnvironment()
