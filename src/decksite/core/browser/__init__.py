"""
decksite.core.browser - headless browser setup for the renderer.

    ensure_browser_dependencies(sentinel, *, env, platform, command) -> PreflightStatus
    BrowserResolver(env, *, require_browser).resolve() -> BrowserEnvironment
"""
from decksite.core.browser.preflight import PreflightStatus, ensure_browser_dependencies
from decksite.core.browser.resolve import BrowserEnvironment, BrowserResolver

__all__ = [
    "BrowserEnvironment",
    "BrowserResolver",
    "PreflightStatus",
    "ensure_browser_dependencies",
]
