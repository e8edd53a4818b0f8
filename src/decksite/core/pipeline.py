"""
pipeline.py - Full site build.

    preflight -> browser env (once) -> render each format in order
    -> copy assets -> discover decks -> index.html / manifest.json / .nojekyll

Every stage runs to completion before the next starts; the first error
propagates and nothing after it runs.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from decksite.core.assets.copy_assets import copy_assets
from decksite.core.browser.preflight import PreflightStatus, ensure_browser_dependencies
from decksite.core.browser.resolve import BrowserResolver
from decksite.core.config.build_config import BuildConfig
from decksite.core.index.discover import DeckGroup, discover_decks
from decksite.core.index.manifest import write_manifest
from decksite.core.index.render_index import write_index
from decksite.core.render.marp_runner import StageResult, run_conversions

log = logging.getLogger(__name__)


@dataclass
class BuildReport:
    preflight: Optional[PreflightStatus] = None
    browser_source: Optional[str] = None
    stages: list[StageResult] = field(default_factory=list)
    copied: list[Path] = field(default_factory=list)
    groups: list[DeckGroup] = field(default_factory=list)
    index_path: Optional[Path] = None
    manifest_path: Optional[Path] = None

    @property
    def deck_count(self) -> int:
        return sum(len(g.decks) for g in self.groups)


def build_index(config: BuildConfig, report: Optional[BuildReport] = None) -> BuildReport:
    """Discover decks and write the listing page (plus manifest / .nojekyll)."""
    report = report or BuildReport()
    report.groups = discover_decks(config.input_dir, config.source_file)
    report.index_path = write_index(report.groups, config.index_path, title=config.index_title)
    if config.manifest:
        write_manifest(report.groups, config.manifest_path)
        report.manifest_path = config.manifest_path
    if config.nojekyll:
        (config.output_dir / ".nojekyll").touch()
    log.info("index written: %s (%d decks)", report.index_path, report.deck_count)
    return report


def run_build(
    config: BuildConfig,
    *,
    resolver: Optional[BrowserResolver] = None,
    skip_render: bool = False,
) -> BuildReport:
    report = BuildReport()

    if not skip_render:
        if config.sentinel_path is not None:
            report.preflight = ensure_browser_dependencies(config.sentinel_path)
        resolver = resolver or BrowserResolver(require_browser=config.require_browser)
        browser = resolver.resolve()
        report.browser_source = browser.source
        report.stages = run_conversions(config.conversions, config, browser)

    report.copied = copy_assets(config.input_dir, config.output_dir, config.markup_extensions)
    log.info("copied %d assets into %s", len(report.copied), config.output_dir)

    return build_index(config, report)
