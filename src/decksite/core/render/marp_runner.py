from __future__ import annotations

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping, Optional

from decksite.core.browser.resolve import BrowserEnvironment
from decksite.core.config.build_config import BuildConfig, Conversion
from decksite.core.errors import RendererLaunchError, RenderStageError

log = logging.getLogger(__name__)

# marp-cli passes --no-sandbox to Chromium when this is set
NO_SANDBOX_ENV = {"CHROME_NO_SANDBOX": "1"}


@dataclass(frozen=True)
class StageResult:
    label: str
    command: tuple[str, ...]
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def renderer_argv(config: BuildConfig, conversion: Conversion) -> list[str]:
    argv = list(config.renderer_command)
    if config.renderer_config is not None:
        argv += ["--config", str(config.renderer_config)]
    return argv + list(conversion.flags)


def renderer_env(browser: BrowserEnvironment, base: Mapping[str, str] | None = None) -> dict[str, str]:
    env = dict(os.environ if base is None else base)
    env.update(browser.variables)
    env.update(NO_SANDBOX_ENV)
    return env


def run_conversion(
    conversion: Conversion,
    config: BuildConfig,
    browser: BrowserEnvironment,
    *,
    base_env: Optional[Mapping[str, str]] = None,
) -> StageResult:
    """Run the renderer once for a single output format and wait for it."""
    argv = renderer_argv(config, conversion)
    log.info("render %s: %s", conversion.label, " ".join(argv))
    try:
        proc = subprocess.run(
            argv,
            cwd=str(config.project_root),
            env=renderer_env(browser, base_env),
            check=False,
        )
    except OSError as e:
        raise RendererLaunchError(f"renderer failed to start for stage '{conversion.label}': {e}") from e
    return StageResult(conversion.label, tuple(argv), proc.returncode)


def run_conversions(
    conversions: Iterable[Conversion],
    config: BuildConfig,
    browser: BrowserEnvironment,
    *,
    base_env: Optional[Mapping[str, str]] = None,
) -> list[StageResult]:
    """Run every conversion in order; the first failing stage aborts the rest."""
    results: list[StageResult] = []
    for conversion in conversions:
        result = run_conversion(conversion, config, browser, base_env=base_env)
        if not result.ok:
            raise RenderStageError(result.label, result.returncode)
        results.append(result)
    return results
