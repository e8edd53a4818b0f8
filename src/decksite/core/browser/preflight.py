from __future__ import annotations

import enum
import logging
import os
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Mapping, Sequence

log = logging.getLogger(__name__)

SKIP_ENV_VAR = "DECKSITE_SKIP_BROWSER_DEPS"
PACKAGE_MANAGER = "apt-get"


class PreflightStatus(str, enum.Enum):
    UNSUPPORTED_PLATFORM = "unsupported-platform"
    SKIPPED = "skipped"
    NOT_ROOT = "not-root"
    NO_PACKAGE_MANAGER = "no-package-manager"
    ALREADY_INSTALLED = "already-installed"
    INSTALLED = "installed"
    FAILED = "failed"


def _truthy(val: str | None) -> bool:
    return (val or "").strip().lower() in {"1", "true", "yes", "on"}


def _is_root() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() == 0


def installer_command() -> list[str]:
    return [sys.executable, "-m", "playwright", "install-deps", "chromium"]


def ensure_browser_dependencies(
    sentinel: Path,
    *,
    env: Mapping[str, str] | None = None,
    platform: str | None = None,
    command: Sequence[str] | None = None,
) -> PreflightStatus:
    """Install the headless browser's system packages once per machine.

    Only acts on Linux, as root, with apt-get available. The sentinel file
    records a successful install; installer failures are logged and ignored.
    """
    env = os.environ if env is None else env
    if (platform or sys.platform) != "linux":
        return PreflightStatus.UNSUPPORTED_PLATFORM
    if _truthy(env.get(SKIP_ENV_VAR)):
        log.info("%s set; skipping browser dependency install", SKIP_ENV_VAR)
        return PreflightStatus.SKIPPED
    if not _is_root():
        log.warning("not running as root; skipping browser dependency install")
        return PreflightStatus.NOT_ROOT
    if shutil.which(PACKAGE_MANAGER) is None:
        log.warning("%s not found; skipping browser dependency install", PACKAGE_MANAGER)
        return PreflightStatus.NO_PACKAGE_MANAGER
    if sentinel.exists():
        return PreflightStatus.ALREADY_INSTALLED

    cmd = list(command or installer_command())
    log.info("installing browser system dependencies: %s", " ".join(cmd))
    try:
        proc = subprocess.run(cmd, check=False)
    except OSError as e:
        log.warning("browser dependency installer failed to start: %s", e)
        return PreflightStatus.FAILED
    if proc.returncode != 0:
        log.warning("browser dependency installer exited with %s; continuing", proc.returncode)
        return PreflightStatus.FAILED

    sentinel.parent.mkdir(parents=True, exist_ok=True)
    sentinel.touch()
    return PreflightStatus.INSTALLED
