from __future__ import annotations
import logging, os

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def boot_logging(level: str | None = None) -> None:
    lvl = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if lvl not in LOG_LEVELS:
        lvl = "INFO"
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s %(levelname)s %(name)s msg=%(message)s",
    )
