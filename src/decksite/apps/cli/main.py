from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from decksite.core.config.build_config import BuildConfig, load_build_config, schema_path
from decksite.core.errors import ConfigError
from decksite.core.index.discover import discover_decks
from decksite.core.pipeline import build_index, run_build
from decksite.obs.logging import LOG_LEVELS, boot_logging


def _load_config(args: argparse.Namespace) -> BuildConfig:
    config_path = Path(args.config) if args.config else None
    return load_build_config(config_path)


def _print_ng(msg: str) -> None:
    print(f"[NG] {msg}", file=sys.stderr)


def cmd_paths(args: argparse.Namespace) -> int:
    try:
        cfg = _load_config(args)
    except ConfigError as e:
        _print_ng(str(e))
        return 2
    print(f"project_root: {cfg.project_root}")
    print(f"input_dir: {cfg.input_dir}")
    print(f"output_dir: {cfg.output_dir}")
    print(f"renderer_config: {cfg.renderer_config}")
    print(f"index: {cfg.index_path}")
    print(f"sentinel: {cfg.sentinel_path}")
    print(f"schema.build: {schema_path()}")
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    try:
        cfg = _load_config(args)
    except ConfigError as e:
        print(f"[NG] {e.path}")
        for m in e.problems[:30]:
            print(f"  - {m}")
        if len(e.problems) > 30:
            print(f"  ... ({len(e.problems)} errors)")
        return 2

    missing: list[str] = []
    if not cfg.input_dir.is_dir():
        missing.append(f"input_dir ({cfg.input_dir})")
    if cfg.renderer_config is not None and not cfg.renderer_config.exists():
        missing.append(f"renderer config ({cfg.renderer_config})")
    if missing:
        print("[NG] missing required files:")
        for m in missing:
            print(f"  - {m}")
        return 2

    print("[OK] build config")
    return 0


def cmd_build(args: argparse.Namespace) -> int:
    try:
        cfg = _load_config(args)
        report = run_build(cfg, skip_render=args.skip_render)
    except Exception as e:
        _print_ng(f"build failed: {e}")
        return 1

    for stage in report.stages:
        print(f"[OK] render {stage.label}")
    print(f"[OK] copied {len(report.copied)} assets")
    print(f"[OK] index: {report.index_path} ({report.deck_count} decks)")
    return 0


def cmd_index(args: argparse.Namespace) -> int:
    try:
        cfg = _load_config(args)
        report = build_index(cfg)
    except Exception as e:
        _print_ng(f"index failed: {e}")
        return 1
    print(f"[OK] index: {report.index_path} ({report.deck_count} decks)")
    return 0


def cmd_verify(args: argparse.Namespace) -> int:
    # PyMuPDF / python-pptx are only needed here
    from decksite.core.verify.inspect_outputs import verify_outputs, write_report

    try:
        cfg = _load_config(args)
    except ConfigError as e:
        _print_ng(str(e))
        return 2

    groups = discover_decks(cfg.input_dir, cfg.source_file)
    if not groups:
        print("[NG] no decks found")
        return 2

    records = verify_outputs(cfg.output_dir, groups)
    any_ng = False
    for r in records:
        name = f"{r['group']}/{r['slug']}"
        if r["ok"]:
            print(f"[OK] {name}")
        else:
            any_ng = True
            print(f"[NG] {name}")
            for p in r["problems"]:
                print(f"  - {p}")

    if args.report:
        out = write_report(records, Path(args.report).resolve())
        print(f"report: {out}")

    return 2 if any_ng else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="decksite")
    parser.add_argument("--config", help="build config json (default: ./decksite.json if present)")
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="logging level (default: $LOG_LEVEL or INFO)",
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_paths = sub.add_parser("paths", help="show resolved project paths")
    p_paths.set_defaults(func=cmd_paths)

    p_val = sub.add_parser("validate", help="validate the build config and required inputs")
    p_val.set_defaults(func=cmd_validate)

    p_build = sub.add_parser("build", help="render every deck, copy assets, write the index")
    p_build.add_argument("--skip-render", action="store_true", help="only copy assets and rebuild the index")
    p_build.set_defaults(func=cmd_build)

    p_idx = sub.add_parser("index", help="rewrite index.html / manifest.json from the input tree")
    p_idx.set_defaults(func=cmd_index)

    p_ver = sub.add_parser("verify", help="check rendered html/pdf/pptx for every deck")
    p_ver.add_argument("--report", required=False, help="write a json report to this path")
    p_ver.set_defaults(func=cmd_verify)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    boot_logging(args.log_level)
    raise SystemExit(args.func(args))


if __name__ == "__main__":
    main()
