from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from .config import ConfigError, default_config_path, ensure_config_file, resolve_settings
from .git import HistoryError
from .run import run_stats
from .scan import ScanError


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitlocalstats",
        description="Show a six month commit heatmap for every repository under a folder.",
    )
    parser.add_argument("-f", "--folder", type=Path, default=None, help="Folder to scan (overrides the config file).")
    parser.add_argument("-e", "--email", type=str, default="", help="Author email to count commits for.")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.json (default: ~/.config/gitlocalstats/config.json).")
    parser.add_argument(
        "--ignore",
        type=str,
        action="append",
        default=None,
        help="Directory names to skip while scanning (repeatable or comma separated; default: node_modules,vendor).",
    )
    parser.add_argument("--jobs", type=int, default=0, help="Parallel directory scan workers (0 = auto).")
    parser.add_argument("--no-color", action="store_true", help="Print the heatmap without ANSI colors.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print timings for each step.")
    return parser


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    started = time.perf_counter()
    args = _build_parser().parse_args(argv)
    config_path = args.config or default_config_path()

    try:
        config = ensure_config_file(config_path=config_path)
        settings = resolve_settings(args, config)
        code = run_stats(settings)
    except (ConfigError, ScanError, HistoryError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"\nDone in {time.perf_counter() - started:.2f}s")
    return code


if __name__ == "__main__":
    raise SystemExit(main())
