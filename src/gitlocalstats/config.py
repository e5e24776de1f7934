from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

from .git import get_global_email
from .models import Settings
from .scan import DEFAULT_IGNORE_DIRNAMES, DEFAULT_MARKERS, default_jobs

PLACEHOLDER_EMAIL = "example@email.com"
DEFAULT_FOLDER_NAME = "Repos"


class ConfigError(RuntimeError):
    """The configuration file could not be read or written."""


def default_config_path(home: Path | None = None) -> Path:
    home = home or Path.home()
    return home / ".config" / "gitlocalstats" / "config.json"


def default_config(home: Path | None = None) -> dict:
    home = home or Path.home()
    return {
        "folder": str(home / DEFAULT_FOLDER_NAME),
        "email": PLACEHOLDER_EMAIL,
        "ignore_dirnames": sorted(DEFAULT_IGNORE_DIRNAMES),
        "markers": list(DEFAULT_MARKERS),
    }


def load_config(config_path: Path) -> dict:
    if not config_path.exists():
        return {}
    try:
        config = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigError(f"Error loading configuration file {config_path}: {e}") from e
    if not isinstance(config, dict):
        raise ConfigError(f"Error loading configuration file {config_path}: expected a JSON object")
    return config


def save_config(config_path: Path, config: dict) -> None:
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(config, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Error writing configuration file {config_path}: {e}") from e


def ensure_config_file(*, config_path: Path, home: Path | None = None) -> dict:
    """
    Write the default configuration on first run, then load it.
    """
    if not config_path.exists():
        save_config(config_path, default_config(home))
        print(f"Wrote new config: {config_path}")
    return load_config(config_path)


def _split_csv_args(values: list[str]) -> list[str]:
    out: list[str] = []
    for v in values:
        for part in str(v).split(","):
            part = part.strip()
            if part:
                out.append(part)
    return out


def _color_enabled(args: argparse.Namespace) -> bool:
    if bool(getattr(args, "no_color", False)):
        return False
    return not os.environ.get("NO_COLOR")


def resolve_settings(args: argparse.Namespace, config: dict, *, home: Path | None = None) -> Settings:
    """Command line beats the config file; the global git email fills a missing or placeholder email."""
    home = home or Path.home()

    folder = getattr(args, "folder", None) or config.get("folder") or str(home / DEFAULT_FOLDER_NAME)

    email = str(getattr(args, "email", "") or config.get("email", "") or "").strip()
    if not email or email == PLACEHOLDER_EMAIL:
        email = get_global_email() or PLACEHOLDER_EMAIL
    if email == PLACEHOLDER_EMAIL:
        print(
            f"Warning: email is still the placeholder {PLACEHOLDER_EMAIL!r}; set it in the config file or pass --email.",
            file=sys.stderr,
        )

    ignore_cli = _split_csv_args(list(getattr(args, "ignore", None) or []))
    if ignore_cli:
        ignore_dirnames = frozenset(ignore_cli)
    elif isinstance(config.get("ignore_dirnames"), list):
        ignore_dirnames = frozenset(str(d) for d in config["ignore_dirnames"] if str(d).strip())
    else:
        ignore_dirnames = DEFAULT_IGNORE_DIRNAMES

    markers_cfg = config.get("markers")
    if isinstance(markers_cfg, list) and markers_cfg:
        markers = tuple(str(m) for m in markers_cfg if str(m).strip())
    else:
        markers = DEFAULT_MARKERS

    jobs = int(getattr(args, "jobs", 0) or config.get("jobs", 0) or default_jobs())

    return Settings(
        folder=Path(str(folder)).expanduser(),
        email=email,
        ignore_dirnames=ignore_dirnames,
        markers=markers,
        jobs=max(1, jobs),
        color=_color_enabled(args),
        verbose=bool(getattr(args, "verbose", False)),
    )
