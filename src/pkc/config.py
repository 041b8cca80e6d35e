"""Configuration management for PKC."""

import os
from pathlib import Path
from typing import Any

import yaml


DEFAULT_CONFIG = {
    "index_path": "~/.pkc/index.json",
    "state_path": "~/.pkc/state.yaml",
    "obsidian_config": None,
    "vaults": [],
    "default_folder": "inbox",
    "open_in_new_tab": False,
    "uri_scheme": "obsidian",
    "required_plugin": "obsidian-advanced-uri",
    "claude_model": "claude-sonnet-4-20250514",
    "supported_browsers": [
        "Safari",
        "Google Chrome",
        "Arc",
        "Brave Browser",
        "Microsoft Edge",
        "Chromium",
        "Vivaldi",
        "Opera",
    ],
    "ranking": {"min_query_length": 2, "max_results": 10},
    "timeouts": {"detection": 5.0, "page_fetch": 20.0, "summary": 60.0},
}


def _find_config_file() -> Path | None:
    """Look for config.yaml in standard locations."""
    candidates = [
        Path.cwd() / "config" / "config.yaml",
        Path.cwd() / "config.yaml",
        Path.home() / ".pkc" / "config.yaml",
    ]
    for p in candidates:
        if p.exists():
            return p
    return None


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration, merging defaults with file and env vars."""
    cfg = _copy(DEFAULT_CONFIG)

    path = Path(config_path) if config_path else _find_config_file()
    if path and path.exists():
        with open(path) as f:
            file_cfg = yaml.safe_load(f) or {}
        _deep_merge(cfg, file_cfg)

    # Env overrides
    if api_key := os.environ.get("ANTHROPIC_API_KEY"):
        cfg["claude_api_key"] = api_key

    # Expand paths
    for key in ("index_path", "state_path"):
        cfg[key] = str(Path(cfg[key]).expanduser().resolve())
    if cfg.get("obsidian_config"):
        cfg["obsidian_config"] = str(Path(cfg["obsidian_config"]).expanduser())

    return cfg


def _copy(data: dict) -> dict:
    """Copy nested dicts and lists so defaults are never mutated."""
    out = {}
    for k, v in data.items():
        if isinstance(v, dict):
            out[k] = _copy(v)
        elif isinstance(v, list):
            out[k] = list(v)
        else:
            out[k] = v
    return out


def _deep_merge(base: dict, override: dict) -> None:
    """Merge override into base in-place."""
    for k, v in override.items():
        if k in base and isinstance(base[k], dict) and isinstance(v, dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
