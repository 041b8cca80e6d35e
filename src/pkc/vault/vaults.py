"""Discover Obsidian vaults and check their installed plugins."""

import json
import logging
import sys
from pathlib import Path
from typing import Any

from ..models import Vault

logger = logging.getLogger(__name__)


def _obsidian_config_candidates() -> list[Path]:
    home = Path.home()
    candidates = [
        home / ".config" / "obsidian" / "obsidian.json",
        home / ".var" / "app" / "md.obsidian.Obsidian" / "config" / "obsidian" / "obsidian.json",
    ]
    if sys.platform == "darwin":
        candidates.insert(0, home / "Library" / "Application Support" / "obsidian" / "obsidian.json")
    return candidates


def _read_obsidian_config(path: Path) -> list[Vault]:
    data = json.loads(path.read_text(encoding="utf-8"))
    vaults = []
    for key, entry in (data.get("vaults") or {}).items():
        root = entry.get("path") if isinstance(entry, dict) else None
        if root:
            vaults.append(Vault(name=Path(root).name, root_path=root, key=key))
    return vaults


def find_vaults(config: dict[str, Any]) -> list[Vault]:
    """Vaults listed in config, else those Obsidian knows about."""
    configured = config.get("vaults") or []
    if configured:
        vaults = []
        for entry in configured:
            root = str(Path(entry["path"]).expanduser())
            vaults.append(Vault(name=entry.get("name") or Path(root).name, root_path=root, key=root))
        return vaults

    candidates = _obsidian_config_candidates()
    if config.get("obsidian_config"):
        candidates.insert(0, Path(config["obsidian_config"]))

    for p in candidates:
        if not p.exists():
            continue
        try:
            return _read_obsidian_config(p)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not read Obsidian config {p}: {e}")
    return []


def installed_plugins(vault: Vault) -> list[str]:
    """Community plugin ids enabled in a vault."""
    plugins_file = Path(vault.root_path) / ".obsidian" / "community-plugins.json"
    if not plugins_file.exists():
        return []
    try:
        data = json.loads(plugins_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning(f"Could not read {plugins_file}: {e}")
        return []
    return [p for p in data if isinstance(p, str)] if isinstance(data, list) else []


def vaults_with_plugin(vaults: list[Vault], plugin_id: str) -> list[Vault]:
    return [v for v in vaults if plugin_id in installed_plugins(v)]


def get_vault(vaults: list[Vault], name: str | None) -> Vault | None:
    return next((v for v in vaults if v.name == name), None)
