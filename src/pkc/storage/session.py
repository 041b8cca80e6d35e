"""Last-used vault and folder, persisted between capture sessions."""

import logging
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


class SessionDefaults:
    """Two string entries, ``vault`` and ``path``, stored as YAML.

    Only the capture flow writes here, on submission, so last writer wins.
    """

    KEYS = ("vault", "path")

    def __init__(self, state_path: str | Path):
        self.state_path = Path(state_path)

    def _load(self) -> dict[str, str]:
        if not self.state_path.exists():
            return {}
        try:
            with open(self.state_path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Ignoring unreadable session state {self.state_path}: {e}")
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: str(v) for k, v in data.items() if k in self.KEYS and v is not None}

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        if key not in self.KEYS:
            raise KeyError(key)
        data = self._load()
        data[key] = value
        self.state_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.state_path, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False)
