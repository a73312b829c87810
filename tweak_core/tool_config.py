import json
import os
from pathlib import Path
from typing import Any, Dict

from .config import DEFAULT_DEBOUNCE_SECONDS

CONFIG_ENV = "TWEAK_CONFIG"

DEFAULTS: Dict[str, Any] = {
    'debounce_seconds': DEFAULT_DEBOUNCE_SECONDS,
    'host': '127.0.0.1',
    'port': 19877,
    'infer_project_root': True,
    'session_idle_seconds': 3600,
}


class ToolConfig:
    _instance = None
    _config: Dict[str, Any] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._load_config()
        return cls._instance

    @classmethod
    def reset(cls):
        """Drop the cached instance so the next ToolConfig() reloads from disk."""
        cls._instance = None

    @staticmethod
    def config_path() -> Path:
        override = os.environ.get(CONFIG_ENV)
        if override:
            return Path(override)
        return Path(__file__).parent.parent / "tweak.json"

    def _load_config(self):
        self._config = dict(DEFAULTS)
        config_path = self.config_path()
        if not config_path.exists():
            return

        with open(config_path, 'r', encoding='utf-8') as f:
            loaded = json.load(f)
        if not isinstance(loaded, dict):
            raise ValueError(f"{config_path} must contain a JSON object")
        unknown = set(loaded) - set(DEFAULTS)
        if unknown:
            raise KeyError(f"Unknown settings in {config_path}: {', '.join(sorted(unknown))}")
        self._config.update(loaded)

    def get(self, name: str) -> Any:
        if name not in self._config:
            raise KeyError(f"Setting '{name}' not found")
        return self._config[name]

    @property
    def debounce_seconds(self) -> float:
        return float(self.get('debounce_seconds'))

    @property
    def host(self) -> str:
        return self.get('host')

    @property
    def port(self) -> int:
        return int(self.get('port'))

    @property
    def infer_project_root(self) -> bool:
        return bool(self.get('infer_project_root'))

    @property
    def session_idle_seconds(self) -> float:
        return float(self.get('session_idle_seconds'))
