from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any


class SettingsLoader:
    """Singleton settings provider.

    Reads pyproject.toml [tool.currency_converter] if present.
    Provides defaults otherwise.
    """

    _instance: "SettingsLoader | None" = None
    _lock = threading.Lock()

    def __new__(cls, *args, **kwargs):  # noqa: D401 - singleton boilerplate
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self) -> None:
        if getattr(self, "_initialized", False):
            return
        self._initialized = True
        self._root = Path(__file__).resolve().parents[2]
        self._config: dict[str, Any] = {}
        self.reload()

    def _defaults(self) -> dict[str, Any]:
        root = self._root
        return {
            "data_dir": str(root / "data"),
            "logs_dir": str(root / "logs"),
            "log_file": str(root / "logs" / "converter.log"),
            "log_level": "INFO",
            "log_rotation_bytes": 1_048_576,  # 1MB
            "log_backup_count": 5,
            "cache_file": "cache.json",
            "cache_ttl_seconds": 3600,
            "default_list_base": "PLN",
        }

    def reload(self) -> None:
        cfg = self._defaults()
        pyproject = self._root / "pyproject.toml"
        if pyproject.exists():
            try:
                data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
                section = data.get("tool", {}).get("currency_converter", {})
                if isinstance(section, dict):
                    for k, v in section.items():
                        cfg[k] = v
            except (OSError, tomllib.TOMLDecodeError):
                # Ignore malformed config; stick to defaults
                pass
        self._config = cfg

    def get(self, key: str, default: Any | None = None) -> Any:
        return self._config.get(key, default)

    def path(self, key: str) -> Path:
        """Return a settings path resolved against the project root.

        A relative cache_file is resolved under data_dir instead.
        """
        p = Path(str(self._config[key]))
        if p.is_absolute():
            return p
        if key == "cache_file":
            return self.path("data_dir") / p
        return self._root / p
