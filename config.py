"""Settings for the recognition client and camera, kept in one JSON file."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

DEFAULT_MODEL = "qwen-vl-max"
CONFIG_DIR = Path.home() / ".config" / "lenstext"

_DEFAULTS: dict[str, Any] = {
    "api_key": "",
    "model": DEFAULT_MODEL,
    "camera_index": None,
}


@dataclass(frozen=True)
class RecognizerConfig:
    api_key: str
    model: str = DEFAULT_MODEL
    temperature: float = 0.1


class JsonConfigStore:
    """Settings file at ``~/.config/lenstext/config.json``.

    Unknown, missing or mistyped entries read back as their defaults; an
    unreadable file behaves like an empty one.
    """

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or CONFIG_DIR / "config.json"
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def get_api_key(self) -> str:
        value = self._get("api_key")
        return value if isinstance(value, str) else ""

    def set_api_key(self, key: str) -> None:
        self._set("api_key", key.strip())

    def get_model(self) -> str:
        value = self._get("model")
        return value if isinstance(value, str) and value else DEFAULT_MODEL

    def set_model(self, model: str) -> None:
        self._set("model", model)

    def get_camera_index(self) -> Optional[int]:
        value = self._get("camera_index")
        if value is None:
            value = os.getenv("CAMERA_INDEX") or None
        if value is None or isinstance(value, bool):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    def set_camera_index(self, index: int) -> None:
        self._set("camera_index", int(index))

    def load_recognizer_config(self) -> RecognizerConfig:
        # A stored key wins over the environment.
        api_key = self.get_api_key() or os.getenv("DASHSCOPE_API_KEY", "")
        return RecognizerConfig(api_key=api_key, model=self.get_model())

    def _get(self, key: str) -> Any:
        return self._load().get(key, _DEFAULTS[key])

    def _set(self, key: str, value: Any) -> None:
        settings = self._load()
        settings[key] = value
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(settings, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(self._path)

    def _load(self) -> dict[str, Any]:
        try:
            settings = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError, UnicodeDecodeError):
            return {}
        return settings if isinstance(settings, dict) else {}
