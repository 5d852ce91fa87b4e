"""Настройки приложения: диапазоны слайдеров, постеризация, журналирование.

Хранятся в JSON; отсутствующий или повреждённый файл даёт значения по умолчанию.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "IMGLAB_CONFIG"
DEFAULT_CONFIG_FILE = "imglab_config.json"


@dataclass
class AppConfig:
    brightness_range: Tuple[float, float] = (0.0, 2.0)
    contrast_range: Tuple[float, float] = (0.0, 2.0)
    posterize_levels: int = 5
    default_save_extension: str = ".png"
    log_level: str = "INFO"
    log_file: Optional[str] = None

    def __post_init__(self) -> None:
        self.brightness_range = self._ordered_range(self.brightness_range)
        self.contrast_range = self._ordered_range(self.contrast_range)
        self.posterize_levels = max(2, min(256, int(self.posterize_levels)))
        ext = self.default_save_extension.strip().lower()
        self.default_save_extension = ext if ext.startswith(".") else f".{ext}"
        self.log_level = self.log_level.upper()

    @staticmethod
    def _ordered_range(value: Any) -> Tuple[float, float]:
        lo, hi = (float(v) for v in value)
        return (lo, hi) if lo <= hi else (hi, lo)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["brightness_range"] = list(self.brightness_range)
        data["contrast_range"] = list(self.contrast_range)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        """Создаёт конфиг из словаря; неизвестные ключи игнорируются."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning("Неизвестные ключи конфигурации пропущены: %s", ", ".join(unknown))
        return cls(**{k: v for k, v in data.items() if k in known})

    def save(self, filepath: str | Path) -> None:
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=4)

    @classmethod
    def load(cls, filepath: str | Path) -> "AppConfig":
        path = Path(filepath)
        if not path.exists():
            logger.info("Файл конфигурации %s не найден, используются значения по умолчанию", path)
            return cls()
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            logger.warning("Не удалось разобрать %s: %s. Используются значения по умолчанию", path, exc)
            return cls()
        if not isinstance(data, dict):
            logger.warning("Ожидался JSON-объект в %s. Используются значения по умолчанию", path)
            return cls()
        try:
            return cls.from_dict(data)
        except (TypeError, ValueError, AttributeError) as exc:
            logger.warning("Недопустимые значения в %s: %s. Используются значения по умолчанию", path, exc)
            return cls()


def resolve_config_path() -> Path:
    """Путь из переменной окружения `IMGLAB_CONFIG` либо `imglab_config.json` в текущем каталоге."""
    return Path(os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE))
