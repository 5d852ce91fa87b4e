"""Набор коррекций, выбранных пользователем в сайдбаре."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

GUIDE_LINES = "lines"
GUIDE_BLOCKS = "blocks"
GUIDE_MODES = (GUIDE_LINES, GUIDE_BLOCKS)


@dataclass(frozen=True)
class Adjustments:
    """
    Value-object: множители яркости/контраста (1.0 означает без изменений),
    перевод в оттенки серого, число уровней постеризации (None: выключена),
    ключ палитры из каталога (None: без перекраски) и режим схемы
    «раскраски по номерам» (`GUIDE_MODES` или None).
    """
    brightness: float = 1.0
    contrast: float = 1.0
    grayscale: bool = False
    posterize_levels: Optional[int] = None
    palette: Optional[str] = None
    guide: Optional[str] = None

    @property
    def is_identity(self) -> bool:
        return (
            self.brightness == 1.0
            and self.contrast == 1.0
            and not self.grayscale
            and self.posterize_levels is None
            and self.palette is None
            and self.guide is None
        )
