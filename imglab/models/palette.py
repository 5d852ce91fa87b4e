"""Каталог палитр (художники, настроения, классика) и подбор ближайшего цвета.

Принципы:
- Палитры: неизменяемые value-object'ы, каталог задаётся данными, а не кодом.
- Цвета хранятся как `#RRGGBB`; разбор HEX строгий: ошибка формата означает `ValueError`.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Sequence, Tuple

_HEX_RE = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)

PALETTE_CATEGORIES: Dict[str, str] = {
    "artist": "Artist Palettes",
    "mood": "Mood Palettes",
    "classic": "Classic Palettes",
}


@dataclass(frozen=True)
class Palette:
    """Именованная палитра.

    Fields:
        name: Отображаемое имя.
        category: Одна из `PALETTE_CATEGORIES`.
        colors: Цвета палитры в виде `#RRGGBB`.
        description: Короткое описание для подсказки.
    """
    name: str
    category: str
    colors: Tuple[str, ...]
    description: str = ""

    def __post_init__(self) -> None:
        if self.category not in PALETTE_CATEGORIES:
            raise ValueError(f"Unknown palette category: {self.category}")
        for color in self.colors:
            hex_to_rgb(color)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "category": self.category,
            "colors": list(self.colors),
            "description": self.description,
        }


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    """'#FFE4B5' или 'ffe4b5' -> (255, 228, 181)."""
    match = _HEX_RE.match(value.strip()) if isinstance(value, str) else None
    if match is None:
        raise ValueError(f"Invalid hex color: {value!r}")
    r, g, b = (int(part, 16) for part in match.groups())
    return r, g, b


def find_closest_palette_color(r: int, g: int, b: int, colors: Sequence[str]) -> str:
    """Возвращает цвет палитры (как записан) с минимальным евклидовым расстоянием в RGB.

    При равенстве расстояний выигрывает первый в списке.
    """
    if not colors:
        raise ValueError("palette must contain at least one color")
    best, best_dist = colors[0], None
    for hex_color in colors:
        pr, pg, pb = hex_to_rgb(hex_color)
        dist = (r - pr) ** 2 + (g - pg) ** 2 + (b - pb) ** 2
        if best_dist is None or dist < best_dist:
            best, best_dist = hex_color, dist
    return best


PALETTES: Dict[str, Palette] = {
    # Artist
    "zorn": Palette(
        name="Anders Zorn",
        category="artist",
        description="Swedish painter known for warm, earthy tones",
        colors=("#FFE4B5", "#D2B48C", "#8B7355", "#654321", "#C09070", "#FF8C00", "#FFFACD", "#228B22"),
    ),
    "rubenSargent": Palette(
        name="John Singer Sargent",
        category="artist",
        description="Master of rich, saturated colors",
        colors=("#4A0E0E", "#8B4513", "#CD853F", "#DAA520", "#FFD700", "#F0E68C", "#DEB887", "#E6E6FA"),
    ),
    "rembrandtGold": Palette(
        name="Rembrandt Gold",
        category="artist",
        description="Dutch master's signature warm palette",
        colors=("#1A1410", "#3E2723", "#5D4037", "#8D6E63", "#A1887F", "#D7CCC8", "#FFCC99", "#FFE082"),
    ),
    "vanGogh": Palette(
        name="Van Gogh Nights",
        category="artist",
        description="Swirling blues and golds",
        colors=("#0F3460", "#1A5FA0", "#3B82D6", "#60A5FA", "#FDB813", "#F7B801", "#1E1B1B", "#E8D5B7"),
    ),
    # Mood
    "moodyBlues": Palette(
        name="Moody Blues",
        category="mood",
        description="Introspective and calm mood",
        colors=("#001F3F", "#003D7A", "#0074D9", "#7FDBCA", "#39CCCC", "#2ECC40", "#AAAAAA", "#F2F2F2"),
    ),
    "warmAutumn": Palette(
        name="Warm Autumn",
        category="mood",
        description="Cozy and warm mood",
        colors=("#8B4513", "#CD853F", "#DAA520", "#FFD700", "#FF8C00", "#FF7F50", "#D2691E", "#F5DEB3"),
    ),
    "darkMystery": Palette(
        name="Dark Mystery",
        category="mood",
        description="Deep, mysterious mood",
        colors=("#1A0033", "#2D0052", "#440055", "#663366", "#9933CC", "#CC66FF", "#2F2F2F", "#666666"),
    ),
    "passionRed": Palette(
        name="Passion Red",
        category="mood",
        description="Bold, energetic mood",
        colors=("#330000", "#660000", "#990000", "#CC0000", "#FF0000", "#FF3333", "#FF9999", "#FFE6E6"),
    ),
    "forest": Palette(
        name="Forest Whisper",
        category="mood",
        description="Natural, earthy mood",
        colors=("#1B3A2C", "#2D5A3D", "#3D7856", "#52A674", "#7AC5A3", "#A8D5BA", "#8B7355", "#D2B48C"),
    ),
    "oceanDepths": Palette(
        name="Ocean Depths",
        category="mood",
        description="Cool, tranquil mood",
        colors=("#0D1B2A", "#1B3A52", "#2A5678", "#4A8FBF", "#7DC3E8", "#B4E7FF", "#4F4F4F", "#CCCCCC"),
    ),
    # Classic
    "grayscale": Palette(
        name="Grayscale",
        category="classic",
        description="Pure black and white with greys",
        colors=("#000000", "#2B2B2B", "#555555", "#808080", "#AAAAAA", "#D3D3D3", "#EEEEEE", "#FFFFFF"),
    ),
    "primary": Palette(
        name="Primary Colors",
        category="classic",
        description="Red, Yellow, Blue and whites",
        colors=("#FF0000", "#0000FF", "#FFFF00", "#FFFFFF", "#000000", "#00FF00", "#FF00FF", "#00FFFF"),
    ),
    "pastel": Palette(
        name="Pastel Dreams",
        category="classic",
        description="Soft, gentle pastel colors",
        colors=("#FFB3BA", "#FFCCCB", "#FFFFBA", "#BAFFC9", "#BAE1FF", "#E0BBE4", "#FFDFD3", "#D4F1F4"),
    ),
}


def get_palette(key: str) -> Palette:
    """Палитра по ключу каталога; неизвестный ключ -> `ValueError` с перечнем допустимых."""
    try:
        return PALETTES[key]
    except KeyError:
        raise ValueError(f"Unknown palette: {key}. Known: {', '.join(PALETTES)}") from None
