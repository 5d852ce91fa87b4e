"""Модели данных: пиксельный буфер и результаты анализа.

Принципы:
- SRP: только структура данных и преобразование в «проводной» формат, без обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Tuple

from PIL import Image

RGBA_FORMAT = "rgba"
BYTES_PER_PIXEL = 4
HISTOGRAM_BINS = 256


@dataclass(frozen=True)
class PixelBuffer:
    """Неизменяемый RGBA8-буфер изображения.

    Fields:
        width: Ширина, px.
        height: Высота, px.
        data: Байты RGBA, построчно, без выравнивания (`width * height * 4`).
        format: Тег формата, всегда "rgba".
    """
    width: int
    height: int
    data: bytes
    format: str = RGBA_FORMAT

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @property
    def expected_length(self) -> int:
        return self.pixel_count * BYTES_PER_PIXEL

    def is_well_formed(self) -> bool:
        """Проверяет инвариант длины `data == width * height * 4`."""
        return len(self.data) == self.expected_length

    def with_data(self, data: bytes) -> "PixelBuffer":
        """Новый буфер тех же размеров и формата с другими байтами."""
        return PixelBuffer(width=self.width, height=self.height, data=bytes(data), format=self.format)

    # ---- Wire format ----
    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "data": list(self.data),
            "format": self.format,
        }

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "PixelBuffer":
        """Собирает буфер из записи `{"width", "height", "data", "format"}`.

        `data` может быть списком целых 0..255 или bytes-подобным объектом.
        """
        return cls(
            width=int(record["width"]),
            height=int(record["height"]),
            data=bytes(record["data"]),
            format=str(record.get("format", RGBA_FORMAT)),
        )

    # ---- PIL bridge ----
    @classmethod
    def from_pil(cls, image: Image.Image) -> "PixelBuffer":
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        width, height = rgba.size
        return cls(width=width, height=height, data=rgba.tobytes())

    def to_pil(self) -> Image.Image:
        """Собирает `PIL.Image` в режиме RGBA. Требует корректной длины `data`."""
        return Image.frombytes("RGBA", (self.width, self.height), self.data)


@dataclass(frozen=True)
class HistogramData:
    """Четыре гистограммы по 256 корзин: R, G, B и яркость (luminosity)."""
    red: Tuple[int, ...]
    green: Tuple[int, ...]
    blue: Tuple[int, ...]
    luminosity: Tuple[int, ...]

    @classmethod
    def from_counts(
        cls,
        red: Iterable[int],
        green: Iterable[int],
        blue: Iterable[int],
        luminosity: Iterable[int],
    ) -> "HistogramData":
        return cls(
            red=tuple(int(c) for c in red),
            green=tuple(int(c) for c in green),
            blue=tuple(int(c) for c in blue),
            luminosity=tuple(int(c) for c in luminosity),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "red": list(self.red),
            "green": list(self.green),
            "blue": list(self.blue),
            "luminosity": list(self.luminosity),
        }


@dataclass(frozen=True)
class ColorSample:
    """Цвет RGB и его HEX (`#rrggbb`, нижний регистр, без альфы)."""
    r: int
    g: int
    b: int
    hex: str

    @classmethod
    def from_rgb(cls, r: int, g: int, b: int) -> "ColorSample":
        return cls(r=r, g=g, b=b, hex=f"#{r:02x}{g:02x}{b:02x}")

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "ColorSample":
        """Запись `{r, g, b[, hex]}`; HEX пересчитывается из каналов."""
        r, g, b = (int(record[key]) for key in ("r", "g", "b"))
        if not all(0 <= v <= 255 for v in (r, g, b)):
            raise ValueError(f"color channels must be in [0, 255], got {(r, g, b)}")
        return cls.from_rgb(r, g, b)

    def to_dict(self) -> Dict[str, Any]:
        return {"r": self.r, "g": self.g, "b": self.b, "hex": self.hex}


@dataclass(frozen=True)
class AnalysisResult:
    """Результат анализа изображения.

    Fields:
        histogram: Гистограммы каналов и яркости.
        dominant_colors: Доминирующие цвета (пока фиксированная заглушка).
        average_brightness: Средняя яркость в [0, 1]; NaN для пустого буфера.
        contrast: СКО яркости / 255; NaN для пустого буфера.
    """
    histogram: HistogramData
    dominant_colors: Tuple[ColorSample, ...]
    average_brightness: float
    contrast: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "histogram": self.histogram.to_dict(),
            "dominant_colors": [c.to_dict() for c in self.dominant_colors],
            "average_brightness": self.average_brightness,
            "contrast": self.contrast,
        }
