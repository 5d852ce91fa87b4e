"""Анализ и попиксельные преобразования RGBA-буфера.

Принципы:
- SRP: только математика над пикселями, без файлового ввода-вывода.
- Чистые функции: вход не изменяется, каждое преобразование возвращает новый `PixelBuffer`.
"""
from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Callable, Optional, Sequence, Tuple

import numpy as np

from imglab.models.adjustments import GUIDE_BLOCKS, GUIDE_LINES, Adjustments
from imglab.models.image_model import (
    BYTES_PER_PIXEL,
    HISTOGRAM_BINS,
    AnalysisResult,
    ColorSample,
    HistogramData,
    PixelBuffer,
)
from imglab.models.palette import find_closest_palette_color, get_palette, hex_to_rgb

logger = logging.getLogger(__name__)

# BT.601 в целых тысячных: floor(0.299R + 0.587G + 0.114B) без ошибок округления float
_LUMA_WEIGHTS = np.array([299, 587, 114], dtype=np.int64)
_LUMA_SCALE = 1000

# Та же формула в float: для подбора цвета палитры и карты градиента
_LUMA_FLOAT = np.array([0.299, 0.587, 0.114], dtype=np.float64)

CONTRAST_PIVOT = 128.0
PLACEHOLDER_DOMINANT_COLOR = ColorSample.from_rgb(128, 128, 128)

# Расширение палитры: доли белого (tint) и чёрного (shade), затем попарные смеси базовых цветов
TINT_SHADE_RATIOS = (0.25, 0.5, 0.75)
MIX_RATIOS = (0.33, 0.5, 0.66)
# Оценка совпадения с цветом палитры: яркость весит намного больше, чем расстояние в RGB
REMAP_LUMA_WEIGHT = 1.5
REMAP_COLOR_WEIGHT = 0.15
_REMAP_CHUNK = 8192

# (до какого уровня включительно, порог модуля градиента Собеля, толщина линии)
GUIDE_LINE_STEPS = ((2, 100.0, 4), (4, 70.0, 3), (6, 45.0, 2), (8, 30.0, 2))
GUIDE_LINE_FINEST = (20.0, 1)
DEFAULT_GUIDE_LEVELS = 5
BLOCK_EDGE_DARKEN = 0.85


class ProcessService:
    # ---------- Анализ ----------
    def analyze(self, buffer: PixelBuffer) -> AnalysisResult:
        """
        Гистограммы R/G/B/яркости, средняя яркость и контраст.

        Полностью прозрачные пиксели (alpha == 0) не учитываются в гистограммах,
        но в знаменателе средних стоит полное число пикселей `width * height`.
        Для буфера нулевой площади яркость и контраст равны NaN.
        """
        pixels = self._pixels_view(buffer)
        opaque = pixels[pixels[:, 3] > 0]

        red = np.bincount(opaque[:, 0], minlength=HISTOGRAM_BINS)
        green = np.bincount(opaque[:, 1], minlength=HISTOGRAM_BINS)
        blue = np.bincount(opaque[:, 2], minlength=HISTOGRAM_BINS)
        lum = np.minimum(self._luminosity(opaque[:, :3]), HISTOGRAM_BINS - 1)
        luminosity = np.bincount(lum, minlength=HISTOGRAM_BINS)

        levels = np.arange(HISTOGRAM_BINS, dtype=np.float64)
        counts = luminosity.astype(np.float64)
        total = np.float64(buffer.pixel_count)
        with np.errstate(divide="ignore", invalid="ignore"):
            average_brightness = np.dot(levels, counts) / total / 255.0
            mean = average_brightness * 255.0
            variance = np.dot((levels - mean) ** 2, counts) / total
            contrast = np.sqrt(variance) / 255.0

        logger.debug(
            "analyze %dx%d: opaque=%d brightness=%.4f contrast=%.4f",
            buffer.width, buffer.height, len(opaque), average_brightness, contrast,
        )
        return AnalysisResult(
            histogram=HistogramData.from_counts(red, green, blue, luminosity),
            # TODO: заменить заглушку кластеризацией k-средних по выборке пикселей
            dominant_colors=(PLACEHOLDER_DOMINANT_COLOR,),
            average_brightness=float(average_brightness),
            contrast=float(contrast),
        )

    # ---------- Преобразования ----------
    def adjust_brightness(self, buffer: PixelBuffer, amount: float) -> PixelBuffer:
        """
        Масштабирование яркости: c' = clamp(round(c * amount), 0, 255) для R, G, B.
        Альфа не меняется. Для NaN/inf результат по каналам не определён.
        """
        amount = float(amount)
        logger.debug("adjust_brightness amount=%s", amount)
        return self._map_rgb(buffer, lambda rgb: self._clamp_u8(rgb * amount))

    def adjust_contrast(self, buffer: PixelBuffer, amount: float) -> PixelBuffer:
        """
        Растяжение контраста относительно 128: c' = clamp(round((c - 128) * amount + 128), 0, 255).
        """
        amount = float(amount)
        logger.debug("adjust_contrast amount=%s", amount)
        return self._map_rgb(
            buffer,
            lambda rgb: self._clamp_u8((rgb - CONTRAST_PIVOT) * amount + CONTRAST_PIVOT),
        )

    def to_grayscale(self, buffer: PixelBuffer) -> PixelBuffer:
        """
        Преобразование в оттенки серого: R = G = B = floor(0.299R + 0.587G + 0.114B).
        """
        logger.debug("to_grayscale %dx%d", buffer.width, buffer.height)
        return self._map_rgb(
            buffer,
            lambda rgb: np.repeat(self._luminosity(rgb)[:, None], 3, axis=1).astype(np.uint8),
        )

    def posterize(self, buffer: PixelBuffer, levels: int) -> PixelBuffer:
        """
        Постеризация (упрощение тонов): c' = floor(c / f) * f, где f = floor(256 / levels).
        """
        self._check_levels(levels, 2, 256)
        factor = 256 // int(levels)
        logger.debug("posterize levels=%d factor=%d", levels, factor)
        return self._map_rgb(buffer, lambda rgb: self._floor_to_step(rgb, factor))

    def quantize(self, buffer: PixelBuffer, levels: int) -> PixelBuffer:
        """
        Квантование каналов с шагом floor(256 / levels). Та же сетка, что у `posterize`,
        но допускается levels = 1 (все каналы RGB обнуляются).
        """
        self._check_levels(levels, 1, 256)
        step = 256 // int(levels)
        logger.debug("quantize levels=%d step=%d", levels, step)
        return self._map_rgb(buffer, lambda rgb: self._floor_to_step(rgb, step))

    # ---------- Палитры ----------
    def expand_palette(self, colors: Sequence[str]) -> Tuple[ColorSample, ...]:
        """
        Расширенная палитра «как на палитре художника», отсортированная по яркости.

        Порядок до сортировки: базовые цвета; для каждого цвета три tint и три shade;
        попарные смеси базовых цветов (i < j) в долях `MIX_RATIOS`. Сортировка устойчивая.
        Каналы смесей округляются половиной вверх.
        """
        if not colors:
            raise ValueError("palette must contain at least one color")
        base = [hex_to_rgb(c) for c in colors]
        expanded = list(base)
        for rgb in base:
            expanded.extend(self._mix(rgb, (255, 255, 255), ratio) for ratio in TINT_SHADE_RATIOS)
            expanded.extend(self._mix(rgb, (0, 0, 0), ratio) for ratio in TINT_SHADE_RATIOS)
        for i, first in enumerate(base):
            for second in base[i + 1:]:
                expanded.extend(self._mix(first, second, ratio) for ratio in MIX_RATIOS)

        luma = np.array(expanded, dtype=np.float64) @ _LUMA_FLOAT
        order = np.argsort(luma, kind="stable")
        return tuple(ColorSample.from_rgb(*expanded[i]) for i in order)

    def remap_to_palette(self, buffer: PixelBuffer, colors: Sequence[str]) -> PixelBuffer:
        """
        Перекрашивает каждый пиксель в лучший цвет расширенной палитры.

        Оценка: `REMAP_LUMA_WEIGHT * |Y - Y_p| + REMAP_COLOR_WEIGHT * ||rgb - rgb_p||`,
        где Y = 0.299R + 0.587G + 0.114B (float). При равных оценках побеждает более тёмный
        цвет (первый в порядке `expand_palette`). Альфа сохраняется, прозрачные пиксели тоже перекрашиваются.
        """
        expanded = self.expand_palette(colors)
        palette = np.array([(c.r, c.g, c.b) for c in expanded], dtype=np.float64)
        palette_luma = palette @ _LUMA_FLOAT
        palette_u8 = palette.astype(np.uint8)
        logger.debug("remap_to_palette base=%d expanded=%d", len(colors), len(expanded))

        def remap(rgb: np.ndarray) -> np.ndarray:
            out = np.empty(rgb.shape, dtype=np.uint8)
            # Порции ограничивают матрицу оценок (N, M) по памяти
            for start in range(0, len(rgb), _REMAP_CHUNK):
                chunk = rgb[start:start + _REMAP_CHUNK]
                luma_diff = np.abs((chunk @ _LUMA_FLOAT)[:, None] - palette_luma[None, :])
                color_dist = np.sqrt(((chunk[:, None, :] - palette[None, :, :]) ** 2).sum(axis=-1))
                best = np.argmin(REMAP_LUMA_WEIGHT * luma_diff + REMAP_COLOR_WEIGHT * color_dist, axis=1)
                out[start:start + len(chunk)] = palette_u8[best]
            return out

        return self._map_rgb(buffer, remap)

    def map_colors_to_palette(self, colors: Sequence[ColorSample], palette: Sequence[str]) -> Tuple[ColorSample, ...]:
        """Подписывает каждый цвет HEX-ом ближайшего цвета палитры (RGB исходного цвета не меняется)."""
        return tuple(
            replace(color, hex=find_closest_palette_color(color.r, color.g, color.b, palette).lower())
            for color in colors
        )

    # ---------- Раскраска по номерам ----------
    def paint_by_numbers_lines(self, buffer: PixelBuffer, levels: int) -> PixelBuffer:
        """
        Контурная схема: чёрные линии по границам (Собель), белый фон, альфа = 255.

        `levels` задаёт детализацию: чем меньше, тем выше порог градиента и толще линии
        (см. `GUIDE_LINE_STEPS`). Края изображения дополняются повтором крайних пикселей.
        """
        self._check_levels(levels, 1, None)
        threshold, thickness = self._guide_line_params(int(levels))
        grid = self._pixel_grid(buffer)
        logger.debug("paint_by_numbers_lines levels=%d threshold=%.0f thickness=%d", levels, threshold, thickness)
        if grid.size == 0:
            return buffer.with_data(bytes(buffer.data))

        gray = grid[..., :3].astype(np.float64) @ _LUMA_FLOAT
        p = np.pad(gray, ((1, 1), (1, 1)), mode="edge")
        gx = (
            (p[0:-2, 2:] + 2 * p[1:-1, 2:] + p[2:, 2:])
            - (p[0:-2, 0:-2] + 2 * p[1:-1, 0:-2] + p[2:, 0:-2])
        )
        gy = (
            (p[2:, 0:-2] + 2 * p[2:, 1:-1] + p[2:, 2:])
            - (p[0:-2, 0:-2] + 2 * p[0:-2, 1:-1] + p[0:-2, 2:])
        )
        edges = self._dilate(np.hypot(gx, gy) > threshold, thickness // 2)

        out = np.full(grid.shape, 255, dtype=np.uint8)
        out[edges, :3] = 0
        return buffer.with_data(out.tobytes())

    def paint_by_numbers_blocks(self, buffer: PixelBuffer) -> PixelBuffer:
        """
        Цветные блоки с границами: пиксель, чей RGB отличается от правого или нижнего соседа,
        затемняется в `BLOCK_EDGE_DARKEN` раз. Рассчитано на постеризованный вход; альфа не меняется.
        """
        grid = self._pixel_grid(buffer)
        rgb = grid[..., :3]
        border = np.zeros(grid.shape[:2], dtype=bool)
        border[:, :-1] |= (rgb[:, :-1] != rgb[:, 1:]).any(axis=-1)
        border[:-1, :] |= (rgb[:-1, :] != rgb[1:, :]).any(axis=-1)
        logger.debug("paint_by_numbers_blocks border pixels=%d", int(border.sum()))

        out = grid.copy()
        out[border, :3] = self._clamp_u8(rgb[border].astype(np.float64) * BLOCK_EDGE_DARKEN)
        return buffer.with_data(out.tobytes())

    def apply(self, buffer: PixelBuffer, adjustments: Adjustments) -> PixelBuffer:
        """
        Конвейер коррекций: яркость -> контраст -> оттенки серого -> постеризация -> палитра -> схема.
        Шаги с нейтральными параметрами пропускаются; при пустом наборе возвращается сам `buffer`.
        Линейная схема берёт детализацию из `posterize_levels` (иначе `DEFAULT_GUIDE_LEVELS`).
        """
        result = buffer
        if adjustments.brightness != 1.0:
            result = self.adjust_brightness(result, adjustments.brightness)
        if adjustments.contrast != 1.0:
            result = self.adjust_contrast(result, adjustments.contrast)
        if adjustments.grayscale:
            result = self.to_grayscale(result)
        if adjustments.posterize_levels is not None:
            result = self.posterize(result, adjustments.posterize_levels)
        if adjustments.palette is not None:
            result = self.remap_to_palette(result, get_palette(adjustments.palette).colors)
        if adjustments.guide == GUIDE_LINES:
            result = self.paint_by_numbers_lines(result, adjustments.posterize_levels or DEFAULT_GUIDE_LEVELS)
        elif adjustments.guide == GUIDE_BLOCKS:
            result = self.paint_by_numbers_blocks(result)
        elif adjustments.guide is not None:
            raise ValueError(f"Unknown guide mode: {adjustments.guide}")
        return result

    # ---------- Вспомогательные функции ----------
    def _pixels_view(self, buffer: PixelBuffer) -> np.ndarray:
        """
        Возвращает представление (N, 4) uint8 только для чтения; неполная последняя группа отбрасывается.
        """
        raw = np.frombuffer(buffer.data, dtype=np.uint8)
        usable = raw.size - raw.size % BYTES_PER_PIXEL
        return raw[:usable].reshape(-1, BYTES_PER_PIXEL)

    def _map_rgb(self, buffer: PixelBuffer, fn: Callable[[np.ndarray], np.ndarray]) -> PixelBuffer:
        """
        Применяет `fn` к каналам RGB копии данных (float64, форма (N, 3)); `fn` возвращает uint8.
        Альфа и неполная последняя группа байтов копируются без изменений.
        """
        out = np.frombuffer(buffer.data, dtype=np.uint8).copy()
        usable = out.size - out.size % BYTES_PER_PIXEL
        pixels = out[:usable].reshape(-1, BYTES_PER_PIXEL)
        if pixels.size:
            pixels[:, :3] = fn(pixels[:, :3].astype(np.float64))
        return buffer.with_data(out.tobytes())

    def _luminosity(self, rgb: np.ndarray) -> np.ndarray:
        """Целочисленная яркость BT.601 с усечением, массив int64 формы (N,)."""
        return (rgb.astype(np.int64) @ _LUMA_WEIGHTS) // _LUMA_SCALE

    def _clamp_u8(self, values: np.ndarray) -> np.ndarray:
        """Округление половин вверх (после отсечения 0..255 совпадает с округлением от нуля), затем clamp."""
        with np.errstate(invalid="ignore"):
            return np.clip(np.floor(values + 0.5), 0, 255).astype(np.uint8)

    def _floor_to_step(self, rgb: np.ndarray, step: int) -> np.ndarray:
        return ((rgb // step) * step).astype(np.uint8)

    def _check_levels(self, levels: int, lo: int, hi: Optional[int]) -> None:
        if isinstance(levels, bool) or not isinstance(levels, (int, np.integer)):
            raise ValueError(f"levels must be an integer, got {levels!r}")
        if hi is None and levels < lo:
            raise ValueError(f"levels must be >= {lo}, got {levels}")
        if hi is not None and not lo <= levels <= hi:
            raise ValueError(f"levels must be in [{lo}, {hi}], got {levels}")

    def _mix(self, first: Tuple[int, int, int], second: Tuple[int, int, int], ratio: float) -> Tuple[int, int, int]:
        r, g, b = (math.floor(a * (1 - ratio) + c * ratio + 0.5) for a, c in zip(first, second))
        return r, g, b

    def _guide_line_params(self, levels: int) -> Tuple[float, int]:
        for upper, threshold, thickness in GUIDE_LINE_STEPS:
            if levels <= upper:
                return threshold, thickness
        return GUIDE_LINE_FINEST

    def _pixel_grid(self, buffer: PixelBuffer) -> np.ndarray:
        """(H, W, 4) uint8 только для чтения; соседство пикселей требует точной длины данных."""
        if not buffer.is_well_formed():
            raise ValueError(
                f"buffer data length {len(buffer.data)} does not match {buffer.width}x{buffer.height} RGBA"
            )
        return np.frombuffer(buffer.data, dtype=np.uint8).reshape(buffer.height, buffer.width, BYTES_PER_PIXEL)

    def _dilate(self, mask: np.ndarray, radius: int) -> np.ndarray:
        """Квадратная дилатация (2 * radius + 1) булевой маски; за краем пикселей нет."""
        if radius <= 0:
            return mask
        h, w = mask.shape
        padded = np.pad(mask, radius, mode="constant", constant_values=False)
        out = np.zeros_like(mask)
        for dy in range(2 * radius + 1):
            for dx in range(2 * radius + 1):
                out |= padded[dy:dy + h, dx:dx + w]
        return out
