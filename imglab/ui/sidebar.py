"""Боковая панель: файл, информация, коррекции, палитра и схема, статистика и гистограмма.

Принципы:
- SRP: управляет только UI параметров, не содержит алгоритмов.
- ISP: выдаёт параметры через `get_adjustments`, события через `on_*`.
"""
from __future__ import annotations

import math
from typing import Callable, Optional, Tuple

import customtkinter as ctk

from imglab.config import AppConfig
from imglab.models.adjustments import GUIDE_BLOCKS, GUIDE_LINES, Adjustments
from imglab.models.image_model import AnalysisResult, ColorSample, PixelBuffer
from imglab.models.palette import PALETTES
from imglab.ui.histogram_view import HistogramView

_NONE_CHOICE = "Нет"


def _format_ratio(value: float) -> str:
    return "—" if math.isnan(value) else f"{value:.3f}"


class Sidebar(ctk.CTkFrame):
    """Панель инструментов с блоками: файл, информация, курсор, коррекции, анализ."""
    def __init__(self, master: ctk.CTk, config: AppConfig, **kwargs) -> None:
        super().__init__(master, width=300, **kwargs)
        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_open_file: Optional[Callable[[], None]] = None
        self.on_save_file: Optional[Callable[[], None]] = None
        self.on_adjustments_change: Optional[Callable[[Adjustments], None]] = None
        self.on_compare_change: Optional[Callable[[bool], None]] = None

        row = 0
        self._title = ctk.CTkLabel(self, text="Файл", font=ctk.CTkFont(size=16, weight="bold"))
        self._title.grid(row=row, column=0, padx=8, pady=(8, 4), sticky="w")
        row += 1
        self._open_btn = ctk.CTkButton(self, text="Открыть изображение…", command=lambda: self._emit(self.on_open_file))
        self._open_btn.grid(row=row, column=0, padx=8, pady=(0, 4), sticky="ew")
        row += 1
        self._save_btn = ctk.CTkButton(self, text="Сохранить как…", command=lambda: self._emit(self.on_save_file))
        self._save_btn.grid(row=row, column=0, padx=8, pady=(0, 12), sticky="ew")
        row += 1

        # Info + cursor
        self._dims_val = ctk.StringVar(value="—")
        self._cursor_val = ctk.StringVar(value="—")
        ctk.CTkLabel(self, textvariable=self._dims_val, anchor="w").grid(row=row, column=0, padx=8, sticky="ew")
        row += 1
        ctk.CTkLabel(self, textvariable=self._cursor_val, anchor="w").grid(row=row, column=0, padx=8, pady=(0, 10), sticky="ew")
        row += 1

        # Adjustments
        ctk.CTkLabel(self, text="Коррекция", font=ctk.CTkFont(size=16, weight="bold")).grid(
            row=row, column=0, padx=8, pady=(8, 4), sticky="w"
        )
        row += 1
        self._brightness_val = ctk.StringVar(value="1.00")
        self._brightness_slider, row = self._add_slider(row, "Яркость", config.brightness_range, self._brightness_val)
        self._contrast_val = ctk.StringVar(value="1.00")
        self._contrast_slider, row = self._add_slider(row, "Контраст", config.contrast_range, self._contrast_val)

        self._grayscale = ctk.BooleanVar(value=False)
        ctk.CTkCheckBox(self, text="Оттенки серого", variable=self._grayscale, command=self._emit_adjustments).grid(
            row=row, column=0, padx=8, pady=(4, 2), sticky="w"
        )
        row += 1
        self._posterize = ctk.BooleanVar(value=False)
        self._posterize_val = ctk.StringVar(value=str(min(16, config.posterize_levels)))
        ctk.CTkCheckBox(self, text="Постеризация, уровней:", variable=self._posterize, command=self._emit_adjustments).grid(
            row=row, column=0, padx=8, pady=(2, 2), sticky="w"
        )
        row += 1
        self._posterize_slider = ctk.CTkSlider(
            self, from_=2, to=16, number_of_steps=14, command=self._on_posterize_slider
        )
        self._posterize_slider.set(min(16, config.posterize_levels))
        self._posterize_slider.grid(row=row, column=0, padx=8, pady=(0, 2), sticky="ew")
        row += 1
        ctk.CTkLabel(self, textvariable=self._posterize_val, anchor="w").grid(row=row, column=0, padx=8, sticky="w")
        row += 1

        # Palette + paint-by-numbers guide
        self._palette_choices = {_NONE_CHOICE: None, **{p.name: key for key, p in PALETTES.items()}}
        ctk.CTkLabel(self, text="Палитра").grid(row=row, column=0, padx=8, pady=(6, 2), sticky="w")
        row += 1
        self._palette_menu = ctk.CTkOptionMenu(
            self, values=list(self._palette_choices), command=lambda _v: self._emit_adjustments()
        )
        self._palette_menu.set(_NONE_CHOICE)
        self._palette_menu.grid(row=row, column=0, padx=8, pady=(0, 4), sticky="ew")
        row += 1
        self._guide_choices = {_NONE_CHOICE: None, "Блоки": GUIDE_BLOCKS, "Линии": GUIDE_LINES}
        ctk.CTkLabel(self, text="Раскраска по номерам").grid(row=row, column=0, padx=8, pady=(2, 2), sticky="w")
        row += 1
        self._guide_menu = ctk.CTkOptionMenu(
            self, values=list(self._guide_choices), command=lambda _v: self._emit_adjustments()
        )
        self._guide_menu.set(_NONE_CHOICE)
        self._guide_menu.grid(row=row, column=0, padx=8, pady=(0, 4), sticky="ew")
        row += 1

        self._compare = ctk.BooleanVar(value=False)
        ctk.CTkSwitch(self, text="До / после рядом", variable=self._compare, command=self._emit_compare).grid(
            row=row, column=0, padx=8, pady=(8, 2), sticky="w"
        )
        row += 1
        ctk.CTkButton(self, text="Сбросить", command=self.reset_adjustments).grid(
            row=row, column=0, padx=8, pady=(4, 12), sticky="ew"
        )
        row += 1

        # Analysis
        ctk.CTkLabel(self, text="Анализ", font=ctk.CTkFont(size=16, weight="bold")).grid(
            row=row, column=0, padx=8, pady=(8, 4), sticky="w"
        )
        row += 1
        self._stats_val = ctk.StringVar(value="—")
        ctk.CTkLabel(self, textvariable=self._stats_val, anchor="w", justify="left").grid(
            row=row, column=0, padx=8, sticky="ew"
        )
        row += 1
        self._swatch = ctk.CTkLabel(self, text="", height=20, corner_radius=4, fg_color="transparent")
        self._swatch.grid(row=row, column=0, padx=8, pady=(2, 4), sticky="ew")
        row += 1
        self._histogram = HistogramView(self)
        self._histogram.grid(row=row, column=0, padx=8, pady=(0, 8), sticky="ew")
        row += 1

        self._status_val = ctk.StringVar(value="")
        ctk.CTkLabel(self, textvariable=self._status_val, wraplength=280, anchor="w", justify="left", text_color="#d9534f").grid(
            row=row, column=0, padx=8, pady=(0, 8), sticky="ew"
        )

    # ---- Public API ----
    def get_adjustments(self) -> Adjustments:
        return Adjustments(
            brightness=round(float(self._brightness_slider.get()), 2),
            contrast=round(float(self._contrast_slider.get()), 2),
            grayscale=bool(self._grayscale.get()),
            posterize_levels=int(round(self._posterize_slider.get())) if self._posterize.get() else None,
            palette=self._palette_choices[self._palette_menu.get()],
            guide=self._guide_choices[self._guide_menu.get()],
        )

    def reset_adjustments(self) -> None:
        self._brightness_slider.set(1.0)
        self._brightness_val.set("1.00")
        self._contrast_slider.set(1.0)
        self._contrast_val.set("1.00")
        self._grayscale.set(False)
        self._posterize.set(False)
        self._palette_menu.set(_NONE_CHOICE)
        self._guide_menu.set(_NONE_CHOICE)
        self._emit_adjustments()

    def set_image_info(self, buffer: PixelBuffer) -> None:
        """Отображает размеры и формат загруженного изображения."""
        self._dims_val.set(f"{buffer.width} × {buffer.height} px, {buffer.format.upper()}")

    def update_cursor_info(self, x: Optional[int], y: Optional[int], rgba: Optional[Tuple[int, int, int, int]]) -> None:
        """Обновляет информацию по курсору (координаты, RGBA, HEX)."""
        if x is None or y is None or rgba is None:
            self._cursor_val.set("—")
            return
        r, g, b, a = rgba
        self._cursor_val.set(f"({x}, {y})  RGBA {r}, {g}, {b}, {a}  {ColorSample.from_rgb(r, g, b).hex}")

    def set_analysis(self, result: Optional[AnalysisResult]) -> None:
        if result is None:
            self._stats_val.set("—")
            self._swatch.configure(fg_color="transparent", text="")
            self._histogram.set_histogram(None)
            return
        self._stats_val.set(
            f"Средняя яркость: {_format_ratio(result.average_brightness)}\n"
            f"Контраст: {_format_ratio(result.contrast)}"
        )
        if result.dominant_colors:
            top = result.dominant_colors[0]
            self._swatch.configure(fg_color=top.hex, text=top.hex)
        self._histogram.set_histogram(result.histogram)

    def set_status(self, message: str) -> None:
        self._status_val.set(message)

    # ---- Internals ----
    def _add_slider(
        self, row: int, label: str, bounds: Tuple[float, float], value_var: ctk.StringVar
    ) -> Tuple[ctk.CTkSlider, int]:
        lo, hi = bounds

        def on_change(value: float) -> None:
            value_var.set(f"{value:.2f}")
            self._emit_adjustments()

        ctk.CTkLabel(self, text=label).grid(row=row, column=0, padx=8, pady=(0, 2), sticky="w")
        slider = ctk.CTkSlider(self, from_=lo, to=hi, number_of_steps=max(1, int(round((hi - lo) * 100))), command=on_change)
        slider.set(min(hi, max(lo, 1.0)))
        slider.grid(row=row + 1, column=0, padx=8, pady=(0, 2), sticky="ew")
        ctk.CTkLabel(self, textvariable=value_var, width=48, anchor="w").grid(row=row + 2, column=0, padx=8, pady=(0, 4), sticky="w")
        return slider, row + 3

    def _on_posterize_slider(self, value: float) -> None:
        self._posterize_val.set(str(int(round(value))))
        if self._posterize.get():
            self._emit_adjustments()

    def _emit_adjustments(self) -> None:
        if self.on_adjustments_change:
            self.on_adjustments_change(self.get_adjustments())

    def _emit_compare(self) -> None:
        if self.on_compare_change:
            self.on_compare_change(bool(self._compare.get()))

    @staticmethod
    def _emit(callback: Optional[Callable[[], None]]) -> None:
        if callback:
            callback()
