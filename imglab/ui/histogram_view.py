"""График гистограмм R/G/B и яркости."""
from __future__ import annotations

from typing import Optional, Sequence

import customtkinter as ctk
import tkinter as tk

from imglab.models.image_model import HistogramData

_CHANNEL_COLORS = (
    ("red", "#e05555"),
    ("green", "#4caf50"),
    ("blue", "#4a7fe0"),
    ("luminosity", "#9e9e9e"),
)


class HistogramView(ctk.CTkFrame):
    """Рисует четыре гистограммы ломаными, нормированными по общему максимуму."""
    def __init__(self, master: tk.Misc, height: int = 120, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_columnconfigure(0, weight=1)
        self._canvas = tk.Canvas(self, height=height, highlightthickness=0, bg="#181818")
        self._canvas.grid(row=0, column=0, sticky="ew")
        self._histogram: Optional[HistogramData] = None
        self._canvas.bind("<Configure>", lambda _e: self._render())

    def set_histogram(self, histogram: Optional[HistogramData]) -> None:
        self._histogram = histogram
        self._render()

    def _render(self) -> None:
        self._canvas.delete("all")
        if self._histogram is None:
            return
        width = max(1, int(self._canvas.winfo_width()))
        height = max(1, int(self._canvas.winfo_height()))
        peak = max(max(getattr(self._histogram, name)) for name, _ in _CHANNEL_COLORS)
        if peak == 0:
            return
        for name, color in _CHANNEL_COLORS:
            points = self._polyline(getattr(self._histogram, name), peak, width, height)
            self._canvas.create_line(*points, fill=color, width=1)

    @staticmethod
    def _polyline(counts: Sequence[int], peak: int, width: int, height: int) -> list[float]:
        step = width / (len(counts) - 1)
        points: list[float] = []
        for i, count in enumerate(counts):
            points.extend((i * step, height - (count / peak) * (height - 2)))
        return points
