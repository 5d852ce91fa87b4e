"""Виджет просмотра: вписывание, масштаб колесом, панорамирование, «до/после».

Принципы:
- SRP: отвечает только за отображение `PixelBuffer` и интеракции с ним.
- Буферы не изменяются: для показа строится отдельный `PIL.Image`.
"""
from __future__ import annotations

from typing import Callable, Optional, Tuple

import customtkinter as ctk
import tkinter as tk
from PIL import Image, ImageTk

from imglab.models.image_model import PixelBuffer

_MIN_SCALE = 0.1
_MAX_SCALE = 4.0
_GAP = 16

Rgba = Tuple[int, int, int, int]


class ImageViewer(ctk.CTkFrame):
    """Канва с исходным и обработанным изображением (одно или рядом)."""
    def __init__(self, master: ctk.CTk | tk.Misc, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        self._canvas = tk.Canvas(self, highlightthickness=0, bg=self._get_canvas_bg())
        self._canvas.grid(row=0, column=0, sticky="nsew")

        self._original: Optional[Image.Image] = None
        self._processed: Optional[Image.Image] = None
        self._tk_images: list[ImageTk.PhotoImage] = []

        self._scale_factor: float = 1.0
        self._top_left: Optional[Tuple[int, int]] = None
        self._pan_anchor: Optional[Tuple[int, int, int, int]] = None

        self._side_by_side: bool = False
        self._hold_before: bool = False

        self.on_cursor_move: Optional[Callable[[Optional[int], Optional[int], Optional[Rgba]], None]] = None

        self._canvas.bind("<Configure>", lambda _e: self._render())
        self._canvas.bind("<Motion>", self._on_mouse_move)
        self._canvas.bind("<Leave>", lambda _e: self._emit_cursor(None, None, None))
        self._canvas.bind("<MouseWheel>", self._on_mouse_wheel)      # Windows/macOS
        self._canvas.bind("<Button-4>", self._on_mouse_wheel)        # Linux scroll up
        self._canvas.bind("<Button-5>", self._on_mouse_wheel)        # Linux scroll down
        self._canvas.bind("<ButtonPress-1>", self._on_pan_start)
        self._canvas.bind("<B1-Motion>", self._on_pan_move)
        self._canvas.bind("<ButtonRelease-1>", lambda _e: setattr(self, "_pan_anchor", None))
        self._canvas.bind("<KeyPress-space>", lambda _e: self._set_hold_before(True))
        self._canvas.bind("<KeyRelease-space>", lambda _e: self._set_hold_before(False))

    # ---- Public API ----
    def set_image(self, buffer: PixelBuffer) -> None:
        """Устанавливает исходное изображение и вписывает его в канву."""
        self._original = buffer.to_pil()
        self._processed = None
        self.set_zoom_to_fit()

    def set_processed_image(self, buffer: Optional[PixelBuffer]) -> None:
        """Обработанное изображение (None: показывать исходное)."""
        self._processed = buffer.to_pil() if buffer is not None else None
        self._render()

    def set_side_by_side(self, enabled: bool) -> None:
        self._side_by_side = enabled
        self._top_left = None
        self._render()

    def set_zoom_to_fit(self) -> None:
        self._scale_factor = self._fit_scale()
        self._top_left = None
        self._render()

    # ---- Rendering ----
    def _render(self) -> None:
        self._canvas.delete("all")
        self._tk_images.clear()
        if self._original is None:
            return

        img_w, img_h = self._original.size
        scaled = (max(1, int(img_w * self._scale_factor)), max(1, int(img_h * self._scale_factor)))
        after = self._processed if (self._processed is not None and not self._hold_before) else self._original

        if self._side_by_side and self._processed is not None:
            frames = [self._original, after]
        else:
            frames = [after]

        content_w = scaled[0] * len(frames) + _GAP * (len(frames) - 1)
        x, y = self._clamp_top_left(content_w, scaled[1])
        for i, frame in enumerate(frames):
            tk_img = ImageTk.PhotoImage(frame.resize(scaled, Image.Resampling.LANCZOS))
            self._tk_images.append(tk_img)
            self._canvas.create_image(x + i * (scaled[0] + _GAP), y, image=tk_img, anchor="nw")

    def _clamp_top_left(self, content_w: int, content_h: int) -> Tuple[int, int]:
        canvas_w = int(self._canvas.winfo_width())
        canvas_h = int(self._canvas.winfo_height())

        def axis(size: int, view: int, current: Optional[int]) -> int:
            if size <= view:
                return (view - size) // 2
            if current is None:
                return 0
            return max(view - size, min(0, current))

        cur_x, cur_y = self._top_left if self._top_left is not None else (None, None)
        self._top_left = (axis(content_w, canvas_w, cur_x), axis(content_h, canvas_h, cur_y))
        return self._top_left

    def _fit_scale(self) -> float:
        if self._original is None:
            return 1.0
        img_w, img_h = self._original.size
        if img_w == 0 or img_h == 0:
            return 1.0
        canvas_w = max(1, int(self._canvas.winfo_width()))
        canvas_h = max(1, int(self._canvas.winfo_height()))
        return max(_MIN_SCALE, min(_MAX_SCALE, min(canvas_w / img_w, canvas_h / img_h)))

    def _get_canvas_bg(self) -> str:
        return "#1f1f1f" if ctk.get_appearance_mode().lower() == "dark" else "#f2f2f2"

    # ---- Cursor ----
    def _on_mouse_move(self, event: tk.Event) -> None:
        if self._original is None or self._top_left is None:
            return
        img_w, img_h = self._original.size
        ox, oy = self._top_left
        scaled_w = max(1, int(img_w * self._scale_factor))
        dx, dy = event.x - ox, event.y - oy
        source = self._processed if (self._processed is not None and not self._hold_before) else self._original
        if self._side_by_side and self._processed is not None:
            if dx >= scaled_w + _GAP:
                dx -= scaled_w + _GAP
            elif dx < scaled_w:
                source = self._original
        x, y = int(dx / self._scale_factor), int(dy / self._scale_factor)
        if dx < 0 or dy < 0 or not (0 <= x < img_w and 0 <= y < img_h):
            self._emit_cursor(None, None, None)
            return
        self._emit_cursor(x, y, source.getpixel((x, y)))

    def _emit_cursor(self, x: Optional[int], y: Optional[int], rgba: Optional[Rgba]) -> None:
        if self.on_cursor_move:
            self.on_cursor_move(x, y, rgba)

    # ---- Zoom / pan ----
    def _on_mouse_wheel(self, event: tk.Event) -> None:
        if self._original is None or self._top_left is None:
            return
        # На X11 колесо приходит как Button-4 (вверх) / Button-5 (вниз)
        up = event.num == 4 if getattr(event, "num", None) in (4, 5) else event.delta > 0
        old_scale = self._scale_factor
        new_scale = max(_MIN_SCALE, min(_MAX_SCALE, old_scale * (1.1 if up else 1.0 / 1.1)))
        if abs(new_scale - old_scale) < 1e-6:
            return
        ox, oy = self._top_left
        ix, iy = (event.x - ox) / old_scale, (event.y - oy) / old_scale
        self._scale_factor = new_scale
        self._top_left = (int(round(event.x - ix * new_scale)), int(round(event.y - iy * new_scale)))
        self._render()

    def _on_pan_start(self, event: tk.Event) -> None:
        if self._top_left is None:
            return
        self._canvas.focus_set()
        self._pan_anchor = (event.x, event.y, *self._top_left)

    def _on_pan_move(self, event: tk.Event) -> None:
        if self._pan_anchor is None:
            return
        sx, sy, ox, oy = self._pan_anchor
        self._top_left = (ox + event.x - sx, oy + event.y - sy)
        self._render()

    def _set_hold_before(self, active: bool) -> None:
        if self._hold_before != active:
            self._hold_before = active
            self._render()
