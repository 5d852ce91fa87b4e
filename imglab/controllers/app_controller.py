"""Контроллер приложения: оркестрация UI и сервисов.

SOLID:
- SRP: класс управляет связями между UI и сервисами (без логики обработки изображений).
- DIP: зависит от сервисов как от ролей; конкретные реализации передаются извне.
Clean Code:
- Обработчики компактны; тяжёлая логика вынесена в сервисы.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from tkinter import filedialog, TclError
from typing import Optional, Tuple

import customtkinter as ctk

from imglab.config import AppConfig
from imglab.errors import ImageLabError
from imglab.models.adjustments import Adjustments
from imglab.models.image_model import PixelBuffer
from imglab.services.image_service import ImageService
from imglab.services.process_service import ProcessService
from imglab.ui.image_viewer import ImageViewer
from imglab.ui.sidebar import Sidebar

logger = logging.getLogger(__name__)

OPEN_FILETYPES = (
    ("Images", "*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.webp"),
    ("All files", "*.*"),
)
SAVE_FILETYPES = (
    ("PNG", "*.png"),
    ("BMP", "*.bmp"),
    ("TIFF", "*.tiff"),
    ("WebP", "*.webp"),
)


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Загрузка и сохранение через `ImageService`.
    - Применение коррекций и анализ результата через `ProcessService`.
    - Показ ошибок `ImageLabError` в строке статуса сайдбара.
    Исходный буфер никогда не изменяется: каждое изменение коррекций
    заново строит результат из него.
    """
    viewer: ImageViewer
    sidebar: Sidebar
    window: ctk.CTk
    config: AppConfig = field(default_factory=AppConfig)

    _image_service: ImageService = field(default_factory=ImageService)
    _process_service: ProcessService = field(default_factory=ProcessService)
    _source: Optional[PixelBuffer] = None
    _result: Optional[PixelBuffer] = None
    _adjustments: Adjustments = field(default_factory=Adjustments)

    def bind_events(self) -> None:
        """Регистрирует обработчики событий между UI-компонентами."""
        self.sidebar.on_open_file = self._handle_open_file
        self.sidebar.on_save_file = self._handle_save_file
        self.sidebar.on_adjustments_change = self._handle_adjustments_change
        self.sidebar.on_compare_change = self.viewer.set_side_by_side
        self.viewer.on_cursor_move = self._handle_cursor_move

    # ---- Handlers ----
    def _handle_open_file(self) -> None:
        try:
            file_path = filedialog.askopenfilename(title="Выберите изображение", filetypes=OPEN_FILETYPES)
        except TclError:
            return
        if not file_path:
            return

        try:
            buffer = self._image_service.load_image(file_path)
        except ImageLabError as exc:
            self.sidebar.set_status(str(exc))
            return

        self._source = buffer
        self.sidebar.set_status("")
        self.sidebar.set_image_info(buffer)
        self.viewer.set_image(buffer)
        self.window.title(f"imglab: {file_path}")
        self._apply_adjustments()

    def _handle_save_file(self) -> None:
        if self._result is None:
            return
        try:
            file_path = filedialog.asksaveasfilename(
                title="Сохранить изображение",
                defaultextension=self.config.default_save_extension,
                filetypes=SAVE_FILETYPES,
            )
        except TclError:
            return
        if not file_path:
            return

        try:
            self._image_service.save_image(self._result, file_path)
        except ImageLabError as exc:
            self.sidebar.set_status(str(exc))
            return
        self.sidebar.set_status("")

    def _handle_adjustments_change(self, adjustments: Adjustments) -> None:
        self._adjustments = adjustments
        self._apply_adjustments()

    def _handle_cursor_move(self, x: Optional[int], y: Optional[int], rgba: Optional[Tuple[int, int, int, int]]) -> None:
        self.sidebar.update_cursor_info(x, y, rgba)

    # ---- Helpers ----
    def _apply_adjustments(self) -> None:
        """Строит результат из исходного буфера, анализирует его и обновляет UI."""
        if self._source is None:
            return
        self._result = self._process_service.apply(self._source, self._adjustments)
        logger.debug("Коррекции применены: %s", self._adjustments)
        self.viewer.set_processed_image(None if self._adjustments.is_identity else self._result)
        self.sidebar.set_analysis(self._process_service.analyze(self._result))
