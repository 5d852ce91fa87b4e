"""Загрузка изображений с диска в `PixelBuffer` и запись обратно.

Принципы:
- SRP: класс отвечает только за кодек (Pillow) и файловый ввод-вывод.
- ISP: узкий интерфейс `load_image(path)` / `save_image(buffer, path)`.
- Ошибки Pillow/ОС заворачиваются в `DecodeError` / `EncodeError` с текстом для пользователя.
"""
from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image

from imglab.errors import DecodeError, EncodeError
from imglab.models.image_model import PixelBuffer

logger = logging.getLogger(__name__)


class ImageService:
    def load_image(self, file_path: str | Path) -> PixelBuffer:
        """Декодирует файл и возвращает его пиксели в RGBA8.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `PixelBuffer` с format="rgba".

        Raises:
            DecodeError: если путь не существует, не читается или формат не поддерживается.
        """
        path = Path(file_path)
        try:
            with Image.open(path) as pil_image:
                buffer = PixelBuffer.from_pil(pil_image)
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            logger.warning("Не удалось загрузить %s: %s", path, exc)
            raise DecodeError(f"Failed to load image: {exc}") from exc

        logger.info("Загружено %s (%d × %d)", path, buffer.width, buffer.height)
        return buffer

    def save_image(self, buffer: PixelBuffer, file_path: str | Path) -> None:
        """Кодирует буфер и сохраняет файл; формат определяется по расширению.

        Raises:
            EncodeError: если длина данных не равна `width * height * 4` (до обращения к диску)
                либо запись не удалась.
        """
        if not buffer.is_well_formed():
            logger.error(
                "Буфер %d × %d: ожидалось %d байт, получено %d",
                buffer.width, buffer.height, buffer.expected_length, len(buffer.data),
            )
            raise EncodeError("Failed to create image from data")

        path = Path(file_path)
        # KeyError: формат известен Pillow только для чтения (например, PSD)
        try:
            buffer.to_pil().save(path)
        except (OSError, ValueError, KeyError) as exc:
            logger.error("Не удалось сохранить %s: %s", path, exc)
            raise EncodeError(f"Failed to save image: {exc}") from exc

        logger.info("Сохранено %s", path)
