"""Граница команд для презентационного слоя.

Каждая команда принимает и возвращает простые записи (dict, байты как список
целых 0..255), а ошибки отдаёт строкой внутри `CommandError`. Вызов по имени
через `invoke` повторяет схему `invoke('load_image', {path})` оболочки.

SOLID:
- SRP: только (де)сериализация и перевод ошибок; расчёты в сервисах.
- DIP: сервисы передаются в конструктор, по умолчанию создаются свои.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from imglab.errors import CommandError, ImageLabError
from imglab.models.image_model import ColorSample, PixelBuffer
from imglab.models.palette import PALETTES, get_palette
from imglab.services.image_service import ImageService
from imglab.services.process_service import ProcessService

logger = logging.getLogger(__name__)

Record = Dict[str, Any]


class ImageCommands:
    def __init__(
        self,
        image_service: Optional[ImageService] = None,
        process_service: Optional[ProcessService] = None,
    ) -> None:
        self._image_service = image_service or ImageService()
        self._process_service = process_service or ProcessService()
        self._commands: Dict[str, Callable[..., Any]] = {
            "load_image": self.load_image,
            "analyze_image": self.analyze_image,
            "adjust_brightness": self.adjust_brightness,
            "adjust_contrast": self.adjust_contrast,
            "convert_to_grayscale": self.convert_to_grayscale,
            "posterize": self.posterize,
            "quantize": self.quantize,
            "list_palettes": self.list_palettes,
            "remap_to_palette": self.remap_to_palette,
            "map_colors_to_palette": self.map_colors_to_palette,
            "paint_by_numbers_lines": self.paint_by_numbers_lines,
            "paint_by_numbers_blocks": self.paint_by_numbers_blocks,
            "save_image": self.save_image,
        }

    @property
    def command_names(self) -> tuple[str, ...]:
        return tuple(self._commands)

    def invoke(self, command: str, **kwargs: Any) -> Any:
        """Вызывает команду по имени.

        Raises:
            CommandError: неизвестная команда, неверные аргументы или запись либо ошибка самой команды.
        """
        handler = self._commands.get(command)
        if handler is None:
            raise CommandError(f"Unknown command: {command}")
        logger.debug("invoke %s", command)
        try:
            return handler(**kwargs)
        except (TypeError, KeyError, ValueError) as exc:
            raise CommandError(f"Invalid arguments for {command}: {exc}") from exc

    # ---- Commands ----
    def load_image(self, path: str) -> Record:
        try:
            buffer = self._image_service.load_image(path)
        except ImageLabError as exc:
            raise CommandError(str(exc)) from exc
        return buffer.to_dict()

    def analyze_image(self, image_data: Record) -> Record:
        buffer = PixelBuffer.from_dict(image_data)
        return self._process_service.analyze(buffer).to_dict()

    def adjust_brightness(self, image_data: Record, amount: float) -> Record:
        buffer = PixelBuffer.from_dict(image_data)
        return self._process_service.adjust_brightness(buffer, amount).to_dict()

    def adjust_contrast(self, image_data: Record, amount: float) -> Record:
        buffer = PixelBuffer.from_dict(image_data)
        return self._process_service.adjust_contrast(buffer, amount).to_dict()

    def convert_to_grayscale(self, image_data: Record) -> Record:
        buffer = PixelBuffer.from_dict(image_data)
        return self._process_service.to_grayscale(buffer).to_dict()

    def posterize(self, image_data: Record, levels: int) -> Record:
        buffer = PixelBuffer.from_dict(image_data)
        try:
            return self._process_service.posterize(buffer, levels).to_dict()
        except ValueError as exc:
            raise CommandError(str(exc)) from exc

    def quantize(self, image_data: Record, levels: int) -> Record:
        buffer = PixelBuffer.from_dict(image_data)
        try:
            return self._process_service.quantize(buffer, levels).to_dict()
        except ValueError as exc:
            raise CommandError(str(exc)) from exc

    def list_palettes(self) -> Dict[str, Record]:
        return {key: palette.to_dict() for key, palette in PALETTES.items()}

    def remap_to_palette(self, image_data: Record, palette: Union[str, List[str]]) -> Record:
        """`palette`: ключ каталога либо список HEX-цветов."""
        buffer = PixelBuffer.from_dict(image_data)
        try:
            colors = self._palette_colors(palette)
            return self._process_service.remap_to_palette(buffer, colors).to_dict()
        except ValueError as exc:
            raise CommandError(str(exc)) from exc

    def map_colors_to_palette(self, colors: List[Record], palette: Union[str, List[str]]) -> List[Record]:
        samples = [ColorSample.from_dict(record) for record in colors]
        try:
            mapped = self._process_service.map_colors_to_palette(samples, self._palette_colors(palette))
        except ValueError as exc:
            raise CommandError(str(exc)) from exc
        return [color.to_dict() for color in mapped]

    def paint_by_numbers_lines(self, image_data: Record, levels: int) -> Record:
        buffer = PixelBuffer.from_dict(image_data)
        try:
            return self._process_service.paint_by_numbers_lines(buffer, levels).to_dict()
        except ValueError as exc:
            raise CommandError(str(exc)) from exc

    def paint_by_numbers_blocks(self, image_data: Record) -> Record:
        buffer = PixelBuffer.from_dict(image_data)
        try:
            return self._process_service.paint_by_numbers_blocks(buffer).to_dict()
        except ValueError as exc:
            raise CommandError(str(exc)) from exc

    def save_image(self, image_data: Record, path: str) -> None:
        buffer = PixelBuffer.from_dict(image_data)
        try:
            self._image_service.save_image(buffer, path)
        except ImageLabError as exc:
            raise CommandError(str(exc)) from exc

    # ---- Helpers ----
    @staticmethod
    def _palette_colors(palette: Union[str, List[str]]) -> Sequence[str]:
        if isinstance(palette, str):
            return get_palette(palette).colors
        return list(palette)
