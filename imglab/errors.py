"""Исключения приложения.

Сообщения ошибок предназначены для показа пользователю как есть:
структурированных кодов нет, различаются только тип и текст.
"""
from __future__ import annotations


class ImageLabError(Exception):
    """Базовая ошибка imglab."""


class DecodeError(ImageLabError):
    """Файл не удалось прочитать или распознать как изображение."""


class EncodeError(ImageLabError):
    """Буфер не удалось собрать в изображение или записать на диск."""


class CommandError(ImageLabError):
    """Ошибка на границе команд: несёт только текст для презентационного слоя."""
