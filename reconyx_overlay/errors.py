"""Ошибки конвейера наложения.

Все три вида ошибок восстановимы на границе UI: контроллер перехватывает их
и показывает пользователю, процесс не завершается.
"""
from __future__ import annotations


class OverlayToolError(Exception):
    """Базовая ошибка приложения."""


class DecodeError(OverlayToolError, ValueError):
    """Пользовательский файл не является декодируемым изображением."""


class AssetLoadError(OverlayToolError):
    """Фиксированный слой наложения отсутствует или не декодируется.

    Без него наложение невозможно, поэтому UI должен явно сообщить,
    что инструмент неработоспособен.
    """


class EncodeError(OverlayToolError):
    """Экспорт вызван без готового композита (или кодирование не удалось)."""
