"""Модели данных для растровых поверхностей.

Принципы:
- SRP: только структура данных, без логики обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image

OPACITY_MIN = 0
OPACITY_MAX = 100


@dataclass(frozen=True)
class RasterSurface:
    """Неизменяемое декодированное изображение и его метаданные.

    Fields:
        pil_image: Изображение PIL в режиме RGBA.
        width: Естественная ширина, px.
        height: Естественная высота, px.
        mode: Режим PIL, например "RGBA".
        source: Путь к исходному файлу, если известен.
        size_bytes: Размер закодированных данных, если известен.
    """
    pil_image: Image.Image
    width: int
    height: int
    mode: str = "RGBA"
    source: Optional[Path] = None
    size_bytes: Optional[int] = None

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @classmethod
    def from_image(
        cls,
        image: Image.Image,
        source: Optional[Path] = None,
        size_bytes: Optional[int] = None,
    ) -> "RasterSurface":
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        width, height = rgba.size
        return cls(
            pil_image=rgba,
            width=width,
            height=height,
            mode=rgba.mode,
            source=source,
            size_bytes=size_bytes,
        )


@dataclass(frozen=True)
class CompositeSurface(RasterSurface):
    """Результат одного прохода наложения; размеры всегда равны базовому изображению."""
    opacity: int = OPACITY_MAX


def validate_opacity(value: int) -> int:
    """Проверяет уровень прозрачности слоя (целое 0–100) и возвращает его.

    Raises:
        ValueError: если значение не целое или вне диапазона.
    """
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Прозрачность должна быть целым числом, получено: {value!r}")
    if not OPACITY_MIN <= value <= OPACITY_MAX:
        raise ValueError(f"Прозрачность вне диапазона [{OPACITY_MIN}, {OPACITY_MAX}]: {value}")
    return value


def opacity_to_alpha(value: int) -> float:
    """Переводит проценты в множитель альфа-канала [0.0, 1.0]."""
    return validate_opacity(value) / float(OPACITY_MAX)
