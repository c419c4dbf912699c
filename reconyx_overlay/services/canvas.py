"""Растровая канва с состоянием отрисовки (аналог 2D-контекста).

Хранит пиксели в изображении RGBA (uint8) и рисует изображения по правилу
Портера–Даффа «source over» через `Image.alpha_composite`:

    out_a   = sa + da * (1 - sa)
    out_rgb = (src_rgb * sa + dst_rgb * da * (1 - sa)) / out_a

где `sa` — альфа пикселя источника, умноженная на `global_alpha`.
Полностью прозрачные пиксели результата нормализуются к (0, 0, 0, 0).
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional, Tuple

import numpy as np
from PIL import Image

Rect = Tuple[int, int, int, int]  # x, y, width, height

_TRANSPARENT = (0, 0, 0, 0)


def _alpha_lut(alpha: float) -> list[int]:
    """Таблица 256 значений: альфа пикселя, умноженная на `alpha`, с округлением."""
    lut = np.rint(np.arange(256, dtype=np.float32) * np.float32(alpha))
    return np.clip(lut, 0, 255).astype(np.uint8).tolist()


class Canvas:
    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Размер канвы должен быть положительным: {width}x{height}")
        self.width = width
        self.height = height
        self._image = Image.new("RGBA", (width, height), _TRANSPARENT)
        self._global_alpha = 1.0

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def global_alpha(self) -> float:
        return self._global_alpha

    @global_alpha.setter
    def global_alpha(self, value: float) -> None:
        value = float(value)
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"global_alpha вне диапазона [0, 1]: {value}")
        self._global_alpha = value

    @contextmanager
    def scoped_alpha(self, alpha: float) -> Iterator["Canvas"]:
        """Устанавливает `global_alpha` на время блока и затем восстанавливает 1.0."""
        self.global_alpha = alpha
        try:
            yield self
        finally:
            self._global_alpha = 1.0

    def draw_image(self, image: Image.Image, rect: Optional[Rect] = None) -> None:
        """Рисует изображение в прямоугольник `rect` (по умолчанию — вся канва).

        Если размер `rect` отличается от размера изображения, оно растягивается
        (билинейная интерполяция, как у браузерной канвы со сглаживанием).
        Части за пределами канвы отсекаются.
        """
        x, y, w, h = rect if rect is not None else (0, 0, self.width, self.height)
        if w <= 0 or h <= 0:
            return

        # clip destination rectangle to the canvas
        x0, y0 = max(0, x), max(0, y)
        x1, y1 = min(self.width, x + w), min(self.height, y + h)
        if x0 >= x1 or y0 >= y1:
            return

        src = image if image.mode == "RGBA" else image.convert("RGBA")
        if src.size != (w, h):
            src = src.resize((w, h), Image.Resampling.BILINEAR)
        if (x0, y0, x1, y1) != (x, y, x + w, y + h):
            src = src.crop((x0 - x, y0 - y, x1 - x, y1 - y))
        if self._global_alpha < 1.0:
            src = src.copy() if src is image else src
            src.putalpha(src.getchannel("A").point(_alpha_lut(self._global_alpha)))

        if src.size == self.size:
            self._image = Image.alpha_composite(self._image, src)
        else:
            self._image.alpha_composite(src, dest=(x0, y0))

    def to_image(self) -> Image.Image:
        """Возвращает копию содержимого канвы (RGBA, uint8)."""
        return self._image.copy()
