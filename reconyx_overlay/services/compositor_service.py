from __future__ import annotations

import logging
from typing import Optional

from reconyx_overlay.models.image_model import (
    CompositeSurface,
    RasterSurface,
    opacity_to_alpha,
)
from reconyx_overlay.services.canvas import Canvas

logger = logging.getLogger(__name__)


class CompositorService:
    def composite(
        self,
        base: Optional[RasterSurface],
        overlay: Optional[RasterSurface],
        opacity: int,
    ) -> Optional[CompositeSurface]:
        """
        Накладывает `overlay` на `base` с прозрачностью `opacity` (0–100).

        - Если одного из изображений ещё нет, возвращает None (это не ошибка).
        - Размер результата всегда равен размеру `base`.
        - `overlay` растягивается на весь прямоугольник базового изображения,
          независимо от собственных размеров и пропорций.
        - Входные поверхности не изменяются; одинаковые входы дают
          побайтно одинаковый результат.
        """
        if base is None or overlay is None:
            return None
        alpha = opacity_to_alpha(opacity)

        canvas = Canvas(base.width, base.height)
        target = (0, 0, base.width, base.height)
        canvas.draw_image(base.pil_image, target)
        with canvas.scoped_alpha(alpha):
            canvas.draw_image(overlay.pil_image, target)

        result = canvas.to_image()
        logger.debug(
            "Composited %dx%d overlay onto %dx%d base at %d%%",
            overlay.width, overlay.height, base.width, base.height, opacity,
        )
        return CompositeSurface(
            pil_image=result,
            width=base.width,
            height=base.height,
            mode=result.mode,
            source=base.source,
            opacity=opacity,
        )
