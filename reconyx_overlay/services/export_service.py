"""Экспорт композита в файл без потерь (PNG).

Принципы:
- SRP: только кодирование и запись; никакой логики наложения.
- Имя файла содержит метку времени в миллисекундах, чтобы не было коллизий.
"""
from __future__ import annotations

import logging
import os
import tempfile
import time
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Callable, Optional

from reconyx_overlay.config import AppConfig
from reconyx_overlay.errors import EncodeError
from reconyx_overlay.models.image_model import RasterSurface

logger = logging.getLogger(__name__)

_MIME_TYPES = {"PNG": "image/png", "WEBP": "image/webp", "TIFF": "image/tiff"}


def _epoch_millis() -> int:
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class ExportedImage:
    """Закодированный файл, готовый к сохранению."""
    filename: str
    data: bytes
    mime_type: str


class ExportService:
    def __init__(
        self,
        config: Optional[AppConfig] = None,
        clock: Callable[[], int] = _epoch_millis,
    ) -> None:
        self._config = config or AppConfig()
        self._clock = clock

    def make_filename(self) -> str:
        return f"{self._config.export_prefix}-{self._clock()}{self._config.export_extension}"

    def export(self, surface: Optional[RasterSurface]) -> ExportedImage:
        """Кодирует поверхность в байты файла.

        Raises:
            EncodeError: если композита ещё нет или кодирование не удалось.
        """
        if surface is None:
            raise EncodeError("Нечего экспортировать: композит ещё не построен")

        fmt = self._config.export_format.upper()
        buffer = BytesIO()
        try:
            surface.pil_image.save(buffer, format=fmt)
        except (OSError, ValueError, KeyError) as exc:
            raise EncodeError(f"Не удалось закодировать изображение в {fmt}") from exc

        exported = ExportedImage(
            filename=self.make_filename(),
            data=buffer.getvalue(),
            mime_type=_MIME_TYPES.get(fmt, "application/octet-stream"),
        )
        logger.info("Encoded %s (%d bytes)", exported.filename, len(exported.data))
        return exported

    def save(self, exported: ExportedImage, destination: str | Path) -> Path:
        """Записывает файл. Если `destination` — каталог, используется сгенерированное имя.

        Байты пишутся во временный файл рядом с целевым и затем атомарно
        переименовываются, поэтому при ошибке записи целевой файл не повреждается.
        """
        path = Path(destination)
        if path.is_dir():
            path = path / exported.filename
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".part", dir=path.parent)
        tmp = Path(tmp_name)
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(exported.data)
            tmp.replace(path)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
        logger.info("Saved export to %s", path)
        return path
