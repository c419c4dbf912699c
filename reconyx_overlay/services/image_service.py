"""Декодирование изображений и загрузка фиксированного слоя наложения.

Принципы:
- SRP: класс отвечает только за загрузку и базовое извлечение свойств.
- OCP: новые источники (стрим, URL) можно добавить отдельными методами.
- LSP/ISP: возвращает `RasterSurface` с предсказуемыми полями; интерфейс узкий и конкретный.

Декодирование выполняется в пуле потоков: вызывающий код получает `Future`
и не блокирует цикл событий UI.
"""
from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from io import BytesIO
from pathlib import Path
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from reconyx_overlay.config import AppConfig
from reconyx_overlay.errors import AssetLoadError, DecodeError
from reconyx_overlay.models.image_model import RasterSurface

logger = logging.getLogger(__name__)


def _failed(future: Future) -> bool:
    return future.done() and (future.cancelled() or future.exception() is not None)


class ImageService:
    def __init__(self, config: Optional[AppConfig] = None) -> None:
        self._config = config or AppConfig()
        self._executor = ThreadPoolExecutor(
            max_workers=self._config.decode_workers, thread_name_prefix="decode"
        )
        self._overlay_lock = threading.Lock()
        self._overlay_future: Optional[Future] = None

    # ---- Decode ----
    def decode(self, data: bytes, source: Optional[Path] = None) -> RasterSurface:
        """Декодирует байты изображения в `RasterSurface`.

        Формат определяет Pillow. Ориентация EXIF применяется так же, как её
        применяет браузер при отрисовке, поэтому размеры поверхности равны
        естественным размерам изображения, а не размерам какого-либо виджета.

        Args:
            data: Закодированные байты изображения.
            source: Путь к исходному файлу (только для метаданных).

        Returns:
            `RasterSurface` в режиме RGBA.

        Raises:
            DecodeError: если данные пусты или не являются изображением.
        """
        if not data:
            raise DecodeError("Пустые данные: нечего декодировать")
        try:
            with Image.open(BytesIO(data)) as opened:
                opened.load()
                oriented = ImageOps.exif_transpose(opened)
                rgba = oriented.convert("RGBA")
        except (UnidentifiedImageError, Image.DecompressionBombError) as exc:
            raise DecodeError(f"Данные не являются изображением: {source or '<bytes>'}") from exc
        except (OSError, SyntaxError, ValueError) as exc:
            # truncated or corrupt payloads surface as OSError/SyntaxError from plugins
            raise DecodeError(f"Не удалось декодировать изображение: {exc}") from exc

        return RasterSurface.from_image(rgba, source=source, size_bytes=len(data))

    def read_file(self, file_path: str | Path) -> bytes:
        """Читает файл целиком в память.

        Raises:
            DecodeError: если путь не существует или не указывает на файл.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise DecodeError(f"Файл не найден: {path}")
        try:
            return path.read_bytes()
        except OSError as exc:
            raise DecodeError(f"Не удалось прочитать файл: {path}") from exc

    def load_image(self, file_path: str | Path) -> RasterSurface:
        """Загружает изображение с диска: чтение в память + декодирование."""
        path = Path(file_path)
        surface = self.decode(self.read_file(path), source=path)
        logger.info("Loaded %s (%dx%d)", path.name, surface.width, surface.height)
        return surface

    def decode_async(self, data: bytes, source: Optional[Path] = None) -> Future:
        """Запускает `decode` в фоне; `Future` завершается `RasterSurface` или `DecodeError`."""
        return self._executor.submit(self.decode, data, source)

    def load_image_async(self, file_path: str | Path) -> Future:
        return self._executor.submit(self.load_image, file_path)

    # ---- Overlay asset ----
    def load_fixed_overlay(self) -> Future:
        """Возвращает `Future` с фиксированным слоем наложения.

        Загрузка выполняется один раз: повторные и одновременные вызовы получают
        тот же объект `Future`, результат кешируется до конца жизни процесса.
        Неудачная загрузка не кешируется, следующий вызов повторит попытку.
        """
        with self._overlay_lock:
            if self._overlay_future is None or _failed(self._overlay_future):
                logger.debug("Starting overlay load from %s", self._config.overlay_path)
                self._overlay_future = self._executor.submit(self._load_overlay, self._config.overlay_path)
            return self._overlay_future

    def _load_overlay(self, path: Path) -> RasterSurface:
        try:
            surface = self.load_image(path)
        except DecodeError as exc:
            logger.error("Overlay asset unavailable: %s", exc)
            raise AssetLoadError(f"Слой наложения недоступен: {path}") from exc
        return surface

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)
