"""Настройки приложения.

Значения заданы по умолчанию в коде: CLI и переменных окружения нет.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

ASSETS_DIR = Path(__file__).resolve().parent / "assets"


@dataclass(frozen=True)
class AppConfig:
    """Неизменяемая конфигурация.

    Fields:
        overlay_path: Путь к фиксированному слою наложения.
        default_opacity: Прозрачность слоя при запуске, %.
        export_prefix: Префикс имени экспортируемого файла.
        export_format: Формат Pillow для экспорта (без потерь).
        window_title: Заголовок главного окна.
        min_size: Минимальный размер окна (ширина, высота).
        poll_interval_ms: Период опроса фоновых задач из цикла Tk.
        decode_workers: Число потоков декодирования.
        log_level: Уровень логирования.
    """
    overlay_path: Path = ASSETS_DIR / "overlay.png"
    default_opacity: int = 100
    export_prefix: str = "image-with-overlay"
    export_format: str = "PNG"
    image_filetypes: Tuple[Tuple[str, str], ...] = (
        ("Изображения", "*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.webp"),
        ("Все файлы", "*.*"),
    )
    window_title: str = "Reconyx_Overlay"
    min_size: Tuple[int, int] = (900, 600)
    poll_interval_ms: int = 30
    decode_workers: int = 2
    log_level: str = "INFO"

    @property
    def export_extension(self) -> str:
        return ".png" if self.export_format.upper() == "PNG" else f".{self.export_format.lower()}"
