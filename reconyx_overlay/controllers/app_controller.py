"""Контроллер приложения: оркестрация UI и сервисов.

SOLID:
- SRP: класс управляет связями между UI и конвейером (без логики наложения).
- DIP: зависит от сервисов как от абстрактных ролей; конкретные реализации инкапсулированы.
Clean Code:
- Обработчики компактны; тяжёлая логика вынесена в сервисы и `OverlayPipeline`.

Декодирование идёт в фоновых потоках. Результаты забираются в цикл Tk
опросом через `after`, поэтому все изменения состояния происходят в одном потоке.
"""
from __future__ import annotations

import logging
from concurrent.futures import Future
from dataclasses import dataclass, field
from tkinter import filedialog, messagebox, TclError
from typing import Callable, Optional

import customtkinter as ctk

from reconyx_overlay.config import AppConfig
from reconyx_overlay.controllers.pipeline import OverlayPipeline, PipelineState
from reconyx_overlay.errors import AssetLoadError, DecodeError, EncodeError
from reconyx_overlay.services.export_service import ExportService
from reconyx_overlay.services.image_service import ImageService
from reconyx_overlay.ui.bottom_bar import BottomBar
from reconyx_overlay.ui.image_viewer import ImageViewer
from reconyx_overlay.ui.sidebar import Sidebar

logger = logging.getLogger(__name__)


@dataclass
class AppController:
    """Связывает элементы UI с конвейером наложения.

    Ответственности:
    - Инициализация и бинд событий (UI -> контроллер).
    - Однократная загрузка слоя наложения при старте.
    - Загрузка пользовательских изображений через `ImageService`.
    - Синхронизация UI с `PipelineState` (подписка).
    - Экспорт результата.
    """
    viewer: ImageViewer
    sidebar: Sidebar
    bottom: BottomBar
    window: ctk.CTk
    config: AppConfig = field(default_factory=AppConfig)

    _image_service: Optional[ImageService] = None
    _export_service: Optional[ExportService] = None
    _pipeline: Optional[OverlayPipeline] = None

    def __post_init__(self) -> None:
        if self._image_service is None:
            self._image_service = ImageService(self.config)
        if self._export_service is None:
            self._export_service = ExportService(self.config)
        if self._pipeline is None:
            self._pipeline = OverlayPipeline(
                exporter=self._export_service, opacity=self.config.default_opacity
            )

    def bind_events(self) -> None:
        """Регистрирует обработчики событий между UI-компонентами.

        Сохраняет слабую связность: компоненты UI ничего не знают друг о друге,
        общаются через контроллер.
        """
        self.sidebar.on_open_file = self._handle_open_file
        self.bottom.on_opacity_change = self._handle_opacity_change
        self.bottom.on_download = self._handle_download
        self._pipeline.subscribe(self._render_state)

    def start(self) -> None:
        """Запускает загрузку фиксированного слоя наложения."""
        self.sidebar.set_status("Загрузка слоя наложения…")
        self._watch(self._image_service.load_fixed_overlay(), self._on_overlay_loaded)

    def shutdown(self) -> None:
        self._image_service.shutdown()

    # ---- Handlers ----
    def _handle_open_file(self) -> None:
        try:
            file_path = filedialog.askopenfilename(
                title="Выберите изображение",
                filetypes=self.config.image_filetypes,
            )
        except TclError:
            # Silent fail if dialog cannot open
            return

        if not file_path:
            return

        generation = self._pipeline.begin_upload()
        self.sidebar.set_status("Декодирование…")
        future = self._image_service.load_image_async(file_path)
        self._watch(future, lambda f: self._on_base_loaded(generation, f))

    def _handle_opacity_change(self, percent: int) -> None:
        try:
            self._pipeline.set_opacity(percent)
        except ValueError as exc:
            logger.warning("Ignoring opacity %r: %s", percent, exc)
        except MemoryError:
            logger.error("Not enough memory to composite at %d%%", percent)
            self.sidebar.set_status("Недостаточно памяти для пересчёта превью", error=True)

    def _handle_download(self) -> None:
        try:
            exported = self._pipeline.export()
        except EncodeError as exc:
            logger.warning("Export unavailable: %s", exc)
            messagebox.showwarning("Экспорт", str(exc))
            return

        try:
            target = filedialog.asksaveasfilename(
                title="Сохранить изображение",
                initialfile=exported.filename,
                defaultextension=self.config.export_extension,
                filetypes=(("PNG", "*.png"),),
            )
        except TclError:
            return
        if not target:
            return

        try:
            path = self._export_service.save(exported, target)
        except OSError as exc:
            logger.warning("Could not write %s: %s", target, exc)
            messagebox.showerror("Экспорт", f"Не удалось сохранить файл: {exc}")
            return
        self.sidebar.set_status(f"Сохранено: {path.name}")

    # ---- Async results ----
    def _on_overlay_loaded(self, future: Future) -> None:
        try:
            overlay = future.result()
        except AssetLoadError as exc:
            self._pipeline.overlay_failed(exc)
            return
        self._pipeline.set_overlay(overlay)

    def _on_base_loaded(self, generation: int, future: Future) -> None:
        try:
            surface = future.result()
        except DecodeError as exc:
            if self._pipeline.reject_base(generation, exc):
                self.sidebar.set_status("Файл не является изображением", error=True)
                messagebox.showerror("Ошибка загрузки", str(exc))
            return
        if self._pipeline.accept_base(generation, surface):
            self.sidebar.set_image_info(surface)

    # ---- Helpers ----
    def _render_state(self, state: PipelineState) -> None:
        if state.overlay_error is not None:
            self.sidebar.set_status(
                "Слой наложения не найден. Инструмент недоступен.", error=True
            )
            self.sidebar.set_upload_enabled(False)
            self.bottom.set_controls_enabled(False)
            self.bottom.set_download_enabled(False)
            self.viewer.set_image(None)
            self.viewer.set_placeholder("Слой наложения не найден: инструмент недоступен")
            return

        self.bottom.set_opacity_percent(state.opacity)
        self.bottom.set_download_enabled(state.composite is not None)
        if state.composite is not None:
            self.viewer.set_image(state.composite.pil_image)
            self.sidebar.set_status(f"Готово · прозрачность слоя {state.opacity}%")
        elif state.overlay is not None and state.base is None:
            self.sidebar.set_status("Слой наложения загружен. Выберите изображение.")

    def _watch(self, future: Future, on_done: Callable[[Future], None]) -> None:
        """Опрашивает `future` из цикла Tk и вызывает `on_done` в потоке UI."""
        def poll() -> None:
            if future.done():
                on_done(future)
            else:
                self.window.after(self.config.poll_interval_ms, poll)

        self.window.after(self.config.poll_interval_ms, poll)
