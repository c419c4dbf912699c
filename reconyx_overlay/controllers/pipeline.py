"""Состояние конвейера наложения и подписка на его изменения.

Принципы:
- SRP: хранит текущие входы (база, слой, прозрачность) и пересчитывает композит.
- Наблюдатель: UI подписывается через `subscribe` и получает новое состояние
  после каждого изменения. Ничего не знает о customtkinter.
- Состояние неизменяемо и заменяется целиком, поэтому подписчики никогда
  не видят частично обновлённых данных.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, List, Optional

from reconyx_overlay.errors import EncodeError
from reconyx_overlay.models.image_model import (
    OPACITY_MAX,
    CompositeSurface,
    RasterSurface,
    validate_opacity,
)
from reconyx_overlay.services.compositor_service import CompositorService
from reconyx_overlay.services.export_service import ExportedImage, ExportService

logger = logging.getLogger(__name__)

STATUS_LOADING = "loading"
STATUS_READY = "ready"
STATUS_OVERLAY_MISSING = "overlay_missing"


@dataclass(frozen=True)
class PipelineState:
    base: Optional[RasterSurface] = None
    overlay: Optional[RasterSurface] = None
    opacity: int = OPACITY_MAX
    composite: Optional[CompositeSurface] = None
    generation: int = 0
    overlay_error: Optional[Exception] = None


Listener = Callable[[PipelineState], None]


class OverlayPipeline:
    def __init__(
        self,
        compositor: Optional[CompositorService] = None,
        exporter: Optional[ExportService] = None,
        opacity: int = OPACITY_MAX,
    ) -> None:
        self._compositor = compositor or CompositorService()
        self._exporter = exporter or ExportService()
        self._state = PipelineState(opacity=validate_opacity(opacity))
        self._listeners: List[Listener] = []

    # ---- Observers ----
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Регистрирует слушателя; возвращает функцию отписки."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def status(self) -> str:
        if self._state.overlay_error is not None:
            return STATUS_OVERLAY_MISSING
        if self._state.overlay is None:
            return STATUS_LOADING
        return STATUS_READY

    @property
    def can_export(self) -> bool:
        return self._state.composite is not None

    # ---- Inputs ----
    def begin_upload(self) -> int:
        """Начинает новую загрузку; более ранние незавершённые декодирования устаревают."""
        self._state = replace(self._state, generation=self._state.generation + 1)
        return self._state.generation

    def accept_base(self, generation: int, surface: RasterSurface) -> bool:
        """Устанавливает базовое изображение, если `generation` всё ещё актуален."""
        if generation != self._state.generation:
            logger.debug("Ignoring stale decode (generation %d, current %d)", generation, self._state.generation)
            return False
        self._update(base=surface)
        return True

    def reject_base(self, generation: int, error: Exception) -> bool:
        """Фиксирует ошибку декодирования; предыдущая база и превью не меняются.

        Returns:
            True, если ошибка относится к актуальной загрузке и её нужно показать.
        """
        if generation != self._state.generation:
            return False
        logger.warning("Upload rejected: %s", error)
        return True

    def set_overlay(self, surface: RasterSurface) -> None:
        self._update(overlay=surface, overlay_error=None)

    def overlay_failed(self, error: Exception) -> None:
        logger.error("Overlay asset failed to load: %s", error)
        self._update(overlay_error=error)

    def set_opacity(self, value: int) -> None:
        value = validate_opacity(value)
        if value == self._state.opacity:
            return
        self._update(opacity=value)

    # ---- Output ----
    def export(self) -> ExportedImage:
        """Кодирует текущий композит.

        Raises:
            EncodeError: если композит ещё не построен.
        """
        if self._state.composite is None:
            raise EncodeError("Экспорт недоступен: сначала загрузите изображение")
        return self._exporter.export(self._state.composite)

    # ---- Helpers ----
    def _update(self, **changes) -> None:
        draft = replace(self._state, **changes)
        # None until both base and overlay are present
        composite = self._compositor.composite(draft.base, draft.overlay, draft.opacity)
        self._state = replace(draft, composite=composite)
        for listener in list(self._listeners):
            listener(self._state)
