"""Боковая панель: загрузка изображения, информация о нём и статус инструмента.

Принципы:
- SRP: управляет только UI, не содержит логики наложения.
- ISP: события наружу через `on_*`, обновления состояния через `set_*`.
"""
from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk

from reconyx_overlay.models.image_model import RasterSurface

_ERROR_COLOR = "#D64545"


def _format_size(size_bytes: Optional[int]) -> str:
    """Человекочитаемый размер файла."""
    if size_bytes is None:
        return "Размер: —"
    if size_bytes < 1024:
        return f"Размер: {size_bytes} Б"
    if size_bytes < 1024 * 1024:
        return f"Размер: {size_bytes / 1024:.1f} КБ"
    return f"Размер: {size_bytes / (1024 * 1024):.1f} МБ"


class Sidebar(ctk.CTkFrame):
    """Панель с блоками: файл, информация, статус."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, width=280, **kwargs)

        self.grid_columnconfigure(0, weight=1)

        # Callbacks
        self.on_open_file: Optional[Callable[[], None]] = None

        # Controls
        self._title = ctk.CTkLabel(self, text="Reconyx_Overlay", font=ctk.CTkFont(size=16, weight="bold"))
        self._title.grid(row=0, column=0, padx=8, pady=(8, 0), sticky="w")
        self._subtitle = ctk.CTkLabel(
            self,
            text="Загрузите изображение и настройте прозрачность слоя наложения",
            wraplength=250,
            anchor="w",
            justify="left",
        )
        self._subtitle.grid(row=1, column=0, padx=8, pady=(0, 8), sticky="ew")

        self._open_btn = ctk.CTkButton(self, text="Загрузить изображение", height=48, command=self._emit_open_file)
        self._open_btn.grid(row=2, column=0, padx=8, pady=(0, 12), sticky="ew")

        # Info section
        self._info_title = ctk.CTkLabel(self, text="Информация", font=ctk.CTkFont(size=16, weight="bold"))
        self._info_title.grid(row=3, column=0, padx=8, pady=(8, 4), sticky="w")

        self._path_val = ctk.StringVar(value="—")
        self._size_val = ctk.StringVar(value="—")
        self._dims_val = ctk.StringVar(value="—")

        self._info_path = ctk.CTkLabel(self, textvariable=self._path_val, wraplength=250, anchor="w", justify="left")
        self._info_size = ctk.CTkLabel(self, textvariable=self._size_val, anchor="w", justify="left")
        self._info_dims = ctk.CTkLabel(self, textvariable=self._dims_val, anchor="w", justify="left")

        self._info_path.grid(row=4, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_size.grid(row=5, column=0, padx=8, pady=(0, 2), sticky="ew")
        self._info_dims.grid(row=6, column=0, padx=8, pady=(0, 10), sticky="ew")

        # Status section
        self._status_title = ctk.CTkLabel(self, text="Статус", font=ctk.CTkFont(size=16, weight="bold"))
        self._status_title.grid(row=7, column=0, padx=8, pady=(8, 4), sticky="w")
        self._status_val = ctk.StringVar(value="Загрузка слоя наложения…")
        self._status = ctk.CTkLabel(self, textvariable=self._status_val, wraplength=250, anchor="w", justify="left")
        self._status.grid(row=8, column=0, padx=8, pady=(0, 8), sticky="ew")
        self._status_default_color = self._status.cget("text_color")

        # filler
        self.grid_rowconfigure(99, weight=1)

    # ---- Public API ----
    def set_image_info(self, surface: RasterSurface) -> None:
        self._path_val.set(surface.source.name if surface.source else "—")
        self._size_val.set(_format_size(surface.size_bytes))
        self._dims_val.set(f"Размеры: {surface.width}×{surface.height}")
        self._open_btn.configure(text="Сменить изображение")

    def set_status(self, text: str, error: bool = False) -> None:
        self._status_val.set(text)
        self._status.configure(text_color=_ERROR_COLOR if error else self._status_default_color)

    def set_upload_enabled(self, enabled: bool) -> None:
        self._open_btn.configure(state="normal" if enabled else "disabled")

    # ---- Events ----
    def _emit_open_file(self) -> None:
        if self.on_open_file:
            self.on_open_file()
