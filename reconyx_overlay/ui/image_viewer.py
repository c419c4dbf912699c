"""Виджет предпросмотра композита.

Принципы:
- SRP: отвечает только за представление; масштаб отображения никогда не
  влияет на размеры поверхностей конвейера.
- Чистый код: чёткое разделение публичного API и внутренних обработчиков событий.
"""
from __future__ import annotations

from typing import Optional

import customtkinter as ctk
import tkinter as tk
from PIL import Image, ImageTk

_EMPTY_HINT = "Загрузите изображение, чтобы применить слой наложения"


class ImageViewer(ctk.CTkFrame):
    """Канва, вписывающая изображение в доступную область."""
    def __init__(self, master: ctk.CTk | tk.Misc, **kwargs) -> None:
        super().__init__(master, **kwargs)
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(0, weight=1)

        self._canvas = tk.Canvas(self, highlightthickness=0, bg=self._get_canvas_bg())
        self._canvas.grid(row=0, column=0, sticky="nsew")

        self._image: Optional[Image.Image] = None
        self._tk_image: Optional[ImageTk.PhotoImage] = None
        self._placeholder = _EMPTY_HINT

        self._canvas.bind("<Configure>", self._on_canvas_resize)

    # ---- Public API ----
    def set_image(self, image: Optional[Image.Image]) -> None:
        """Устанавливает изображение для показа (None — пустое состояние) и перерисовывает."""
        self._image = image
        self._render()

    def set_placeholder(self, text: str) -> None:
        self._placeholder = text
        if self._image is None:
            self._render()

    # ---- Internals ----
    def _on_canvas_resize(self, _event: tk.Event) -> None:
        self._render()

    def _render(self) -> None:
        self._canvas.delete("all")
        canvas_w = max(1, int(self._canvas.winfo_width()))
        canvas_h = max(1, int(self._canvas.winfo_height()))

        if self._image is None:
            self._canvas.create_text(
                canvas_w // 2,
                canvas_h // 2,
                text=self._placeholder,
                fill=self._get_hint_fg(),
                width=max(1, canvas_w - 40),
            )
            return

        img_w, img_h = self._image.size
        scale = self._fit_scale((img_w, img_h))
        scaled_w = max(1, int(img_w * scale))
        scaled_h = max(1, int(img_h * scale))
        display = self._image
        if (scaled_w, scaled_h) != (img_w, img_h):
            display = self._image.resize((scaled_w, scaled_h), Image.Resampling.LANCZOS)

        x = (canvas_w - scaled_w) // 2
        y = (canvas_h - scaled_h) // 2
        self._tk_image = ImageTk.PhotoImage(display)
        self._canvas.create_image(x, y, image=self._tk_image, anchor="nw")

    def _fit_scale(self, size: tuple[int, int]) -> float:
        canvas_w = max(1, int(self._canvas.winfo_width()))
        canvas_h = max(1, int(self._canvas.winfo_height()))
        img_w, img_h = size
        if img_w == 0 or img_h == 0:
            return 1.0
        # never upscale the preview
        return min(1.0, canvas_w / img_w, canvas_h / img_h)

    def _get_canvas_bg(self) -> str:
        # CTk does not expose canvas theme, so pick neutral
        return "#1f1f1f" if ctk.get_appearance_mode().lower() == "dark" else "#f2f2f2"

    def _get_hint_fg(self) -> str:
        return "#8a8a8a"
