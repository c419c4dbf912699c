from __future__ import annotations

from typing import Callable, Optional

import customtkinter as ctk

from reconyx_overlay.models.image_model import OPACITY_MAX, OPACITY_MIN


class BottomBar(ctk.CTkFrame):
    def __init__(self, master: ctk.CTk, default_opacity: int = OPACITY_MAX, **kwargs) -> None:
        super().__init__(master, height=64, **kwargs)

        # callbacks
        self.on_opacity_change: Optional[Callable[[int], None]] = None
        self.on_download: Optional[Callable[[], None]] = None

        # layout
        self.grid_rowconfigure(0, weight=1)
        self.grid_columnconfigure(1, weight=1)  # slider stretches

        # Opacity controls
        self._opacity_label = ctk.CTkLabel(self, text="Прозрачность слоя")
        self._opacity_label.grid(row=0, column=0, padx=(10, 6), pady=8, sticky="w")

        self._opacity_value = ctk.StringVar(value=f"{default_opacity}%")
        self._opacity_slider = ctk.CTkSlider(
            self,
            from_=OPACITY_MIN,
            to=OPACITY_MAX,
            number_of_steps=OPACITY_MAX - OPACITY_MIN,
            command=self._on_slider_change,
        )
        self._opacity_slider.set(default_opacity)
        self._opacity_slider.grid(row=0, column=1, padx=6, pady=8, sticky="ew")
        self._opacity_value_label = ctk.CTkLabel(self, textvariable=self._opacity_value, width=48, anchor="w")
        self._opacity_value_label.grid(row=0, column=2, padx=(6, 12), pady=8, sticky="w")

        # Download
        self._download_btn = ctk.CTkButton(self, text="Скачать", width=120, command=self._on_download_click)
        self._download_btn.grid(row=0, column=3, padx=(6, 10), pady=8, sticky="e")
        self.set_download_enabled(False)

    # public API (sync from controller)
    def set_opacity_percent(self, percent: int) -> None:
        self._opacity_slider.set(percent)
        self._opacity_value.set(f"{percent}%")

    def set_download_enabled(self, enabled: bool) -> None:
        self._download_btn.configure(state="normal" if enabled else "disabled")

    def set_controls_enabled(self, enabled: bool) -> None:
        self._opacity_slider.configure(state="normal" if enabled else "disabled")

    # events
    def _on_slider_change(self, value: float) -> None:
        percent = int(round(value))
        self._opacity_value.set(f"{percent}%")
        if self.on_opacity_change:
            self.on_opacity_change(percent)

    def _on_download_click(self) -> None:
        if self.on_download:
            self.on_download()
