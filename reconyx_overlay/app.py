from __future__ import annotations

import customtkinter as ctk

from reconyx_overlay.config import AppConfig
from reconyx_overlay.controllers.app_controller import AppController
from reconyx_overlay.ui.image_viewer import ImageViewer
from reconyx_overlay.ui.sidebar import Sidebar
from reconyx_overlay.ui.bottom_bar import BottomBar


class OverlayApp(ctk.CTk):
    def __init__(self, config: AppConfig | None = None) -> None:
        super().__init__()
        self._config = config or AppConfig()
        ctk.set_appearance_mode("system")
        ctk.set_default_color_theme("blue")

        self.title(self._config.window_title)
        self.minsize(*self._config.min_size)

        # root layout: left preview, right sidebar, opacity bar below
        self.grid_columnconfigure(0, weight=1)
        self.grid_rowconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=0)

        self._viewer = ImageViewer(self)
        self._viewer.grid(row=0, column=0, sticky="nsew", padx=(12, 6), pady=(12, 6))

        self._sidebar = Sidebar(self)
        self._sidebar.grid(row=0, column=1, sticky="ns", padx=(6, 12), pady=(12, 6))

        self._bottom = BottomBar(self, default_opacity=self._config.default_opacity)
        self._bottom.grid(row=1, column=0, columnspan=2, sticky="ew", padx=12, pady=(0, 12))

        self._controller = AppController(
            viewer=self._viewer, sidebar=self._sidebar, bottom=self._bottom, window=self, config=self._config
        )
        self._controller.bind_events()
        self._controller.start()

        self.protocol("WM_DELETE_WINDOW", self._on_close)

    def _on_close(self) -> None:
        self._controller.shutdown()
        self.destroy()
