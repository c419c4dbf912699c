"""Точка входа в приложение."""
import logging

from reconyx_overlay.app import OverlayApp
from reconyx_overlay.config import AppConfig

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


def main() -> None:
    """Создаёт и запускает главное окно приложения."""
    config = AppConfig()
    configure_logging(config.log_level)
    app = OverlayApp(config)
    app.mainloop()


if __name__ == "__main__":
    main()
