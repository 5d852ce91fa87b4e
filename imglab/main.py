"""Точка входа в приложение."""
from imglab.app import ImageLabApp
from imglab.config import AppConfig, resolve_config_path
from imglab.log import configure_logging


def main() -> None:
    """Загружает настройки, создаёт и запускает главное окно приложения."""
    config = AppConfig.load(resolve_config_path())
    configure_logging(config)
    app = ImageLabApp(config)
    app.mainloop()


if __name__ == "__main__":
    main()
