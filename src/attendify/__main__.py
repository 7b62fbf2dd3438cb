from __future__ import annotations

from .core.logging_config import setup_logging
from .main import create_app, load_settings
from .server import serve


def main() -> None:
    settings = load_settings()
    setup_logging(settings.ENVIRONMENT, settings.LOG_LEVEL)

    app = create_app(settings)
    container = app.extensions["attendify"]
    serve(
        app,
        host=app.config["APP_HOST"],
        port=app.config["APP_PORT"],
        on_shutdown=container.conn.dispose,
    )


if __name__ == "__main__":
    main()
