"""Development server: ``python backend/app.py``."""
import logging
from pathlib import Path

from dotenv import load_dotenv


def main() -> None:
    # Config reads the environment at import time, so .env goes first.
    load_dotenv(Path(__file__).resolve().parents[1] / ".env")

    from stopgame.config import Config, pick_async_mode

    logging.basicConfig(
        level=Config.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    async_mode = pick_async_mode(Config.SOCKETIO_ASYNC_MODE)
    if async_mode == "eventlet":
        import eventlet

        eventlet.monkey_patch()

    from stopgame.server import create_app

    app, socketio = create_app(Config)
    app.logger.info("[app-start] host=%s port=%s debug=%s", Config.HOST, Config.PORT, Config.DEBUG)

    socketio.run(
        app,
        host=Config.HOST,
        port=Config.PORT,
        debug=Config.DEBUG,
        use_reloader=Config.USE_RELOADER,
        allow_unsafe_werkzeug=Config.DEBUG,
    )


if __name__ == "__main__":
    main()
