from __future__ import annotations

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import Config, pick_async_mode
from .game.store import RoomStore
from .routes.health import bp as health_bp
from .routes.rooms import bp as rooms_bp
from .realtime.handlers import register_socketio_handlers


def create_app(config_class=Config, store: RoomStore | None = None) -> tuple[Flask, SocketIO]:
    app = Flask(__name__)
    app.config.from_object(config_class)

    if app.config.get("TRUST_PROXY_HEADERS", False):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    cors_origins = app.config.get("CORS_ORIGINS", "*")
    CORS(app, resources={r"/api/*": {"origins": cors_origins}})

    async_mode = pick_async_mode(app.config.get("SOCKETIO_ASYNC_MODE", ""))

    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=async_mode,
    )

    if store is None:
        store = RoomStore(
            max_players=int(app.config.get("MAX_PLAYERS", 8)),
            round_duration_sec=int(app.config.get("ROUND_DURATION_SEC", 60)),
        )
    app.extensions["room_store"] = store

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(rooms_bp, url_prefix="/api")

    register_socketio_handlers(
        socketio,
        store,
        letters=app.config.get("LETTERS") or None,
    )

    app.logger.info("[app-ready] async_mode=%s max_players=%s", async_mode, store.max_players)

    return app, socketio
