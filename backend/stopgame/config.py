import os
import sys


def pick_async_mode(configured: str = "") -> str:
    """Socket.IO async mode: the configured one, else threading on Windows
    and Python 3.13+ (eventlet misbehaves there), else eventlet.
    """
    if configured:
        return configured
    if sys.platform.startswith("win") or sys.version_info >= (3, 13):
        return "threading"
    return "eventlet"


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # Socket.IO async mode; empty picks a platform default.
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

    # Game
    MAX_PLAYERS = int(os.environ.get("MAX_PLAYERS", "8"))
    ROUND_DURATION_SEC = int(os.environ.get("ROUND_DURATION_SEC", "60"))
    LETTERS = os.environ.get("LETTERS", "ABCDEFGHIJLMNOPQRSTUVZ").strip().upper()

    # Dev server (backend/app.py)
    HOST = os.environ.get("HOST", "0.0.0.0")
    PORT = int(os.environ.get("PORT", "5000"))
    DEBUG = os.environ.get("FLASK_DEBUG", "0") == "1"
    USE_RELOADER = os.environ.get("FLASK_USE_RELOADER", "0") == "1"
