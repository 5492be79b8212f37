import logging

from stopgame.config import Config
from stopgame.server import create_app

logging.basicConfig(level=Config.LOG_LEVEL)

app, socketio = create_app(Config)
