from __future__ import annotations

import uuid

from flask import Blueprint, current_app, jsonify, request

from ..game.errors import GameError, RoomNotFound
from ..game.serializers import parse_categories, room_public_state
from ..game.store import RoomStore

bp = Blueprint("rooms", __name__)


def _store() -> RoomStore:
    return current_app.extensions["room_store"]


def _error(exc: GameError):
    status = 404 if isinstance(exc, RoomNotFound) else 400
    return jsonify({"error": exc.code}), status


@bp.get("/rooms")
def list_rooms():
    store = _store()
    rooms = [room_public_state(r) for r in store.get_all_rooms()]
    return jsonify({"stats": store.get_room_stats(), "rooms": rooms})


@bp.post("/rooms")
def create_room():
    data = request.get_json(silent=True) or {}
    code = str(data.get("roomCode", "")).strip()
    if not code:
        code = uuid.uuid4().hex[:6].upper()
    room = _store().create_room(code)
    return jsonify({"roomCode": room.id}), 201


@bp.get("/rooms/<code>")
def get_room(code: str):
    try:
        room = _store().get_room(code)
    except GameError as exc:
        return _error(exc)
    return jsonify(room_public_state(room))


@bp.put("/rooms/<code>/categories")
def update_categories(code: str):
    data = request.get_json(silent=True) or {}
    categories = parse_categories(data.get("categories"))
    if categories is None:
        return jsonify({"error": "invalid_categories"}), 400

    try:
        room = _store().update_categories(code, categories)
    except GameError as exc:
        return _error(exc)
    return jsonify(room_public_state(room))
