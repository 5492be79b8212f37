from __future__ import annotations

import logging
from typing import Any

from flask import request
from flask_socketio import SocketIO, emit, join_room, leave_room

from ..game.errors import GameError, InvalidState, RoomNotFound
from ..game.logic import DEFAULT_LETTERS, pick_letter
from ..game.models import Player, Room
from ..game.serializers import (
    parse_categories,
    player_public_state,
    room_public_state,
    voting_board_dict,
)
from ..game.store import RoomStore
from ..game.timer import RoundTimer

logger = logging.getLogger(__name__)


def _validate_name(name: str) -> bool:
    n = (name or "").strip()
    if not n:
        return False
    if len(n) > 16:
        return False
    # Avoid obvious HTML/script injection.
    if "<" in n or ">" in n:
        return False
    # No control characters.
    for ch in n:
        if ord(ch) < 32:
            return False
    return True


def _normalize_letter(raw: Any, alphabet: str) -> str | None:
    letter = str(raw or "").strip().upper()
    if len(letter) != 1 or letter not in alphabet:
        return None
    return letter


def register_socketio_handlers(socketio: SocketIO, store: RoomStore, letters: str | None = None) -> None:
    alphabet = letters or DEFAULT_LETTERS
    used_letters: dict[str, list[str]] = {}

    def _fail(event: str, error: str) -> dict:
        emit(event, {"error": error})
        return {"ok": False, "error": error}

    def _room_or_fail(room_code: str, event: str = "room:error") -> tuple[Room | None, dict | None]:
        if not room_code:
            return None, _fail(event, "invalid_room")
        try:
            return store.get_room(room_code), None
        except RoomNotFound as exc:
            return None, _fail(event, exc.code)

    def _broadcast_room_state(room_code: str) -> None:
        try:
            room = store.get_room(room_code)
        except RoomNotFound:
            return
        socketio.emit("room:state", room_public_state(room), to=room_code)

    def _close_voting(room_code: str) -> bool:
        try:
            closed = store.close_voting(room_code)
        except RoomNotFound:
            return False

        if closed is None:
            try:
                room = store.get_room(room_code)
            except RoomNotFound:
                return False
            with room.lock:
                voting = voting_board_dict(room.voting)
            socketio.emit("voting:state", {"roomCode": room_code, "voting": voting}, to=room_code)
            return False

        board, deltas = closed
        socketio.emit(
            "game:results",
            {
                "roomCode": room_code,
                "voting": voting_board_dict(board),
                "scores": [d.to_dict() for d in deltas],
            },
            to=room_code,
        )
        _broadcast_room_state(room_code)
        return True

    def _end_round(room_code: str) -> None:
        try:
            board, players = store.end_round(room_code)
        except InvalidState:
            # Timer and last submission can race; the first one wins.
            return
        except RoomNotFound:
            return

        try:
            room = store.get_room(room_code)
        except RoomNotFound:
            return
        with room.lock:
            payload = {
                "roomCode": room_code,
                "votingData": voting_board_dict(board),
                "players": [player_public_state(p, include_answers=True) for p in players],
            }
        socketio.emit("game:voting", payload, to=room_code)

        # Rounds where nothing needs peer voting resolve straight away.
        if not _close_voting(room_code):
            _broadcast_room_state(room_code)

    def _make_timer(room_code: str) -> RoundTimer:
        def _on_tick() -> bool:
            try:
                remaining = store.tick(room_code)
            except GameError:
                return False

            socketio.emit("game:tick", {"roomCode": room_code, "timeLeft": remaining}, to=room_code)
            if remaining <= 0:
                _end_round(room_code)
                return False
            return True

        return RoundTimer(
            _on_tick,
            interval=1.0,
            start_task=socketio.start_background_task,
            sleep=socketio.sleep,
            name=f"room={room_code}",
        )

    def _after_leave(room: Room) -> None:
        if not room.players:
            used_letters.pop(room.id, None)
            return

        if room.state == "playing" and all(p.finished for p in room.players):
            _end_round(room.id)
        elif room.state == "voting":
            # Fewer players means a lower vote threshold.
            _close_voting(room.id)
        _broadcast_room_state(room.id)

    @socketio.on("room:join")
    def room_join(data):
        payload = data or {}
        room_code = str(payload.get("roomCode", "")).strip()
        name = str(payload.get("name", "")).strip()

        if not room_code or not _validate_name(name):
            return _fail("room:error", "invalid_payload")

        # One seat per socket across all rooms.
        if store.find_player_room(request.sid) is not None:
            return _fail("room:error", "already_joined")

        try:
            room = store.join_room(room_code, Player(id=request.sid, name=name))
        except GameError as exc:
            return _fail("room:error", exc.code)

        join_room(room_code)
        _broadcast_room_state(room_code)
        return {"ok": True, "playerId": request.sid, "hostId": room.host_id}

    @socketio.on("room:leave")
    def room_leave(data):
        payload = data or {}
        room_code = str(payload.get("roomCode", "")).strip()
        if not room_code:
            return {"ok": False, "error": "invalid_room"}

        leave_room(room_code)
        room = store.remove_player(request.sid, room_id=room_code)
        if room is None:
            return {"ok": False, "error": "player_not_found"}

        _after_leave(room)
        return {"ok": True}

    @socketio.on("room:set_categories")
    def room_set_categories(data):
        payload = data or {}
        room_code = str(payload.get("roomCode", "")).strip()
        room, failure = _room_or_fail(room_code)
        if failure:
            return failure

        if request.sid != room.host_id:
            return _fail("room:error", "only_host")

        categories = parse_categories(payload.get("categories"))
        if categories is None:
            return _fail("room:error", "invalid_categories")

        store.update_categories(room_code, categories)
        _broadcast_room_state(room_code)
        return {"ok": True}

    @socketio.on("game:start")
    def game_start(data):
        payload = data or {}
        room_code = str(payload.get("roomCode", "")).strip()
        room, failure = _room_or_fail(room_code, "game:error")
        if failure:
            return failure

        if request.sid != room.host_id:
            return _fail("game:error", "only_host")

        if payload.get("letter"):
            letter = _normalize_letter(payload.get("letter"), alphabet)
            if letter is None:
                return _fail("game:error", "invalid_letter")
        else:
            history = used_letters.setdefault(room_code, [])
            letter = pick_letter(alphabet, exclude=history)

        timer = _make_timer(room_code)
        try:
            info = store.start_round(room_code, letter, timer=timer)
        except GameError as exc:
            timer.cancel()
            return _fail("game:error", exc.code)

        history = used_letters.setdefault(room_code, [])
        history.append(letter)
        if len(history) >= len(alphabet):
            history.clear()

        socketio.emit("game:round_started", {"roomCode": room_code, **info}, to=room_code)
        _broadcast_room_state(room_code)
        return {"ok": True, **info}

    @socketio.on("answers:submit")
    def answers_submit(data):
        payload = data or {}
        room_code = str(payload.get("roomCode", "")).strip()
        answers_raw = payload.get("answers")
        if not isinstance(answers_raw, dict):
            return _fail("game:error", "invalid_payload")

        answers = {str(k): str(v) if v is not None else "" for k, v in answers_raw.items()}

        try:
            store.submit_answers(room_code, request.sid, answers)
        except GameError as exc:
            return _fail("game:error", exc.code)

        if store.all_finished(room_code):
            _end_round(room_code)
        else:
            _broadcast_room_state(room_code)
        return {"ok": True}

    @socketio.on("vote:cast")
    def vote_cast(data):
        payload = data or {}
        room_code = str(payload.get("roomCode", "")).strip()
        target = str(payload.get("targetPlayerId", "")).strip()
        category = str(payload.get("category", "")).strip()
        vote = str(payload.get("vote", "")).strip()

        try:
            store.vote_word(room_code, target, category, vote, request.sid)
        except GameError as exc:
            return _fail("game:error", exc.code)

        finished = _close_voting(room_code)
        return {"ok": True, "finished": finished}

    @socketio.on("game:reset")
    def game_reset(data):
        payload = data or {}
        room_code = str(payload.get("roomCode", "")).strip()
        room, failure = _room_or_fail(room_code, "game:error")
        if failure:
            return failure

        if request.sid != room.host_id:
            return _fail("game:error", "only_host")

        store.reset_room(room_code)
        used_letters.pop(room_code, None)
        _broadcast_room_state(room_code)
        return {"ok": True}

    @socketio.on("disconnect")
    def on_disconnect(*_args):
        # A socket holds at most one seat, but sweep until none is left.
        while True:
            room = store.remove_player(request.sid)
            if room is None:
                break
            logger.info("[disconnect] player=%s room=%s", request.sid, room.id)
            _after_leave(room)
