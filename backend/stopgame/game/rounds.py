from __future__ import annotations

import logging
import time
from typing import TYPE_CHECKING, Mapping

from .errors import InvalidState, PlayerNotFound
from .models import Player, Room, VotingBoard

if TYPE_CHECKING:
    from .logic import AnswerValidator
    from .timer import RoundTimer

logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


def _require_state(room: Room, *allowed: str) -> None:
    if room.state not in allowed:
        raise InvalidState(
            f"room {room.id} is {room.state}, expected one of {', '.join(allowed)}",
            room_id=room.id,
            state=room.state,
        )


def start_round(
    room: Room,
    letter: str,
    duration_sec: int,
    timer: RoundTimer | None = None,
) -> dict:
    _require_state(room, "waiting", "results")

    room.cancel_timer()
    room.current_letter = letter
    room.state = "playing"
    room.time_left = duration_sec
    room.round_started_at_ms = now_ms()
    room.voting = None

    for player in room.players:
        player.answers = {}
        player.finished = False

    if timer is not None:
        room.timer = timer
        timer.start()

    logger.info("[round-start] room=%s round=%s letter=%s", room.id, room.current_round, letter)
    return {
        "letter": letter,
        "timeLeft": room.time_left,
        "round": room.current_round,
    }


def tick(room: Room) -> int:
    """Advance the countdown by one second and return the seconds left."""
    _require_state(room, "playing")
    room.time_left = max(0, room.time_left - 1)
    return room.time_left


def submit_answers(room: Room, player_id: str, answers: Mapping[str, str]) -> Room:
    _require_state(room, "playing")

    player = room.find_player(player_id)
    if player is None:
        raise PlayerNotFound(f"player {player_id} is not in room {room.id}", room_id=room.id, player_id=player_id)

    player.answers = dict(answers)
    player.finished = True
    return room


def all_finished(room: Room) -> bool:
    return bool(room.players) and all(p.finished for p in room.players)


def end_round(room: Room, validator: AnswerValidator) -> tuple[VotingBoard, list[Player]]:
    _require_state(room, "playing")

    room.state = "voting"
    room.cancel_timer()

    board = validator.prepare_voting_data(room.players, room.current_letter, room.categories)
    room.voting = board

    logger.info(
        "[round-end] room=%s round=%s letter=%s entries=%d pending=%d",
        room.id,
        room.current_round,
        room.current_letter,
        len(board),
        len(board.pending()),
    )
    return board, room.players


def show_results(room: Room) -> VotingBoard:
    _require_state(room, "voting")

    board = room.voting or VotingBoard()
    room.state = "results"
    room.voting = None
    room.current_round += 1
    return board


def reset_room(room: Room, duration_sec: int) -> Room:
    room.cancel_timer()
    room.state = "waiting"
    room.current_round = 1
    room.current_letter = ""
    room.time_left = duration_sec
    room.round_started_at_ms = None
    room.voting = None
    for player in room.players:
        player.answers = {}
        player.finished = False
    logger.info("[room-reset] room=%s", room.id)
    return room
