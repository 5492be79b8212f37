from __future__ import annotations

import logging
from threading import RLock
from typing import Iterable, Iterator, Mapping, Sequence

from . import rounds, scoring, voting
from .errors import AlreadyJoined, DuplicateName, RoomFull, RoomNotFound
from .logic import AnswerValidator, LetterAnswerValidator, compute_round_scores
from .models import (
    DEFAULT_MAX_PLAYERS,
    DEFAULT_ROUND_DURATION_SEC,
    Category,
    Player,
    Room,
    VotingBoard,
    default_categories,
)
from .scoring import ScoreDelta
from .timer import RoundTimer

logger = logging.getLogger(__name__)


class RoomStore:
    """Owns every live room of the process, keyed by room id.

    The registry lock covers insert/delete; each room's own lock covers
    mutations of that room. Locks are always taken store first, then room.
    """

    def __init__(
        self,
        validator: AnswerValidator | None = None,
        max_players: int = DEFAULT_MAX_PLAYERS,
        round_duration_sec: int = DEFAULT_ROUND_DURATION_SEC,
    ) -> None:
        self.validator: AnswerValidator = validator or LetterAnswerValidator()
        self.max_players = max_players
        self.round_duration_sec = round_duration_sec
        self._lock = RLock()
        self._rooms: dict[str, Room] = {}

    # Registry

    def create_room(self, room_id: str) -> Room:
        with self._lock:
            existing = self._rooms.get(room_id)
            if existing is not None:
                return existing

            room = Room(
                id=room_id,
                max_players=self.max_players,
                time_left=self.round_duration_sec,
                categories=default_categories(),
            )
            self._rooms[room_id] = room
            logger.info("[room-create] room=%s", room_id)
            return room

    def join_room(self, room_id: str, player: Player) -> Room:
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                room = self.create_room(room_id)

            with room.lock:
                if room.find_player(player.id) is not None:
                    raise AlreadyJoined(f"player {player.id} is already in room {room_id}", room_id=room_id, player_id=player.id)
                if room.is_full():
                    raise RoomFull(f"room {room_id} is full", room_id=room_id, max_players=room.max_players)
                if room.has_name(player.name):
                    raise DuplicateName(f"name {player.name!r} is taken in room {room_id}", room_id=room_id, name=player.name)

                if not room.players:
                    room.host_id = player.id
                room.players.append(player)

            logger.info("[room-join] room=%s player=%s name=%s size=%d", room_id, player.id, player.name, len(room.players))
            return room

    def remove_player(self, player_id: str, room_id: str | None = None) -> Room | None:
        """Remove a player and return their room, or None if nobody matched.

        With ``room_id`` only that room is searched; without it every room is
        scanned in creation order. A room left empty is deleted from the store
        (its timer cancelled) and still returned.
        """
        with self._lock:
            if room_id is not None:
                room = self._rooms.get(room_id)
                candidates = [room] if room is not None else []
            else:
                candidates = list(self._rooms.values())

            for room in candidates:
                with room.lock:
                    player = room.find_player(player_id)
                    if player is None:
                        continue

                    room.players.remove(player)
                    logger.info("[room-leave] room=%s player=%s size=%d", room.id, player_id, len(room.players))

                    if not room.players:
                        room.host_id = None
                        if room.cancel_timer():
                            logger.info("[timer-cancel] room=%s reason=empty", room.id)
                        del self._rooms[room.id]
                        logger.info("[room-delete] room=%s", room.id)
                    elif room.host_id == player_id:
                        # Host passes to the next player in join order.
                        room.host_id = room.players[0].id
                        logger.info("[room-host] room=%s host=%s", room.id, room.host_id)
                    return room

            return None

    def find_player_room(self, player_id: str) -> Room | None:
        """The first room seating ``player_id``, or None."""
        with self._lock:
            for room in self._rooms.values():
                with room.lock:
                    if room.find_player(player_id) is not None:
                        return room
        return None

    def get_room(self, room_id: str) -> Room:
        with self._lock:
            room = self._rooms.get(room_id)
        if room is None:
            raise RoomNotFound(f"room {room_id} not found", room_id=room_id)
        return room

    def get_all_rooms(self) -> Iterator[Room]:
        with self._lock:
            snapshot = list(self._rooms.values())
        return iter(snapshot)

    def get_room_stats(self) -> dict:
        with self._lock:
            rooms = list(self._rooms.values())
        return {
            "totalRooms": len(rooms),
            "totalPlayers": sum(len(r.players) for r in rooms),
        }

    def update_categories(self, room_id: str, categories: Sequence[Category]) -> Room:
        room = self.get_room(room_id)
        with room.lock:
            room.categories = list(categories)
        return room

    # Rounds

    def start_round(self, room_id: str, letter: str, timer: RoundTimer | None = None) -> dict:
        room = self.get_room(room_id)
        with room.lock:
            return rounds.start_round(room, letter, self.round_duration_sec, timer=timer)

    def tick(self, room_id: str) -> int:
        room = self.get_room(room_id)
        with room.lock:
            return rounds.tick(room)

    def end_round(self, room_id: str) -> tuple[VotingBoard, list[Player]]:
        room = self.get_room(room_id)
        with room.lock:
            return rounds.end_round(room, self.validator)

    def submit_answers(self, room_id: str, player_id: str, answers: Mapping[str, str]) -> Room:
        room = self.get_room(room_id)
        with room.lock:
            return rounds.submit_answers(room, player_id, answers)

    def all_finished(self, room_id: str) -> bool:
        room = self.get_room(room_id)
        with room.lock:
            return rounds.all_finished(room)

    def show_results(self, room_id: str) -> VotingBoard:
        room = self.get_room(room_id)
        with room.lock:
            return rounds.show_results(room)

    def reset_room(self, room_id: str) -> Room:
        room = self.get_room(room_id)
        with room.lock:
            return rounds.reset_room(room, self.round_duration_sec)

    # Voting and scores

    def vote_word(self, room_id: str, target_player_id: str, category: str, vote: str, voter_id: str) -> Room:
        room = self.get_room(room_id)
        with room.lock:
            return voting.vote_word(room, target_player_id, category, vote, voter_id)

    def all_votes_complete(self, room_id: str) -> bool:
        room = self.get_room(room_id)
        with room.lock:
            return voting.all_votes_complete(room)

    def update_scores(self, room_id: str, scores: Iterable[ScoreDelta]) -> Room:
        room = self.get_room(room_id)
        with room.lock:
            return scoring.update_scores(room, scores)

    def close_voting(self, room_id: str) -> tuple[VotingBoard, list[ScoreDelta]] | None:
        """Score the round and move to results once every vote is in.

        Returns the resolved board and the applied deltas, or None while
        votes are still missing (or the room is not voting).
        """
        room = self.get_room(room_id)
        with room.lock:
            if room.state != "voting" or not voting.all_votes_complete(room):
                return None
            deltas = compute_round_scores(room.voting, [p.id for p in room.players])
            scoring.update_scores(room, deltas)
            board = rounds.show_results(room)
            logger.info("[round-results] room=%s round=%s", room.id, room.current_round - 1)
            return board, deltas
