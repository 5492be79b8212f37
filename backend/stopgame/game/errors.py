from __future__ import annotations


class GameError(Exception):
    """Base class for failures surfaced to callers of the room store.

    ``code`` is the snake_case identifier sent to clients.
    """

    code = "game_error"

    def __init__(self, message: str = "", **context: object) -> None:
        super().__init__(message or self.code)
        self.context = context


class RoomNotFound(GameError):
    code = "room_not_found"


class RoomFull(GameError):
    code = "room_full"


class DuplicateName(GameError):
    code = "duplicate_name"


class PlayerNotFound(GameError):
    code = "player_not_found"


class VotingNotStarted(GameError):
    code = "voting_not_started"


class WordNotFound(GameError):
    code = "word_not_found"


class InvalidVote(GameError):
    code = "invalid_vote"


class InvalidState(GameError):
    code = "invalid_state"


class AlreadyJoined(GameError):
    code = "already_joined"


class SelfVote(GameError):
    code = "self_vote"
