from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .models import Room


@dataclass(frozen=True)
class ScoreDelta:
    player_id: str
    round_score: int

    def to_dict(self) -> dict:
        return {"playerId": self.player_id, "roundScore": self.round_score}


def update_scores(room: Room, scores: Iterable[ScoreDelta]) -> Room:
    """Add each round score to the matching player's total.

    Players that already left are skipped.
    """
    for delta in scores:
        player = room.find_player(delta.player_id)
        if player is not None:
            player.score += delta.round_score
    return room
