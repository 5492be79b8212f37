from __future__ import annotations

from typing import Any

from .models import Category, Player, Room, VotingBoard, VotingEntry


def player_public_state(player: Player, include_answers: bool = False) -> dict:
    d = {
        "id": player.id,
        "name": player.name,
        "score": player.score,
        "finished": player.finished,
    }
    if include_answers:
        d["answers"] = dict(player.answers)
    return d


def category_dict(category: Category) -> dict:
    return {"id": category.id, "label": category.label, "icon": category.icon}


def parse_categories(raw: Any) -> list[Category] | None:
    """Read a list of ``{id, label, icon}`` objects; None if malformed."""
    if not isinstance(raw, list) or not raw:
        return None

    categories: list[Category] = []
    seen: set[str] = set()
    for item in raw:
        if not isinstance(item, dict):
            return None
        cid = str(item.get("id", "")).strip()
        label = str(item.get("label", "")).strip()
        if not cid or not label or cid in seen:
            return None
        seen.add(cid)
        categories.append(Category(id=cid, label=label, icon=str(item.get("icon", "")).strip()))
    return categories


def voting_entry_dict(entry: VotingEntry) -> dict:
    return {
        "word": entry.word,
        "needsVoting": entry.needs_voting,
        "votes": dict(entry.votes),
        "result": entry.result,
    }


def voting_board_dict(board: VotingBoard | None) -> dict:
    if board is None:
        return {}
    return {
        category_id: {author_id: voting_entry_dict(entry) for author_id, entry in by_author.items()}
        for category_id, by_author in board.categories.items()
    }


def room_public_state(room: Room) -> dict:
    with room.lock:
        # Answers stay private until the round moves to voting.
        show_answers = room.state in ("voting", "results")
        payload = {
            "code": room.id,
            "hostId": room.host_id,
            "state": room.state,
            "round": room.current_round,
            "letter": room.current_letter,
            "timeLeft": room.time_left,
            "roundStartedAtMs": room.round_started_at_ms,
            "maxPlayers": room.max_players,
            "players": [player_public_state(p, include_answers=show_answers) for p in room.players],
            "categories": [category_dict(c) for c in room.categories],
        }
        if room.voting is not None:
            payload["voting"] = voting_board_dict(room.voting)
        return payload
