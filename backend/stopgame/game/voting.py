from __future__ import annotations

from .errors import InvalidVote, PlayerNotFound, SelfVote, VotingNotStarted, WordNotFound
from .models import VOTES, Room, VotingEntry, VoteResult


def required_votes(room: Room) -> int:
    # Everyone votes on every word except their own.
    return max(0, len(room.players) - 1)


def resolve(entry: VotingEntry) -> VoteResult:
    """Strict majority; a tie rejects the word."""
    return "accepted" if entry.count("accept") > entry.count("reject") else "rejected"


def vote_word(room: Room, target_player_id: str, category: str, vote: str, voter_id: str) -> Room:
    if room.voting is None:
        raise VotingNotStarted(f"room {room.id} is not voting", room_id=room.id)

    if vote not in VOTES:
        raise InvalidVote(f"unknown vote {vote!r}", room_id=room.id, vote=vote)

    if room.find_player(voter_id) is None:
        raise PlayerNotFound(f"voter {voter_id} is not in room {room.id}", room_id=room.id, player_id=voter_id)

    if voter_id == target_player_id:
        raise SelfVote(f"player {voter_id} cannot vote on their own word", room_id=room.id, player_id=voter_id)

    entry = room.voting.get(category, target_player_id)
    if entry is None:
        raise WordNotFound(
            f"no word for {target_player_id} in {category}",
            room_id=room.id,
            category=category,
            target_player_id=target_player_id,
        )

    # Last vote from a voter wins.
    entry.votes[voter_id] = vote  # type: ignore[assignment]
    return room


def all_votes_complete(room: Room) -> bool:
    """Resolve every entry that has enough votes; True once none are left waiting.

    Entries that cross the threshold get their ``result`` written immediately,
    so repeated calls yield partial results while voting is still open.
    """
    if room.voting is None:
        return False

    needed = required_votes(room)
    complete = True

    for _category_id, _author_id, entry in room.voting.entries():
        if not entry.needs_voting:
            continue
        if len(entry.votes) < needed:
            complete = False
            continue
        entry.result = resolve(entry)

    return complete
