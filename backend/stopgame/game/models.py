from __future__ import annotations

from dataclasses import dataclass, field
from threading import RLock
from typing import TYPE_CHECKING, Iterator, Literal

if TYPE_CHECKING:
    from .timer import RoundTimer


RoomState = Literal["waiting", "playing", "voting", "results"]
Vote = Literal["accept", "reject"]
VoteResult = Literal["accepted", "rejected"]

VOTES: tuple[str, ...] = ("accept", "reject")

DEFAULT_MAX_PLAYERS = 8
DEFAULT_ROUND_DURATION_SEC = 60


@dataclass
class Category:
    id: str
    label: str
    icon: str = ""


DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category(id="nome", label="Nome", icon="👤"),
    Category(id="animal", label="Animal", icon="🐾"),
    Category(id="cor", label="Cor", icon="🎨"),
    Category(id="objeto", label="Objeto", icon="📦"),
    Category(id="filme", label="Filme", icon="🎬"),
    Category(id="cep", label="CEP", icon="📍"),
    Category(id="comida", label="Comida", icon="🍕"),
    Category(id="profissao", label="Profissão", icon="💼"),
)


def default_categories() -> list[Category]:
    return [Category(id=c.id, label=c.label, icon=c.icon) for c in DEFAULT_CATEGORIES]


@dataclass
class Player:
    id: str
    name: str
    score: int = 0
    answers: dict[str, str] = field(default_factory=dict)
    finished: bool = False


@dataclass
class VotingEntry:
    word: str
    needs_voting: bool = True
    votes: dict[str, Vote] = field(default_factory=dict)
    result: VoteResult | None = None

    def count(self, vote: Vote) -> int:
        return sum(1 for v in self.votes.values() if v == vote)


@dataclass
class VotingBoard:
    """Voting entries keyed by category id, then by author player id."""

    categories: dict[str, dict[str, VotingEntry]] = field(default_factory=dict)

    def add(self, category_id: str, author_id: str, entry: VotingEntry) -> VotingEntry:
        self.categories.setdefault(category_id, {})[author_id] = entry
        return entry

    def get(self, category_id: str, author_id: str) -> VotingEntry | None:
        by_author = self.categories.get(category_id)
        if by_author is None:
            return None
        return by_author.get(author_id)

    def entries(self) -> Iterator[tuple[str, str, VotingEntry]]:
        for category_id, by_author in self.categories.items():
            for author_id, entry in by_author.items():
                yield category_id, author_id, entry

    def pending(self) -> list[tuple[str, str, VotingEntry]]:
        """Entries that still wait for peer votes to resolve."""
        return [
            (category_id, author_id, entry)
            for category_id, author_id, entry in self.entries()
            if entry.needs_voting and entry.result is None
        ]

    def __len__(self) -> int:
        return sum(len(by_author) for by_author in self.categories.values())


@dataclass
class Room:
    id: str
    players: list[Player] = field(default_factory=list)
    state: RoomState = "waiting"
    current_round: int = 1
    current_letter: str = ""
    time_left: int = DEFAULT_ROUND_DURATION_SEC
    round_started_at_ms: int | None = None
    max_players: int = DEFAULT_MAX_PLAYERS
    host_id: str | None = None
    categories: list[Category] = field(default_factory=default_categories)
    # Only set while state == "voting".
    voting: VotingBoard | None = None
    timer: RoundTimer | None = field(default=None, repr=False, compare=False)
    lock: RLock = field(default_factory=RLock, repr=False, compare=False)

    def find_player(self, player_id: str) -> Player | None:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    def has_name(self, name: str) -> bool:
        return any(p.name == name for p in self.players)

    def is_full(self) -> bool:
        return len(self.players) >= self.max_players

    def cancel_timer(self) -> bool:
        """Cancel the running round timer, if any. Returns True when one was stopped."""
        timer, self.timer = self.timer, None
        if timer is None:
            return False
        return timer.cancel()
