from __future__ import annotations

import random
import re
import unicodedata
from collections import Counter
from typing import Protocol, Sequence

from .models import Category, Player, VotingBoard, VotingEntry
from .scoring import ScoreDelta


DEFAULT_LETTERS = "ABCDEFGHIJLMNOPQRSTUVZ"

UNIQUE_WORD_POINTS = 10
SHARED_WORD_POINTS = 5


class AnswerValidator(Protocol):
    def prepare_voting_data(
        self,
        players: Sequence[Player],
        letter: str,
        categories: Sequence[Category],
    ) -> VotingBoard: ...


def normalize_word(text: str) -> str:
    t = unicodedata.normalize("NFKD", text or "")
    t = "".join(ch for ch in t if not unicodedata.combining(ch))
    t = t.strip().lower()
    t = re.sub(r"\s+", " ", t)
    return t


def starts_with_letter(word: str, letter: str) -> bool:
    w = normalize_word(word)
    initial = normalize_word(letter)
    if not w or not initial:
        return False
    return w.startswith(initial)


class LetterAnswerValidator:
    """Builds the voting board for a round.

    Blank answers and answers that don't start with the round letter are
    rejected up front; the rest go to peer voting.
    """

    def prepare_voting_data(
        self,
        players: Sequence[Player],
        letter: str,
        categories: Sequence[Category],
    ) -> VotingBoard:
        board = VotingBoard()
        for category in categories:
            board.categories.setdefault(category.id, {})
            for player in players:
                word = (player.answers.get(category.id) or "").strip()
                if word and starts_with_letter(word, letter):
                    entry = VotingEntry(word=word, needs_voting=True)
                else:
                    entry = VotingEntry(word=word, needs_voting=False, result="rejected")
                board.add(category.id, player.id, entry)
        return board


def pick_letter(letters: str = DEFAULT_LETTERS, exclude: Sequence[str] = ()) -> str:
    pool = [ch for ch in letters if ch not in exclude] or list(letters)
    return random.choice(pool)


def compute_round_scores(board: VotingBoard, player_ids: Sequence[str] = ()) -> list[ScoreDelta]:
    """Points per player for a resolved board.

    An accepted word earns UNIQUE_WORD_POINTS, or SHARED_WORD_POINTS when
    another accepted entry in the same category has the same word.
    """
    totals: dict[str, int] = {pid: 0 for pid in player_ids}

    for category_id, by_author in board.categories.items():
        accepted = {
            author_id: normalize_word(entry.word)
            for author_id, entry in by_author.items()
            if entry.result == "accepted"
        }
        counts = Counter(accepted.values())
        for author_id in by_author:
            totals.setdefault(author_id, 0)
        for author_id, word in accepted.items():
            totals[author_id] += SHARED_WORD_POINTS if counts[word] > 1 else UNIQUE_WORD_POINTS

    return [ScoreDelta(player_id=pid, round_score=score) for pid, score in totals.items()]
