from stopgame.game.logic import (
    LetterAnswerValidator,
    normalize_word,
    pick_letter,
    starts_with_letter,
)
from stopgame.game.models import Category, Player


def test_normalize_word_strips_accents_and_case():
    assert normalize_word("  Égua  ") == "egua"
    assert normalize_word("São   Paulo") == "sao paulo"


def test_starts_with_letter():
    assert starts_with_letter("Sapo", "s")
    assert starts_with_letter("Águia", "A")
    assert not starts_with_letter("Rato", "S")
    assert not starts_with_letter("", "S")


def test_validator_marks_blank_and_wrong_letter_rejected():
    players = [
        Player(id="p1", name="Ana", answers={"animal": "Sapo", "cor": "Verde"}),
        Player(id="p2", name="Bia", answers={"animal": "  "}),
    ]
    categories = [Category(id="animal", label="Animal"), Category(id="cor", label="Cor")]

    board = LetterAnswerValidator().prepare_voting_data(players, "S", categories)

    sapo = board.get("animal", "p1")
    assert sapo.needs_voting is True and sapo.result is None

    blank = board.get("animal", "p2")
    assert blank.needs_voting is False and blank.result == "rejected"

    wrong = board.get("cor", "p1")
    assert wrong.word == "Verde"
    assert wrong.needs_voting is False and wrong.result == "rejected"

    missing = board.get("cor", "p2")
    assert missing.word == "" and missing.result == "rejected"
    assert len(board) == 4
    assert [(c, a) for c, a, _ in board.pending()] == [("animal", "p1")]


def test_pick_letter_avoids_used_letters():
    for _ in range(20):
        assert pick_letter("ABC", exclude=["A", "B"]) == "C"


def test_pick_letter_falls_back_when_everything_used():
    assert pick_letter("AB", exclude=["A", "B"]) in ("A", "B")
