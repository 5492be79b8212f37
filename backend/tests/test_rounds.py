import pytest

from stopgame.game.errors import InvalidState, PlayerNotFound
from stopgame.game.models import Player
from stopgame.game.store import RoomStore


@pytest.fixture()
def room_store(static_validator):
    store = RoomStore(validator=static_validator)
    store.join_room("ABC", Player(id="p1", name="Ana"))
    store.join_room("ABC", Player(id="p2", name="Bia"))
    return store


def test_start_round_resets_players(room_store, fake_timer):
    room = room_store.get_room("ABC")
    room.players[0].answers = {"animal": "Sapo"}
    room.players[0].finished = True
    room.time_left = 3

    info = room_store.start_round("ABC", "S", timer=fake_timer)

    assert info == {"letter": "S", "timeLeft": 60, "round": 1}
    assert room.state == "playing"
    assert room.current_letter == "S"
    assert room.round_started_at_ms is not None
    assert all(p.answers == {} and p.finished is False for p in room.players)
    assert room.timer is fake_timer
    assert fake_timer.started


def test_start_round_only_from_waiting_or_results(room_store):
    room_store.start_round("ABC", "S")
    with pytest.raises(InvalidState):
        room_store.start_round("ABC", "T")


def test_submit_answers(room_store):
    room_store.start_round("ABC", "S")
    room = room_store.submit_answers("ABC", "p1", {"animal": "Sapo"})

    ana = room.find_player("p1")
    assert ana.answers == {"animal": "Sapo"}
    assert ana.finished is True
    assert room.state == "playing"
    assert not room_store.all_finished("ABC")

    room_store.submit_answers("ABC", "p2", {"animal": "Sardinha"})
    assert room_store.all_finished("ABC")


def test_submit_answers_unknown_player(room_store):
    room_store.start_round("ABC", "S")
    with pytest.raises(PlayerNotFound):
        room_store.submit_answers("ABC", "ghost", {"animal": "Sapo"})


def test_submit_answers_outside_round(room_store):
    with pytest.raises(InvalidState):
        room_store.submit_answers("ABC", "p1", {"animal": "Sapo"})


def test_end_round_builds_voting_and_cancels_timer(room_store, static_validator, fake_timer):
    room_store.start_round("ABC", "S", timer=fake_timer)
    room_store.submit_answers("ABC", "p1", {"animal": "Sapo"})

    board, players = room_store.end_round("ABC")
    room = room_store.get_room("ABC")

    assert room.state == "voting"
    assert room.voting is board
    assert board.get("animal", "p1").word == "Sapo"
    assert [p.id for p in players] == ["p1", "p2"]
    assert fake_timer.cancel_calls == 1
    assert room.timer is None

    _players, letter, categories = static_validator.calls[0]
    assert letter == "S"
    assert len(categories) == 8


def test_end_round_requires_playing(room_store):
    with pytest.raises(InvalidState):
        room_store.end_round("ABC")


def test_tick_counts_down_to_zero(room_store):
    room_store.start_round("ABC", "S")
    room = room_store.get_room("ABC")
    room.time_left = 2

    assert room_store.tick("ABC") == 1
    assert room_store.tick("ABC") == 0
    assert room_store.tick("ABC") == 0


def test_show_results_advances_round(room_store):
    room_store.start_round("ABC", "S")
    room_store.end_round("ABC")

    board = room_store.show_results("ABC")
    room = room_store.get_room("ABC")

    assert board is not None
    assert room.state == "results"
    assert room.voting is None
    assert room.current_round == 2

    info = room_store.start_round("ABC", "T")
    assert info["round"] == 2


def test_reset_room_cancels_timer(room_store, fake_timer):
    room_store.start_round("ABC", "S", timer=fake_timer)
    room_store.submit_answers("ABC", "p1", {"animal": "Sapo"})
    room_store.get_room("ABC").players[0].score = 15

    room = room_store.reset_room("ABC")

    assert room.state == "waiting"
    assert room.current_letter == ""
    assert room.current_round == 1
    assert fake_timer.cancel_calls == 1
    assert room.players[0].answers == {}
    assert room.players[0].score == 15
