import pytest

from openingexplorer.date import LaxDate
from openingexplorer.game_id import GameId
from openingexplorer.lichess_game import GamePlayer
from openingexplorer.masters import (
    MAX_MASTERS_GAMES,
    MastersEntry,
    MastersGame,
    MastersGameWithId,
)
from openingexplorer.query import Limits
from openingexplorer.stats import Color, Outcome
from openingexplorer.uci import RawUci, Uci
from openingexplorer.util import ByColor


def test_masters_entry():
    uci = Uci.parse("e2e4")
    game = GameId.parse("aaaaaaaa")
    a = MastersEntry.new_single(uci, game, Outcome(None), 1600, 1700)

    buf = a.to_bytes()
    assert len(buf) == MastersEntry.SIZE_HINT

    deserialized = MastersEntry()
    deserialized.extend_from_bytes(buf)

    group = deserialized.groups[RawUci.from_uci(uci)]
    assert group.stats.draws == 1
    assert group.games[0] == (1600 + 1700, game)


def test_empty_entry_serializes_to_nothing():
    assert MastersEntry().to_bytes() == b""


def _merged(singles):
    entry = MastersEntry()
    for single in singles:
        entry.extend_from_bytes(single.to_bytes())
    return entry


def test_prepare_orders_top_games_and_moves():
    e4 = Uci.parse("e2e4")
    d4 = Uci.parse("d2d4")
    a = GameId.parse("aaaaaaaa")
    b = GameId.parse("bbbbbbbb")
    c = GameId.parse("cccccccc")
    entry = _merged(
        [
            MastersEntry.new_single(e4, a, Outcome(Color.WHITE), 1600, 1700),
            MastersEntry.new_single(e4, b, Outcome(Color.BLACK), 2000, 2000),
            MastersEntry.new_single(d4, c, Outcome(None), 2500, 2500),
        ]
    )
    res = entry.prepare(Limits())
    assert res.top_games == [(d4, c), (e4, b), (e4, a)]
    assert res.total.total() == 3
    assert res.moves[0].uci == e4
    assert res.moves[0].game is None
    assert res.moves[1].game == c
    assert res.recent_games == []


def test_prepare_respects_limits():
    e4 = Uci.parse("e2e4")
    entry = _merged(
        [
            MastersEntry.new_single(e4, GameId(1), Outcome(None), 2000, 2000),
            MastersEntry.new_single(e4, GameId(2), Outcome(None), 2100, 2100),
        ]
    )
    res = entry.prepare(Limits(top_games=1, moves=0))
    assert res.top_games == [(e4, GameId(2))]
    assert res.moves == []


def test_write_keeps_only_top_games():
    e4 = Uci.parse("e2e4")
    entry = _merged(
        MastersEntry.new_single(e4, GameId(i), Outcome(None), 1000 + i, 1000)
        for i in range(20)
    )
    roundtrip = MastersEntry()
    roundtrip.extend_from_bytes(entry.to_bytes())
    group = roundtrip.groups[RawUci.from_uci(e4)]
    assert len(group.games) == MAX_MASTERS_GAMES
    assert min(key for key, _ in group.games) == 2005
    assert group.stats.draws == 20
    res = roundtrip.prepare(Limits())
    assert len(res.top_games) == MAX_MASTERS_GAMES
    assert res.top_games[0] == (e4, GameId(19))


def _game_json():
    return {
        "id": "aaaaaaaa",
        "event": "Open",
        "site": "Somewhere",
        "date": "2020.05.??",
        "round": "1",
        "white": {"name": "Alice", "rating": 2600},
        "black": {"name": "Bob", "rating": 2500},
        "winner": "white",
        "moves": "e2e4 e7e5",
    }


def test_game_from_json():
    with_id = MastersGameWithId.from_json(_game_json())
    assert with_id.id == GameId.parse("aaaaaaaa")
    game = with_id.game
    assert game.players == ByColor(GamePlayer("Alice", 2600), GamePlayer("Bob", 2500))
    assert game.date == LaxDate.parse("2020.05.??")
    assert game.moves == [Uci.parse("e2e4"), Uci.parse("e7e5")]
    assert game.outcome() == Outcome(Color.WHITE)


def test_game_json_roundtrip():
    game = MastersGame.from_json(_game_json())
    assert MastersGame.from_json(game.to_json()) == game
    assert game.to_json()["moves"] == "e2e4 e7e5"


def test_game_without_winner_or_moves():
    data = _game_json()
    data["winner"] = None
    data["moves"] = ""
    game = MastersGame.from_json(data)
    assert game.winner is None
    assert game.moves == []
    assert game.outcome().is_draw


@pytest.mark.parametrize(
    "field,value",
    [("winner", "green"), ("moves", "e2e4 zz"), ("date", "year"), ("white", {"name": "x"})],
)
def test_game_from_json_rejects_bad_fields(field, value):
    data = _game_json()
    data[field] = value
    with pytest.raises(ValueError):
        MastersGame.from_json(data)


def test_game_with_id_rejects_bad_id():
    data = _game_json()
    data["id"] = "short"
    with pytest.raises(ValueError):
        MastersGameWithId.from_json(data)