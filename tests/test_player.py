import io
from datetime import datetime, timedelta, timezone

import pytest

from openingexplorer.game_id import GameId
from openingexplorer.mode import Mode
from openingexplorer.player import (
    IndexRun,
    PlayerEntry,
    PlayerStatus,
    _header_bytes,
    _read_header,
)
from openingexplorer.query import Limits, PlayerQueryFilter
from openingexplorer.speed import Speed
from openingexplorer.stats import Color, Outcome
from openingexplorer.uci import RawUci, Uci

E2, E4, D2, D4 = 12, 28, 11, 27
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
U64_MAX = (1 << 64) - 1


def _merged():
    uci_ab = Uci.normal(E2, E4, None)
    uci_c = Uci.normal(D2, D4, None)
    a = PlayerEntry.new_single(
        uci_ab, Speed.BULLET, Mode.RATED, GameId.parse("aaaaaaaa"), Outcome(Color.WHITE), 1600
    )
    b = PlayerEntry.new_single(
        uci_ab, Speed.BULLET, Mode.RATED, GameId.parse("bbbbbbbb"), Outcome(Color.BLACK), 1800
    )
    c = PlayerEntry.new_single(
        uci_c, Speed.BULLET, Mode.RATED, GameId.parse("cccccccc"), Outcome(None), 1700
    )
    merged = PlayerEntry()
    for entry in (a, b, c):
        merged.extend_from_bytes(entry.to_bytes())
    return merged, uci_ab, uci_c


def test_header_roundtrip():
    data = _header_bytes(Speed.CORRESPONDENCE, Mode.RATED, 15) + b"\x00"
    stream = io.BytesIO(data)
    assert _read_header(stream) == (Speed.CORRESPONDENCE, Mode.RATED, 15)
    assert _read_header(stream) is None


def test_single_entry_size():
    a = PlayerEntry.new_single(
        Uci.normal(E2, E4, None),
        Speed.BULLET,
        Mode.RATED,
        GameId.parse("aaaaaaaa"),
        Outcome(Color.WHITE),
        1600,
    )
    assert len(a.to_bytes()) == PlayerEntry.SIZE_HINT


def test_merge_player():
    merged, uci_ab, _ = _merged()
    assert len(merged.sub_entries) == 2
    assert merged.max_game_idx == 2
    group = merged.sub_entries[RawUci.from_uci(uci_ab)][(Speed.BULLET, Mode.RATED)]
    assert group.stats.white == 1
    assert group.stats.draws == 0
    assert group.stats.black == 1
    assert group.stats.average_rating() == 1700
    assert len(group.games) == 2

    roundtrip = PlayerEntry()
    roundtrip.extend_from_bytes(merged.to_bytes())
    assert len(roundtrip.sub_entries) == 2
    assert roundtrip.max_game_idx == 2


def test_prepare_orders_moves_and_recent_games():
    merged, uci_ab, uci_c = _merged()
    res = merged.prepare(Color.WHITE, PlayerQueryFilter(), Limits())
    assert res.total.total() == 3
    assert [m.uci for m in res.moves] == [uci_ab, uci_c]
    assert res.moves[0].game is None
    assert res.moves[1].game == GameId.parse("cccccccc")
    assert res.moves[0].average_opponent_rating == 1700
    assert res.moves[0].performance == 1700
    assert res.recent_games == [
        (uci_c, GameId.parse("cccccccc")),
        (uci_ab, GameId.parse("bbbbbbbb")),
        (uci_ab, GameId.parse("aaaaaaaa")),
    ]
    assert res.top_games == []


def test_prepare_limits_and_filter():
    merged, _, uci_c = _merged()
    res = merged.prepare(Color.WHITE, PlayerQueryFilter(), Limits(recent_games=1, moves=1))
    assert len(res.moves) == 1
    assert res.recent_games == [(uci_c, GameId.parse("cccccccc"))]

    filtered = merged.prepare(Color.BLACK, PlayerQueryFilter(speeds=(Speed.BLITZ,)), Limits())
    assert filtered.total.total() == 0
    assert filtered.moves == []
    assert filtered.recent_games == []


def test_invalid_header_rejected():
    with pytest.raises(ValueError):
        _read_header(io.BytesIO(b"\x07"))


def test_index_run_since():
    assert IndexRun.index(5).since() == 6
    assert IndexRun.index(U64_MAX).since() == U64_MAX
    assert IndexRun.revisit(7).since() == 7
    assert str(IndexRun.index(5)) == "created_at > 5"
    assert str(IndexRun.revisit(7)) == "created_at >= 7"


def test_player_status_roundtrip():
    status = PlayerStatus(
        latest_created_at=123,
        revisit_ongoing_created_at=None,
        indexed_at=EPOCH + timedelta(seconds=1000),
        revisited_at=EPOCH + timedelta(seconds=2000),
    )
    assert PlayerStatus.read(io.BytesIO(status.to_bytes())) == status

    with_revisit = PlayerStatus(latest_created_at=5, revisit_ongoing_created_at=42)
    assert PlayerStatus.read(io.BytesIO(with_revisit.to_bytes())) == with_revisit


def test_default_status_wants_index():
    status = PlayerStatus()
    assert status.maybe_index() == IndexRun.index(0)
    assert status.maybe_revisit_ongoing() is None


def test_finish_run_cools_down():
    status = PlayerStatus(latest_created_at=9, revisit_ongoing_created_at=42)
    run = status.maybe_revisit_ongoing()
    assert run == IndexRun.revisit(42)
    status.finish_run(run)
    assert status.maybe_revisit_ongoing() is None
    assert status.maybe_index() is None
    assert status.revisited_at == status.indexed_at


def test_finish_index_run_keeps_revisit_time():
    status = PlayerStatus()
    status.finish_run(IndexRun.index(0))
    assert status.revisited_at == EPOCH
    assert status.maybe_index() is None