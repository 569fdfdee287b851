import io

import pytest
from hypothesis import given
from hypothesis import strategies as st

from openingexplorer.game_id import GameId, InvalidGameId

game_ids = st.integers(min_value=0, max_value=62**8 - 1).map(GameId)


@given(game_ids)
def test_game_id_roundtrip(game_id):
    assert GameId.parse(str(game_id)) == game_id


@given(game_ids)
def test_bytes_roundtrip(game_id):
    data = game_id.to_bytes()
    assert len(data) == GameId.SIZE
    assert GameId.read(io.BytesIO(data)) == game_id


def test_zero():
    assert GameId.parse("00000000") == GameId(0)
    assert GameId(0).to_bytes() == b"\x00" * 6


def test_string_roundtrip_of_literal():
    assert str(GameId.parse("oV2tflO2")) == "oV2tflO2"


def test_distinct_ids():
    assert GameId.parse("aaaaaaaa") != GameId.parse("bbbbbbbb")


@pytest.mark.parametrize("s", ["", "aaaaaaa", "aaaaaaaaa", "aaaa-aaa", "aaaaaaa\u00e9"])
def test_invalid(s):
    with pytest.raises(InvalidGameId):
        GameId.parse(s)


def test_read_out_of_range():
    with pytest.raises(InvalidGameId):
        GameId.read(io.BytesIO((62**8).to_bytes(6, "little")))


def test_read_truncated():
    with pytest.raises(EOFError):
        GameId.read(io.BytesIO(b"\x01\x02"))