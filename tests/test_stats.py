import io

import pytest
from hypothesis import given
from hypothesis import strategies as st

from openingexplorer.stats import Color, Outcome, Stats

u32 = st.integers(min_value=0, max_value=2**32 - 1)


@given(u32, u32, u32, u32)
def test_stats_roundtrip(rating_sum, white, draws, black):
    stats = Stats(rating_sum=rating_sum, white=white, draws=draws, black=black)
    assert Stats.read(io.BytesIO(stats.to_bytes())) == stats


def test_performance_single():
    single = Stats(white=1, draws=0, black=0, rating_sum=1500)
    assert single.performance(Color.WHITE) == 2300
    assert single.performance(Color.BLACK) == 700


def test_performance_symmetrical():
    symmetrical = Stats(white=123, draws=10, black=123, rating_sum=(123 + 10 + 123) * 987)
    assert symmetrical.performance(Color.WHITE) == 987
    assert symmetrical.performance(Color.BLACK) == 987


def test_performance_p5():
    p5 = Stats(white=5, draws=0, black=95, rating_sum=0)
    assert p5.performance(Color.WHITE) == -470
    assert p5.performance(Color.BLACK) == 470


def test_performance_empty():
    assert Stats().performance(Color.WHITE) is None


@pytest.mark.parametrize(
    "winner, expected",
    [(Color.WHITE, (1, 0, 0)), (Color.BLACK, (0, 0, 1)), (None, (0, 1, 0))],
)
def test_new_single(winner, expected):
    stats = Stats.new_single(Outcome.from_winner(winner), 1700)
    assert (stats.white, stats.draws, stats.black) == expected
    assert stats.rating_sum == 1700
    assert stats.is_single()
    assert stats.average_rating() == 1700


def test_add_and_average():
    stats = Stats.new_single(Outcome(Color.WHITE), 1600)
    stats += Stats.new_single(Outcome(Color.BLACK), 1800)
    assert stats.total() == 2
    assert not stats.is_single()
    assert stats.average_rating() == 1700


def test_empty():
    assert Stats().is_empty()
    assert Stats().average_rating() is None
    assert not Stats(draws=1).is_empty()


def test_single_entries_are_compact():
    assert Stats.read(io.BytesIO(Stats(draws=1, rating_sum=5).to_bytes())) == Stats(5, draws=1)
    assert len(Stats(white=1, rating_sum=100).to_bytes()) == 2


def test_read_truncated():
    with pytest.raises(EOFError):
        Stats.read(io.BytesIO(b"\x05"))


def test_outcome_str():
    assert str(Outcome(Color.WHITE)) == "1-0"
    assert str(Outcome(Color.BLACK)) == "0-1"
    assert str(Outcome(None)) == "1/2-1/2"


def test_color_invert():
    won_by_black = Stats.new_single(Outcome.from_winner(~Color.WHITE), 1500)
    assert (won_by_black.white, won_by_black.draws, won_by_black.black) == (0, 0, 1)
    won_by_white = Stats.new_single(Outcome.from_winner(~Color.BLACK), 1500)
    assert (won_by_white.white, won_by_white.draws, won_by_white.black) == (1, 0, 0)