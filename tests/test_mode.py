import pytest

from openingexplorer.mode import InvalidMode, Mode


def test_from_rated():
    assert Mode.from_rated(True) is Mode.RATED
    assert Mode.from_rated(False) is Mode.CASUAL


@pytest.mark.parametrize("rated", [True, False])
def test_is_rated_inverts_from_rated(rated):
    assert Mode.from_rated(rated).is_rated() == rated


def test_parse():
    assert Mode.parse("rated") is Mode.RATED
    assert Mode.parse("casual") is Mode.CASUAL


@pytest.mark.parametrize("mode", list(Mode))
def test_roundtrip(mode):
    assert Mode.parse(str(mode)) is mode


@pytest.mark.parametrize("name", ["", "Rated", "unrated"])
def test_invalid(name):
    with pytest.raises(InvalidMode):
        Mode.parse(name)