import pytest

from openingexplorer.variant import LilaVariant, Variant


@pytest.mark.parametrize(
    "name, expected",
    [
        ("standard", LilaVariant.STANDARD),
        ("chess", LilaVariant.STANDARD),
        ("Standard", LilaVariant.STANDARD),
        ("From Position", LilaVariant.FROM_POSITION),
        ("fromPosition", LilaVariant.FROM_POSITION),
        ("King of the Hill", LilaVariant.KING_OF_THE_HILL),
        ("Racing Kings", LilaVariant.RACING_KINGS),
        ("Three-check", LilaVariant.THREE_CHECK),
        ("chess960", LilaVariant.CHESS960),
        ("antichess", LilaVariant.ANTICHESS),
    ],
)
def test_parse_aliases(name, expected):
    assert LilaVariant.parse(name) is expected


@pytest.mark.parametrize("name", ["", "Chess", "three-check", "kingofthehill"])
def test_parse_unknown(name):
    with pytest.raises(ValueError):
        LilaVariant.parse(name)


@pytest.mark.parametrize(
    "lila, variant",
    [
        (LilaVariant.STANDARD, Variant.CHESS),
        (LilaVariant.CHESS960, Variant.CHESS),
        (LilaVariant.FROM_POSITION, Variant.CHESS),
        (LilaVariant.ATOMIC, Variant.ATOMIC),
        (LilaVariant.CRAZYHOUSE, Variant.CRAZYHOUSE),
        (LilaVariant.HORDE, Variant.HORDE),
        (LilaVariant.KING_OF_THE_HILL, Variant.KING_OF_THE_HILL),
        (LilaVariant.RACING_KINGS, Variant.RACING_KINGS),
        (LilaVariant.THREE_CHECK, Variant.THREE_CHECK),
        (LilaVariant.ANTICHESS, Variant.ANTICHESS),
    ],
)
def test_to_variant(lila, variant):
    assert lila.to_variant() is variant


def test_every_variant_parses_from_its_value():
    for lila in LilaVariant:
        assert LilaVariant.parse(lila.value) is lila