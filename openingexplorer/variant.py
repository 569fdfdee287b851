"""Chess variants and the names under which they are requested."""

from enum import Enum


class Variant(Enum):
    """Rule sets that positions are played under."""

    CHESS = "chess"
    ANTICHESS = "antichess"
    ATOMIC = "atomic"
    CRAZYHOUSE = "crazyhouse"
    HORDE = "horde"
    KING_OF_THE_HILL = "kingofthehill"
    RACING_KINGS = "racingkings"
    THREE_CHECK = "threecheck"


class LilaVariant(Enum):
    """Variant names as used by the game server."""

    ANTICHESS = "antichess"
    ATOMIC = "atomic"
    CHESS960 = "chess960"
    CRAZYHOUSE = "crazyhouse"
    FROM_POSITION = "fromPosition"
    HORDE = "horde"
    KING_OF_THE_HILL = "kingOfTheHill"
    RACING_KINGS = "racingKings"
    STANDARD = "standard"
    THREE_CHECK = "threeCheck"

    @classmethod
    def parse(cls, s: str) -> "LilaVariant":
        """Parse any accepted spelling of a variant name."""
        try:
            return _ALIASES[s]
        except KeyError:
            raise ValueError(f"unknown variant: {s!r}") from None

    def to_variant(self) -> Variant:
        return _TO_VARIANT[self]

    def __str__(self) -> str:
        return self.value


_ALIASES = {
    "Antichess": LilaVariant.ANTICHESS,
    "antichess": LilaVariant.ANTICHESS,
    "Atomic": LilaVariant.ATOMIC,
    "atomic": LilaVariant.ATOMIC,
    "Chess960": LilaVariant.CHESS960,
    "chess960": LilaVariant.CHESS960,
    "Crazyhouse": LilaVariant.CRAZYHOUSE,
    "crazyhouse": LilaVariant.CRAZYHOUSE,
    "FromPosition": LilaVariant.FROM_POSITION,
    "fromPosition": LilaVariant.FROM_POSITION,
    "From Position": LilaVariant.FROM_POSITION,
    "Horde": LilaVariant.HORDE,
    "horde": LilaVariant.HORDE,
    "KingOfTheHill": LilaVariant.KING_OF_THE_HILL,
    "kingOfTheHill": LilaVariant.KING_OF_THE_HILL,
    "King of the Hill": LilaVariant.KING_OF_THE_HILL,
    "RacingKings": LilaVariant.RACING_KINGS,
    "racingKings": LilaVariant.RACING_KINGS,
    "Racing Kings": LilaVariant.RACING_KINGS,
    "Standard": LilaVariant.STANDARD,
    "standard": LilaVariant.STANDARD,
    "chess": LilaVariant.STANDARD,
    "ThreeCheck": LilaVariant.THREE_CHECK,
    "threeCheck": LilaVariant.THREE_CHECK,
    "Three-check": LilaVariant.THREE_CHECK,
}

_TO_VARIANT = {
    LilaVariant.STANDARD: Variant.CHESS,
    LilaVariant.CHESS960: Variant.CHESS,
    LilaVariant.FROM_POSITION: Variant.CHESS,
    LilaVariant.ANTICHESS: Variant.ANTICHESS,
    LilaVariant.ATOMIC: Variant.ATOMIC,
    LilaVariant.CRAZYHOUSE: Variant.CRAZYHOUSE,
    LilaVariant.HORDE: Variant.HORDE,
    LilaVariant.KING_OF_THE_HILL: Variant.KING_OF_THE_HILL,
    LilaVariant.RACING_KINGS: Variant.RACING_KINGS,
    LilaVariant.THREE_CHECK: Variant.THREE_CHECK,
}