"""Rating brackets that games are grouped by."""

import re
from enum import IntEnum

_UNSIGNED = re.compile(r"\+?[0-9]+")
_U16_MAX = 0xFFFF


class RatingGroup(IntEnum):
    """Rating bracket of a game, numbered as in the storage format."""

    GROUP_LOW = 0
    GROUP_1600 = 1
    GROUP_1800 = 2
    GROUP_2000 = 3
    GROUP_2200 = 4
    GROUP_2500 = 5
    GROUP_2800 = 6
    GROUP_3200 = 7

    @classmethod
    def select_avg(cls, avg: int) -> "RatingGroup":
        """The bracket of an average rating."""
        if avg < 1600:
            return cls.GROUP_LOW
        if avg < 1800:
            return cls.GROUP_1600
        if avg < 2000:
            return cls.GROUP_1800
        if avg < 2200:
            return cls.GROUP_2000
        if avg < 2500:
            return cls.GROUP_2200
        if avg < 2800:
            return cls.GROUP_2500
        return cls.GROUP_3200

    @classmethod
    def select(cls, mover_rating: int, opponent_rating: int) -> "RatingGroup":
        """The bracket of a game between two rated players."""
        return cls.select_avg(mover_rating // 2 + opponent_rating // 2)

    @classmethod
    def parse(cls, s: str) -> "RatingGroup":
        """Parse a rating and return its bracket."""
        if not _UNSIGNED.fullmatch(s) or int(s) > _U16_MAX:
            raise ValueError(f"invalid rating: {s!r}")
        return cls.select_avg(int(s))