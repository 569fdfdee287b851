"""Colors, game outcomes and aggregated win/draw/loss statistics."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Optional

from openingexplorer.uint import encode_uint, read_uint


class Color(Enum):
    """Side to move, valued by its wire name."""

    WHITE = "white"
    BLACK = "black"

    @property
    def char(self) -> str:
        """The single-letter name, 'w' or 'b'."""
        return self.value[0]

    def __invert__(self) -> "Color":
        return Color.BLACK if self is Color.WHITE else Color.WHITE

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Outcome:
    """Result of a game: a winner, or a draw when there is none."""

    winner: Optional[Color] = None

    @classmethod
    def from_winner(cls, winner: Optional[Color]) -> "Outcome":
        return cls(winner)

    @property
    def is_draw(self) -> bool:
        return self.winner is None

    def __str__(self) -> str:
        if self.winner is Color.WHITE:
            return "1-0"
        if self.winner is Color.BLACK:
            return "0-1"
        return "1/2-1/2"


def _round_half_away(x: float) -> int:
    magnitude = abs(x)
    floor = math.floor(magnitude)
    rounded = floor + 1 if magnitude - floor >= 0.5 else floor
    return -rounded if x < 0 else rounded


# Rating differences by percentage score, from the FIDE handbook.
_DELTAS = (
    -800.0, -677.0, -589.0, -538.0, -501.0, -470.0, -444.0, -422.0, -401.0, -383.0, -366.0,
    -351.0, -336.0, -322.0, -309.0, -296.0, -284.0, -273.0, -262.0, -251.0, -240.0, -230.0,
    -220.0, -211.0, -202.0, -193.0, -184.0, -175.0, -166.0, -158.0, -149.0, -141.0, -133.0,
    -125.0, -117.0, -110.0, -102.0, -95.0, -87.0, -80.0, -72.0, -65.0, -57.0, -50.0, -43.0,
    -36.0, -29.0, -21.0, -14.0, -7.0, 0.0, 7.0, 14.0, 21.0, 29.0, 36.0, 43.0, 50.0, 57.0,
    65.0, 72.0, 80.0, 87.0, 95.0, 102.0, 110.0, 117.0, 125.0, 133.0, 141.0, 149.0, 158.0,
    166.0, 175.0, 184.0, 193.0, 202.0, 211.0, 220.0, 230.0, 240.0, 251.0, 262.0, 273.0,
    284.0, 296.0, 309.0, 322.0, 336.0, 351.0, 366.0, 383.0, 401.0, 422.0, 444.0, 470.0,
    501.0, 538.0, 589.0, 677.0, 800.0,
)


@dataclass
class Stats:
    """Counts of results and the sum of the ratings involved."""

    rating_sum: int = 0
    white: int = 0
    draws: int = 0
    black: int = 0

    @classmethod
    def new_single(cls, outcome: Outcome, rating: int) -> "Stats":
        return cls(
            rating_sum=rating,
            white=int(outcome.winner is Color.WHITE),
            draws=int(outcome.winner is None),
            black=int(outcome.winner is Color.BLACK),
        )

    def __iadd__(self, other: "Stats") -> "Stats":
        self.rating_sum += other.rating_sum
        self.white += other.white
        self.draws += other.draws
        self.black += other.black
        return self

    def total(self) -> int:
        return self.white + self.draws + self.black

    def is_empty(self) -> bool:
        return self.total() == 0

    def is_single(self) -> bool:
        return self.total() == 1

    def _average_rating_float(self) -> Optional[float]:
        total = self.total()
        return self.rating_sum / total if total > 0 else None

    def average_rating(self) -> Optional[int]:
        avg = self._average_rating_float()
        return None if avg is None else _round_half_away(avg)

    def performance(self, color: Color) -> Optional[int]:
        """Performance rating from the point of view of the given color."""
        avg_opponent_rating = self._average_rating_float()
        if avg_opponent_rating is None:
            return None
        wins = self.white if color is Color.WHITE else self.black
        score = 100 * wins + 50 * self.draws
        p = score / self.total()
        idx = int(p)
        fract = p - idx
        upper = _DELTAS[idx + 1] if idx + 1 < len(_DELTAS) else 800.0
        return _round_half_away(avg_opponent_rating + _DELTAS[idx] * (1.0 - fract) + upper * fract)

    @classmethod
    def read(cls, stream: BinaryIO) -> "Stats":
        rating_sum = read_uint(stream)
        code = read_uint(stream)
        if code == 0:
            return cls(rating_sum, white=1)
        if code == 1:
            return cls(rating_sum, black=1)
        if code == 2:
            return cls(rating_sum, draws=1)
        draws = read_uint(stream)
        black = read_uint(stream)
        return cls(rating_sum, white=code - 3, draws=draws, black=black)

    def to_bytes(self) -> bytes:
        counts = (self.white, self.draws, self.black)
        head = encode_uint(self.rating_sum)
        if counts == (1, 0, 0):
            return head + encode_uint(0)
        if counts == (0, 0, 1):
            return head + encode_uint(1)
        if counts == (0, 1, 0):
            return head + encode_uint(2)
        return head + encode_uint(self.white + 3) + encode_uint(self.draws) + encode_uint(self.black)