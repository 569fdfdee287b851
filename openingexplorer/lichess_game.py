"""Per-game information stored for games from the game server."""

from dataclasses import dataclass, field
from typing import BinaryIO

from openingexplorer.date import Month
from openingexplorer.mode import Mode
from openingexplorer.speed import Speed
from openingexplorer.stats import Color, Outcome
from openingexplorer.uint import encode_uint, read_uint
from openingexplorer.util import ByColor

_SPEEDS = list(Speed)
_OUTCOMES = [Outcome(Color.BLACK), Outcome(Color.WHITE), Outcome(None)]


def _read_exact(stream: BinaryIO, n: int) -> bytes:
    data = stream.read(n)
    if len(data) != n:
        raise EOFError("unexpected end of data while reading game")
    return data


def _read_u16(stream: BinaryIO) -> int:
    return int.from_bytes(_read_exact(stream, 2), "little")


@dataclass
class GamePlayer:
    """Name and rating of one side of a game."""

    name: str
    rating: int

    @classmethod
    def read(cls, stream: BinaryIO) -> "GamePlayer":
        length = read_uint(stream)
        name = _read_exact(stream, length).decode("utf-8")
        return cls(name=name, rating=_read_u16(stream))

    def to_bytes(self) -> bytes:
        name = self.name.encode("utf-8")
        return encode_uint(len(name)) + name + self.rating.to_bytes(2, "little")


def _no_side_indexed() -> ByColor[bool]:
    return ByColor(white=False, black=False)


@dataclass
class LichessGame:
    """A game's result, players and which indexes already include it."""

    outcome: Outcome
    speed: Speed
    mode: Mode
    players: ByColor[GamePlayer]
    month: Month
    indexed_player: ByColor[bool] = field(default_factory=_no_side_indexed)
    indexed_lichess: bool = False

    SIZE_HINT = 1 + 2 * (1 + 20 + 2) + 2

    def to_bytes(self) -> bytes:
        header = (
            _SPEEDS.index(self.speed)
            | (_OUTCOMES.index(self.outcome) << 3)
            | (int(self.mode.is_rated()) << 5)
            | (int(self.indexed_player.white) << 6)
            | (int(self.indexed_player.black) << 7)
        )
        return b"".join(
            (
                bytes([header]),
                self.players.white.to_bytes(),
                self.players.black.to_bytes(),
                self.month.value.to_bytes(2, "little"),
                bytes([int(self.indexed_lichess)]),
            )
        )

    @classmethod
    def read(cls, stream: BinaryIO) -> "LichessGame":
        byte = _read_exact(stream, 1)[0]
        speed_bits = byte & 7
        if speed_bits >= len(_SPEEDS):
            raise ValueError("invalid speed")
        outcome_bits = (byte >> 3) & 3
        if outcome_bits >= len(_OUTCOMES):
            raise ValueError("invalid outcome")
        indexed_player = ByColor(white=bool((byte >> 6) & 1), black=bool((byte >> 7) & 1))
        white = GamePlayer.read(stream)
        black = GamePlayer.read(stream)
        month = Month(_read_u16(stream))
        indexed_lichess = _read_exact(stream, 1)[0] != 0
        return cls(
            outcome=_OUTCOMES[outcome_bits],
            speed=_SPEEDS[speed_bits],
            mode=Mode.from_rated(bool((byte >> 5) & 1)),
            players=ByColor(white=white, black=black),
            month=month,
            indexed_player=indexed_player,
            indexed_lichess=indexed_lichess,
        )