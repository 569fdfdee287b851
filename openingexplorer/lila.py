"""Games as exported by the game server, one JSON object per line."""

import json
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Iterable, Iterator, List, Mapping, Optional, Union

from openingexplorer.game_id import GameId
from openingexplorer.speed import Speed
from openingexplorer.stats import Color
from openingexplorer.user import UserName
from openingexplorer.util import ByColor
from openingexplorer.variant import LilaVariant

_EPOCH = datetime(1970, 1, 1)
_U16_MAX = 0xFFFF
_U64_MAX = (1 << 64) - 1


class Status(Enum):
    """State in which a game ended, or that it is still going."""

    CREATED = "created"
    STARTED = "started"
    ABORTED = "aborted"
    MATE = "mate"
    RESIGN = "resign"
    STALEMATE = "stalemate"
    TIMEOUT = "timeout"
    DRAW = "draw"
    OUT_OF_TIME = "outoftime"
    CHEAT = "cheat"
    NO_START = "noStart"
    UNKNOWN_FINISH = "unknownFinish"
    VARIANT_END = "variantEnd"

    @classmethod
    def parse(cls, s: str) -> "Status":
        try:
            return cls(s)
        except ValueError:
            raise ValueError(f"unknown game status: {s!r}") from None

    def is_ongoing(self) -> bool:
        return self in (Status.CREATED, Status.STARTED)

    def is_unindexable(self) -> bool:
        return self in (Status.UNKNOWN_FINISH, Status.NO_START, Status.ABORTED)


@dataclass(frozen=True)
class User:
    """An account that played a game."""

    name: UserName


def _rating(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _U16_MAX:
        raise ValueError(f"invalid rating: {value!r}")
    return value


def _uint(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _U64_MAX:
        raise ValueError(f"invalid unsigned integer: {value!r}")
    return value


@dataclass
class Player:
    """One side of a game; anonymous or unrated sides lack user or rating."""

    user: Optional[User] = None
    rating: Optional[int] = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Player":
        user = data.get("user")
        if user is not None:
            name = user["name"]
            if not isinstance(name, str):
                raise TypeError("user name must be a string")
            user = User(UserName.parse(name))
        return cls(user=user, rating=_rating(data.get("rating")))


@dataclass
class Game:
    """A game from a player's game export."""

    id: GameId
    rated: bool
    created_at: int
    last_move_at: datetime
    status: Status
    variant: LilaVariant
    players: ByColor[Player]
    speed: Speed
    moves: List[str] = field(default_factory=list)
    winner: Optional[Color] = None
    initial_fen: Optional[str] = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Game":
        """Build a game from its decoded JSON object."""
        try:
            rated = data["rated"]
            if not isinstance(rated, bool):
                raise TypeError("rated must be a boolean")
            last_move_at = data["lastMoveAt"]
            if isinstance(last_move_at, bool) or not isinstance(last_move_at, int):
                raise TypeError("lastMoveAt must be an integer")
            moves = data["moves"]
            if not isinstance(moves, str):
                raise TypeError("moves must be a string")
            winner = data.get("winner")
            initial_fen = data.get("initialFen")
            if initial_fen is not None and not isinstance(initial_fen, str):
                raise TypeError("initialFen must be a string")
            players = data["players"]
            return cls(
                id=GameId.parse(data["id"]),
                rated=rated,
                created_at=_uint(data["createdAt"]),
                last_move_at=_EPOCH + timedelta(milliseconds=last_move_at),
                status=Status.parse(data["status"]),
                variant=LilaVariant.parse(data["variant"]),
                players=ByColor(
                    white=Player.from_json(players["white"]),
                    black=Player.from_json(players["black"]),
                ),
                speed=Speed.parse(data["speed"]),
                moves=moves.split(" ") if moves else [],
                winner=None if winner is None else Color(winner),
                initial_fen=initial_fen,
            )
        except (KeyError, TypeError, AttributeError, OverflowError) as err:
            raise ValueError(f"invalid game: {err!r}") from err


def parse_games(lines: Iterable[Union[str, bytes]]) -> Iterator[Game]:
    """Decode one game per non-empty line; a malformed line raises ValueError."""
    for line in lines:
        if isinstance(line, bytes):
            line = line.decode("utf-8")
        if line.endswith("\n"):
            line = line[:-1]
            if line.endswith("\r"):
                line = line[:-1]
        if not line:
            continue
        yield Game.from_json(json.loads(line))