"""Move statistics and stored games of the masters database."""

import io
from dataclasses import dataclass, field
from typing import Any, BinaryIO, Dict, List, Mapping, Optional, Tuple

from openingexplorer.date import LaxDate
from openingexplorer.game_id import GameId
from openingexplorer.lichess import DEFAULT_MOVES, PreparedMove, PreparedResponse
from openingexplorer.lichess_game import GamePlayer
from openingexplorer.query import Limits
from openingexplorer.stats import Color, Outcome, Stats
from openingexplorer.uci import RawUci, Uci
from openingexplorer.util import ByColor, sort_by_key_and_truncate

MAX_MASTERS_GAMES = 15

_U16_MAX = 0xFFFF


def _read_exact(stream: BinaryIO, n: int) -> bytes:
    data = stream.read(n)
    if len(data) != n:
        raise EOFError("unexpected end of data while reading masters entry")
    return data


def _player_from_json(data: Mapping[str, Any]) -> GamePlayer:
    name = data["name"]
    rating = data["rating"]
    if not isinstance(name, str):
        raise TypeError("player name must be a string")
    if isinstance(rating, bool) or not isinstance(rating, int) or not 0 <= rating <= _U16_MAX:
        raise ValueError(f"invalid rating: {rating!r}")
    return GamePlayer(name=name, rating=rating)


def _player_to_json(player: GamePlayer) -> Dict[str, Any]:
    return {"name": player.name, "rating": player.rating}


def _parse_winner(value: Any) -> Optional[Color]:
    return None if value is None else Color(value)


def _parse_moves(value: Any) -> List[Uci]:
    if not isinstance(value, str):
        raise TypeError("moves must be a string")
    return [Uci.parse(part) for part in value.split(" ")] if value else []


@dataclass
class MastersGame:
    """An over-the-board game between strong players."""

    event: str
    site: str
    date: LaxDate
    round: str
    players: ByColor[GamePlayer]
    winner: Optional[Color]
    moves: List[Uci] = field(default_factory=list)

    def outcome(self) -> Outcome:
        return Outcome.from_winner(self.winner)

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "MastersGame":
        """Build a game from its decoded JSON object."""
        try:
            for name in ("event", "site", "date", "round"):
                if not isinstance(data[name], str):
                    raise TypeError(f"{name} must be a string")
            return cls(
                event=data["event"],
                site=data["site"],
                date=LaxDate.parse(data["date"]),
                round=data["round"],
                players=ByColor(
                    white=_player_from_json(data["white"]),
                    black=_player_from_json(data["black"]),
                ),
                winner=_parse_winner(data.get("winner")),
                moves=_parse_moves(data["moves"]),
            )
        except (KeyError, TypeError, AttributeError) as err:
            raise ValueError(f"invalid masters game: {err!r}") from err

    def to_json(self) -> Dict[str, Any]:
        """The game as a JSON-ready object."""
        return {
            "event": self.event,
            "site": self.site,
            "date": str(self.date),
            "round": self.round,
            "black": _player_to_json(self.players.black),
            "white": _player_to_json(self.players.white),
            "winner": None if self.winner is None else str(self.winner),
            "moves": " ".join(str(uci) for uci in self.moves),
        }


@dataclass
class MastersGameWithId:
    """A game submitted for import together with its id."""

    id: GameId
    game: MastersGame

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "MastersGameWithId":
        try:
            game_id = data["id"]
            if not isinstance(game_id, str):
                raise TypeError("id must be a string")
        except (KeyError, TypeError) as err:
            raise ValueError(f"invalid masters game: {err!r}") from err
        return cls(id=GameId.parse(game_id), game=MastersGame.from_json(data))


@dataclass
class MastersGroup:
    """Statistics of one move and its games, keyed by rating sum."""

    stats: Stats = field(default_factory=Stats)
    games: List[Tuple[int, GameId]] = field(default_factory=list)


@dataclass
class MastersEntry:
    """Statistics of all moves from one position in one year."""

    groups: Dict[RawUci, MastersGroup] = field(default_factory=dict)

    SIZE_HINT = 14

    @classmethod
    def new_single(
        cls,
        uci: Uci,
        game_id: GameId,
        outcome: Outcome,
        mover_rating: int,
        opponent_rating: int,
    ) -> "MastersEntry":
        sort_key = min(mover_rating + opponent_rating, _U16_MAX)
        group = MastersGroup(Stats.new_single(outcome, mover_rating), [(sort_key, game_id)])
        return cls(groups={RawUci.from_uci(uci): group})

    def extend_from_bytes(self, data: bytes) -> None:
        """Merge serialized entries into this one."""
        stream = io.BytesIO(data)
        size = len(data)
        while stream.tell() < size:
            group = self.groups.setdefault(RawUci.read(stream), MastersGroup())
            group.stats += Stats.read(stream)
            num_games = _read_exact(stream, 1)[0]
            for _ in range(num_games):
                sort_key = int.from_bytes(_read_exact(stream, 2), "little")
                group.games.append((sort_key, GameId.read(stream)))

    def to_bytes(self) -> bytes:
        """Serialize, keeping only the top games (and any lone game of a move)."""
        top_games = sorted(
            (game for group in self.groups.values() for game in group.games), reverse=True
        )
        if not top_games:
            return b""
        lowest_top_game = top_games[min(len(top_games), MAX_MASTERS_GAMES) - 1]

        out = bytearray()
        for uci, group in self.groups.items():
            out += uci.to_bytes()
            out += group.stats.to_bytes()
            if len(group.games) == 1:
                kept = group.games
            else:
                kept = [game for game in group.games if game >= lowest_top_game]
            out.append(len(kept))
            for sort_key, game_id in kept:
                out += sort_key.to_bytes(2, "little")
                out += game_id.to_bytes()
        return bytes(out)

    def prepare(self, limits: Limits) -> PreparedResponse:
        """Select moves and top games within the limits."""
        total = Stats()
        moves: List[PreparedMove] = []
        top_games: List[Tuple[int, Uci, GameId]] = []

        for raw, group in self.groups.items():
            total += group.stats
            uci = raw.to_uci()
            single_game = None
            if group.stats.is_single() and group.games:
                single_game = group.games[0][1]
            moves.append(
                PreparedMove(
                    uci=uci,
                    stats=group.stats,
                    game=single_game,
                    average_rating=group.stats.average_rating(),
                )
            )
            top_games.extend((sort_key, uci, game) for sort_key, game in group.games)

        sort_by_key_and_truncate(
            top_games, min(limits.top_games, MAX_MASTERS_GAMES), lambda row: -row[0]
        )
        num_moves = DEFAULT_MOVES if limits.moves is None else limits.moves
        sort_by_key_and_truncate(moves, num_moves, lambda m: -m.stats.total())

        return PreparedResponse(
            total=total,
            moves=moves,
            top_games=[(uci, game) for _, uci, game in top_games],
            recent_games=[],
        )