"""Aggregated move statistics for games from the game server."""

import io
from dataclasses import dataclass, field
from itertools import product
from typing import BinaryIO, Dict, Iterator, List, Optional, Tuple

from openingexplorer.game_id import GameId
from openingexplorer.query import LichessQueryFilter, Limits
from openingexplorer.rating import RatingGroup
from openingexplorer.speed import Speed
from openingexplorer.stats import Outcome, Stats
from openingexplorer.uci import RawUci, Uci
from openingexplorer.uint import encode_uint, read_uint
from openingexplorer.util import sort_by_key_and_truncate

MAX_LICHESS_GAMES = 8
MAX_TOP_GAMES = 4  # <= MAX_LICHESS_GAMES
DEFAULT_MOVES = 12

_SPEEDS = list(Speed)
_END = b"\x00"


def _read_header(stream: BinaryIO) -> Optional[Tuple[Speed, RatingGroup, int]]:
    """Read a group header; None marks the end of a move's groups."""
    data = stream.read(1)
    if not data:
        raise EOFError("unexpected end of data while reading header")
    n = data[0]
    speed_bits = n & 7
    if speed_bits == 0:
        return None
    if speed_bits > len(_SPEEDS):
        raise ValueError("invalid speed")
    at_least_num_games = n >> 6
    num_games = read_uint(stream) if at_least_num_games >= 3 else at_least_num_games
    return _SPEEDS[speed_bits - 1], RatingGroup((n >> 3) & 7), num_games


def _header_bytes(speed: Speed, rating_group: RatingGroup, num_games: int) -> bytes:
    head = bytes(
        [(_SPEEDS.index(speed) + 1) | (int(rating_group) << 3) | (min(3, num_games) << 6)]
    )
    return head + encode_uint(num_games) if num_games >= 3 else head


@dataclass
class LichessGroup:
    """Statistics and indexed games of one bracket."""

    stats: Stats = field(default_factory=Stats)
    games: List[Tuple[int, GameId]] = field(default_factory=list)


GroupKey = Tuple[Speed, RatingGroup]
SubEntry = Dict[GroupKey, LichessGroup]


def _groups(sub_entry: SubEntry) -> Iterator[Tuple[Speed, RatingGroup, LichessGroup]]:
    for speed, rating_group in product(Speed, RatingGroup):
        group = sub_entry.get((speed, rating_group))
        if group is not None:
            yield speed, rating_group, group


@dataclass
class PreparedMove:
    """A move with its statistics, ready for a response."""

    uci: Uci
    stats: Stats
    game: Optional[GameId] = None
    average_rating: Optional[int] = None
    average_opponent_rating: Optional[int] = None
    performance: Optional[int] = None


@dataclass
class PreparedResponse:
    """Totals, moves and game references for a response."""

    total: Stats
    moves: List[PreparedMove]
    recent_games: List[Tuple[Uci, GameId]]
    top_games: List[Tuple[Uci, GameId]]


@dataclass
class LichessEntry:
    """Statistics of moves from one position, by speed and rating bracket."""

    sub_entries: Dict[RawUci, SubEntry] = field(default_factory=dict)
    min_game_idx: Optional[int] = None
    max_game_idx: Optional[int] = None

    SIZE_HINT = 13

    @classmethod
    def new_single(
        cls,
        uci: Uci,
        speed: Speed,
        game_id: GameId,
        outcome: Outcome,
        mover_rating: int,
        opponent_rating: int,
    ) -> "LichessEntry":
        rating_group = RatingGroup.select(mover_rating, opponent_rating)
        group = LichessGroup(Stats.new_single(outcome, mover_rating), [(0, game_id)])
        return cls(
            sub_entries={RawUci.from_uci(uci): {(speed, rating_group): group}},
            min_game_idx=0,
            max_game_idx=0,
        )

    def extend_from_bytes(self, data: bytes) -> None:
        """Merge serialized entries into this one; their games count as newer."""
        stream = io.BytesIO(data)
        size = len(stream.getbuffer())
        base_game_idx = 0 if self.max_game_idx is None else self.max_game_idx + 1

        while stream.tell() < size:
            sub_entry = self.sub_entries.setdefault(RawUci.read(stream), {})
            while stream.tell() < size:
                header = _read_header(stream)
                if header is None:
                    break
                speed, rating_group, num_games = header
                group = sub_entry.setdefault((speed, rating_group), LichessGroup())
                group.stats += Stats.read(stream)
                for _ in range(num_games):
                    game_idx = base_game_idx + read_uint(stream)
                    self.min_game_idx = (
                        game_idx if self.min_game_idx is None else min(self.min_game_idx, game_idx)
                    )
                    self.max_game_idx = (
                        game_idx if self.max_game_idx is None else max(self.max_game_idx, game_idx)
                    )
                    group.games.append((game_idx, GameId.read(stream)))

    def to_bytes(self) -> bytes:
        out = bytearray()
        min_idx = self.min_game_idx or 0
        for i, (uci, sub_entry) in enumerate(self.sub_entries.items()):
            if i > 0:
                out += _END
            out += uci.to_bytes()
            for speed, rating_group, group in _groups(sub_entry):
                if group.stats.is_empty():
                    continue
                out += _header_bytes(speed, rating_group, min(len(group.games), MAX_LICHESS_GAMES))
                out += group.stats.to_bytes()
                for game_idx, game in group.games[-MAX_LICHESS_GAMES:]:
                    out += encode_uint(game_idx - min_idx)
                    out += game.to_bytes()
        return bytes(out)

    def prepare(self, filter: LichessQueryFilter, limits: Limits) -> PreparedResponse:
        """Select moves and games matching the filter, within the limits."""
        total = Stats()
        moves: List[PreparedMove] = []
        recent_games: List[Tuple[RatingGroup, Speed, int, Uci, GameId]] = []

        for raw, sub_entry in self.sub_entries.items():
            uci = raw.to_uci()
            latest_game: Optional[Tuple[int, GameId]] = None
            stats = Stats()

            for speed, rating_group, group in _groups(sub_entry):
                if not filter.contains_speed(speed):
                    continue
                if not filter.contains_rating_group(rating_group):
                    continue
                stats += group.stats
                for idx, game in group.games:
                    if latest_game is None or latest_game[0] < idx:
                        latest_game = (idx, game)
                if limits.wants_games():
                    recent_games.extend(
                        (rating_group, speed, idx, uci, game) for idx, game in group.games
                    )

            if not stats.is_empty():
                total += stats
                moves.append(
                    PreparedMove(
                        uci=uci,
                        stats=stats,
                        game=latest_game[1] if latest_game and stats.is_single() else None,
                        average_rating=stats.average_rating(),
                    )
                )

        num_moves = DEFAULT_MOVES if limits.moves is None else limits.moves
        sort_by_key_and_truncate(moves, num_moves, lambda m: -m.stats.total())

        # Split out top games from recent games.
        top_group = filter.top_group()
        if top_group is not None:
            top_games = [
                row
                for row in recent_games
                if row[0] >= top_group and row[1] is not Speed.CORRESPONDENCE
            ]
            sort_by_key_and_truncate(
                top_games,
                MAX_TOP_GAMES,
                lambda row: (-min(row[0], RatingGroup.GROUP_2500), -row[2]),
            )
            top_ids = {row[4] for row in top_games}
            recent_games = [row for row in recent_games if row[4] not in top_ids]
        else:
            top_games = []
        valid_recent_games = MAX_LICHESS_GAMES - len(top_games)
        del top_games[limits.top_games:]

        sort_by_key_and_truncate(
            recent_games, min(valid_recent_games, limits.recent_games), lambda row: -row[2]
        )

        return PreparedResponse(
            total=total,
            moves=moves,
            top_games=[(uci, game) for _, _, _, uci, game in top_games],
            recent_games=[(uci, game) for _, _, _, uci, game in recent_games],
        )