"""Per-player move statistics and the indexing status of players."""

import io
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from itertools import product
from typing import BinaryIO, Dict, Iterator, List, Optional, Tuple

from openingexplorer.game_id import GameId
from openingexplorer.lichess import LichessGroup, PreparedMove, PreparedResponse
from openingexplorer.mode import Mode
from openingexplorer.query import Limits, PlayerQueryFilter
from openingexplorer.speed import Speed
from openingexplorer.stats import Color, Outcome, Stats
from openingexplorer.uci import RawUci, Uci
from openingexplorer.uint import encode_uint, read_uint
from openingexplorer.util import sort_by_key_and_truncate

MAX_PLAYER_GAMES = 8  # must fit into 4 bits

_U64_MAX = (1 << 64) - 1
_SPEEDS = list(Speed)
_END = b"\x00"
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_REVISIT_COOLDOWN = timedelta(hours=24)
_INDEX_COOLDOWN = timedelta(seconds=60)

GroupKey = Tuple[Speed, Mode]
SubEntry = Dict[GroupKey, LichessGroup]


def _read_header(stream: BinaryIO) -> Optional[Tuple[Speed, Mode, int]]:
    """Read a group header; None marks the end of a move's groups."""
    data = stream.read(1)
    if not data:
        raise EOFError("unexpected end of data while reading header")
    n = data[0]
    speed_bits = n & 7
    if speed_bits == 0:
        return None
    if speed_bits > len(_SPEEDS):
        raise ValueError("invalid player header")
    return _SPEEDS[speed_bits - 1], Mode.from_rated(bool((n >> 3) & 1)), n >> 4


def _header_bytes(speed: Speed, mode: Mode, num_games: int) -> bytes:
    if not 0 <= num_games <= 15:
        raise ValueError(f"too many games for header: {num_games}")
    return bytes(
        [(_SPEEDS.index(speed) + 1) | (int(mode.is_rated()) << 3) | (num_games << 4)]
    )


def _groups(sub_entry: SubEntry) -> Iterator[Tuple[Speed, Mode, LichessGroup]]:
    for speed, mode in product(Speed, Mode):
        group = sub_entry.get((speed, mode))
        if group is not None:
            yield speed, mode, group


@dataclass
class PlayerEntry:
    """Statistics of a player's moves from one position, by speed and mode."""

    sub_entries: Dict[RawUci, SubEntry] = field(default_factory=dict)
    min_game_idx: Optional[int] = None
    max_game_idx: Optional[int] = None

    SIZE_HINT = 13

    @classmethod
    def new_single(
        cls,
        uci: Uci,
        speed: Speed,
        mode: Mode,
        game_id: GameId,
        outcome: Outcome,
        opponent_rating: int,
    ) -> "PlayerEntry":
        group = LichessGroup(Stats.new_single(outcome, opponent_rating), [(0, game_id)])
        return cls(
            sub_entries={RawUci.from_uci(uci): {(speed, mode): group}},
            min_game_idx=0,
            max_game_idx=0,
        )

    def extend_from_bytes(self, data: bytes) -> None:
        """Merge serialized entries into this one; their games count as newer."""
        stream = io.BytesIO(data)
        size = len(data)
        base_game_idx = 0 if self.max_game_idx is None else self.max_game_idx + 1

        while stream.tell() < size:
            sub_entry = self.sub_entries.setdefault(RawUci.read(stream), {})
            while stream.tell() < size:
                header = _read_header(stream)
                if header is None:
                    break
                speed, mode, num_games = header
                group = sub_entry.setdefault((speed, mode), LichessGroup())
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
            for speed, mode, group in _groups(sub_entry):
                if group.stats.is_empty():
                    continue
                out += _header_bytes(speed, mode, min(len(group.games), MAX_PLAYER_GAMES))
                out += group.stats.to_bytes()
                for game_idx, game in group.games[-MAX_PLAYER_GAMES:]:
                    out += encode_uint(game_idx - min_idx)
                    out += game.to_bytes()
        return bytes(out)

    def prepare(
        self, color: Color, filter: PlayerQueryFilter, limits: Limits
    ) -> PreparedResponse:
        """Select moves and recent games matching the filter, within the limits."""
        total = Stats()
        moves: List[PreparedMove] = []
        recent_games: List[Tuple[int, RawUci, GameId]] = []

        for raw, sub_entry in self.sub_entries.items():
            latest_game: Optional[Tuple[int, GameId]] = None
            stats = Stats()

            for speed, mode, group in _groups(sub_entry):
                if not filter.contains_speed(speed) or not filter.contains_mode(mode):
                    continue
                stats += group.stats
                for idx, game in group.games:
                    if latest_game is None or latest_game[0] < idx:
                        latest_game = (idx, game)
                recent_games.extend((idx, raw, game) for idx, game in group.games)

            if not stats.is_empty():
                total += stats
                moves.append(
                    PreparedMove(
                        uci=raw.to_uci(),
                        stats=stats,
                        game=latest_game[1] if latest_game and stats.is_single() else None,
                        average_opponent_rating=stats.average_rating(),
                        performance=stats.performance(color),
                    )
                )

        num_moves = _U64_MAX if limits.moves is None else limits.moves
        sort_by_key_and_truncate(moves, num_moves, lambda m: -m.stats.total())
        sort_by_key_and_truncate(
            recent_games, min(limits.recent_games, MAX_PLAYER_GAMES), lambda row: -row[0]
        )

        return PreparedResponse(
            total=total,
            moves=moves,
            recent_games=[(raw.to_uci(), game) for _, raw, game in recent_games],
            top_games=[],
        )


class IndexRunKind(Enum):
    """Whether a run fetches new games or revisits ongoing ones."""

    INDEX = "index"
    REVISIT = "revisit"


@dataclass(frozen=True)
class IndexRun:
    """A planned indexing run, bounded by a game creation time in milliseconds."""

    kind: IndexRunKind
    created_at: int

    @classmethod
    def index(cls, after: int) -> "IndexRun":
        return cls(IndexRunKind.INDEX, after)

    @classmethod
    def revisit(cls, since: int) -> "IndexRun":
        return cls(IndexRunKind.REVISIT, since)

    def since(self) -> int:
        """The smallest creation time to request."""
        if self.kind is IndexRunKind.INDEX:
            # Plus one millisecond to avoid overlap; games created in the same
            # millisecond as the last one seen may be missed.
            return min(self.created_at + 1, _U64_MAX)
        return self.created_at

    def __str__(self) -> str:
        if self.kind is IndexRunKind.INDEX:
            return f"created_at > {self.created_at}"
        return f"created_at >= {self.created_at}"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _elapsed_since(moment: datetime) -> timedelta:
    return max(_now() - moment, timedelta(0))


def _epoch_seconds(moment: datetime) -> int:
    delta = moment - _EPOCH
    if delta < timedelta(0):
        raise ValueError("time before unix epoch")
    return delta // timedelta(seconds=1)


@dataclass
class PlayerStatus:
    """How far a player's games have been indexed, and when."""

    latest_created_at: int = 0
    revisit_ongoing_created_at: Optional[int] = None
    indexed_at: datetime = _EPOCH
    revisited_at: datetime = _EPOCH

    SIZE_HINT = 3 * 8

    def maybe_revisit_ongoing(self) -> Optional[IndexRun]:
        if _elapsed_since(self.revisited_at) > _REVISIT_COOLDOWN:
            if self.revisit_ongoing_created_at is not None:
                return IndexRun.revisit(self.revisit_ongoing_created_at)
        return None

    def maybe_index(self) -> Optional[IndexRun]:
        if _now() - self.indexed_at > _INDEX_COOLDOWN:
            return IndexRun.index(self.latest_created_at)
        return None

    def finish_run(self, run: IndexRun) -> None:
        self.indexed_at = _now()
        if run.kind is IndexRunKind.REVISIT:
            self.revisited_at = self.indexed_at

    @classmethod
    def read(cls, stream: BinaryIO) -> "PlayerStatus":
        latest_created_at = read_uint(stream)
        revisit = read_uint(stream)
        indexed_at = _EPOCH + timedelta(seconds=read_uint(stream))
        revisited_at = _EPOCH + timedelta(seconds=read_uint(stream))
        return cls(
            latest_created_at=latest_created_at,
            revisit_ongoing_created_at=revisit or None,
            indexed_at=indexed_at,
            revisited_at=revisited_at,
        )

    def to_bytes(self) -> bytes:
        return b"".join(
            (
                encode_uint(self.latest_created_at),
                encode_uint(self.revisit_ongoing_created_at or 0),
                encode_uint(_epoch_seconds(self.indexed_at)),
                encode_uint(_epoch_seconds(self.revisited_at)),
            )
        )