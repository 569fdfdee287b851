"""Persistent storage of explorer entries, games and player status."""

import io
import json
import logging
from itertools import chain
from os import PathLike
from typing import Callable, Iterable, Iterator, List, Optional, Tuple, Union

import lmdb

from openingexplorer.date import Month, Year
from openingexplorer.game_id import GameId
from openingexplorer.key import KeyPrefix
from openingexplorer.lichess import LichessEntry
from openingexplorer.lichess_game import LichessGame
from openingexplorer.masters import MastersEntry, MastersGame
from openingexplorer.player import PlayerEntry, PlayerStatus
from openingexplorer.user import UserId

log = logging.getLogger(__name__)

DEFAULT_MAP_SIZE = 16 * 1024 * 1024 * 1024

_COLUMNS = (
    "masters",
    "masters_game",
    "lichess",
    "lichess_game",
    "player",
    "player_status",
)

MergeFn = Callable[[Optional[bytes], Iterable[bytes]], Optional[bytes]]


def _values(existing: Optional[bytes], operands: Iterable[bytes]) -> Iterator[bytes]:
    return chain(() if existing is None else (existing,), operands)


def merge_lichess_values(existing: Optional[bytes], operands: Iterable[bytes]) -> bytes:
    """Combine serialized lichess entries into one."""
    entry = LichessEntry()
    for value in _values(existing, operands):
        entry.extend_from_bytes(value)
    return entry.to_bytes()


def merge_lichess_game_values(
    existing: Optional[bytes], operands: Iterable[bytes]
) -> Optional[bytes]:
    """Keep the latest game information, but accumulate which indexes hold it."""
    info: Optional[LichessGame] = None
    for value in _values(existing, operands):
        new_info = LichessGame.read(io.BytesIO(value))
        if info is not None:
            new_info.indexed_player.white |= info.indexed_player.white
            new_info.indexed_player.black |= info.indexed_player.black
            new_info.indexed_lichess |= info.indexed_lichess
        info = new_info
    return None if info is None else info.to_bytes()


def merge_player_values(existing: Optional[bytes], operands: Iterable[bytes]) -> bytes:
    """Combine serialized player entries into one."""
    entry = PlayerEntry()
    for value in _values(existing, operands):
        entry.extend_from_bytes(value)
    return entry.to_bytes()


def merge_masters_values(existing: Optional[bytes], operands: Iterable[bytes]) -> bytes:
    """Combine serialized masters entries into one."""
    entry = MastersEntry()
    for value in _values(existing, operands):
        entry.extend_from_bytes(value)
    return entry.to_bytes()


def _scan(txn: "lmdb.Transaction", db: object, lower: bytes, upper: bytes) -> List[bytes]:
    """Values of keys in [lower, upper)."""
    cursor = txn.cursor(db=db)
    if not cursor.set_range(lower):
        return []
    found = []
    for key, value in cursor.iternext():
        if key >= upper:
            break
        found.append(value)
    return found


_Op = Tuple[object, bytes, bytes, Optional[MergeFn]]


def _apply(env: "lmdb.Environment", ops: List[_Op]) -> None:
    """Write all operations atomically, resolving merges against stored values."""
    with env.begin(write=True) as txn:
        for db, key, value, merge in ops:
            if merge is None:
                txn.put(key, value, db=db)
                continue
            merged = merge(txn.get(key, db=db), [value])
            if merged is None:
                txn.delete(key, db=db)
            else:
                txn.put(key, merged, db=db)


class Database:
    """The explorer's store, holding one table per kind of record."""

    def __init__(self, path: Union[str, "PathLike[str]"], map_size: int = DEFAULT_MAP_SIZE) -> None:
        self._env = lmdb.open(str(path), map_size=map_size, max_dbs=len(_COLUMNS))
        self._dbs = {name: self._env.open_db(name.encode("ascii")) for name in _COLUMNS}
        log.info("database opened")

    def close(self) -> None:
        self._env.close()

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def masters(self) -> "MastersDatabase":
        return MastersDatabase(self._env, self._dbs["masters"], self._dbs["masters_game"])

    def lichess(self) -> "LichessDatabase":
        return LichessDatabase(
            self._env,
            self._dbs["lichess"],
            self._dbs["lichess_game"],
            self._dbs["player"],
            self._dbs["player_status"],
        )


def _decode_masters_game(value: bytes) -> MastersGame:
    return MastersGame.from_json(json.loads(value))


class MastersDatabase:
    """Entries and games of the masters database."""

    def __init__(self, env: "lmdb.Environment", cf_masters: object, cf_masters_game: object) -> None:
        self._env = env
        self._cf_masters = cf_masters
        self._cf_masters_game = cf_masters_game

    def has_game(self, game_id: GameId) -> bool:
        with self._env.begin() as txn:
            return txn.get(game_id.to_bytes(), db=self._cf_masters_game) is not None

    def game(self, game_id: GameId) -> Optional[MastersGame]:
        with self._env.begin() as txn:
            value = txn.get(game_id.to_bytes(), db=self._cf_masters_game)
        return None if value is None else _decode_masters_game(value)

    def games(self, ids: Iterable[GameId]) -> List[Optional[MastersGame]]:
        with self._env.begin() as txn:
            values = [txn.get(i.to_bytes(), db=self._cf_masters_game) for i in ids]
        return [None if v is None else _decode_masters_game(v) for v in values]

    def has(self, key: bytes) -> bool:
        with self._env.begin() as txn:
            return txn.get(key, db=self._cf_masters) is not None

    def read(self, prefix: KeyPrefix, since: Year, until: Year) -> MastersEntry:
        """Merge the entries of a position over the years since..until."""
        entry = MastersEntry()
        lower = prefix.with_year(since)
        upper = prefix.with_year(until.add_years_saturating(1))
        with self._env.begin() as txn:
            values = _scan(txn, self._cf_masters, lower, upper)
        for value in values:
            entry.extend_from_bytes(value)
        return entry

    def batch(self) -> "MastersBatch":
        return MastersBatch(self)


class MastersBatch:
    """Writes to the masters database, committed together."""

    def __init__(self, db: MastersDatabase) -> None:
        self._db = db
        self._ops: List[_Op] = []

    def merge(self, key: bytes, entry: MastersEntry) -> None:
        self._ops.append((self._db._cf_masters, key, entry.to_bytes(), merge_masters_values))

    def put_game(self, game_id: GameId, game: MastersGame) -> None:
        value = json.dumps(game.to_json(), separators=(",", ":")).encode("utf-8")
        self._ops.append((self._db._cf_masters_game, game_id.to_bytes(), value, None))

    def commit(self) -> None:
        ops, self._ops = self._ops, []
        _apply(self._db._env, ops)


def _decode_lichess_game(value: bytes) -> LichessGame:
    return LichessGame.read(io.BytesIO(value))


class LichessDatabase:
    """Entries, games and player data from the game server."""

    def __init__(
        self,
        env: "lmdb.Environment",
        cf_lichess: object,
        cf_lichess_game: object,
        cf_player: object,
        cf_player_status: object,
    ) -> None:
        self._env = env
        self._cf_lichess = cf_lichess
        self._cf_lichess_game = cf_lichess_game
        self._cf_player = cf_player
        self._cf_player_status = cf_player_status

    def game(self, game_id: GameId) -> Optional[LichessGame]:
        with self._env.begin() as txn:
            value = txn.get(game_id.to_bytes(), db=self._cf_lichess_game)
        return None if value is None else _decode_lichess_game(value)

    def games(self, ids: Iterable[GameId]) -> List[Optional[LichessGame]]:
        with self._env.begin() as txn:
            values = [txn.get(i.to_bytes(), db=self._cf_lichess_game) for i in ids]
        return [None if v is None else _decode_lichess_game(v) for v in values]

    def _read_months(self, db: object, prefix: KeyPrefix, since: Month, until: Month) -> List[bytes]:
        lower = prefix.with_month(since)
        upper = prefix.with_month(until.add_months_saturating(1))
        with self._env.begin() as txn:
            return _scan(txn, db, lower, upper)

    def read_lichess(self, prefix: KeyPrefix, since: Month, until: Month) -> LichessEntry:
        """Merge the entries of a position over the months since..until."""
        entry = LichessEntry()
        for value in self._read_months(self._cf_lichess, prefix, since, until):
            entry.extend_from_bytes(value)
        return entry

    def read_player(self, prefix: KeyPrefix, since: Month, until: Month) -> PlayerEntry:
        """Merge a player's entries of a position over the months since..until."""
        entry = PlayerEntry()
        for value in self._read_months(self._cf_player, prefix, since, until):
            entry.extend_from_bytes(value)
        return entry

    def player_status(self, user_id: UserId) -> Optional[PlayerStatus]:
        with self._env.begin() as txn:
            value = txn.get(user_id.as_lowercase_str().encode("utf-8"), db=self._cf_player_status)
        return None if value is None else PlayerStatus.read(io.BytesIO(value))

    def put_player_status(self, user_id: UserId, status: PlayerStatus) -> None:
        with self._env.begin(write=True) as txn:
            txn.put(
                user_id.as_lowercase_str().encode("utf-8"),
                status.to_bytes(),
                db=self._cf_player_status,
            )

    def batch(self) -> "LichessBatch":
        return LichessBatch(self)


class LichessBatch:
    """Writes to the lichess and player tables, committed together."""

    def __init__(self, db: LichessDatabase) -> None:
        self._db = db
        self._ops: List[_Op] = []

    def merge_lichess(self, key: bytes, entry: LichessEntry) -> None:
        self._ops.append((self._db._cf_lichess, key, entry.to_bytes(), merge_lichess_values))

    def merge_game(self, game_id: GameId, game: LichessGame) -> None:
        self._ops.append(
            (self._db._cf_lichess_game, game_id.to_bytes(), game.to_bytes(), merge_lichess_game_values)
        )

    def merge_player(self, key: bytes, entry: PlayerEntry) -> None:
        self._ops.append((self._db._cf_player, key, entry.to_bytes(), merge_player_values))

    def commit(self) -> None:
        ops, self._ops = self._ops, []
        _apply(self._db._env, ops)