# openingexplorer

The data layer of a chess opening explorer. It keeps per-position move
statistics for three collections (masters games, lichess games and
individual players) in an LMDB environment. Each collection holds compact
binary records that are merged as games are added.

## Installation

```
pip install openingexplorer
```

To run the tests:

```
pip install "openingexplorer[test]"
pytest
```

## Concepts

- **Keys.** `KeyBuilder.masters()`, `KeyBuilder.lichess()` and
  `KeyBuilder.player(user_id, color)` give a base. `with_zobrist(variant, zobrist)`
  turns a base into a `KeyPrefix` for one position. `with_month(month)` or
  `with_year(year)` then gives the full 14-byte key. Keys sort in time order,
  so a date range is a range scan.
- **Entries.** `LichessEntry`, `PlayerEntry` and `MastersEntry` group results
  by move (`RawUci`, a move packed into 16 bits). Within a move, lichess
  entries are grouped by speed and rating group, player entries by speed and
  mode. `to_bytes()` writes an entry and `extend_from_bytes()` merges a
  written entry into an existing one. An entry for a single game takes only a
  few bytes.
- **Preparing a response.** `prepare(...)` applies a `LichessQueryFilter`,
  `PlayerQueryFilter` and `Limits`. It returns a `PreparedResponse` with
  totals, moves sorted by number of games, and top or recent games.
  Filters and limits can be built from query parameters with `from_query`.
- **Storage.** `openingexplorer.db.Database(path)` opens an LMDB environment
  with one table per kind of record; it can be used as a context manager.
  `masters()` and `lichess()` give access to the tables, and `batch()` collects
  writes that `commit()` applies in one transaction, merging each entry with
  what is already stored (`merge_lichess_values`, `merge_player_values`,
  `merge_masters_values`, `merge_lichess_game_values`).

## Example

```python
from openingexplorer.date import Month
from openingexplorer.db import Database
from openingexplorer.game_id import GameId
from openingexplorer.key import KeyBuilder
from openingexplorer.lichess import LichessEntry
from openingexplorer.query import LichessQueryFilter, Limits
from openingexplorer.speed import Speed
from openingexplorer.stats import Outcome
from openingexplorer.uci import Uci
from openingexplorer.variant import Variant

with Database("_db") as db:
    lichess = db.lichess()

    prefix = KeyBuilder.lichess().with_zobrist(Variant.CHESS, 0x1234)
    month = Month.parse("2022-04")

    batch = lichess.batch()
    batch.merge_lichess(
        prefix.with_month(month),
        LichessEntry.new_single(
            Uci.parse("e2e4"), Speed.BLITZ, GameId.parse("aaaaaaaa"),
            Outcome.from_winner(None), 2000, 2200,
        ),
    )
    batch.commit()

    entry = lichess.read_lichess(prefix, Month.parse("2022-01"), Month.max_value())
    response = entry.prepare(LichessQueryFilter.from_query({}), Limits.from_query({}))
    print(response.total.total(), [str(m.uci) for m in response.moves])
```

## Other pieces

- `openingexplorer.lila` parses game records of a player's game export
  (newline-delimited JSON) into `Game` objects with `parse_games(lines)`.
- `openingexplorer.ndjson.ndjson_stream(stream, keep_alive=8.0)` turns an async
  stream of items into newline-delimited JSON chunks (items with a `to_json()`
  method are converted first). It yields a bare newline whenever the stream
  stays idle for `keep_alive` seconds.
- `openingexplorer.masters.MastersGame` and `MastersGameWithId` read games from
  decoded JSON with `from_json`; `MastersGame.to_json()` writes them back.
- `openingexplorer.response.ExplorerGame` and `ExplorerGameWithUci` turn stored
  games into JSON-ready response rows.
- `PlayerStatus` records how far a player's games have been indexed and
  decides, through `maybe_index()` and `maybe_revisit_ongoing()`, whether an
  `IndexRun` is due.
- Errors for bad requests derive from `openingexplorer.errors.ExplorerError`
  (`BadRequest`, `DuplicateGame`, `RejectedImport`); `status_code()` returns 400.

## What it does not do

- It knows no chess rules: it does not compute Zobrist hashes of positions,
  check move legality, convert SAN moves or render PGN. Callers pass hashes
  and moves in UCI notation.
- It has no HTTP server, no command-line program, no game importer and no
  background indexer that downloads games; it offers the pieces these would
  be built from.
- It does not classify positions by opening name.
- Database compaction and monitoring of table properties are not offered.