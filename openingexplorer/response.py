"""Game rows as they appear in explorer responses."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from openingexplorer.date import Month, Year
from openingexplorer.game_id import GameId
from openingexplorer.lichess_game import GamePlayer, LichessGame
from openingexplorer.masters import MastersGame
from openingexplorer.mode import Mode
from openingexplorer.speed import Speed
from openingexplorer.stats import Color
from openingexplorer.uci import Uci
from openingexplorer.util import ByColor


def _player_json(player: GamePlayer) -> Dict[str, Any]:
    return {"name": player.name, "rating": player.rating}


@dataclass
class ExplorerGame:
    """A game referenced from an explorer response."""

    id: GameId
    winner: Optional[Color]
    speed: Optional[Speed]
    mode: Optional[Mode]
    players: ByColor[GamePlayer]
    year: Year
    month: Optional[Month]

    @classmethod
    def from_lichess(cls, game_id: GameId, info: LichessGame) -> "ExplorerGame":
        return cls(
            id=game_id,
            winner=info.outcome.winner,
            speed=info.speed,
            mode=info.mode,
            players=info.players,
            year=info.month.year(),
            month=info.month,
        )

    @classmethod
    def from_masters(cls, game_id: GameId, info: MastersGame) -> "ExplorerGame":
        return cls(
            id=game_id,
            winner=info.winner,
            speed=None,
            mode=None,
            players=info.players,
            year=info.date.year,
            month=info.date.month(),
        )

    def to_json(self) -> Dict[str, Any]:
        """The row as a JSON-ready object; unknown speed and mode are left out."""
        out: Dict[str, Any] = {
            "id": str(self.id),
            "winner": None if self.winner is None else str(self.winner),
        }
        if self.speed is not None:
            out["speed"] = str(self.speed)
        if self.mode is not None:
            out["mode"] = str(self.mode)
        out["black"] = _player_json(self.players.black)
        out["white"] = _player_json(self.players.white)
        out["year"] = self.year.value
        out["month"] = None if self.month is None else str(self.month)
        return out


@dataclass
class ExplorerGameWithUci:
    """A game row together with the move played in it."""

    uci: Uci
    row: ExplorerGame

    def to_json(self) -> Dict[str, Any]:
        return {"uci": str(self.uci), **self.row.to_json()}