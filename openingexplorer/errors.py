"""Errors reported to clients of the explorer."""

from openingexplorer.game_id import GameId


class ExplorerError(Exception):
    """An error that is answered with a bad request status."""

    def status_code(self) -> int:
        return 400


class BadRequest(ExplorerError):
    """An illegal position, move or notation in a request."""

    def __init__(self, reason: object) -> None:
        self.reason = reason
        super().__init__(f"bad request: {reason}")


class DuplicateGame(ExplorerError):
    """A game that was already imported."""

    def __init__(self, game_id: GameId) -> None:
        self.game_id = game_id
        super().__init__(f"duplicate game {game_id}")


class RejectedImport(ExplorerError):
    """A game that does not qualify for import."""

    def __init__(self, game_id: GameId) -> None:
        self.game_id = game_id
        super().__init__(f"rejected import of {game_id}")