import pytest

from openingexplorer.errors import BadRequest, DuplicateGame, ExplorerError, RejectedImport
from openingexplorer.game_id import GameId


def test_duplicate_game_message():
    err = DuplicateGame(GameId.parse("aaaaaaaa"))
    assert str(err) == "duplicate game aaaaaaaa"
    assert err.game_id == GameId.parse("aaaaaaaa")


def test_rejected_import_message():
    err = RejectedImport(GameId.parse("bbbbbbbb"))
    assert str(err) == "rejected import of bbbbbbbb"


def test_bad_request_message():
    err = BadRequest(ValueError("illegal uci"))
    assert str(err) == "bad request: illegal uci"


@pytest.mark.parametrize(
    "err",
    [
        BadRequest("x"),
        DuplicateGame(GameId.parse("aaaaaaaa")),
        RejectedImport(GameId.parse("aaaaaaaa")),
    ],
)
def test_status_code_is_bad_request(err):
    assert err.status_code() == 400


def test_errors_are_caught_as_explorer_error():
    with pytest.raises(ExplorerError) as info:
        raise DuplicateGame(GameId.parse("cccccccc"))
    assert str(info.value) == "duplicate game cccccccc"
    assert info.value.game_id == GameId.parse("cccccccc")
    assert info.value.status_code() == 400