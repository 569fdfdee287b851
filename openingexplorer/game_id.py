"""Eight-character base-62 game identifiers."""

import string
from dataclasses import dataclass
from typing import BinaryIO

_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase
_DIGITS = {c: i for i, c in enumerate(_ALPHABET)}
_LIMIT = 62**8


class InvalidGameId(ValueError):
    """Raised for a malformed game id."""

    def __init__(self, message: str = "invalid game id") -> None:
        super().__init__(message)


@dataclass(frozen=True, order=True)
class GameId:
    """A game id, stored as its numeric value."""

    value: int

    SIZE = 6

    def __post_init__(self) -> None:
        if not 0 <= self.value < _LIMIT:
            raise InvalidGameId()

    @classmethod
    def parse(cls, s: str) -> "GameId":
        if len(s) != 8 or any(c not in _DIGITS for c in s):
            raise InvalidGameId()
        n = 0
        for c in reversed(s):
            n = n * 62 + _DIGITS[c]
        return cls(n)

    def to_bytes(self) -> bytes:
        return self.value.to_bytes(self.SIZE, "little")

    @classmethod
    def read(cls, stream: BinaryIO) -> "GameId":
        data = stream.read(cls.SIZE)
        if len(data) != cls.SIZE:
            raise EOFError("unexpected end of data while reading game id")
        return cls(int.from_bytes(data, "little"))

    def __str__(self) -> str:
        n = self.value
        chars = []
        for _ in range(8):
            n, rem = divmod(n, 62)
            chars.append(_ALPHABET[rem])
        return "".join(chars)