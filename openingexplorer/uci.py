"""Moves in UCI notation and their compact two-byte encoding."""

from dataclasses import dataclass
from enum import IntEnum
from typing import BinaryIO, Optional

_FILES = "abcdefgh"
_RANKS = "12345678"


class Role(IntEnum):
    """Piece kinds, numbered as in the move encoding."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    @property
    def char(self) -> str:
        return "pnbrqk"[self - 1]

    @classmethod
    def from_char(cls, ch: str) -> Optional["Role"]:
        index = "pnbrqk".find(ch)
        return cls(index + 1) if len(ch) == 1 and index >= 0 else None


def _square_name(square: int) -> str:
    return _FILES[square & 7] + _RANKS[square >> 3]


def _parse_square(s: str) -> int:
    if len(s) != 2 or s[0] not in _FILES or s[1] not in _RANKS:
        raise ValueError(f"invalid square: {s!r}")
    return _FILES.index(s[0]) + 8 * _RANKS.index(s[1])


def _check_square(square: int) -> int:
    if not 0 <= square < 64:
        raise ValueError(f"invalid square index: {square}")
    return square


@dataclass(frozen=True)
class Uci:
    """A normal move, a drop (put) or a null move.

    A normal move has both squares set and an optional promotion role;
    a drop has only the target square and a role; a null move has neither.
    """

    from_square: Optional[int] = None
    to_square: Optional[int] = None
    role: Optional[Role] = None

    @classmethod
    def normal(cls, from_square: int, to_square: int, promotion: Optional[Role] = None) -> "Uci":
        return cls(_check_square(from_square), _check_square(to_square), promotion)

    @classmethod
    def put(cls, role: Role, to_square: int) -> "Uci":
        return cls(None, _check_square(to_square), role)

    @classmethod
    def null(cls) -> "Uci":
        return cls()

    @property
    def is_null(self) -> bool:
        return self.to_square is None

    @property
    def is_put(self) -> bool:
        return self.from_square is None and self.to_square is not None

    @property
    def promotion(self) -> Optional[Role]:
        return self.role if self.from_square is not None else None

    @classmethod
    def parse(cls, s: str) -> "Uci":
        try:
            if s == "0000":
                return cls.null()
            if len(s) == 4 and s[1] == "@":
                role = Role.from_char(s[0].lower()) if s[0].isupper() else None
                if role is None:
                    raise ValueError(s)
                return cls.put(role, _parse_square(s[2:]))
            if len(s) in (4, 5):
                promotion = None
                if len(s) == 5:
                    promotion = Role.from_char(s[4])
                    if promotion is None:
                        raise ValueError(s)
                return cls.normal(_parse_square(s[:2]), _parse_square(s[2:4]), promotion)
        except ValueError:
            pass
        raise ValueError(f"invalid uci: {s!r}")

    def __str__(self) -> str:
        if self.is_null:
            return "0000"
        if self.is_put:
            return f"{self.role.char.upper()}@{_square_name(self.to_square)}"
        suffix = self.role.char if self.role is not None else ""
        return _square_name(self.from_square) + _square_name(self.to_square) + suffix


@dataclass(frozen=True)
class RawUci:
    """A move packed into 16 bits: from, to and role."""

    value: int

    @classmethod
    def from_uci(cls, uci: Uci) -> "RawUci":
        if uci.is_null:
            from_square, to_square, role = 0, 0, None
        elif uci.is_put:
            from_square, to_square, role = uci.to_square, uci.to_square, uci.role
        else:
            from_square, to_square, role = uci.from_square, uci.to_square, uci.role
        return cls(from_square | (to_square << 6) | ((int(role) if role else 0) << 12))

    def to_uci(self) -> Uci:
        from_square = self.value & 63
        to_square = (self.value >> 6) & 63
        role_number = self.value >> 12
        role = Role(role_number) if 1 <= role_number <= 6 else None
        if from_square == to_square:
            return Uci.put(role, to_square) if role is not None else Uci.null()
        return Uci.normal(from_square, to_square, role)

    @classmethod
    def read(cls, stream: BinaryIO) -> "RawUci":
        data = stream.read(2)
        if len(data) != 2:
            raise EOFError("unexpected end of data while reading move")
        return cls(int.from_bytes(data, "little"))

    def to_bytes(self) -> bytes:
        return self.value.to_bytes(2, "little")