"""User names and case-insensitive user ids."""

import re
from typing import Union

_VALID_NAME = re.compile(r"[A-Za-z0-9_-]{1,30}")


class InvalidUserName(ValueError):
    """Raised for a malformed user name."""

    def __init__(self, message: str = "invalid username") -> None:
        super().__init__(message)


class UserName:
    """A user name as displayed, compared without regard to ASCII case."""

    __slots__ = ("_name",)

    def __init__(self, name: str) -> None:
        if not _VALID_NAME.fullmatch(name):
            raise InvalidUserName()
        self._name = name

    @classmethod
    def from_bytes(cls, data: bytes) -> "UserName":
        try:
            name = data.decode("ascii")
        except UnicodeDecodeError:
            raise InvalidUserName() from None
        return cls(name)

    @classmethod
    def parse(cls, s: str) -> "UserName":
        return cls.from_bytes(s.encode("utf-8"))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, UserName):
            return self._name.lower() == other._name.lower()
        if isinstance(other, UserId):
            return self._name.lower() == other.as_lowercase_str()
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._name.lower())

    def __str__(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"UserName({self._name!r})"


class UserId:
    """The lowercase identity of a user."""

    __slots__ = ("_id",)

    def __init__(self, lowercase: str) -> None:
        self._id = lowercase

    @classmethod
    def from_name(cls, name: Union[UserName, str]) -> "UserId":
        if not isinstance(name, UserName):
            name = UserName.parse(name)
        return cls(str(name).lower())

    def as_lowercase_str(self) -> str:
        return self._id

    def __eq__(self, other: object) -> bool:
        if isinstance(other, UserId):
            return self._id == other._id
        if isinstance(other, UserName):
            return other == self
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._id)

    def __str__(self) -> str:
        return self._id

    def __repr__(self) -> str:
        return f"UserId({self._id!r})"