"""Rated or casual games."""

from enum import Enum


class InvalidMode(ValueError):
    """Raised for an unknown mode name."""

    def __init__(self, message: str = "invalid mode") -> None:
        super().__init__(message)


class Mode(Enum):
    """Whether a game was rated, valued by its wire name."""

    RATED = "rated"
    CASUAL = "casual"

    @classmethod
    def from_rated(cls, rated: bool) -> "Mode":
        return cls.RATED if rated else cls.CASUAL

    def is_rated(self) -> bool:
        return self is Mode.RATED

    @classmethod
    def parse(cls, s: str) -> "Mode":
        """Parse a mode from its wire name."""
        try:
            return cls(s)
        except ValueError:
            raise InvalidMode() from None

    def __str__(self) -> str:
        return self.value