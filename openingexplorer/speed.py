"""Time controls of games."""

from enum import Enum


class InvalidSpeed(ValueError):
    """Raised for an unknown speed name."""

    def __init__(self, message: str = "invalid speed") -> None:
        super().__init__(message)


class Speed(Enum):
    """Time control, valued by its wire name."""

    ULTRA_BULLET = "ultraBullet"
    BULLET = "bullet"
    BLITZ = "blitz"
    RAPID = "rapid"
    CLASSICAL = "classical"
    CORRESPONDENCE = "correspondence"

    @classmethod
    def parse(cls, s: str) -> "Speed":
        """Parse a speed from its wire name."""
        try:
            return cls(s)
        except ValueError:
            raise InvalidSpeed() from None

    def __str__(self) -> str:
        return self.value