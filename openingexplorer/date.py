"""Years, months and loosely specified dates."""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

MAX_YEAR = 3000  # MAX_YEAR * 12 + 12 fits in 16 bits

_UNSIGNED = re.compile(r"\+?[0-9]+")


class InvalidDate(ValueError):
    """Raised for an invalid year or month."""


def _parse_unsigned(s: str, limit: int) -> Optional[int]:
    if not _UNSIGNED.fullmatch(s):
        return None
    value = int(s)
    return value if value <= limit else None


@dataclass(frozen=True, order=True)
class Year:
    """A calendar year between 0 and MAX_YEAR."""

    value: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.value <= MAX_YEAR:
            raise InvalidDate("invalid year")

    @classmethod
    def max_value(cls) -> "Year":
        return cls(MAX_YEAR)

    @classmethod
    def min_masters(cls) -> "Year":
        return cls(1952)

    @classmethod
    def max_masters(cls) -> "Year":
        return cls(2021)

    def add_years_saturating(self, years: int) -> "Year":
        return Year(min(self.value + years, MAX_YEAR))

    def __int__(self) -> int:
        return self.value


@dataclass(frozen=True, order=True)
class Month:
    """A month, counted as year * 12 + zero-based month."""

    value: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.value <= MAX_YEAR * 12 + 11:
            raise InvalidDate("invalid month")

    @classmethod
    def max_value(cls) -> "Month":
        return cls(MAX_YEAR * 12 + 11)

    @classmethod
    def from_time_saturating(cls, time: datetime) -> "Month":
        year = max(0, min(time.year, MAX_YEAR))
        return cls(year * 12 + time.month - 1)

    def add_months_saturating(self, months: int) -> "Month":
        return Month(min(self.value + months, MAX_YEAR * 12 + 11))

    def year(self) -> Year:
        return Year(self.value // 12)

    @classmethod
    def parse(cls, s: str) -> "Month":
        """Parse "YYYY-MM" or "YYYY/MM"."""
        match = re.search(r"[-/]", s)
        if match is None:
            raise InvalidDate("invalid month")
        year = _parse_unsigned(s[: match.start()], 0xFFFF)
        month_plus_one = _parse_unsigned(s[match.end():], 0xFFFF)
        if year is None or month_plus_one is None:
            raise InvalidDate("invalid month")
        if year <= MAX_YEAR and 1 <= month_plus_one <= 12:
            return cls(year * 12 + month_plus_one - 1)
        raise InvalidDate("invalid month")

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"{self.value // 12:04}-{self.value % 12 + 1:02}"


@dataclass(frozen=True)
class LaxDate:
    """A date of the form YYYY.MM.DD where month and day may be unknown."""

    year: Year
    month_of_year: Optional[int] = None
    day: Optional[int] = None

    @classmethod
    def parse(cls, s: str) -> "LaxDate":
        parts = s.split(".", 2)
        year = _parse_unsigned(parts[0], 0xFFFF)
        if year is None:
            raise InvalidDate("invalid year")
        month = _parse_unsigned(parts[1], 0xFF) if len(parts) > 1 else None
        if month is not None and not 1 <= month <= 12:
            month = None
        day = _parse_unsigned(parts[2], 0xFF) if len(parts) > 2 else None
        return cls(Year(year), month, day)

    def month(self) -> Optional[Month]:
        if self.month_of_year is None:
            return None
        return Month(self.year.value * 12 + self.month_of_year - 1)

    def __str__(self) -> str:
        month = "??" if self.month_of_year is None else f"{self.month_of_year:02}"
        day = "??" if self.day is None else f"{self.day:02}"
        return f"{self.year.value:04}.{month}.{day}"