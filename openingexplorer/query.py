"""Filters and limits taken from explorer query parameters."""

import re
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional, Tuple, TypeVar

from openingexplorer.date import Month
from openingexplorer.errors import BadRequest
from openingexplorer.mode import Mode
from openingexplorer.rating import RatingGroup
from openingexplorer.speed import Speed

T = TypeVar("T")

USIZE_MAX = (1 << 64) - 1

_UNSIGNED = re.compile(r"\+?[0-9]+")


def _parse_usize(name: str, s: str) -> int:
    if not _UNSIGNED.fullmatch(s) or int(s) > USIZE_MAX:
        raise BadRequest(f"invalid {name}: {s!r}")
    return int(s)


def _parse_list(name: str, s: str, parse: Callable[[str], T]) -> Tuple[T, ...]:
    if s == "":
        return ()
    try:
        return tuple(parse(part) for part in s.split(","))
    except ValueError:
        raise BadRequest(f"invalid {name}: {s!r}") from None


def _parse_month(name: str, s: str) -> Month:
    try:
        return Month.parse(s)
    except ValueError:
        raise BadRequest(f"invalid {name}: {s!r}") from None


@dataclass(frozen=True)
class Limits:
    """How many games and moves a response may hold."""

    top_games: int = USIZE_MAX
    recent_games: int = USIZE_MAX
    moves: Optional[int] = None

    def wants_games(self) -> bool:
        return self.top_games > 0 or self.recent_games > 0

    @classmethod
    def from_query(cls, params: Mapping[str, str]) -> "Limits":
        kwargs = {}
        if "topGames" in params:
            kwargs["top_games"] = _parse_usize("topGames", params["topGames"])
        if "recentGames" in params:
            kwargs["recent_games"] = _parse_usize("recentGames", params["recentGames"])
        if "moves" in params:
            kwargs["moves"] = _parse_usize("moves", params["moves"])
        return cls(**kwargs)


@dataclass(frozen=True)
class LichessQueryFilter:
    """Speeds, rating brackets and months to include."""

    speeds: Optional[Tuple[Speed, ...]] = None
    ratings: Optional[Tuple[RatingGroup, ...]] = None
    since: Month = field(default_factory=Month)
    until: Month = field(default_factory=Month.max_value)

    def contains_speed(self, speed: Speed) -> bool:
        return self.speeds is None or speed in self.speeds

    def contains_rating_group(self, rating_group: RatingGroup) -> bool:
        if self.ratings is None:
            return True
        clamped = max(RatingGroup.GROUP_1600, min(rating_group, RatingGroup.GROUP_2500))
        return clamped in self.ratings

    def top_group(self) -> Optional[RatingGroup]:
        """The lowest bracket of a contiguous top range, if it reaches 2000."""
        top = None
        for group in reversed(RatingGroup):
            if not self.contains_rating_group(group) or group < RatingGroup.GROUP_2000:
                break
            top = group
        return top

    @classmethod
    def from_query(cls, params: Mapping[str, str]) -> "LichessQueryFilter":
        kwargs = {}
        if "speeds" in params:
            kwargs["speeds"] = _parse_list("speeds", params["speeds"], Speed.parse)
        if "ratings" in params:
            kwargs["ratings"] = _parse_list("ratings", params["ratings"], RatingGroup.parse)
        if "since" in params:
            kwargs["since"] = _parse_month("since", params["since"])
        if "until" in params:
            kwargs["until"] = _parse_month("until", params["until"])
        return cls(**kwargs)


@dataclass(frozen=True)
class PlayerQueryFilter:
    """Modes, speeds and months to include for a player."""

    modes: Optional[Tuple[Mode, ...]] = None
    speeds: Optional[Tuple[Speed, ...]] = None
    since: Month = field(default_factory=Month)
    until: Month = field(default_factory=Month.max_value)

    def contains_speed(self, speed: Speed) -> bool:
        return self.speeds is None or speed in self.speeds

    def contains_mode(self, mode: Mode) -> bool:
        return self.modes is None or mode in self.modes

    @classmethod
    def from_query(cls, params: Mapping[str, str]) -> "PlayerQueryFilter":
        kwargs = {}
        if "modes" in params:
            kwargs["modes"] = _parse_list("modes", params["modes"], Mode.parse)
        if "speeds" in params:
            kwargs["speeds"] = _parse_list("speeds", params["speeds"], Speed.parse)
        if "since" in params:
            kwargs["since"] = _parse_month("since", params["since"])
        if "until" in params:
            kwargs["until"] = _parse_month("until", params["until"])
        return cls(**kwargs)