"""Small helpers shared across the package."""

from dataclasses import dataclass
from typing import (
    Any,
    AsyncIterable,
    AsyncIterator,
    Callable,
    Generic,
    Iterator,
    List,
    TypeVar,
)

from openingexplorer.stats import Color

T = TypeVar("T")
U = TypeVar("U")


@dataclass
class ByColor(Generic[T]):
    """A pair of values, one for each side."""

    white: T
    black: T

    def get(self, color: Color) -> T:
        return self.white if color is Color.WHITE else self.black

    def map(self, func: Callable[[T], U]) -> "ByColor[U]":
        return ByColor(white=func(self.white), black=func(self.black))

    def __iter__(self) -> Iterator[T]:
        yield self.white
        yield self.black


def sort_by_key_and_truncate(items: List[T], num: int, key: Callable[[T], Any]) -> None:
    """Sort the list in place by key and keep only its first num items."""
    items.sort(key=key)
    del items[max(num, 0):]


_NOTHING = object()


async def dedup_by_key(stream: AsyncIterable[T], key: Callable[[T], Any]) -> AsyncIterator[T]:
    """Yield items whose key differs from the key of the item before."""
    latest: Any = _NOTHING
    async for item in stream:
        current = key(item)
        if latest is _NOTHING or current != latest:
            latest = current
            yield item