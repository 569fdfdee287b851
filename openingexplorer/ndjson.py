"""Newline-delimited JSON streams with keep-alive lines."""

import asyncio
import json
from typing import Any, AsyncIterable, AsyncIterator, Optional

NDJSON_HEADERS = {
    "X-Accel-Buffering": "no",
    "Content-Type": "application/x-ndjson",
}

_END = object()


def _encode_line(item: Any) -> bytes:
    obj = item.to_json() if hasattr(item, "to_json") else item
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False).encode("utf-8") + b"\n"


async def _next(iterator: AsyncIterator[Any]) -> Any:
    try:
        return await iterator.__anext__()
    except StopAsyncIteration:
        return _END


async def ndjson_stream(
    stream: AsyncIterable[Any], keep_alive: Optional[float] = 8.0
) -> AsyncIterator[bytes]:
    """Encode each item as one JSON line.

    Whenever the stream stays silent for keep_alive seconds, an empty line
    is sent so that the connection is not dropped.
    """
    iterator = stream.__aiter__()
    pending: Optional["asyncio.Future[Any]"] = None
    try:
        while True:
            if pending is None:
                pending = asyncio.ensure_future(_next(iterator))
            done, _ = await asyncio.wait({pending}, timeout=keep_alive)
            if not done:
                yield b"\n"
                continue
            item = pending.result()
            pending = None
            if item is _END:
                return
            yield _encode_line(item)
    finally:
        if pending is not None:
            pending.cancel()