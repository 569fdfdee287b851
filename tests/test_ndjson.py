import asyncio
import json

import pytest

from openingexplorer.ndjson import NDJSON_HEADERS, ndjson_stream


async def _items(*items, delay=0.0):
    for item in items:
        if delay:
            await asyncio.sleep(delay)
        yield item


async def _collect(agen):
    return [chunk async for chunk in agen]


class _Row:
    def __init__(self, value):
        self.value = value

    def to_json(self):
        return {"value": self.value}


@pytest.mark.asyncio
async def test_items_become_compact_lines():
    out = await _collect(ndjson_stream(_items({"a": 1}, {"b": [1, 2]})))
    assert out == [b'{"a":1}\n', b'{"b":[1,2]}\n']
    assert NDJSON_HEADERS["Content-Type"] == "application/x-ndjson"
    assert NDJSON_HEADERS["X-Accel-Buffering"] == "no"


@pytest.mark.asyncio
async def test_lines_roundtrip_through_json():
    items = [{"x": "é"}, [1, None, True], "text"]
    out = await _collect(ndjson_stream(_items(*items)))
    assert all(chunk.endswith(b"\n") and chunk.count(b"\n") == 1 for chunk in out)
    assert [json.loads(chunk) for chunk in out] == items


@pytest.mark.asyncio
async def test_objects_with_to_json():
    out = await _collect(ndjson_stream(_items(_Row(3))))
    assert [json.loads(chunk) for chunk in out] == [{"value": 3}]


@pytest.mark.asyncio
async def test_empty_stream():
    assert await _collect(ndjson_stream(_items())) == []


@pytest.mark.asyncio
async def test_keep_alive_on_silence():
    out = await _collect(ndjson_stream(_items({"a": 1}, delay=0.2), keep_alive=0.02))
    assert out[0] == b"\n"
    assert out[-1] == b'{"a":1}\n'
    assert set(out[:-1]) == {b"\n"}


@pytest.mark.asyncio
async def test_no_keep_alive_when_fast():
    out = await _collect(ndjson_stream(_items(1, 2, 3), keep_alive=5.0))
    assert b"\n" not in out
    assert [json.loads(chunk) for chunk in out] == [1, 2, 3]


@pytest.mark.asyncio
async def test_unserializable_item_raises():
    with pytest.raises(TypeError):
        await _collect(ndjson_stream(_items(object())))