import pytest

from forzadata.core.decoders import STRUCTS
from forzadata.core.schema import OPAQUE, schema_length


def _pack(fields, values=None, extra=0):
    """Build a datagram for `fields`; values keyed by name or (type, name), missing ones are 0."""
    values = values or {}
    buf = bytearray(schema_length(fields) + extra)
    for fd in fields:
        if fd.type == OPAQUE:
            buf[fd.start:fd.end] = b"\xaa" * fd.width
            continue
        v = values.get((fd.type, fd.name), values.get(fd.name, 0))
        STRUCTS[fd.type].pack_into(buf, fd.start, v)
    return bytes(buf)


@pytest.fixture
def pack():
    return _pack


@pytest.fixture
def small_schema():
    return [
        "s32 IsRaceOn",
        "f32 CurrentEngineRpm ; revs",
        "hzn HorizonPlaceholder",
        "f32 Speed",
        "f32 Power",
        "u16 LapNumber",
        "u8 Gear",
        "s8 Steer",
    ]
