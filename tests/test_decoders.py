import json
import math
import struct

import pytest

from forzadata.core.decoders import DecodedFrame, decode, short_float
from forzadata.core.errors import DecodeError
from forzadata.core.schema import bundled_schema, load_schema, parse_schema


def test_gear_power_scenario():
    fields = parse_schema(["u8 Gear", "f32 Power"])
    frame = decode(fields, bytes([3, 0x00, 0x00, 0x48, 0x43]))
    assert frame.u8 == {"Gear": 3}
    assert frame.f32 == {"Power": 200.0}
    assert frame.s32 == frame.u32 == frame.u16 == frame.s8 == {}


def test_known_values_decode(small_schema, pack):
    fields = parse_schema(small_schema)
    values = {
        "IsRaceOn": -2, "CurrentEngineRpm": 7500.25, "Speed": -1.5,
        "Power": 200.0, "LapNumber": 65535, "Gear": 255, "Steer": -127,
    }
    frame = decode(fields, pack(fields, values))
    assert frame.s32 == {"IsRaceOn": -2}
    assert frame.f32 == {"CurrentEngineRpm": 7500.25, "Speed": -1.5, "Power": 200.0}
    assert frame.u16 == {"LapNumber": 65535}
    assert frame.u8 == {"Gear": 255}
    assert frame.s8 == {"Steer": -127}


def test_signed_vs_unsigned_same_bytes():
    fields = parse_schema(["s32 A", "u32 B", "s8 C", "u8 D"])
    packet = b"\xff\xff\xff\xff" * 2 + b"\xff\xff"
    frame = decode(fields, packet)
    assert frame.s32["A"] == -1
    assert frame.u32["B"] == 0xFFFFFFFF
    assert frame.s8["C"] == -1
    assert frame.u8["D"] == 255


def test_float_is_bit_exact():
    fields = parse_schema(["f32 X"])
    raw = struct.pack("<f", 0.1)
    v = decode(fields, raw).f32["X"]
    assert struct.pack("<f", v) == raw


def test_little_endian_u16():
    frame = decode(parse_schema(["u16 Lap"]), b"\x01\x02")
    assert frame.u16["Lap"] == 0x0201


def test_opaque_produces_nothing(pack):
    fields = parse_schema(["hzn Pad", "u8 Gear"])
    frame = decode(fields, pack(fields, {"Gear": 4}))
    assert frame.u8 == {"Gear": 4}
    for t in ("s32", "u32", "f32", "u16", "s8"):
        assert "Pad" not in frame.mapping(t)
    assert frame.value(fields[0]) == ""


def test_same_name_different_types_coexist(pack):
    fields = parse_schema(["u8 X", "f32 X"])
    frame = decode(fields, pack(fields, {("u8", "X"): 9, ("f32", "X"): 2.5}))
    assert frame.u8 == {"X": 9}
    assert frame.f32 == {"X": 2.5}


def test_same_name_same_type_last_wins():
    fields = parse_schema(["u8 X", "u8 X"])
    frame = decode(fields, bytes([1, 2]))
    assert frame.u8 == {"X": 2}


def test_deterministic(small_schema, pack):
    fields = parse_schema(small_schema)
    packet = pack(fields, {"CurrentEngineRpm": 3000.0, "Gear": 2})
    assert decode(fields, packet) == decode(fields, packet)


def test_short_packet_raises():
    fields = parse_schema(["u8 Gear", "f32 Power"])
    with pytest.raises(DecodeError) as e:
        decode(fields, b"\x03\x00")
    assert e.value.got == 2 and e.value.want == 5


def test_longer_packet_ok():
    # FH4 datagrams are one byte longer than the decoded layout
    fields = load_schema(bundled_schema("fh4"))
    frame = decode(fields, bytes(324))
    assert frame.f32["CurrentEngineRpm"] == 0.0
    assert frame.u8["Gear"] == 0


def test_is_idle():
    assert DecodedFrame().is_idle()
    assert DecodedFrame(f32={"CurrentEngineRpm": 0.0}).is_idle()
    assert DecodedFrame(f32={"CurrentEngineRpm": -0.0}).is_idle()
    assert not DecodedFrame(f32={"CurrentEngineRpm": 850.0}).is_idle()


def test_snapshot_string():
    fields = parse_schema(["u8 Gear", "f32 Power"])
    frame = decode(fields, bytes([3, 0x00, 0x00, 0x48, 0x43]))
    assert frame.to_snapshot() == '{}, {}, {"Power":200.0}, {}, {"Gear":3}, {}'


def test_snapshot_keys_sorted():
    frame = DecodedFrame(u8={"b": 1, "a": 2})
    assert frame.to_snapshot().split(", ")[4] == '{"a":2,"b":1}'


def test_short_float():
    assert short_float(struct.unpack("<f", struct.pack("<f", 0.1))[0]) == 0.1
    assert short_float(struct.unpack("<f", struct.pack("<f", 850.3))[0]) == 850.3
    assert short_float(200.0) == 200.0
    assert short_float(-0.0) == 0.0
    assert math.isnan(short_float(float("nan")))


def test_short_float_keeps_float32_bits():
    for raw in (b"\x01\x00\x00\x00", b"\xff\xff\x7f\x7f", b"\xdb\x0f\x49\x40"):
        (v,) = struct.unpack("<f", raw)
        assert struct.pack("<f", short_float(v)) == raw


def test_snapshot_prints_short_float32():
    fields = parse_schema(["f32 CurrentEngineRpm", "f32 Speed"])
    frame = decode(fields, struct.pack("<ff", 850.3, 0.1))
    assert frame.f32["Speed"] != 0.1   # decoded value stays the exact float32
    assert frame.to_snapshot() == '{}, {}, {"CurrentEngineRpm":850.3,"Speed":0.1}, {}, {}, {}'


def test_snapshot_non_finite_is_null():
    fields = parse_schema(["f32 CurrentEngineRpm", "f32 Speed", "f32 Boost"])
    frame = decode(fields, struct.pack("<fff", 900.0, float("nan"), float("-inf")))
    snap = frame.to_snapshot()
    assert snap.split(", ")[2] == '{"Boost":null,"CurrentEngineRpm":900.0,"Speed":null}'
    for part in snap.split(", "):
        json.loads(part)
