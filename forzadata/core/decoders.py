# core/decoders.py
import json
import logging
import math
import struct
from dataclasses import dataclass, field
from typing import Dict, Sequence

from .errors import DecodeError
from .schema import OPAQUE, FieldDescriptor, schema_length

logger = logging.getLogger("forzadata")

# all multi-byte values on the wire are little-endian
STRUCTS = {
    "s32": struct.Struct("<i"),
    "u32": struct.Struct("<I"),
    "f32": struct.Struct("<f"),
    "u16": struct.Struct("<H"),
    "u8":  struct.Struct("<B"),
    "s8":  struct.Struct("<b"),
}

# snapshot / mapping order
VALUE_TYPES = ("s32", "u32", "f32", "u16", "u8", "s8")

RPM_FIELD = "CurrentEngineRpm"

_F32 = STRUCTS["f32"]


def short_float(v: float) -> float:
    """
    Shortest decimal that packs back to the same float32 bits, so 0.1f
    prints as 0.1 instead of 0.10000000149011612. Non-finite values pass through.
    """
    if not math.isfinite(v):
        return v
    want = _F32.pack(v)
    for digits in range(1, 10):
        candidate = float(f"{v:.{digits}g}")
        try:
            if _F32.pack(candidate) == want:
                return candidate
        except OverflowError:
            continue
    return v


def _json_f32(v):
    # JSON has no NaN or Infinity
    return short_float(v) if math.isfinite(v) else None


@dataclass
class DecodedFrame:
    s32: Dict[str, int] = field(default_factory=dict)
    u32: Dict[str, int] = field(default_factory=dict)
    f32: Dict[str, float] = field(default_factory=dict)
    u16: Dict[str, int] = field(default_factory=dict)
    u8:  Dict[str, int] = field(default_factory=dict)
    s8:  Dict[str, int] = field(default_factory=dict)

    def mapping(self, dtype: str) -> dict:
        if dtype not in STRUCTS:
            raise KeyError(dtype)
        return getattr(self, dtype)

    def value(self, fd: FieldDescriptor):
        """Value decoded for a descriptor; reserved fields give an empty string."""
        if fd.type == OPAQUE:
            return ""
        return self.mapping(fd.type).get(fd.name, "")

    def text_value(self, fd: FieldDescriptor):
        """Like value(), with float32 fields shortened for text output."""
        v = self.value(fd)
        if fd.type == "f32" and v != "":
            return short_float(v)
        return v

    def is_idle(self) -> bool:
        # the game sends zeroed frames while paused, rewinding or in menus
        return self.f32.get(RPM_FIELD, 0.0) == 0

    def to_snapshot(self) -> str:
        parts = []
        for t in VALUE_TYPES:
            m = self.mapping(t)
            if t == "f32":
                m = {k: _json_f32(v) for k, v in m.items()}
            parts.append(json.dumps(m, sort_keys=True, separators=(",", ":"), allow_nan=False))
        return ", ".join(parts)


def decode(fields: Sequence[FieldDescriptor], packet: bytes) -> DecodedFrame:
    want = schema_length(fields)
    if len(packet) < want:
        raise DecodeError(len(packet), want)

    frame = DecodedFrame()
    debug = logger.isEnabledFor(logging.DEBUG)
    for fd in fields:
        if debug:
            logger.debug("Data chunk %d: %s (%s) (%s)", fd.index, list(packet[fd.start:fd.end]), fd.name, fd.type)
        if fd.type == OPAQUE:
            continue
        (value,) = STRUCTS[fd.type].unpack_from(packet, fd.start)
        frame.mapping(fd.type)[fd.name] = value
    return frame
