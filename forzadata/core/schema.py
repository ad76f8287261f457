# core/schema.py
import logging
import os
from typing import Iterable, NamedTuple, Tuple

from .errors import SchemaError

logger = logging.getLogger("forzadata")

FORMATS_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "formats")

BUNDLED = {
    "fm7": "FM7_packetformat.dat",   # Forza Motorsport 7 "Dash", 311 bytes
    "fh4": "FH4_packetformat.dat",   # Forza Horizon 4, 324 byte datagram
}

# type tag -> byte width
WIDTHS = {
    "s32": 4,
    "u32": 4,
    "f32": 4,
    "u16": 2,
    "u8":  1,
    "s8":  1,
    "hzn": 12,   # Forza Horizon reserved block, never decoded
}

OPAQUE = "hzn"


class FieldDescriptor(NamedTuple):
    index: int
    name: str
    type: str
    start: int
    end: int

    @property
    def width(self) -> int:
        return self.end - self.start


def bundled_schema(key: str) -> str:
    try:
        return os.path.join(FORMATS_DIR, BUNDLED[key.lower()])
    except KeyError:
        raise SchemaError(f"Unknown packet format '{key}' (want one of {', '.join(sorted(BUNDLED))})") from None


def _split_line(line: str):
    # everything after the first ';' is a comment
    body = line.split(";", 1)[0].strip()
    if not body:
        return None
    parts = body.split(None, 1)
    if len(parts) < 2:
        return parts[0], ""
    return parts[0], parts[1].strip()


def parse_schema(lines: Iterable[str], source: str = "<schema>") -> Tuple[FieldDescriptor, ...]:
    """
    Turn schema lines into field descriptors with cumulative byte offsets.

    Each usable line reads ``<type> <name>`` with an optional ``; comment``.
    Blank and comment-only lines are skipped. Any bad line rejects the whole
    schema with SchemaError; nothing partial is returned.
    """
    fields = []
    cursor = 0
    for lineno, line in enumerate(lines, start=1):
        parsed = _split_line(line)
        if parsed is None:
            continue
        dtype, name = parsed
        width = WIDTHS.get(dtype)
        if width is None:
            raise SchemaError(f"Unknown data type '{dtype}' in {source} line {lineno}")
        if not name:
            raise SchemaError(f"Missing field name for '{dtype}' in {source} line {lineno}")

        field = FieldDescriptor(lineno - 1, name, dtype, cursor, cursor + width)
        cursor = field.end
        fields.append(field)
        logger.debug("Processed %s line %d: %s (%s), byte offset %d:%d",
                     source, lineno, name, dtype, field.start, field.end)
    return tuple(fields)


def load_schema(path: str) -> Tuple[FieldDescriptor, ...]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            lines = f.read().splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise SchemaError(f"Error reading format file {path}: {e}") from e
    fields = parse_schema(lines, source=os.path.basename(path))
    if not fields:
        raise SchemaError(f"No fields defined in {path}")
    return fields


def schema_length(fields) -> int:
    return fields[-1].end if fields else 0
