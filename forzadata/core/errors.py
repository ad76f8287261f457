# core/errors.py


class ForzaDataError(Exception):
    """Base class for everything this package raises on purpose."""


class SchemaError(ForzaDataError, ValueError):
    """Schema file unreadable or a line that cannot be turned into a field."""


class DecodeError(ForzaDataError, ValueError):
    """Datagram does not carry enough bytes for the loaded schema."""

    def __init__(self, got: int, want: int):
        super().__init__(f"packet is {got} bytes, schema needs {want}")
        self.got = got
        self.want = want
