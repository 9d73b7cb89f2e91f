"""Bounds-checked little-endian field readers.

Payload decoders read every field through these helpers rather than
overlaying a record layout on the raw bytes. Each reader checks that the
whole field lies inside the payload before touching it, so a short payload
produces a ``FieldTruncatedError`` instead of reading garbage or raising an
unrelated ``struct.error``.
"""

import struct

_U8 = struct.Struct("<B")
_U16 = struct.Struct("<H")
_I16 = struct.Struct("<h")
_U32 = struct.Struct("<I")
_I32 = struct.Struct("<i")


class FieldTruncatedError(ValueError):
    """Raised when a field would extend past the end of the payload."""


def _read(layout: struct.Struct, data: bytes, offset: int) -> int:
    """Unpack one integer of *layout* at *offset* after checking bounds.

    Raises:
        FieldTruncatedError: If ``offset`` is negative or the field does not
            fit in ``data``.
    """
    end = offset + layout.size
    if offset < 0 or end > len(data):
        raise FieldTruncatedError(
            f"field at offset {offset} needs {layout.size} bytes, "
            f"payload has {len(data)}"
        )
    value: int = layout.unpack_from(data, offset)[0]
    return value


def read_u8(data: bytes, offset: int) -> int:
    return _read(_U8, data, offset)


def read_u16(data: bytes, offset: int) -> int:
    return _read(_U16, data, offset)


def read_i16(data: bytes, offset: int) -> int:
    return _read(_I16, data, offset)


def read_u32(data: bytes, offset: int) -> int:
    return _read(_U32, data, offset)


def read_i32(data: bytes, offset: int) -> int:
    return _read(_I32, data, offset)
