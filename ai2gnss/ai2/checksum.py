"""AI2 frame checksum.

AI2 frames carry a 16-bit additive checksum: the sum of every byte from the
start marker up to (but excluding) the checksum itself, truncated to 16 bits
and transmitted little-endian just before the terminator.

Example frame (receiver idle command, no escaping needed)::

    10 01 02 01 00 02 16 00 10 03
    ^^^^^^^^^^^^^^^^^ ^^^^^ ^^^^^
    summed bytes      chk   terminator
    0x10+0x01+0x02+0x01+0x00+0x02 = 0x0016
"""

CHECKSUM_SIZE = 2


def sum16(data: bytes) -> int:
    """Return the sum of all bytes in *data* modulo 2**16.

    Example:
        >>> sum16(bytes([0x10, 0x01, 0x02, 0x01, 0x00, 0x02]))
        22
    """
    return sum(data) & 0xFFFF


def split_checksum(buffer: bytes) -> tuple[bytes, int] | None:
    """Separate the summed bytes from the trailing little-endian checksum.

    Args:
        buffer: Un-escaped frame buffer, start marker included.

    Returns:
        A tuple of (summed bytes, provided checksum), or None if the buffer
        is too short to hold a checksum.
    """
    if len(buffer) < CHECKSUM_SIZE:
        return None
    provided = int.from_bytes(buffer[-CHECKSUM_SIZE:], "little")
    return buffer[:-CHECKSUM_SIZE], provided


def validate_checksum(buffer: bytes) -> bool:
    """Return True if the trailing checksum of *buffer* matches its contents."""
    parts = split_checksum(buffer)
    if parts is None:
        return False
    body, provided = parts
    return sum16(body) == provided
