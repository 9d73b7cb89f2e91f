"""Frame validation and sub-packet splitting.

A buffer from the ``ByteFramer`` has this layout::

    +--------+-------+-----------------------------+----------+
    | marker | class |   sub-packet stream ...     | checksum |
    | 0x10   | 1 B   |                             | 2 B (LE) |
    +--------+-------+-----------------------------+----------+

and the sub-packet stream is a repetition of::

    [type:1][len_lo:1][len_hi:1][payload: len bytes]

The checksum covers the marker, the class and the sub-packet stream. A frame
that fails the checksum is rejected whole; no sub-packet of it is ever
dispatched.
"""

import logging

from ai2gnss.ai2.checksum import split_checksum, sum16
from ai2gnss.ai2.types import ACK_CLASS, Frame, SubPacket

logger = logging.getLogger(__name__)

__all__ = ["MIN_FRAME_SIZE", "parse_frame", "split_subpackets"]

# marker + class + 2-byte checksum
MIN_FRAME_SIZE = 4

_HEADER_SIZE = 2
_SUBPACKET_HEADER_SIZE = 3


def split_subpackets(body: bytes) -> tuple[list[SubPacket], bool]:
    """Split a frame body into its length-prefixed sub-packets.

    Splitting stops at the first sub-packet whose declared length runs past
    the end of the body. Sub-packets split before that point are returned
    unchanged; the remainder of the body is abandoned.

    Args:
        body: Bytes after the marker and class, checksum already removed.

    Returns:
        A tuple of (sub-packets in wire order, cut_off flag).

    Example:
        >>> split_subpackets(bytes([0x99, 0x02, 0x00, 0xAA, 0xBB]))
        ([SubPacket(packet_type=0x99, payload=aa bb)], False)
    """
    subpackets: list[SubPacket] = []
    offset = 0
    while len(body) - offset >= _SUBPACKET_HEADER_SIZE:
        packet_type = body[offset]
        length = int.from_bytes(body[offset + 1 : offset + 3], "little")
        offset += _SUBPACKET_HEADER_SIZE
        if len(body) - offset < length:
            logger.warning(
                "packet cut off: type 0x%02x declares %d bytes, %d remain",
                packet_type,
                length,
                len(body) - offset,
            )
            return subpackets, True
        subpackets.append(SubPacket(packet_type, bytes(body[offset : offset + length])))
        offset += length
    return subpackets, False


def parse_frame(buffer: bytes) -> Frame | None:
    """Validate a framer buffer and split it into sub-packets.

    Args:
        buffer: Un-escaped buffer as returned by ``ByteFramer``, start
            marker included, terminator excluded.

    Returns:
        A ``Frame``, or None if:
        - The buffer is shorter than ``MIN_FRAME_SIZE`` (dropped silently)
        - The checksum does not match (logged)

    Note:
        An ack frame (class 0x02) is returned with no sub-packets; whatever
        follows its class byte is not interpreted.
    """
    if len(buffer) < MIN_FRAME_SIZE:
        return None

    parts = split_checksum(buffer)
    if parts is None:
        return None
    summed, provided = parts

    calculated = sum16(summed)
    if calculated != provided:
        logger.warning("checksum mismatch %04x != %04x", provided, calculated)
        return None

    frame_class = summed[1]
    if frame_class == ACK_CLASS:
        logger.debug("decoded ack")
        return Frame(frame_class=frame_class)

    subpackets, cut_off = split_subpackets(summed[_HEADER_SIZE:])
    return Frame(frame_class=frame_class, subpackets=subpackets, cut_off=cut_off)
