"""AI2 frame encoder, the counterpart of the framer and validator.

Frame layout::

    10 <class> escaped(<cmd> <len_lo> <len_hi> <payload...> <chk_lo> <chk_hi>) 10 03
    ^^^^^^^^^^                                                             ^^^^^
    raw                                                                    raw

- class: never escaped, even when it equals 0x10
- len: little-endian payload length
- chk: ``(0x10 + class + cmd + len_lo + len_hi + sum(payload)) mod 2**16``,
  little-endian
- escaped(X): every literal 0x10 in X is sent twice

Several command sub-packets may share one frame; the checksum then covers all
of them.
"""

from collections.abc import Iterable

from ai2gnss.ai2.checksum import sum16
from ai2gnss.ai2.framer import DLE, ETX

__all__ = ["MAX_PAYLOAD_SIZE", "encode_frame", "encode_subpackets", "escape"]

MAX_PAYLOAD_SIZE = 0xFFFF

_TERMINATOR = bytes([DLE, ETX])


def escape(data: bytes) -> bytes:
    """Double every literal 0x10 byte in *data*.

    Example:
        >>> escape(bytes([0x01, 0x10, 0x02])).hex(" ")
        '01 10 10 02'
    """
    return data.replace(bytes([DLE]), bytes([DLE, DLE]))


def _check_byte(name: str, value: int) -> None:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"{name} must be 0-255, got {value}")


def _subpacket(command: int, payload: bytes) -> bytes:
    _check_byte("command", command)
    if len(payload) > MAX_PAYLOAD_SIZE:
        raise ValueError(
            f"payload must be at most {MAX_PAYLOAD_SIZE} bytes, got {len(payload)}"
        )
    return bytes([command]) + len(payload).to_bytes(2, "little") + payload


def encode_subpackets(
    frame_class: int, subpackets: Iterable[tuple[int, bytes]]
) -> bytes:
    """Build one frame carrying several ``(command, payload)`` sub-packets.

    Args:
        frame_class: Class byte, sent unescaped.
        subpackets: Commands with their payloads, in transmission order.

    Returns:
        The complete wire bytes, start marker to terminator.

    Raises:
        ValueError: If the class or a command is not a byte value, or a
            payload does not fit the 16-bit length field.
    """
    _check_byte("frame_class", frame_class)
    body = b"".join(_subpacket(command, bytes(payload)) for command, payload in subpackets)
    checksum = sum16(bytes([DLE, frame_class]) + body)
    escaped = escape(body + checksum.to_bytes(2, "little"))
    return bytes([DLE, frame_class]) + escaped + _TERMINATOR


def encode_frame(frame_class: int, command: int, payload: bytes = b"") -> bytes:
    """Build a single-command frame ready to write to the receiver.

    Example:
        >>> encode_frame(0x01, 0x02, b"\\x03").hex(" ")  # receiver on
        '10 01 02 01 00 03 17 00 10 03'
    """
    return encode_subpackets(frame_class, [(command, payload)])
