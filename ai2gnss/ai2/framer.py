"""Byte framer: turns a raw AI2 byte stream into un-escaped frame buffers.

Wire framing::

    10 <class> <escaped body and checksum> 10 03

Inside a frame ``0x10`` never appears on its own: the encoder doubles every
literal ``0x10``. The framer therefore treats ``0x10`` as an escape
introducer. The byte after it is stored literally, except ``0x03``, which
ends the frame.

State machine (one byte at a time):

    IDLE
        ``0x10`` -> COLLECTING with the marker stored as ``buffer[0]``.
        anything else -> discarded as line noise.
    COLLECTING
        ``0x03`` as the second stored byte -> "unexpected end of packet",
        back to IDLE.
        ``0x10`` while not escaping -> escaping, byte not stored.
        ``0x03`` while escaping -> frame complete, back to IDLE.
        anything else -> stored literally, escaping cleared.
        buffer full -> "overlong packet", buffer dropped, back to IDLE.

Every error path returns to IDLE, so the framer always resynchronizes on the
next ``0x10`` of a noisy or corrupted stream.
"""

import logging
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)

__all__ = ["BUFFER_CAPACITY", "DLE", "ETX", "ByteFramer", "FramerState", "FramerStats"]

DLE = 0x10  # start marker and escape introducer
ETX = 0x03  # terminator, only meaningful after DLE

BUFFER_CAPACITY = 1024


class FramerState(Enum):
    IDLE = "idle"
    COLLECTING = "collecting"


@dataclass
class FramerStats:
    """Running counters of what the framer has seen.

    Attributes:
        frames: Complete buffers handed out.
        noise_bytes: Bytes discarded while waiting for a start marker.
        premature_ends: Frames terminated right after the start marker.
        overlong: Buffers dropped for exceeding ``BUFFER_CAPACITY``.
    """

    frames: int = 0
    noise_bytes: int = 0
    premature_ends: int = 0
    overlong: int = 0


class ByteFramer:
    """Incremental AI2 deframer.

    Feed it bytes as they arrive; it returns each complete, un-escaped
    buffer (start marker, class, body, checksum) for the validator. The
    terminator is not included.

    Example::

        framer = ByteFramer()
        for buffer in framer.feed(chunk):
            frame = parse_frame(buffer)

    Args:
        capacity: Maximum number of stored bytes per frame.
    """

    def __init__(self, capacity: int = BUFFER_CAPACITY) -> None:
        self._capacity = capacity
        self._state = FramerState.IDLE
        self._buffer = bytearray()
        self._escaping = False
        self._position = 0
        self.stats = FramerStats()

    @property
    def state(self) -> FramerState:
        return self._state

    def reset(self) -> None:
        """Drop any partial frame and return to IDLE."""
        self._state = FramerState.IDLE
        self._buffer = bytearray()
        self._escaping = False

    def _start(self) -> None:
        self._state = FramerState.COLLECTING
        self._buffer = bytearray([DLE])
        self._escaping = False

    def _finish(self) -> bytes:
        frame = bytes(self._buffer)
        self.reset()
        self.stats.frames += 1
        return frame

    def push(self, byte: int) -> bytes | None:
        """Process one byte; return a completed buffer or None."""
        self._position += 1

        if self._state is FramerState.IDLE:
            if byte != DLE:
                self.stats.noise_bytes += 1
                logger.debug("discarding noise byte 0x%02x", byte)
                return None
            self._start()
            return None

        if len(self._buffer) == 1 and byte == ETX:
            self.stats.premature_ends += 1
            logger.warning("%04x unexpected end of packet", self._position)
            self.reset()
            return None

        if not self._escaping and byte == DLE:
            self._escaping = True
            return None

        if self._escaping and byte == ETX:
            return self._finish()

        self._escaping = False
        if len(self._buffer) >= self._capacity:
            self.stats.overlong += 1
            logger.warning("overlong packet, throwing away")
            self.reset()
            return None

        self._buffer.append(byte)
        return None

    def feed(self, data: bytes) -> list[bytes]:
        """Process a chunk of bytes and return every buffer it completed."""
        frames = []
        for byte in data:
            frame = self.push(byte)
            if frame is not None:
                frames.append(frame)
        return frames
