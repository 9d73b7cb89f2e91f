"""AI2 frame and report types.

This module defines dataclasses for validated frames and for the structured
reports produced by the payload decoders.

Design Decisions:
    1. Reports are plain values. A decoder builds one report per sub-packet
       and hands it to the caller; nothing here is shared or mutated after
       construction.

    2. Degraded reports instead of exceptions: a payload that is too short
       for its decoder still produces a ``TruncatedReport`` carrying the raw
       bytes, so a truncated sub-packet is always visible to the sink and
       never aborts the rest of the frame.

    3. Unknown packet types are surfaced as ``UnknownReport`` with the full
       payload. They are never dropped.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum

# Class byte of an acknowledgment frame (no sub-packets follow)
ACK_CLASS = 0x02

# Error code the receiver sends when it rejected a command's checksum
INVALID_CHECKSUM_CODE = 0x02FF


class PacketType(IntEnum):
    """Sub-packet type identifiers understood by the decoders."""

    POSITION = 0x06
    MEASUREMENT = 0x08
    ASYNC_EVENT = 0x80
    NMEA = 0xD3
    POSITION_EXT = 0xD5
    ERROR = 0xF5


@dataclass
class SubPacket:
    """One length-prefixed unit inside a frame body.

    Attributes:
        packet_type: Type byte selecting the payload decoder.
        payload: Exactly the number of bytes declared by the 16-bit
            little-endian length field.
    """

    packet_type: int
    payload: bytes

    def __repr__(self) -> str:
        return (
            f"SubPacket(packet_type=0x{self.packet_type:02X}, "
            f"payload={self.payload.hex(' ') if self.payload else '(empty)'})"
        )


@dataclass
class Frame:
    """A checksum-validated AI2 frame.

    Attributes:
        frame_class: Class byte following the start marker.
        subpackets: Sub-packets in wire order. Empty for ack frames.
        cut_off: True when the last declared sub-packet length ran past the
            end of the frame. Sub-packets before it are still listed.
    """

    frame_class: int
    subpackets: list[SubPacket] = field(default_factory=list)
    cut_off: bool = False

    @property
    def is_ack(self) -> bool:
        return self.frame_class == ACK_CLASS


@dataclass
class PositionReport:
    """Decoded position fix (types 0x06 and 0xD5).

    Attributes:
        fcount: Receiver frame counter (roughly milliseconds since start).
        latitude_degrees: ``90 * raw / 2**31``, positive=North.
        longitude_degrees: ``180 * raw / 2**31``, positive=East.
        altitude_meters: Raw value at half-meter resolution divided by 2.
            None for the extended variant, which carries no altitude.
        satellite_ids: SV identifiers listed after the fixed header.
        extended: True when decoded from the extended (0xD5) layout.

    Example:
        >>> report = decode_position(payload)
        >>> report.latitude_degrees  # raw 2**30
        45.0
        >>> report.altitude_meters  # raw 20
        10.0
    """

    fcount: int
    latitude_degrees: float
    longitude_degrees: float
    altitude_meters: float | None
    satellite_ids: list[int] = field(default_factory=list)
    extended: bool = False


@dataclass
class SatelliteMeasurement:
    """Signal measurement for a single satellite.

    Attributes:
        sv_id: Satellite vehicle identifier.
        snr: Signal-to-noise ratio, raw value divided by 10.
        cno: Carrier-to-noise density, raw value divided by 10.
    """

    sv_id: int
    snr: float
    cno: float


@dataclass
class MeasurementReport:
    """Decoded measurement report (type 0x08).

    Attributes:
        fcount: Receiver frame counter.
        satellites: One entry per complete 28-byte satellite record.
        excess_bytes: Trailing bytes that did not fill a whole record.
    """

    fcount: int
    satellites: list[SatelliteMeasurement] = field(default_factory=list)
    excess_bytes: int = 0

    @property
    def excess_data(self) -> bool:
        return self.excess_bytes > 0


@dataclass
class NmeaReport:
    """NMEA passthrough (type 0xD3).

    The text is forwarded exactly as received; the codec never parses it.

    Attributes:
        fcount: Receiver frame counter, None if the payload was shorter
            than the 4-byte counter.
        raw_text: Bytes following the counter, verbatim.
    """

    fcount: int | None
    raw_text: bytes


class AsyncEvent(Enum):
    """Receiver engine state changes announced asynchronously."""

    ENGINE_OFF = 0x01
    ENGINE_IDLE = 0x07
    UNKNOWN = None


@dataclass
class AsyncEventReport:
    """Decoded async event (type 0x80).

    Attributes:
        event: Recognized event, or ``AsyncEvent.UNKNOWN``.
        code: The raw event byte, kept for unknown events.
    """

    event: AsyncEvent
    code: int


@dataclass
class ErrorReport:
    """Error report from the receiver (type 0xF5).

    Attributes:
        code: Little-endian 16-bit error code when the payload is exactly two
            bytes long, otherwise None.
        raw_bytes: The full payload.
    """

    code: int | None
    raw_bytes: bytes

    @property
    def invalid_checksum(self) -> bool:
        return self.code == INVALID_CHECKSUM_CODE


@dataclass
class UnknownReport:
    """Sub-packet of a type no decoder handles."""

    packet_type: int
    raw_bytes: bytes


@dataclass
class TruncatedReport:
    """Sub-packet too short for its decoder's fixed header.

    Attributes:
        packet_type: Type byte of the sub-packet.
        required_length: Minimum payload length the decoder needs.
        raw_bytes: The payload that was received.
    """

    packet_type: int
    required_length: int
    raw_bytes: bytes


@dataclass
class AckReport:
    """Acknowledgment frame (class 0x02)."""

    frame_class: int = ACK_CLASS


Report = (
    PositionReport
    | MeasurementReport
    | NmeaReport
    | AsyncEventReport
    | ErrorReport
    | UnknownReport
    | TruncatedReport
    | AckReport
)
